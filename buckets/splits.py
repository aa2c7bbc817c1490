from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from buckets.definitions import BucketDefinition, SplitKind
from buckets.results import BucketLevel, Partitions, SplitItem


def is_split(definition: BucketDefinition) -> bool:
    return definition.is_split


def split_kind_of(definition: BucketDefinition) -> Optional[SplitKind]:
    return definition.resolved_split_kind


def route(levels: Sequence[BucketLevel]) -> Partitions:
    """Republish the items of every split-flagged level into series/rows/chart partitions."""
    collected: Dict[SplitKind, List[SplitItem]] = {kind: [] for kind in SplitKind}
    for level in levels:
        kind = split_kind_of(level.definition)
        if kind is None:
            continue
        for item in level.items:
            collected[kind].append(SplitItem(key=item.key, members=item.members, source_definition=level.definition))
    return Partitions(
        series=tuple(collected[SplitKind.SERIES]),
        rows=tuple(collected[SplitKind.ROWS]),
        charts=tuple(collected[SplitKind.CHART]),
    )
