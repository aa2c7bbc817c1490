"""
Bucket pipeline

Applies an ordered list of bucket definitions stage by stage. Each stage
groups the records that survived the previous one; the result carries the
level hierarchy, the first-level labels and the split partitions.

Usage:
    from buckets.pipeline import run

    result = run(rows, [{"field": "region", "type": "terms"}, {"field": "channel", "type": "split_series"}])
    result.labels            # ("North", "South", ...)
    result.partitions.series # one SplitItem per channel
"""

from __future__ import annotations

import logging
from functools import reduce
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from buckets.bucketizer import group
from buckets.config import EngineSettings
from buckets.definitions import BucketDefinition, normalize_definition
from buckets.labels import derive_labels
from buckets.results import BucketItem, BucketLevel, Partitions, PipelineResult, Record
from buckets.splits import route

logger = logging.getLogger(__name__)

DefinitionLike = Union[BucketDefinition, Mapping[str, Any]]


def own_records(records: Optional[Iterable[object]]) -> Tuple[Record, ...]:
    """Read-only copies of the caller's records; non-mapping entries are skipped."""
    if records is None:
        return ()
    return tuple(MappingProxyType(dict(r)) for r in records if isinstance(r, Mapping))


def narrow(records: Sequence[Record], items: Sequence[BucketItem]) -> Tuple[Record, ...]:
    """Restrict ``records`` (in order, without duplicates) to the members of ``items``."""
    kept = {id(m) for item in items for m in item.members}
    return tuple(r for r in records if id(r) in kept)


def build_level(
    records: Sequence[Record],
    definition: BucketDefinition,
    depth: int,
    *,
    settings: Optional[EngineSettings] = None,
) -> BucketLevel:
    items = group(records, definition, settings=settings)
    logger.debug(
        "level %d: %s on %r -> %d items from %d rows",
        depth,
        definition.kind.value,
        definition.field,
        len(items),
        len(records),
    )
    return BucketLevel(definition=definition, depth=depth, items=items, input_records=tuple(records))


def _stage(settings: EngineSettings):
    def step(
        acc: Tuple[Tuple[BucketLevel, ...], Tuple[Record, ...]],
        definition: BucketDefinition,
    ) -> Tuple[Tuple[BucketLevel, ...], Tuple[Record, ...]]:
        levels, records = acc
        level = build_level(records, definition, len(levels), settings=settings)
        return levels + (level,), narrow(records, level.items)

    return step


def run(
    records: Optional[Iterable[object]],
    definitions: Optional[Sequence[DefinitionLike]],
    *,
    settings: Optional[EngineSettings] = None,
) -> PipelineResult:
    settings = settings or EngineSettings()
    owned = own_records(records)
    normalized = [normalize_definition(d) for d in (definitions or [])]

    if not normalized:
        return PipelineResult(
            surviving_records=owned,
            labels=derive_labels((), total_label=settings.total_label),
            levels=(),
            partitions=Partitions(),
        )

    levels, surviving = reduce(_stage(settings), normalized, ((), owned))
    return PipelineResult(
        surviving_records=surviving,
        labels=derive_labels(levels, total_label=settings.total_label),
        levels=levels,
        partitions=route(levels),
    )
