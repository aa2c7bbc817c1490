"""Immutable result types produced by the bucket pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from buckets.definitions import BucketDefinition

Record = Mapping[str, Any]


@dataclass(frozen=True)
class BucketItem:
    key: str
    members: Tuple[Record, ...]
    display_label: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def label(self) -> str:
        return self.display_label or self.key

    def to_dict(self, *, include_members: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {"key": self.key, "display_label": self.display_label, "count": self.count}
        if include_members:
            out["members"] = [dict(m) for m in self.members]
        return out


@dataclass(frozen=True)
class BucketLevel:
    definition: BucketDefinition
    depth: int
    items: Tuple[BucketItem, ...]
    input_records: Tuple[Record, ...]

    def to_dict(self, *, include_members: bool = False) -> Dict[str, Any]:
        return {
            "definition": self.definition.to_dict(),
            "depth": self.depth,
            "input_count": len(self.input_records),
            "items": [item.to_dict(include_members=include_members) for item in self.items],
        }


@dataclass(frozen=True)
class SplitItem:
    key: str
    members: Tuple[Record, ...]
    source_definition: BucketDefinition

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "count": len(self.members), "field": self.source_definition.field}


@dataclass(frozen=True)
class Partitions:
    series: Tuple[SplitItem, ...] = ()
    rows: Tuple[SplitItem, ...] = ()
    charts: Tuple[SplitItem, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "series": [s.to_dict() for s in self.series],
            "rows": [s.to_dict() for s in self.rows],
            "charts": [s.to_dict() for s in self.charts],
        }


@dataclass(frozen=True)
class PipelineResult:
    surviving_records: Tuple[Record, ...]
    labels: Tuple[str, ...]
    levels: Tuple[BucketLevel, ...]
    partitions: Partitions

    def to_dict(self, *, include_members: bool = False) -> Dict[str, Any]:
        return {
            "labels": list(self.labels),
            "levels": [level.to_dict(include_members=include_members) for level in self.levels],
            "partitions": self.partitions.to_dict(),
            "surviving_count": len(self.surviving_records),
        }
