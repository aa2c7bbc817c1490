from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from buckets.values import as_number, format_number

logger = logging.getLogger(__name__)


class BucketKind(str, Enum):
    TERMS = "terms"
    HISTOGRAM = "histogram"
    DATE_HISTOGRAM = "date_histogram"
    RANGE = "range"
    SPLIT_SERIES = "split_series"
    SPLIT_ROWS = "split_rows"
    SPLIT_CHART = "split_chart"

    @property
    def is_split(self) -> bool:
        return self.value.startswith("split_")


class SplitKind(str, Enum):
    SERIES = "series"
    ROWS = "rows"
    CHART = "chart"


class DateInterval(str, Enum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class AggregationPolicy(str, Enum):
    SUM = "sum"
    AVERAGE = "avg"
    MIN = "min"
    MAX = "max"
    COUNT = "count"
    REPRESENTATIVE = "none"


_POLICY_ALIASES = {
    "average": AggregationPolicy.AVERAGE,
    "mean": AggregationPolicy.AVERAGE,
    "representative": AggregationPolicy.REPRESENTATIVE,
}

BUCKET_KIND_LABELS: Dict[BucketKind, Tuple[str, str]] = {
    BucketKind.TERMS: ("Terms", "Group by field values (categories)"),
    BucketKind.HISTOGRAM: ("Histogram", "Group by numeric intervals"),
    BucketKind.DATE_HISTOGRAM: ("Date histogram", "Group by time intervals"),
    BucketKind.RANGE: ("Ranges", "Group by custom ranges"),
    BucketKind.SPLIT_SERIES: ("Split series", "Create one series per value"),
    BucketKind.SPLIT_ROWS: ("Split rows", "Create one row per value"),
    BucketKind.SPLIT_CHART: ("Split charts", "Create a separate chart per value"),
}


def _enum_value(enum_cls, value: object, default):
    if isinstance(value, enum_cls):
        return value
    if value is None or value == "":
        return default
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        logger.warning("unknown %s %r, using %s", enum_cls.__name__, value, getattr(default, "value", default))
        return default


def parse_policy(value: object) -> Optional[AggregationPolicy]:
    """Return the policy named by ``value``; None means unrecognized (first-value reduction)."""
    if isinstance(value, AggregationPolicy):
        return value
    if value is None:
        return None
    key = str(value).strip().lower()
    if key in _POLICY_ALIASES:
        return _POLICY_ALIASES[key]
    try:
        return AggregationPolicy(key)
    except ValueError:
        return None


@dataclass(frozen=True)
class RangeSpec:
    from_: Optional[float] = None
    to: Optional[float] = None
    label: str = ""

    @property
    def key(self) -> str:
        if self.label:
            return self.label
        lo = "*" if self.from_ is None else format_number(self.from_)
        hi = "*" if self.to is None else format_number(self.to)
        return f"{lo}-{hi}"

    def contains(self, value: float) -> bool:
        return (self.from_ is None or value >= self.from_) and (self.to is None or value < self.to)

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_, "to": self.to, "label": self.label}


@dataclass(frozen=True)
class BucketDefinition:
    field: str
    kind: BucketKind = BucketKind.TERMS
    order: SortOrder = SortOrder.DESC
    size: Optional[int] = None
    min_doc_count: Optional[int] = None
    interval: float = 1.0
    date_interval: DateInterval = DateInterval.DAY
    ranges: Tuple[RangeSpec, ...] = ()
    split_kind: Optional[SplitKind] = None
    label: str = ""

    @property
    def is_split(self) -> bool:
        return self.kind.is_split or self.split_kind is not None

    @property
    def resolved_split_kind(self) -> Optional[SplitKind]:
        if self.split_kind is not None:
            return self.split_kind
        if self.kind.is_split:
            return SplitKind(self.kind.value[len("split_"):])
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "kind": self.kind.value,
            "order": self.order.value,
            "size": self.size,
            "min_doc_count": self.min_doc_count,
            "interval": self.interval,
            "date_interval": self.date_interval.value,
            "ranges": [r.to_dict() for r in self.ranges],
            "split_kind": self.split_kind.value if self.split_kind else None,
            "label": self.label,
        }


@dataclass(frozen=True)
class Metric:
    field: str
    aggregation: Optional[AggregationPolicy] = AggregationPolicy.SUM
    label: str = ""

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        agg = self.aggregation.value if self.aggregation else "value"
        return f"{agg}({self.field})"


def _first(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return default


def _as_optional_int(value: object) -> Optional[int]:
    num = as_number(value)
    if num is None:
        return None
    return int(num)


def _normalize_range(raw: object) -> Optional[RangeSpec]:
    if isinstance(raw, RangeSpec):
        return raw
    if not isinstance(raw, Mapping):
        return None
    label = raw.get("label")
    return RangeSpec(
        from_=as_number(_first(raw, "from", "from_")),
        to=as_number(raw.get("to")),
        label=str(label) if label else "",
    )


def normalize_definition(raw: Union[BucketDefinition, Mapping[str, Any]]) -> BucketDefinition:
    """Build a BucketDefinition from a raw mapping (camelCase or snake_case keys).

    Unknown kinds fall back to ``terms``; unusable numbers fall back to defaults.
    """
    if isinstance(raw, BucketDefinition):
        return raw
    if not isinstance(raw, Mapping):
        logger.warning("bucket definition %r is not a mapping", raw)
        return BucketDefinition(field="")

    kind = _enum_value(BucketKind, _first(raw, "kind", "type"), BucketKind.TERMS)
    split_raw = _first(raw, "split_kind", "splitKind", "splitType", "split_type")
    split_kind = _enum_value(SplitKind, split_raw, None) if split_raw else None

    min_doc_count = _as_optional_int(_first(raw, "min_doc_count", "minDocCount"))
    interval = as_number(raw.get("interval"))
    ranges = raw.get("ranges")
    if not isinstance(ranges, (list, tuple)):
        if ranges is not None:
            logger.warning("ranges %r is not a list, ignoring", ranges)
        ranges = ()
    label = raw.get("label")

    return BucketDefinition(
        field=str(raw.get("field") or ""),
        kind=kind,
        order=_enum_value(SortOrder, raw.get("order"), SortOrder.DESC),
        size=_as_optional_int(raw.get("size")),
        min_doc_count=min_doc_count if min_doc_count and min_doc_count > 0 else None,
        interval=interval if interval and interval > 0 else 1.0,
        date_interval=_enum_value(DateInterval, _first(raw, "date_interval", "dateInterval"), DateInterval.DAY),
        ranges=tuple(r for r in (_normalize_range(x) for x in ranges) if r is not None),
        split_kind=split_kind,
        label=str(label) if label else "",
    )


def normalize_metric(raw: Union[Metric, Mapping[str, Any]]) -> Metric:
    if isinstance(raw, Metric):
        return raw
    if not isinstance(raw, Mapping):
        return Metric(field="")
    agg_raw = _first(raw, "aggregation", "agg", default="sum")
    policy = parse_policy(agg_raw)
    if policy is None:
        logger.warning("unknown aggregation %r, reducing to the first value", agg_raw)
    label = raw.get("label")
    return Metric(field=str(raw.get("field") or ""), aggregation=policy, label=str(label) if label else "")


_DEFAULT_SPLIT_SIZES = {
    BucketKind.SPLIT_SERIES: (SplitKind.SERIES, 5),
    BucketKind.SPLIT_ROWS: (SplitKind.ROWS, 5),
    BucketKind.SPLIT_CHART: (SplitKind.CHART, 4),
}


def default_definition(kind: Union[BucketKind, str], field: str = "") -> BucketDefinition:
    kind = _enum_value(BucketKind, kind, BucketKind.TERMS)
    base = BucketDefinition(field=field, kind=kind, order=SortOrder.DESC, size=10, min_doc_count=1)
    if kind == BucketKind.HISTOGRAM:
        return replace(base, interval=1.0)
    if kind == BucketKind.DATE_HISTOGRAM:
        return replace(base, date_interval=DateInterval.DAY)
    if kind == BucketKind.RANGE:
        return replace(base, ranges=(RangeSpec(from_=0.0, to=100.0, label="Range 1"),))
    if kind in _DEFAULT_SPLIT_SIZES:
        split_kind, size = _DEFAULT_SPLIT_SIZES[kind]
        return replace(base, split_kind=split_kind, size=size)
    return base


def definition_label(definition: BucketDefinition) -> str:
    if definition.label:
        return definition.label
    kind_label = BUCKET_KIND_LABELS.get(definition.kind, (definition.kind.value, ""))[0]
    return f"{kind_label} - {definition.field}"
