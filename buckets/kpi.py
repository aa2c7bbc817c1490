from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence

from buckets.aggregator import reduce_records
from buckets.extractor import MetricLike
from buckets.definitions import normalize_metric
from buckets.results import Record
from buckets.values import as_number, field_value


@dataclass(frozen=True)
class KpiTrend:
    direction: Optional[str] = None
    value: float = 0.0
    percent: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def kpi_value(records: Optional[Sequence[Record]], metric: Optional[MetricLike]) -> float:
    if metric is None or not records:
        return 0
    m = normalize_metric(metric)
    return reduce_records(records, m.field, m.aggregation)


def kpi_trend(records: Optional[Sequence[Record]], metric: Optional[MetricLike]) -> KpiTrend:
    """Compare the metric field of the last two records (records are assumed chronological)."""
    if metric is None or not records or len(records) < 2:
        return KpiTrend()
    m = normalize_metric(metric)
    last = as_number(field_value(records[-1], m.field)) or 0.0
    prev = as_number(field_value(records[-2], m.field)) or 0.0
    diff = last - prev
    direction = None if diff == 0 else ("up" if diff > 0 else "down")
    percent = (diff / abs(prev)) * 100 if prev != 0 else 0.0
    return KpiTrend(direction=direction, value=diff, percent=percent)
