from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from buckets.aggregator import reduce_records
from buckets.definitions import Metric, normalize_metric
from buckets.results import PipelineResult, Record

MetricLike = Union[Metric, Mapping[str, Any]]


def extract(result: PipelineResult, filtered_records: Optional[Sequence[Record]], metric: MetricLike) -> List[float]:
    """One value per label: per first-level item, or a single total without levels."""
    metric = normalize_metric(metric)
    if not result.levels:
        return [reduce_records(filtered_records or (), metric.field, metric.aggregation)]
    return [reduce_records(item.members, metric.field, metric.aggregation) for item in result.levels[0].items]


def extract_split_series(result: PipelineResult, metric: MetricLike) -> List[Dict[str, Any]]:
    """Values per series partition, aligned with the first-level labels.

    Each value reduces the records shared by the series item and the
    first-level item at that position.
    """
    metric = normalize_metric(metric)
    out: List[Dict[str, Any]] = []
    for split in result.partitions.series:
        in_split = {id(m) for m in split.members}
        values = [
            reduce_records(
                [m for m in item.members if id(m) in in_split],
                metric.field,
                metric.aggregation,
            )
            for item in result.levels[0].items
        ]
        out.append({"key": split.key, "values": values})
    return out


def extract_all(
    result: PipelineResult,
    filtered_records: Optional[Sequence[Record]],
    metrics: Sequence[MetricLike],
) -> List[Dict[str, Any]]:
    series: List[Dict[str, Any]] = []
    for raw in metrics or ():
        metric = normalize_metric(raw)
        series.append({"label": metric.display_label, "values": extract(result, filtered_records, metric)})
    return series
