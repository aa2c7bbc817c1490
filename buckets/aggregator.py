"""
Aggregation policies.

Reduces a group of records (or an extracted value list) to one number.
Every function here is total: unusable input degrades to 0.

Usage:
    from buckets.aggregator import reduce_records

    reduce_records(rows, "revenue", "sum")
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Union

from buckets.definitions import AggregationPolicy, parse_policy
from buckets.results import Record
from buckets.values import as_number, field_value, is_missing

PolicyLike = Union[AggregationPolicy, str, None]


def _valid(values: Iterable[Optional[float]]) -> List[float]:
    return [v for v in values if v is not None]


def aggregate_values(values: Sequence[object], policy: PolicyLike) -> float:
    """
    Apply an aggregation policy to already-extracted values.

    Args:
        values: Raw field values, one per record
        policy: Aggregation policy (enum or string)

    Returns:
        Aggregated value; 0 when nothing numeric is left
    """
    values = list(values) if values is not None else []
    agg = parse_policy(policy)
    if agg == AggregationPolicy.COUNT:
        return len(values)

    if agg == AggregationPolicy.REPRESENTATIVE:
        if len(values) == 1:
            return as_number(values[0]) or 0
        for v in values:
            if not is_missing(v):
                return as_number(v) or 0
        return 0

    if agg is None:
        return (as_number(values[0]) or 0) if values else 0

    numeric = _valid(as_number(v) for v in values)
    if not numeric:
        return 0

    if agg == AggregationPolicy.SUM:
        return sum(numeric)
    elif agg == AggregationPolicy.AVERAGE:
        return sum(numeric) / len(numeric)
    elif agg == AggregationPolicy.MIN:
        return min(numeric)
    elif agg == AggregationPolicy.MAX:
        return max(numeric)

    return 0


def reduce_records(records: Sequence[Record], field: str, policy: PolicyLike) -> float:
    """Reduce ``records`` to one number from ``field`` under ``policy``."""
    return aggregate_values([field_value(r, field) for r in records or ()], policy)
