"""Configuration checks for bucket definitions and metrics.

These run at the configuration layer; the engine itself never rejects input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Tuple, Union

from buckets.definitions import (
    AggregationPolicy,
    BucketDefinition,
    BucketKind,
    Metric,
    normalize_definition,
    normalize_metric,
    parse_policy,
)
from buckets.values import as_number


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": list(self.errors)}


def _result(errors: Sequence[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=tuple(errors))


def validate_bucket(raw: Union[BucketDefinition, Mapping[str, Any]]) -> ValidationResult:
    # checks the raw values: normalization would already have replaced bad ones
    if isinstance(raw, BucketDefinition):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        return _result(["Bucket definition must be an object"])

    definition = normalize_definition(raw)
    errors = []
    if not definition.field:
        errors.append("Field is required")

    if definition.kind == BucketKind.HISTOGRAM:
        interval = as_number(raw.get("interval"))
        if interval is None or interval <= 0:
            errors.append("Interval must be greater than 0")

    if definition.kind == BucketKind.DATE_HISTOGRAM and not (raw.get("date_interval") or raw.get("dateInterval")):
        errors.append("Date interval is required")

    if definition.kind == BucketKind.RANGE and not definition.ranges:
        errors.append("At least one range is required")

    size = as_number(raw.get("size"))
    if size is not None and size <= 0:
        errors.append("Size must be greater than 0")

    return _result(errors)


def validate_metrics(metrics: Sequence[Union[Metric, Mapping[str, Any]]]) -> ValidationResult:
    if not metrics:
        return _result(["At least one metric is required"])

    errors = []
    for idx, raw in enumerate(metrics, start=1):
        metric = normalize_metric(raw)
        if not metric.field and metric.aggregation != AggregationPolicy.COUNT:
            errors.append(f"Metric {idx}: field must be specified")
        agg_raw = raw.get("aggregation", raw.get("agg")) if isinstance(raw, Mapping) else metric.aggregation
        if agg_raw is not None and parse_policy(agg_raw) is None:
            errors.append(f"Metric {idx}: unknown aggregation {agg_raw!r}")
    return _result(errors)
