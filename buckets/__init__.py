"""Bucket aggregation engine (UI-agnostic).

This package contains:
- value coercion and aggregation policies
- bucket grouping (terms / histogram / date histogram / range)
- the multi-level pipeline, split routing and label derivation
- value extraction for chart series and KPIs
- a pandas bridge for table consumers and exports
"""

from __future__ import annotations

from buckets.aggregator import aggregate_values, reduce_records
from buckets.config import EngineSettings, normalize_settings
from buckets.definitions import (
    AggregationPolicy,
    BucketDefinition,
    BucketKind,
    DateInterval,
    Metric,
    RangeSpec,
    SortOrder,
    SplitKind,
    normalize_definition,
    normalize_metric,
)
from buckets.extractor import extract, extract_all, extract_split_series
from buckets.pipeline import run
from buckets.results import BucketItem, BucketLevel, Partitions, PipelineResult, SplitItem

__all__ = [
    "AggregationPolicy",
    "BucketDefinition",
    "BucketItem",
    "BucketKind",
    "BucketLevel",
    "DateInterval",
    "EngineSettings",
    "Metric",
    "Partitions",
    "PipelineResult",
    "RangeSpec",
    "SortOrder",
    "SplitItem",
    "SplitKind",
    "aggregate_values",
    "extract",
    "extract_all",
    "extract_split_series",
    "normalize_definition",
    "normalize_metric",
    "normalize_settings",
    "reduce_records",
    "run",
]
