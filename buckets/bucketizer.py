"""
Bucketizer

Partitions a record collection into ordered groups according to one
bucket definition. Grouping only: aggregation happens downstream.

Usage:
    from buckets.bucketizer import group
    from buckets.definitions import normalize_definition

    items = group(rows, normalize_definition({"field": "category", "type": "terms", "size": 5}))
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from buckets.config import EngineSettings, validate_locale
from buckets.dates import date_key, format_date_label, parse_date
from buckets.definitions import BucketDefinition, BucketKind, SortOrder
from buckets.results import BucketItem, Record
from buckets.values import as_number, as_text, field_value, format_number

logger = logging.getLogger(__name__)

Groups = Dict[object, List[Record]]


def _collect(records: Sequence[Record], key_fn: Callable[[Record], Optional[object]]) -> Groups:
    # dicts keep first-seen order, which breaks ties in the stable sorts below
    grouped: Groups = {}
    for row in records:
        key = key_fn(row)
        if key is None:
            continue
        grouped.setdefault(key, []).append(row)
    return grouped


def _size(definition: BucketDefinition, default: int) -> int:
    if definition.size is None or definition.size <= 0:
        return default
    return definition.size


def _min_doc_count(definition: BucketDefinition, settings: EngineSettings) -> int:
    if definition.min_doc_count is None or definition.min_doc_count <= 0:
        return settings.min_doc_count
    return definition.min_doc_count


def _numeric(row: Record, field: str) -> float:
    return as_number(field_value(row, field)) or 0.0


def _interval_start(value: float, interval: float) -> float:
    # value / interval can overflow to inf for tiny intervals; such rows land in the 0 bucket
    steps = value / interval
    if not math.isfinite(steps):
        return 0.0
    start = math.floor(steps) * interval
    return start if math.isfinite(start + interval) else 0.0


def group_terms(records: Sequence[Record], definition: BucketDefinition, settings: EngineSettings) -> Tuple[BucketItem, ...]:
    grouped = _collect(records, lambda row: as_text(field_value(row, definition.field)))
    min_count = _min_doc_count(definition, settings)
    entries = [(key, rows) for key, rows in grouped.items() if len(rows) >= min_count]
    # ordered by group cardinality, not by key
    entries.sort(key=lambda e: len(e[1]), reverse=definition.order != SortOrder.ASC)
    entries = entries[: _size(definition, settings.terms_size)]
    return tuple(BucketItem(key=str(key), members=tuple(rows)) for key, rows in entries)


def group_histogram(records: Sequence[Record], definition: BucketDefinition, settings: EngineSettings) -> Tuple[BucketItem, ...]:
    interval = definition.interval if definition.interval and definition.interval > 0 else 1.0
    grouped = _collect(records, lambda row: _interval_start(_numeric(row, definition.field), interval))
    min_count = _min_doc_count(definition, settings)
    entries = sorted(
        ((start, rows) for start, rows in grouped.items() if len(rows) >= min_count),
        key=lambda e: e[0],
    )
    entries = entries[: _size(definition, settings.histogram_size)]
    return tuple(
        BucketItem(key=f"{format_number(start)}-{format_number(start + interval)}", members=tuple(rows))
        for start, rows in entries
    )


def group_date_histogram(records: Sequence[Record], definition: BucketDefinition, settings: EngineSettings) -> Tuple[BucketItem, ...]:
    interval = definition.date_interval

    def key_fn(row: Record) -> Optional[str]:
        ts = parse_date(field_value(row, definition.field))
        if ts is None:
            return None
        return date_key(ts, interval)

    grouped = _collect(records, key_fn)
    dropped = len(records) - sum(len(rows) for rows in grouped.values())
    if dropped:
        logger.debug("date_histogram on %s dropped %d rows without a usable date", definition.field, dropped)

    min_count = _min_doc_count(definition, settings)
    entries = sorted(
        ((key, rows) for key, rows in grouped.items() if len(rows) >= min_count),
        key=lambda e: e[0],
    )
    entries = entries[: _size(definition, settings.date_histogram_size)]
    locale = validate_locale(settings.locale)
    return tuple(
        BucketItem(key=key, members=tuple(rows), display_label=format_date_label(key, interval, locale))
        for key, rows in entries
    )


def group_range(records: Sequence[Record], definition: BucketDefinition, settings: EngineSettings) -> Tuple[BucketItem, ...]:
    min_count = _min_doc_count(definition, settings)
    values = [(row, _numeric(row, definition.field)) for row in records]
    items: List[BucketItem] = []
    for rng in definition.ranges:
        members = tuple(row for row, value in values if rng.contains(value))
        if len(members) >= min_count:
            items.append(BucketItem(key=rng.key, members=members))
    return tuple(items)


_GROUPERS: Dict[BucketKind, Callable[[Sequence[Record], BucketDefinition, EngineSettings], Tuple[BucketItem, ...]]] = {
    BucketKind.TERMS: group_terms,
    BucketKind.HISTOGRAM: group_histogram,
    BucketKind.DATE_HISTOGRAM: group_date_histogram,
    BucketKind.RANGE: group_range,
    BucketKind.SPLIT_SERIES: group_terms,
    BucketKind.SPLIT_ROWS: group_terms,
    BucketKind.SPLIT_CHART: group_terms,
}


def group(
    records: Sequence[Record],
    definition: BucketDefinition,
    *,
    settings: Optional[EngineSettings] = None,
) -> Tuple[BucketItem, ...]:
    settings = settings or EngineSettings()
    grouper = _GROUPERS.get(definition.kind, group_terms)
    return grouper(records, definition, settings)
