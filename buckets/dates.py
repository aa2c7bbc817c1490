from __future__ import annotations

import re
from datetime import date, datetime
from numbers import Number
from typing import Optional, Tuple

import pandas as pd
from babel.core import UnknownLocaleError
from babel.dates import format_date

from buckets.config import DEFAULT_LOCALE
from buckets.definitions import DateInterval
from buckets.values import is_missing

WEEK_KEY_RE = re.compile(r"^(\d+)-W(\d+)$")
TIME_KEY_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
# pandas resolves these against the clock
RELATIVE_DATE_WORDS = frozenset({"now", "today", "tomorrow", "yesterday"})


def parse_date(value: object) -> Optional[pd.Timestamp]:
    """Parse a record value as a UTC timestamp; numbers are epoch milliseconds."""
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, str) and (not value.strip() or value.strip().lower() in RELATIVE_DATE_WORDS):
        return None
    try:
        if isinstance(value, Number):
            ts = pd.to_datetime(value, unit="ms", utc=True)
        else:
            ts = pd.to_datetime(value, utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    return ts


def iso_week(ts: pd.Timestamp) -> Tuple[int, int]:
    """ISO-8601 (year, week) of the Monday-starting week containing ``ts``."""
    iso = ts.isocalendar()
    return int(iso[0]), int(iso[1])


def date_key(ts: pd.Timestamp, interval: DateInterval) -> str:
    if interval == DateInterval.YEAR:
        return f"{ts.year:04d}"
    if interval == DateInterval.MONTH:
        return f"{ts.year:04d}-{ts.month:02d}"
    if interval == DateInterval.WEEK:
        year, week = iso_week(ts)
        return f"{year:04d}-W{week:02d}"
    if interval == DateInterval.HOUR:
        return f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}T{ts.hour:02d}:00:00Z"
    if interval == DateInterval.MINUTE:
        return f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}T{ts.hour:02d}:{ts.minute:02d}:00Z"
    return f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"


def format_date_label(key: str, interval: Optional[DateInterval], locale: str = DEFAULT_LOCALE) -> str:
    """Human label for a date bucket key, e.g. ``2023-03`` -> ``March 2023``."""
    if interval is None:
        return key
    try:
        if interval == DateInterval.YEAR:
            return key
        if interval == DateInterval.MONTH:
            year, month = key.split("-")
            return format_date(date(int(year), int(month), 1), "MMMM y", locale=locale)
        if interval == DateInterval.WEEK:
            match = WEEK_KEY_RE.match(key)
            if match:
                return f"Week {int(match.group(2))}, {match.group(1)}"
            return key
        if interval == DateInterval.DAY:
            return format_date(date.fromisoformat(key), format="long", locale=locale)
        if interval in (DateInterval.HOUR, DateInterval.MINUTE):
            dt = datetime.strptime(key, TIME_KEY_FORMAT)
            day = format_date(dt.date(), format="medium", locale=locale)
            if interval == DateInterval.HOUR:
                return f"{day}, {dt.hour}:00"
            return f"{day}, {dt.hour}:{dt.minute:02d}"
    except (ValueError, TypeError, LookupError, UnknownLocaleError):
        return key
    return key
