"""
Unit tests for date parsing, interval keys and display labels.
"""

import pandas as pd
import pytest

from buckets.dates import date_key, format_date_label, iso_week, parse_date
from buckets.definitions import DateInterval


class TestParseDate:
    """Test parse_date()."""

    def test_iso_date_string(self):
        ts = parse_date("2023-03-15")
        assert (ts.year, ts.month, ts.day) == (2023, 3, 15)
        assert str(ts.tz) == "UTC"

    def test_offset_is_converted_to_utc(self):
        ts = parse_date("2023-03-15T01:30:00+02:00")
        assert (ts.day, ts.hour, ts.minute) == (14, 23, 30)

    def test_epoch_milliseconds(self):
        ts = parse_date(0)
        assert (ts.year, ts.month, ts.day) == (1970, 1, 1)

    def test_timestamp_passthrough(self):
        ts = parse_date(pd.Timestamp("2024-06-01 12:00"))
        assert (ts.year, ts.month, ts.hour) == (2024, 6, 12)

    @pytest.mark.parametrize("value", [None, "", "not a date", True, float("nan"), {"a": 1}])
    def test_unparsable(self, value):
        assert parse_date(value) is None

    @pytest.mark.parametrize("value", ["today", "now", "Tomorrow", " yesterday "])
    def test_clock_relative_words_are_rejected(self, value):
        assert parse_date(value) is None


class TestDateKey:
    """Test date_key() for every interval."""

    @pytest.mark.parametrize(
        "interval, expected",
        [
            (DateInterval.YEAR, "2023"),
            (DateInterval.MONTH, "2023-03"),
            (DateInterval.DAY, "2023-03-15"),
            (DateInterval.HOUR, "2023-03-15T14:00:00Z"),
            (DateInterval.MINUTE, "2023-03-15T14:35:00Z"),
            (DateInterval.WEEK, "2023-W11"),
        ],
    )
    def test_keys(self, interval, expected):
        ts = parse_date("2023-03-15T14:35:10Z")
        assert date_key(ts, interval) == expected

    def test_week_belongs_to_iso_year(self):
        """A Monday in late December can open week 1 of the next ISO year."""
        assert date_key(parse_date("2024-12-30"), DateInterval.WEEK) == "2025-W01"

    def test_sunday_closes_previous_week(self):
        assert iso_week(parse_date("2021-01-03")) == (2020, 53)
        assert iso_week(parse_date("2021-01-04")) == (2021, 1)

    def test_week_keys_sort_chronologically(self):
        keys = [date_key(parse_date(d), DateInterval.WEEK) for d in ["2023-01-09", "2023-03-01", "2023-12-25"]]
        assert keys == sorted(keys)


class TestFormatDateLabel:
    """Test format_date_label() with the default locale."""

    @pytest.mark.parametrize(
        "key, interval, expected",
        [
            ("2023", DateInterval.YEAR, "2023"),
            ("2023-03", DateInterval.MONTH, "March 2023"),
            ("2023-W11", DateInterval.WEEK, "Week 11, 2023"),
            ("2023-W02", DateInterval.WEEK, "Week 2, 2023"),
            ("2023-03-15", DateInterval.DAY, "March 15, 2023"),
            ("2023-03-15T14:00:00Z", DateInterval.HOUR, "Mar 15, 2023, 14:00"),
            ("2023-03-15T14:05:00Z", DateInterval.MINUTE, "Mar 15, 2023, 14:05"),
        ],
    )
    def test_labels(self, key, interval, expected):
        assert format_date_label(key, interval) == expected

    def test_other_locale(self):
        assert format_date_label("2023-03", DateInterval.MONTH, "fr_FR") == "mars 2023"

    def test_malformed_key_is_returned_as_is(self):
        assert format_date_label("garbage", DateInterval.MONTH) == "garbage"
        assert format_date_label("garbage", DateInterval.DAY) == "garbage"

    def test_no_interval(self):
        assert format_date_label("2023-03", None) == "2023-03"
