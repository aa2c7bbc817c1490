"""
Unit tests for aggregation policies.

Tests reduce_records() and aggregate_values(), including the handling of
invalid values and the representative-value policy.
"""

import pytest

from buckets.aggregator import aggregate_values, reduce_records
from buckets.definitions import AggregationPolicy


class TestAggregateValues:
    """Test aggregate_values() on already-extracted values."""

    def test_sum_aggregation(self):
        assert aggregate_values([10.0, 20.0, 30.0, 40.0], AggregationPolicy.SUM) == 100.0

    def test_average_aggregation(self):
        assert aggregate_values([10.0, 20.0, 30.0, 40.0], "avg") == 25.0

    def test_average_alias(self):
        assert aggregate_values([10.0, 20.0], "average") == 15.0

    def test_min_max_aggregation(self):
        values = [3, "bad", -1, 7]
        assert aggregate_values(values, "min") == -1
        assert aggregate_values(values, "max") == 7

    def test_count_counts_every_entry(self):
        assert aggregate_values([1, None, "x"], "count") == 3

    def test_accepts_none(self):
        assert aggregate_values(None, "sum") == 0


class TestReduceRecords:
    """Test reduce_records() over record groups."""

    def test_sum_of_empty_is_zero(self):
        assert reduce_records([], "v", "sum") == 0

    def test_sum_skips_nan(self):
        assert reduce_records([{"v": float("nan")}, {"v": 5}], "v", "sum") == 5

    def test_count_ignores_field_validity(self):
        """count returns the number of records even when the field is absent everywhere."""
        records = [{"a": 1}, {"b": 2}, {}]
        assert reduce_records(records, "v", "count") == 3

    def test_average_ignores_invalid_values(self):
        records = [{"v": 10}, {"v": "x"}, {"v": 20}, {}]
        assert reduce_records(records, "v", "avg") == 15

    @pytest.mark.parametrize("policy", ["sum", "avg", "min", "max"])
    def test_no_valid_values_is_zero(self, policy):
        records = [{"v": None}, {"v": "n/a"}, {"v": float("inf")}]
        assert reduce_records(records, "v", policy) == 0

    def test_numeric_strings_are_coerced(self):
        assert reduce_records([{"v": "1.5"}, {"v": "2.5"}], "v", "sum") == 4.0

    def test_skips_non_mapping_records(self):
        assert reduce_records([None, {"v": 4}], "v", "sum") == 4


class TestRepresentativePolicy:
    """Test the representative ("none") policy."""

    def test_single_record_numeric(self):
        assert reduce_records([{"v": "42"}], "v", "none") == 42

    def test_single_record_not_numeric(self):
        assert reduce_records([{"v": "abc"}], "v", "none") == 0

    def test_first_present_value_wins(self):
        records = [{"v": None}, {}, {"v": 8}, {"v": 9}]
        assert reduce_records(records, "v", AggregationPolicy.REPRESENTATIVE) == 8

    def test_first_present_value_not_numeric(self):
        records = [{"v": None}, {"v": "abc"}, {"v": 9}]
        assert reduce_records(records, "v", "none") == 0

    def test_all_missing_is_zero(self):
        assert reduce_records([{"v": None}, {}], "v", "representative") == 0


class TestUnknownPolicy:
    """Unrecognized policies reduce to the first record's value."""

    def test_first_value(self):
        assert reduce_records([{"v": 3}, {"v": 5}], "v", "median") == 3

    def test_first_value_not_numeric(self):
        assert reduce_records([{"v": "x"}, {"v": 5}], "v", "median") == 0

    def test_no_records(self):
        assert reduce_records([], "v", "median") == 0
