"""
Tests for split routing and split-series value extraction.
"""

import pytest

from buckets.definitions import BucketDefinition, BucketKind, SplitKind, normalize_definition
from buckets.extractor import extract_split_series
from buckets.pipeline import run
from buckets.splits import is_split, route, split_kind_of


@pytest.fixture
def channel_records():
    return [
        {"region": "N", "channel": "web", "v": 1},
        {"region": "N", "channel": "web", "v": 2},
        {"region": "N", "channel": "store", "v": 4},
        {"region": "S", "channel": "web", "v": 8},
    ]


class TestSplitKind:
    """Test split detection on definitions."""

    def test_plain_terms_is_not_split(self):
        definition = BucketDefinition(field="x")
        assert not is_split(definition)
        assert split_kind_of(definition) is None

    @pytest.mark.parametrize(
        "kind, expected",
        [
            (BucketKind.SPLIT_SERIES, SplitKind.SERIES),
            (BucketKind.SPLIT_ROWS, SplitKind.ROWS),
            (BucketKind.SPLIT_CHART, SplitKind.CHART),
        ],
    )
    def test_kind_suffix(self, kind, expected):
        assert split_kind_of(BucketDefinition(field="x", kind=kind)) == expected

    def test_explicit_split_kind_wins(self):
        definition = normalize_definition({"field": "x", "type": "split_series", "splitType": "chart"})
        assert split_kind_of(definition) == SplitKind.CHART

    def test_explicit_split_kind_on_terms(self):
        definition = normalize_definition({"field": "x", "type": "terms", "splitType": "rows"})
        assert is_split(definition)
        assert split_kind_of(definition) == SplitKind.ROWS


class TestRoute:
    """Test route() over pipeline levels."""

    def test_split_series_two_values(self, channel_records):
        result = run(channel_records, [{"field": "channel", "type": "split_series"}])
        assert [s.key for s in result.partitions.series] == ["web", "store"]
        assert result.partitions.rows == ()
        assert result.partitions.charts == ()

    def test_split_rows_and_charts(self, channel_records):
        result = run(
            channel_records,
            [{"field": "region", "type": "split_rows"}, {"field": "channel", "type": "split_chart"}],
        )
        assert [s.key for s in result.partitions.rows] == ["N", "S"]
        assert [s.key for s in result.partitions.charts] == ["web", "store"]
        assert result.partitions.series == ()

    def test_levels_contribute_in_order(self, channel_records):
        result = run(
            channel_records,
            [{"field": "region", "type": "split_series"}, {"field": "channel", "type": "split_series"}],
        )
        assert [s.key for s in result.partitions.series] == ["N", "S", "web", "store"]

    def test_split_item_carries_members_and_definition(self, channel_records):
        result = run(channel_records, [{"field": "channel", "type": "split_series"}])
        web = result.partitions.series[0]
        assert len(web.members) == 3
        assert web.source_definition is result.levels[0].definition

    def test_non_split_levels_are_ignored(self, channel_records):
        result = run(channel_records, [{"field": "region"}])
        assert route(result.levels) == result.partitions
        assert result.partitions.series == ()


class TestSplitSeriesValues:
    """Test extract_split_series()."""

    def test_values_aligned_with_labels(self, channel_records):
        result = run(
            channel_records,
            [{"field": "region", "type": "terms"}, {"field": "channel", "type": "split_series"}],
        )
        assert result.labels == ("N", "S")
        assert extract_split_series(result, {"field": "v", "aggregation": "sum"}) == [
            {"key": "web", "values": [3, 8]},
            {"key": "store", "values": [4, 0]},
        ]

    def test_no_series(self, channel_records):
        result = run(channel_records, [{"field": "region"}])
        assert extract_split_series(result, {"field": "v"}) == []
