import pytest


@pytest.fixture
def category_records():
    return [
        {"cat": "A", "v": 10},
        {"cat": "A", "v": 20},
        {"cat": "B", "v": 30},
    ]


@pytest.fixture
def sales_records():
    """Small sales fact table spanning two months, two regions and two channels."""
    return [
        {"date": "2023-01-05", "region": "North", "channel": "web", "revenue": 100.0, "units": 2},
        {"date": "2023-01-28", "region": "North", "channel": "store", "revenue": 250.0, "units": 5},
        {"date": "2023-02-10", "region": "South", "channel": "web", "revenue": 80.0, "units": 1},
        {"date": "2023-02-14", "region": "North", "channel": "web", "revenue": 40.0, "units": 1},
        {"date": "not a date", "region": "South", "channel": "store", "revenue": None, "units": 3},
    ]
