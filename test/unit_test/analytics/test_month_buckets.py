from datetime import date, datetime

import pytest

from booktalks_buddy.analytics import cumulative_growth, group_by_month, last_n_month_keys, month_key


class TestMonthKey:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2026, 3, 1), "2026-03"),
            (datetime(2026, 3, 31, 23, 59, 59), "2026-03"),
            ("2026-12-15T10:00:00Z", "2026-12"),
            ("2026-01-01T00:00:00+00:00", "2026-01"),
        ],
    )
    def test_month_key(self, value, expected):
        assert month_key(value) == expected


class TestLastNMonthKeys:
    def test_oldest_first_and_crosses_year_boundary(self):
        assert last_n_month_keys(4, today=date(2026, 2, 10)) == ["2025-11", "2025-12", "2026-01", "2026-02"]

    def test_zero_months(self):
        assert last_n_month_keys(0, today=date(2026, 2, 10)) == []


class TestGroupByMonth:
    def test_first_and_last_day_of_month_share_a_bucket(self):
        rows = [
            {"created_at": datetime(2026, 1, 1, 0, 0)},
            {"created_at": datetime(2026, 1, 31, 23, 59)},
            {"created_at": datetime(2026, 2, 1, 0, 0)},
        ]

        assert group_by_month(rows, "created_at") == {"2026-01": 2, "2026-02": 1}

    def test_requested_months_are_zero_filled_and_bounded(self):
        rows = [
            {"created_at": datetime(2025, 12, 31)},
            {"created_at": datetime(2026, 2, 14)},
            {"created_at": None},
        ]

        buckets = group_by_month(rows, "created_at", months=["2026-01", "2026-02", "2026-03"])

        assert buckets == {"2026-01": 0, "2026-02": 1, "2026-03": 0}
        assert list(buckets) == ["2026-01", "2026-02", "2026-03"]

    def test_reads_attributes_from_objects(self):
        class Row:
            def __init__(self, joined_at):
                self.joined_at = joined_at

        rows = [Row(date(2026, 5, 2)), Row(date(2026, 4, 30))]

        assert group_by_month(rows, "joined_at") == {"2026-04": 1, "2026-05": 1}


def test_cumulative_growth():
    buckets = {"2026-01": 2, "2026-02": 0, "2026-03": 3}

    assert cumulative_growth(buckets, starting_total=10) == {"2026-01": 12, "2026-02": 12, "2026-03": 15}
