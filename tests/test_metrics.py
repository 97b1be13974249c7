"""Tests for duration totals over expanded occurrences."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import make_aggregate, make_schedule
from recurrence_primitives.holidays import DateSetHolidays
from recurrence_primitives.metrics import (
    total_days,
    total_hours,
    total_minutes,
    total_seconds,
)
from recurrence_primitives.schedule import Schedule


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestTotals:
    def test_single_two_hours(self):
        s = make_schedule("two_hours_daily", repeatCount=1)
        assert total_seconds(s) == 2 * 3600
        assert total_minutes(s) == 120.0
        assert total_hours(s) == 2.0
        assert total_days(s) == pytest.approx(2 / 24)

    def test_three_days(self):
        assert total_seconds(make_schedule("two_hours_daily")) == 3 * 2 * 3600

    def test_aggregate_sums_members(self):
        agg = make_aggregate("daily_morning", "single")
        assert total_seconds(agg) == 5 * 3600 + 2 * 3600

    def test_filters_and_exceptions_apply(self):
        s = make_schedule("two_hours_daily", exceptDates=["2025-01-02"])
        assert total_hours(s) == 4.0

    def test_holidays_do_not_change_totals(self):
        s = make_schedule("two_hours_daily")
        assert total_seconds(s, DateSetHolidays(["2025-01-02"])) == 3 * 2 * 3600

    def test_nothing_to_expand(self):
        s = Schedule(repeat_interval="daily", start_time="09:00", end_time="10:00")
        assert total_seconds(s) == 0
        assert total_days(s) == 0.0


class TestRange:
    def test_range_selects_one_day(self):
        s = make_schedule("two_hours_daily")
        got = total_seconds(s, from_dt=_utc(2025, 1, 2), to_dt=_utc(2025, 1, 2, 23, 59, 59))
        assert got == 2 * 3600

    def test_range_before_everything(self):
        s = make_schedule("single")
        assert total_seconds(s, from_dt=_utc(2025, 1, 1), to_dt=_utc(2025, 1, 1, 23, 59)) == 0

    def test_range_after_everything(self):
        s = make_schedule("two_hours_daily")
        assert total_seconds(s, from_dt=_utc(2025, 2, 1), to_dt=_utc(2025, 2, 2)) == 0

    def test_partial_overlap_counts_in_full(self):
        s = make_schedule("two_hours_daily")
        got = total_seconds(s, from_dt=_utc(2025, 1, 3, 10, 0), to_dt=_utc(2025, 1, 3, 10, 30))
        assert got == 2 * 3600

    def test_range_bounds_open_ended(self, open_ended):
        got = total_hours(open_ended, from_dt=_utc(2025, 1, 1), to_dt=_utc(2025, 1, 10, 23, 0))
        assert got == 10.0
