"""Tests for Schedule construction, span derivation, identifier and wire shape.

Test data loaded from: data/fixtures/scenarios/validation.json,
data/fixtures/schedules.json
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date, datetime, time

import pytest
from dateutil.relativedelta import relativedelta

from conftest import SCHEDULE_NAMES, load_scenarios, make_schedule, schedule_record
from recurrence_primitives.calendar import MonthOfYear, RecurrenceInterval, Weekday
from recurrence_primitives.durations import format_duration
from recurrence_primitives.schedule import DEFAULT_TIMEZONE, Schedule
from recurrence_primitives.types import ScheduleValidationError

_data = load_scenarios("validation")


class TestValidation:
    """Every invalid record is rejected at construction."""

    @pytest.mark.parametrize("spec", _data["invalid"], ids=lambda s: s["id"])
    def test_invalid(self, spec):
        with pytest.raises(ScheduleValidationError) as excinfo:
            Schedule.from_dict(spec["record"])
        assert spec["error"] in str(excinfo.value), spec["notes"]

    def test_all_problems_reported(self):
        with pytest.raises(ScheduleValidationError) as excinfo:
            Schedule(
                repeat_interval="daily",
                repeat_count=0,
                by_day=["someday"],
                timezone="Nowhere/Special",
            )
        assert len(excinfo.value.errors) == 3

    def test_rejects_aware_time(self):
        from datetime import timezone

        with pytest.raises(ScheduleValidationError, match="naive time"):
            Schedule(start_time=time(9, 0, tzinfo=timezone.utc))

    def test_not_a_record(self):
        with pytest.raises(ScheduleValidationError):
            Schedule.from_dict(["daily"])

    def test_invalid_json(self):
        with pytest.raises(ScheduleValidationError, match="Invalid JSON"):
            Schedule.from_json("{not json")


class TestSpanDerivation:
    """end_time and duration: the missing one is derived."""

    def test_duration_from_end_time(self):
        s = Schedule(repeat_interval="daily", start_time="09:00", end_time="10:30")
        assert s.duration == relativedelta(hours=1, minutes=30)

    def test_end_time_from_duration(self):
        s = Schedule(repeat_interval="daily", start_time="22:00", duration="PT3H")
        assert s.end_time == time(1, 0)

    def test_overnight_duration(self):
        s = Schedule(repeat_interval="daily", start_time="23:30", end_time="01:00")
        assert s.duration == relativedelta(hours=1, minutes=30)

    def test_equal_times_give_zero_duration(self):
        s = Schedule(repeat_interval="none", start_date="2024-01-01", start_time="09:00", end_time="09:00")
        assert s.duration == relativedelta()

    def test_end_time_without_start_time_is_raw(self):
        s = Schedule(repeat_interval="daily", end_time="08:00")
        assert s.end_time == time(8, 0)
        assert s.duration is None

    def test_consistent_end_time_and_duration(self):
        s = Schedule(start_time="09:00", end_time="10:00", duration="PT1H")
        assert s.end_time == time(10, 0)

    def test_inconsistent_end_time_wins(self):
        s = Schedule.from_dict({
            "repeatInterval": "daily", "startDate": "2024-01-01", "endDate": "2024-01-03",
            "startTime": "09:00:00", "endTime": "10:00:00", "duration": "PT2H",
        })
        assert s.end_time == time(10, 0)
        assert s.duration == relativedelta(hours=1)
        assert s.to_dict()["duration"] == format_duration(relativedelta(hours=1))

    def test_consistent_multi_day_duration_kept(self):
        s = Schedule(start_time="09:00", end_time="09:00", duration="P1D")
        assert s.duration == relativedelta(days=1)
        assert Schedule.from_dict(s.to_dict()) == s

    def test_timedelta_duration(self):
        from datetime import timedelta

        s = Schedule(start_time="09:00", duration=timedelta(minutes=90))
        assert s.end_time == time(10, 30)

    def test_microseconds_dropped(self):
        s = Schedule(start_time=time(9, 0, 0, 500))
        assert s.start_time == time(9, 0)


class TestCoercion:
    def test_strings_become_typed_values(self, office_hours):
        assert office_hours.repeat_interval is RecurrenceInterval.DAILY
        assert office_hours.start_date == date(2025, 1, 1)
        assert office_hours.start_time == time(9, 0)
        assert Weekday.MONDAY in office_hours.by_day
        assert office_hours.by_month == {MonthOfYear.JANUARY, MonthOfYear.FEBRUARY}
        assert office_hours.except_dates == {date(2025, 1, 2)}
        assert office_hours.timezone == "America/New_York"

    def test_datetime_start_date_keeps_date(self):
        s = Schedule(start_date=datetime(2024, 5, 1, 13, 45))
        assert s.start_date == date(2024, 5, 1)

    def test_defaults(self):
        s = Schedule()
        assert s.repeat_interval is RecurrenceInterval.NONE
        assert not s.is_recurring
        assert s.timezone == DEFAULT_TIMEZONE
        assert s.by_day == frozenset()

    def test_none_timezone_uses_default(self):
        assert Schedule(timezone=None).timezone == DEFAULT_TIMEZONE

    def test_immutable(self, daily_morning):
        with pytest.raises(FrozenInstanceError):
            daily_morning.start_date = date(2030, 1, 1)


class TestIdentifier:
    def test_stable_for_equal_content(self):
        assert make_schedule("daily_morning").identifier == make_schedule("daily_morning").identifier

    def test_set_order_does_not_matter(self):
        a = Schedule(repeat_interval="daily", by_day=["monday", "friday"])
        b = Schedule(repeat_interval="daily", by_day=["friday", "monday"])
        assert a.identifier == b.identifier

    def test_derived_span_is_canonical(self):
        a = Schedule(start_time="09:00", end_time="10:00")
        b = Schedule(start_time="09:00", duration="PT1H")
        assert a.identifier == b.identifier

    @pytest.mark.parametrize(
        "override",
        [
            {"repeatCount": 2},
            {"endDate": "2025-01-06"},
            {"startTime": "09:01:00"},
            {"timezone": "Europe/Rome"},
            {"byDay": ["monday"]},
            {"exceptDates": ["2025-01-02"]},
        ],
        ids=lambda o: next(iter(o)),
    )
    def test_any_change_changes_identifier(self, override):
        base = make_schedule("daily_morning")
        assert make_schedule("daily_morning", **override).identifier != base.identifier

    def test_supplied_identifier_ignored(self):
        record = schedule_record("daily_morning", identifier="forged")
        assert Schedule.from_dict(record).identifier != "forged"
        assert Schedule.from_dict(record).identifier == make_schedule("daily_morning").identifier

    def test_is_sha256_hex(self, daily_morning):
        assert len(daily_morning.identifier) == 64
        int(daily_morning.identifier, 16)


class TestCopyWith:
    def test_with_start_date(self, daily_morning):
        moved = daily_morning.with_start_date(date(2025, 1, 3))
        assert moved.start_date == date(2025, 1, 3)
        assert moved.end_date == daily_morning.end_date
        assert moved.identifier != daily_morning.identifier

    def test_with_end_date_is_revalidated(self, daily_morning):
        with pytest.raises(ScheduleValidationError):
            daily_morning.with_end_date(date(2024, 12, 31))


class TestWireShape:
    def test_to_dict(self, daily_morning):
        assert daily_morning.to_dict() == {
            "identifier": daily_morning.identifier,
            "repeatInterval": "daily",
            "startDate": "2025-01-01",
            "endDate": "2025-01-05",
            "startTime": "09:00:00",
            "endTime": "10:00:00",
            "duration": "P0Y0M0DT1H0M0S",
            "timezone": "UTC",
            "repeatCount": None,
            "byDay": None,
            "byMonth": None,
            "byMonthDay": [],
            "byMonthWeek": [],
            "exceptDates": [],
            "includeDates": [],
        }

    def test_enum_arrays_in_calendar_order(self):
        s = Schedule(by_day=["sunday", "monday"], by_month=["march", "january"])
        record = s.to_dict()
        assert record["byDay"] == ["monday", "sunday"]
        assert record["byMonth"] == ["january", "march"]

    @pytest.mark.parametrize("name", SCHEDULE_NAMES)
    def test_round_trip(self, name):
        s = make_schedule(name)
        again = Schedule.from_dict(s.to_dict())
        assert again.identifier == s.identifier
        assert again.to_dict() == s.to_dict()
        assert again == s

    def test_json_round_trip(self, office_hours):
        assert Schedule.from_json(office_hours.to_json()).to_dict() == office_hours.to_dict()
