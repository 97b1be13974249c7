"""Tests for the holiday provider interface."""

from __future__ import annotations

from datetime import date

from recurrence_primitives.holidays import DateSetHolidays, HolidayProvider


class TestDateSetHolidays:
    def test_lookup(self):
        holidays = DateSetHolidays(["2024-12-25", date(2024, 12, 26)])
        assert holidays.is_holiday(date(2024, 12, 25))
        assert holidays.is_holiday(date(2024, 12, 26))
        assert not holidays.is_holiday(date(2024, 12, 27))
        assert len(holidays) == 2

    def test_empty(self):
        assert not DateSetHolidays().is_holiday(date(2024, 1, 1))

    def test_satisfies_protocol(self):
        assert isinstance(DateSetHolidays(), HolidayProvider)

    def test_any_object_with_is_holiday(self):
        class Weekends:
            def is_holiday(self, d: date) -> bool:
                return d.isoweekday() >= 6

        assert isinstance(Weekends(), HolidayProvider)
