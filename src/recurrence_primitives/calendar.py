"""Layer 1: calendar vocabulary for weekdays, months and recurrence steps."""

from __future__ import annotations

import calendar as _stdlib_calendar
from datetime import date
from enum import Enum
from math import ceil

from dateutil.relativedelta import relativedelta


class Weekday(str, Enum):
    """Day of the week. Bijective with ISO weekday numbers 1..7."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def iso(self) -> int:
        return _WEEKDAY_ISO[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_iso(cls, number: int) -> Weekday:
        if not 1 <= number <= 7:
            raise ValueError(f"Invalid ISO weekday: {number} (must be 1-7)")
        return _ISO_WEEKDAY[number]

    @classmethod
    def from_date(cls, d: date) -> Weekday:
        return _ISO_WEEKDAY[d.isoweekday()]


class MonthOfYear(str, Enum):
    """Month of the year. Bijective with month numbers 1..12."""

    JANUARY = "january"
    FEBRUARY = "february"
    MARCH = "march"
    APRIL = "april"
    MAY = "may"
    JUNE = "june"
    JULY = "july"
    AUGUST = "august"
    SEPTEMBER = "september"
    OCTOBER = "october"
    NOVEMBER = "november"
    DECEMBER = "december"

    @property
    def number(self) -> int:
        return _MONTH_NUMBER[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_number(cls, number: int) -> MonthOfYear:
        if not 1 <= number <= 12:
            raise ValueError(f"Invalid month number: {number} (must be 1-12)")
        return _NUMBER_MONTH[number]

    @classmethod
    def from_date(cls, d: date) -> MonthOfYear:
        return _NUMBER_MONTH[d.month]


class RecurrenceInterval(str, Enum):
    """Fixed calendar step between candidate dates."""

    NONE = "none"
    DAILY = "daily"
    EVERY_WEEK = "every_week"
    EVERY_TWO_WEEKS = "every_two_weeks"
    EVERY_THREE_WEEKS = "every_three_weeks"
    EVERY_FOUR_WEEKS = "every_four_weeks"
    EVERY_MONTH = "every_month"
    EVERY_TWO_MONTHS = "every_two_months"
    EVERY_THREE_MONTHS = "every_three_months"
    EVERY_FOUR_MONTHS = "every_four_months"
    EVERY_SIX_MONTHS = "every_six_months"
    EVERY_YEAR = "every_year"

    @property
    def is_recurring(self) -> bool:
        return self is not RecurrenceInterval.NONE

    @property
    def months(self) -> int:
        """Month component of one step (years expressed as 12 months)."""
        return _STEPS[self][0]

    @property
    def days(self) -> int:
        """Day component of one step (weeks expressed as 7 days)."""
        return _STEPS[self][1]

    @property
    def step(self) -> relativedelta:
        """One step as calendar arithmetic. A month is a calendar month, not 30 days."""
        months, days = _STEPS[self]
        return relativedelta(months=months, days=days)

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


_WEEKDAY_ISO: dict[Weekday, int] = {
    Weekday.MONDAY: 1,
    Weekday.TUESDAY: 2,
    Weekday.WEDNESDAY: 3,
    Weekday.THURSDAY: 4,
    Weekday.FRIDAY: 5,
    Weekday.SATURDAY: 6,
    Weekday.SUNDAY: 7,
}
_ISO_WEEKDAY: dict[int, Weekday] = {v: k for k, v in _WEEKDAY_ISO.items()}

_MONTH_NUMBER: dict[MonthOfYear, int] = {
    month: i for i, month in enumerate(MonthOfYear, start=1)
}
_NUMBER_MONTH: dict[int, MonthOfYear] = {v: k for k, v in _MONTH_NUMBER.items()}

# interval -> (months, days) per step
_STEPS: dict[RecurrenceInterval, tuple[int, int]] = {
    RecurrenceInterval.NONE: (0, 0),
    RecurrenceInterval.DAILY: (0, 1),
    RecurrenceInterval.EVERY_WEEK: (0, 7),
    RecurrenceInterval.EVERY_TWO_WEEKS: (0, 14),
    RecurrenceInterval.EVERY_THREE_WEEKS: (0, 21),
    RecurrenceInterval.EVERY_FOUR_WEEKS: (0, 28),
    RecurrenceInterval.EVERY_MONTH: (1, 0),
    RecurrenceInterval.EVERY_TWO_MONTHS: (2, 0),
    RecurrenceInterval.EVERY_THREE_MONTHS: (3, 0),
    RecurrenceInterval.EVERY_FOUR_MONTHS: (4, 0),
    RecurrenceInterval.EVERY_SIX_MONTHS: (6, 0),
    RecurrenceInterval.EVERY_YEAR: (12, 0),
}


def days_in_month(d: date) -> int:
    return _stdlib_calendar.monthrange(d.year, d.month)[1]


def step_date(anchor: date, interval: RecurrenceInterval, n: int) -> date:
    """The n-th candidate date after anchor: anchor + n * step.

    Always computed from the anchor, so month steps clamp to the month end
    without drifting (Jan 31 -> Feb 29 -> Mar 31).
    """
    months, days = _STEPS[interval]
    return anchor + relativedelta(months=months * n, days=days * n)


def steps_before(anchor: date, interval: RecurrenceInterval, target: date) -> int:
    """Largest n with step_date(anchor, interval, n) <= target (0 if none).

    Used to seek a walk forward without visiting every intermediate step.
    """
    months, days = _STEPS[interval]
    if target <= anchor or (months == 0 and days == 0):
        return 0
    if months == 0:
        return (target - anchor).days // days
    n = ((target.year - anchor.year) * 12 + target.month - anchor.month) // months
    # Clamping can push the estimate one step past target
    while n > 0 and step_date(anchor, interval, n) > target:
        n -= 1
    return n


def week_of_month(d: date) -> tuple[int, int]:
    """Ordinal week of d within its month, counted forward and backward.

    Weeks start on Monday; week 1 contains the 1st of the month. Returns
    (week, negative_week) where negative_week is -1 for the last week of
    the month, -2 for the one before, and so on.
    """
    offset = d.replace(day=1).isoweekday() - 1
    week = ceil((d.day + offset) / 7)
    weeks_in_month = ceil((days_in_month(d) + offset) / 7)
    return week, week - (weeks_in_month + 1)
