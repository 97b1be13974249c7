"""Calendar filter predicates.

Each predicate answers whether a candidate date is *excluded* by one
constraint of the schedule. An empty constraint never excludes.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Callable

from recurrence_primitives.calendar import MonthOfYear, Weekday, week_of_month

if TYPE_CHECKING:
    from recurrence_primitives.schedule import Schedule


def excluded_by_day(schedule: Schedule, d: date) -> bool:
    return bool(schedule.by_day) and Weekday.from_date(d) not in schedule.by_day


def excluded_by_month(schedule: Schedule, d: date) -> bool:
    return bool(schedule.by_month) and MonthOfYear.from_date(d) not in schedule.by_month


def excluded_by_month_day(schedule: Schedule, d: date) -> bool:
    """Only the positive day of month is compared.

    Negative entries ("n-th day from month end") pass validation but never
    match a date.
    """
    return bool(schedule.by_month_day) and d.day not in schedule.by_month_day


def excluded_by_month_week(schedule: Schedule, d: date) -> bool:
    """Excluded unless the forward or backward ordinal week is listed."""
    if not schedule.by_month_week:
        return False
    week, negative_week = week_of_month(d)
    return week not in schedule.by_month_week and negative_week not in schedule.by_month_week


def excluded_by_exception(schedule: Schedule, d: date) -> bool:
    return d in schedule.except_dates


def is_included(schedule: Schedule, d: date) -> bool:
    """Explicit inclusion bypasses every other filter."""
    return d in schedule.include_dates


# Evaluation order
FILTERS: tuple[Callable[[Schedule, date], bool], ...] = (
    excluded_by_day,
    excluded_by_month,
    excluded_by_month_day,
    excluded_by_month_week,
    excluded_by_exception,
)


def is_excluded(schedule: Schedule, d: date) -> bool:
    """Whether d produces no occurrence: not included and rejected by any filter."""
    if is_included(schedule, d):
        return False
    return any(f(schedule, d) for f in FILTERS)


def can_match(schedule: Schedule) -> bool:
    """False when the filters reject every possible date.

    Only negative by_month_day entries are known to never match; walking an
    open-ended schedule that cannot match would never return.
    """
    if schedule.by_month_day and all(v < 0 for v in schedule.by_month_day):
        return False
    return True
