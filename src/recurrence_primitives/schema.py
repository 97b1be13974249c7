"""Input validation for schedule fields.

Each validator returns a list of error messages (empty = valid), so a
Schedule can report every problem at once.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from recurrence_primitives.calendar import MonthOfYear, Weekday


def validate_timezone(name: str) -> list[str]:
    """Checks the zone is a resolvable IANA identifier."""
    if not isinstance(name, str) or not name:
        return [f"Invalid timezone: {name!r}"]
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return [f"Unknown timezone: {name!r}"]
    return []


def validate_date_range(start: date | None, end: date | None) -> list[str]:
    if start is not None and end is not None and end < start:
        return [
            f"start_date must be before or equal to end_date "
            f"({start.isoformat()} > {end.isoformat()})"
        ]
    return []


def validate_repeat_count(repeat_count: int | None) -> list[str]:
    if repeat_count is None:
        return []
    if isinstance(repeat_count, bool) or not isinstance(repeat_count, int):
        return [f"repeat_count must be an integer, got {repeat_count!r}"]
    if repeat_count < 1:
        return [f"repeat_count must be a positive integer, got {repeat_count}"]
    return []


def validate_by_day(values: Iterable) -> list[str]:
    """Checks every entry names a weekday and none repeats."""
    errors: list[str] = []
    seen: list[Weekday] = []
    for value in values:
        try:
            day = Weekday(value)
        except ValueError:
            errors.append(f"by_day: invalid weekday {value!r}")
            continue
        if day in seen:
            errors.append(f"by_day: duplicate weekday {day.value!r}")
        seen.append(day)
    return errors


def validate_by_month(values: Iterable) -> list[str]:
    errors: list[str] = []
    seen: list[MonthOfYear] = []
    for value in values:
        try:
            month = MonthOfYear(value)
        except ValueError:
            errors.append(f"by_month: invalid month {value!r}")
            continue
        if month in seen:
            errors.append(f"by_month: duplicate month {month.value!r}")
        seen.append(month)
    return errors


def _validate_signed_range(name: str, values: Iterable, limit: int) -> list[str]:
    errors: list[str] = []
    for value in values:
        if (
            isinstance(value, bool)
            or not isinstance(value, int)
            or value == 0
            or not -limit <= value <= limit
        ):
            errors.append(
                f"{name}: {value!r} must be an integer in 1..{limit} "
                f"or -{limit}..-1"
            )
    return errors


def validate_by_month_day(values: Iterable) -> list[str]:
    return _validate_signed_range("by_month_day", values, 31)


def validate_by_month_week(values: Iterable) -> list[str]:
    return _validate_signed_range("by_month_week", values, 6)


def validate_dates_within(
    name: str,
    dates: Iterable[date],
    start: date | None,
    end: date | None,
    unique: bool = False,
) -> list[str]:
    """Checks override dates lie inside [start, end] when both bounds are set.

    With unique=True, repeated dates are reported too.
    """
    errors: list[str] = []
    seen: set[date] = set()
    for d in dates:
        if not isinstance(d, date):
            errors.append(f"{name}: {d!r} is not a date")
            continue
        if unique and d in seen:
            errors.append(f"{name}: duplicate date {d.isoformat()}")
        seen.add(d)
        if start is not None and end is not None and not start <= d <= end:
            errors.append(
                f"{name}: {d.isoformat()} is outside "
                f"{start.isoformat()}..{end.isoformat()}"
            )
    return errors
