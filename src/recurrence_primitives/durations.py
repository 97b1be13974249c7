"""Boundary: calendar durations, ISO-8601 strings ↔ relativedelta.

A schedule's duration is a *calendar* duration (years, months, days,
hours, minutes, seconds), so it is carried as a relativedelta rather than
a fixed number of seconds.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

# Any fixed date works: month/year components never change a time of day.
_REFERENCE_DATE = date(2000, 1, 1)

_ISO_DURATION = re.compile(
    r"^P(?!$)"
    r"(?:(?P<years>\d+)Y)?"
    r"(?:(?P<months>\d+)M)?"
    r"(?:(?P<weeks>\d+)W)?"
    r"(?:(?P<days>\d+)D)?"
    r"(?:T(?=\d)"
    r"(?:(?P<hours>\d+)H)?"
    r"(?:(?P<minutes>\d+)M)?"
    r"(?:(?P<seconds>\d+)S)?"
    r")?$"
)


def parse_duration(s: str) -> relativedelta:
    """Parse an ISO-8601 duration such as 'PT1H30M' or 'P1Y2M3DT4H5M6S'.

    Raises ValueError for malformed strings. Fractional values and
    negative durations are not supported.
    """
    match = _ISO_DURATION.match(s.strip().upper()) if isinstance(s, str) else None
    if match is None:
        raise ValueError(f"Duration must be an ISO-8601 string like 'PT1H', got {s!r}")
    parts = {k: int(v) for k, v in match.groupdict().items() if v is not None}
    weeks = parts.pop("weeks", 0)
    parts["days"] = parts.get("days", 0) + 7 * weeks
    return relativedelta(**parts)


def format_duration(delta: relativedelta | timedelta) -> str:
    """Canonical 'P{y}Y{m}M{d}DT{h}H{i}M{s}S' form, every component present."""
    d = to_relativedelta(delta)
    return (
        f"P{d.years}Y{d.months}M{d.days}D"
        f"T{d.hours}H{d.minutes}M{d.seconds}S"
    )


def to_relativedelta(value: relativedelta | timedelta | str) -> relativedelta:
    """Normalise any accepted duration form into a relativedelta.

    Seconds roll into minutes, minutes into hours and hours into days;
    days never roll into months.
    """
    if isinstance(value, relativedelta):
        return relativedelta(
            years=value.years, months=value.months, days=value.days,
            hours=value.hours, minutes=value.minutes, seconds=value.seconds,
        )
    if isinstance(value, timedelta):
        return relativedelta(days=value.days, seconds=value.seconds)
    if isinstance(value, str):
        return parse_duration(value)
    raise TypeError(
        f"Duration must be a relativedelta, timedelta or ISO-8601 string, "
        f"got {type(value).__name__}"
    )


def is_zero(delta: relativedelta) -> bool:
    return not any(
        (delta.years, delta.months, delta.days,
         delta.hours, delta.minutes, delta.seconds)
    )


def is_negative(delta: relativedelta) -> bool:
    return any(
        v < 0 for v in (delta.years, delta.months, delta.days,
                        delta.hours, delta.minutes, delta.seconds)
    )


def end_time_from_duration(start: time, duration: relativedelta) -> time:
    """Time of day reached by adding duration to start."""
    return (datetime.combine(_REFERENCE_DATE, start) + duration).time()


def duration_between(start: time, end: time) -> relativedelta:
    """Wrap-aware difference between two times of day.

    If end is earlier than start the span crosses midnight and one day is
    added. Equal times give a zero duration.
    """
    start_dt = datetime.combine(_REFERENCE_DATE, start)
    end_dt = datetime.combine(_REFERENCE_DATE, end)
    if end < start:
        end_dt += timedelta(days=1)
    return to_relativedelta(end_dt - start_dt)
