"""Schedule: the immutable recurrence definition.

A Schedule describes a recurring or single-occurrence time pattern. It does
not expand itself; see recurrence_primitives.expander.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from recurrence_primitives.calendar import MonthOfYear, RecurrenceInterval, Weekday
from recurrence_primitives.durations import (
    duration_between,
    end_time_from_duration,
    format_duration,
    is_negative,
    is_zero,
    to_relativedelta,
)
from recurrence_primitives.schema import (
    validate_by_day,
    validate_by_month,
    validate_by_month_day,
    validate_by_month_week,
    validate_date_range,
    validate_dates_within,
    validate_repeat_count,
    validate_timezone,
)
from recurrence_primitives.types import ScheduleValidationError

DEFAULT_TIMEZONE = "UTC"

# Wire key -> constructor keyword
_WIRE_FIELDS = {
    "repeatInterval": "repeat_interval",
    "startDate": "start_date",
    "endDate": "end_date",
    "startTime": "start_time",
    "endTime": "end_time",
    "duration": "duration",
    "repeatCount": "repeat_count",
    "byDay": "by_day",
    "byMonth": "by_month",
    "byMonthDay": "by_month_day",
    "byMonthWeek": "by_month_week",
    "exceptDates": "except_dates",
    "includeDates": "include_dates",
    "timezone": "timezone",
}
_ARRAY_FIELDS = (
    "byDay", "byMonth", "byMonthDay", "byMonthWeek", "exceptDates", "includeDates",
)


@dataclass(frozen=True)
class Schedule:
    """Immutable recurrence definition: interval, bounds, span, filters, overrides.

    Only one of ``end_time`` and ``duration`` needs to be given; the other is
    derived. A time-of-day end earlier than ``start_time`` crosses midnight.
    When both are given and disagree, ``end_time`` wins.
    String values are accepted for dates ('2024-01-01'), times ('09:00'),
    durations ('PT1H') and enum members ('monday').

    Raises ScheduleValidationError listing every invalid field.
    """

    repeat_interval: RecurrenceInterval = RecurrenceInterval.NONE
    start_date: date | None = None
    end_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    duration: relativedelta | None = None
    repeat_count: int | None = None
    by_day: frozenset[Weekday] = frozenset()
    by_month: frozenset[MonthOfYear] = frozenset()
    by_month_day: frozenset[int] = frozenset()
    by_month_week: frozenset[int] = frozenset()
    except_dates: frozenset[date] = frozenset()
    include_dates: frozenset[date] = frozenset()
    timezone: str = DEFAULT_TIMEZONE
    identifier: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        errors: list[str] = []

        try:
            interval = RecurrenceInterval(self.repeat_interval)
        except ValueError:
            errors.append(f"Invalid repeat_interval: {self.repeat_interval!r}")
            interval = RecurrenceInterval.NONE

        start_date = _coerce_date(self.start_date, "start_date", errors)
        end_date = _coerce_date(self.end_date, "end_date", errors)
        start_time = _coerce_time(self.start_time, "start_time", errors)
        end_time = _coerce_time(self.end_time, "end_time", errors)
        end_time, duration = _resolve_span(start_time, end_time, self.duration, errors)

        by_day = _as_list(self.by_day, "by_day", errors)
        by_month = _as_list(self.by_month, "by_month", errors)
        by_month_day = _as_list(self.by_month_day, "by_month_day", errors)
        by_month_week = _as_list(self.by_month_week, "by_month_week", errors)
        except_dates = [
            _coerce_date(d, "except_dates", errors)
            for d in _as_list(self.except_dates, "except_dates", errors)
        ]
        include_dates = [
            _coerce_date(d, "include_dates", errors)
            for d in _as_list(self.include_dates, "include_dates", errors)
        ]

        timezone = self.timezone if self.timezone is not None else DEFAULT_TIMEZONE
        errors.extend(validate_timezone(timezone))
        errors.extend(validate_date_range(start_date, end_date))
        errors.extend(validate_repeat_count(self.repeat_count))
        errors.extend(validate_by_day(by_day))
        errors.extend(validate_by_month(by_month))
        errors.extend(validate_by_month_day(by_month_day))
        errors.extend(validate_by_month_week(by_month_week))
        errors.extend(validate_dates_within(
            "except_dates", [d for d in except_dates if d is not None],
            start_date, end_date,
        ))
        errors.extend(validate_dates_within(
            "include_dates", [d for d in include_dates if d is not None],
            start_date, end_date, unique=True,
        ))

        if errors:
            raise ScheduleValidationError(errors)

        values = {
            "repeat_interval": interval,
            "start_date": start_date,
            "end_date": end_date,
            "start_time": start_time,
            "end_time": end_time,
            "duration": duration,
            "by_day": frozenset(Weekday(d) for d in by_day),
            "by_month": frozenset(MonthOfYear(m) for m in by_month),
            "by_month_day": frozenset(by_month_day),
            "by_month_week": frozenset(by_month_week),
            "except_dates": frozenset(except_dates),
            "include_dates": frozenset(include_dates),
            "timezone": timezone,
        }
        for name, value in values.items():
            object.__setattr__(self, name, value)
        object.__setattr__(self, "identifier", _digest(self._semantic_dict()))

    @property
    def is_recurring(self) -> bool:
        return self.repeat_interval.is_recurring

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def with_start_date(self, start_date: date) -> Schedule:
        """Copy with a new start date. Re-validated."""
        return replace(self, start_date=start_date)

    def with_end_date(self, end_date: date) -> Schedule:
        """Copy with a new end date. Re-validated."""
        return replace(self, end_date=end_date)

    # ------------------------------------------------------------------
    # Wire shape
    # ------------------------------------------------------------------

    def _semantic_dict(self) -> dict:
        return {
            "repeatInterval": self.repeat_interval.value,
            "startDate": _iso_or_none(self.start_date),
            "endDate": _iso_or_none(self.end_date),
            "startTime": _time_or_none(self.start_time),
            "endTime": _time_or_none(self.end_time),
            "duration": format_duration(self.duration) if self.duration is not None else None,
            "timezone": self.timezone,
            "repeatCount": self.repeat_count,
            "byDay": [d.value for d in sorted(self.by_day, key=lambda d: d.iso)] or None,
            "byMonth": [m.value for m in sorted(self.by_month, key=lambda m: m.number)] or None,
            "byMonthDay": sorted(self.by_month_day),
            "byMonthWeek": sorted(self.by_month_week),
            "exceptDates": [d.isoformat() for d in sorted(self.except_dates)],
            "includeDates": [d.isoformat() for d in sorted(self.include_dates)],
        }

    def to_dict(self) -> dict:
        """Flat wire record. Set-valued fields are emitted in canonical order."""
        return {"identifier": self.identifier, **self._semantic_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> Schedule:
        """Build a Schedule from its wire record.

        Any supplied 'identifier' is ignored and recomputed from content.
        Raises ScheduleValidationError.
        """
        if not isinstance(data, dict):
            raise ScheduleValidationError(
                f"Schedule record must be an object, got {type(data).__name__}"
            )
        if not isinstance(data.get("repeatInterval"), str):
            raise ScheduleValidationError('Missing or invalid "repeatInterval"')

        errors = [
            f'"{key}" must be an array or null'
            for key in _ARRAY_FIELDS
            if data.get(key) is not None and not isinstance(data[key], list)
        ]
        if errors:
            raise ScheduleValidationError(errors)

        kwargs = {
            name: data[key]
            for key, name in _WIRE_FIELDS.items()
            if data.get(key) is not None
        }
        return cls(**kwargs)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, s: str) -> Schedule:
        try:
            data = json.loads(s)
        except json.JSONDecodeError as e:
            raise ScheduleValidationError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)


def _digest(payload: dict) -> str:
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _iso_or_none(d: date | None) -> str | None:
    return d.isoformat() if d is not None else None


def _time_or_none(t: time | None) -> str | None:
    return t.strftime("%H:%M:%S") if t is not None else None


def _as_list(value, name: str, errors: list[str]) -> list:
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        errors.append(f"{name} must be a collection, got a string")
        return []
    try:
        return list(value)
    except TypeError:
        errors.append(f"{name} must be a collection, got {type(value).__name__}")
        return []


def _coerce_date(value, name: str, errors: list[str]) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    errors.append(f"{name}: invalid date {value!r}")
    return None


def _coerce_time(value, name: str, errors: list[str]) -> time | None:
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = time.fromisoformat(value)
        except ValueError:
            errors.append(f"{name}: invalid time {value!r}")
            return None
    if not isinstance(value, time):
        errors.append(f"{name}: invalid time {value!r}")
        return None
    if value.tzinfo is not None:
        errors.append(
            f"{name} must be a naive time of day; the schedule's timezone applies"
        )
        return None
    return value.replace(microsecond=0)


def _resolve_span(
    start_time: time | None,
    end_time: time | None,
    raw_duration,
    errors: list[str],
) -> tuple[time | None, relativedelta | None]:
    """Derive the (end_time, duration) pair from whichever was given.

    When both are given and disagree, end_time wins and the duration is
    recomputed from it.
    """
    if raw_duration is None:
        if end_time is not None and start_time is not None:
            return end_time, duration_between(start_time, end_time)
        return end_time, None

    try:
        duration = to_relativedelta(raw_duration)
    except (TypeError, ValueError) as e:
        errors.append(f"duration: {e}")
        return end_time, None

    if is_negative(duration):
        errors.append("duration cannot be negative")
        return end_time, None
    if start_time is None:
        errors.append("start_time is required when duration is given")
        return end_time, None

    derived = end_time_from_duration(start_time, duration)
    if end_time is not None:
        if end_time == derived:
            # Keeps spans of a day or more intact
            return end_time, duration
        return end_time, duration_between(start_time, end_time)

    if is_zero(duration):
        errors.append("duration cannot be zero")
        return end_time, None
    return derived, duration
