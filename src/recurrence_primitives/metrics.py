"""Duration totals over expanded occurrences."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from recurrence_primitives.aggregate import ScheduleAggregate
from recurrence_primitives.expander import expand, expand_aggregate

if TYPE_CHECKING:
    from recurrence_primitives.holidays import HolidayProvider
    from recurrence_primitives.schedule import Schedule

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

# Widest UTC offset spread between two zones, rounded up to whole days
_ZONE_SLACK = timedelta(days=2)


def total_seconds(
    source: Schedule | ScheduleAggregate,
    holidays: HolidayProvider | None = None,
    from_dt: datetime | None = None,
    to_dt: datetime | None = None,
) -> int:
    """Sum of occurrence durations, in whole seconds.

    Occurrences ending before from_dt or starting after to_dt are skipped;
    the others count in full, without clipping to the range. from_dt and
    to_dt must be timezone-aware. A schedule with neither an end date,
    a repeat count nor to_dt never stops expanding.
    """
    # Loose date bound so open-ended schedules stop; exact check below
    to_date = (to_dt + _ZONE_SLACK).date() if to_dt is not None else None
    if isinstance(source, ScheduleAggregate):
        occurrences = expand_aggregate(source, to_date=to_date, holidays=holidays)
    else:
        occurrences = expand(source, to_date=to_date, holidays=holidays)

    total = 0
    for occurrence in occurrences:
        if from_dt is not None and occurrence.end < from_dt:
            continue
        if to_dt is not None and occurrence.start > to_dt:
            continue
        total += max(0, int(occurrence.duration.total_seconds()))
    return total


def total_minutes(
    source: Schedule | ScheduleAggregate,
    holidays: HolidayProvider | None = None,
    from_dt: datetime | None = None,
    to_dt: datetime | None = None,
) -> float:
    return total_seconds(source, holidays, from_dt, to_dt) / SECONDS_PER_MINUTE


def total_hours(
    source: Schedule | ScheduleAggregate,
    holidays: HolidayProvider | None = None,
    from_dt: datetime | None = None,
    to_dt: datetime | None = None,
) -> float:
    return total_seconds(source, holidays, from_dt, to_dt) / SECONDS_PER_HOUR


def total_days(
    source: Schedule | ScheduleAggregate,
    holidays: HolidayProvider | None = None,
    from_dt: datetime | None = None,
    to_dt: datetime | None = None,
) -> float:
    return total_seconds(source, holidays, from_dt, to_dt) / SECONDS_PER_DAY
