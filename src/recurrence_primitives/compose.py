"""Occurrence composer: candidate date + time-of-day fields -> zoned instants."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo

from dateutil.relativedelta import relativedelta


def compose_start(d: date, start_time: time | None, tz: tzinfo) -> datetime:
    """d at start_time (midnight when absent) in tz."""
    return datetime.combine(d, start_time or time(0, 0), tzinfo=tz)


def compose_end(
    start: datetime,
    d: date,
    start_time: time | None,
    end_time: time | None,
    duration: relativedelta | None,
    tz: tzinfo,
) -> datetime | None:
    """End instant for an occurrence starting at start, or None if undefined.

    A duration takes precedence. Otherwise end_time is placed on d, or on the
    following day when it is earlier than start_time (overnight span).
    """
    if duration is not None:
        return start + duration
    if end_time is None:
        return None
    end = datetime.combine(d, end_time, tzinfo=tz)
    if start_time is not None and end_time < start_time:
        end += timedelta(days=1)
    return end
