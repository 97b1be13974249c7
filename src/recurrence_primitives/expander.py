"""Layer 2: RecurrenceWalker, lazy expansion of one Schedule into Occurrences.

The walker is an explicit pull-based iterator: nothing is computed until
the caller asks for the next occurrence, and the only state it keeps is a
cursor over candidate dates plus the emitted count.
"""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Callable, Iterator
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta

from recurrence_primitives.calendar import step_date, steps_before
from recurrence_primitives.compose import compose_end, compose_start
from recurrence_primitives.filters import can_match, is_excluded
from recurrence_primitives.types import ExpansionError, Occurrence

if TYPE_CHECKING:
    from recurrence_primitives.aggregate import ScheduleAggregate
    from recurrence_primitives.holidays import HolidayProvider
    from recurrence_primitives.schedule import Schedule

logger = logging.getLogger(__name__)

PostFilter = Callable[[Occurrence, "Schedule", int], bool]

# Calendar filters and every step grid repeat within this span
_CALENDAR_CYCLE = relativedelta(years=800)


class WalkerState(Enum):
    NOT_STARTED = "not_started"
    ITERATING = "iterating"
    EXHAUSTED = "exhausted"


class RecurrenceWalker:
    """Iterator over the occurrences of one schedule inside an optional window.

    The window [from_date, to_date] is intersected with the schedule's own
    start/end dates. Candidate dates are anchored at start_date (from_date
    when the schedule has none) and advance by the interval step; include
    dates off the step grid are visited as extra candidates.

    Qualifying candidates before the window still count toward
    repeat_count. A post_filter returning False suppresses the occurrence
    but its candidate is counted too.
    """

    def __init__(
        self,
        schedule: Schedule,
        from_date: date | datetime | None = None,
        to_date: date | datetime | None = None,
        holidays: HolidayProvider | None = None,
        post_filter: PostFilter | None = None,
    ) -> None:
        self.schedule = schedule
        self.from_date = _as_date(from_date)
        self.to_date = _as_date(to_date)
        self.holidays = holidays
        self.post_filter = post_filter

        self._state = WalkerState.NOT_STARTED
        self._tz: ZoneInfo | None = None
        self._anchor: date | None = None
        self._start: date | None = None
        self._end: date | None = None
        self._count = 0
        # Candidate cursor: grid position and index into sorted include dates
        self._n = 0
        self._grid: date | None = None
        self._includes: list[date] = []
        self._include_pos = 0
        self._last_hit: date | None = None
        self._last_except: date | None = None

    @property
    def state(self) -> WalkerState:
        return self._state

    @property
    def count(self) -> int:
        """Qualifying candidates visited so far, emitted or not."""
        return self._count

    def __iter__(self) -> RecurrenceWalker:
        return self

    def __next__(self) -> Occurrence:
        if self._state is WalkerState.NOT_STARTED:
            self._begin()
        if self._state is WalkerState.EXHAUSTED:
            raise StopIteration
        if not self.schedule.is_recurring:
            return self._next_single()
        return self._next_recurring()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _begin(self) -> None:
        schedule = self.schedule
        try:
            self._tz = ZoneInfo(schedule.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            self._state = WalkerState.EXHAUSTED
            raise ExpansionError(
                schedule.identifier, f"timezone {schedule.timezone!r} is unavailable"
            ) from e

        self._anchor = schedule.start_date or self.from_date
        self._start = _latest(schedule.start_date, self.from_date)
        self._end = _earliest(schedule.end_date, self.to_date)

        if self._start is None:
            logger.debug("Schedule %s has no start date and no window; nothing to expand",
                         schedule.identifier[:12])
            self._state = WalkerState.EXHAUSTED
            return
        if self._end is not None and self._end < self._start:
            self._state = WalkerState.EXHAUSTED
            return

        if schedule.is_recurring:
            if schedule.end_time is None and schedule.duration is None:
                logger.debug("Recurring schedule %s has no end time or duration; nothing to expand",
                             schedule.identifier[:12])
                self._state = WalkerState.EXHAUSTED
                return
            self._position_cursor()

        self._state = WalkerState.ITERATING

    def _position_cursor(self) -> None:
        schedule = self.schedule
        anchor = self._anchor
        self._includes = sorted(d for d in schedule.include_dates if d >= anchor)
        self._last_except = max(schedule.except_dates, default=None)

        # Without a count cap nothing before the window matters: seek to it
        seek = self._start if schedule.repeat_count is None else anchor
        self._include_pos = bisect_left(self._includes, seek)
        self._last_hit = seek

        if not can_match(schedule):
            logger.debug("Schedule %s filters reject every date; only include dates remain",
                         schedule.identifier[:12])
            self._grid = None
            return
        self._n = steps_before(anchor, schedule.repeat_interval, seek)
        self._grid = step_date(anchor, schedule.repeat_interval, self._n)

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def _next_single(self) -> Occurrence:
        schedule = self.schedule
        self._state = WalkerState.EXHAUSTED
        day = schedule.start_date
        if day is None or (schedule.start_time is None and schedule.end_time is None):
            raise StopIteration
        if day < self._start or (self._end is not None and day > self._end):
            raise StopIteration

        occurrence = self._compose(day)
        self._count = 1
        if self.post_filter is not None and not self.post_filter(occurrence, schedule, 0):
            raise StopIteration
        return occurrence

    def _next_recurring(self) -> Occurrence:
        schedule = self.schedule
        limit = schedule.repeat_count
        while True:
            day = self._next_candidate()
            if day is None or (self._end is not None and day > self._end):
                self._exhaust()
                raise StopIteration

            if is_excluded(schedule, day):
                if day > self._give_up_after():
                    logger.debug("Schedule %s: no candidate matched since %s; stopping",
                                 schedule.identifier[:12], self._last_hit)
                    self._exhaust()
                    raise StopIteration
                continue

            self._last_hit = day
            ordinal = self._count
            self._count += 1

            occurrence = None
            if day >= self._start:
                occurrence = self._compose(day)
                if self.post_filter is not None and not self.post_filter(
                    occurrence, schedule, ordinal
                ):
                    occurrence = None

            if limit is not None and self._count >= limit:
                self._exhaust()
            if occurrence is not None:
                return occurrence
            if self._state is WalkerState.EXHAUSTED:
                raise StopIteration

    def _next_candidate(self) -> date | None:
        """Next date from the step grid merged with the include dates."""
        grid = self._grid
        include = (
            self._includes[self._include_pos]
            if self._include_pos < len(self._includes)
            else None
        )
        if include is not None and (grid is None or include <= grid):
            self._include_pos += 1
            if include == grid:
                self._advance_grid()
            return include
        if grid is not None:
            self._advance_grid()
        return grid

    def _advance_grid(self) -> None:
        self._n += 1
        try:
            self._grid = step_date(self._anchor, self.schedule.repeat_interval, self._n)
        except (ValueError, OverflowError):
            # Stepped past date.max
            self._grid = None

    def _give_up_after(self) -> date:
        latest = self._last_hit
        if self._last_except is not None:
            latest = max(latest, self._last_except)
        try:
            return latest + _CALENDAR_CYCLE
        except (ValueError, OverflowError):
            return date.max

    def _compose(self, day: date) -> Occurrence:
        schedule = self.schedule
        start = compose_start(day, schedule.start_time, self._tz)
        end = compose_end(
            start, day, schedule.start_time, schedule.end_time, schedule.duration, self._tz
        )
        is_holiday = self.holidays is not None and bool(self.holidays.is_holiday(day))
        return Occurrence(
            start=start,
            end=end if end is not None else start,
            timezone=schedule.timezone,
            is_holiday=is_holiday,
            schedule_identifier=schedule.identifier,
        )

    def _exhaust(self) -> None:
        self._state = WalkerState.EXHAUSTED
        logger.debug("Walker for %s exhausted after %d occurrences",
                     self.schedule.identifier[:12], self._count)


def expand(
    schedule: Schedule,
    from_date: date | datetime | None = None,
    to_date: date | datetime | None = None,
    holidays: HolidayProvider | None = None,
    post_filter: PostFilter | None = None,
) -> RecurrenceWalker:
    """Lazily expand one schedule. See RecurrenceWalker."""
    return RecurrenceWalker(schedule, from_date, to_date, holidays, post_filter)


def expand_aggregate(
    aggregate: ScheduleAggregate,
    from_date: date | datetime | None = None,
    to_date: date | datetime | None = None,
    holidays: HolidayProvider | None = None,
    post_filter: PostFilter | None = None,
) -> Iterator[Occurrence]:
    """Expand every member in aggregate order, one schedule after another.

    Output is not globally time-ordered; use merge.expand_aggregate_sorted
    for that.
    """
    for schedule in aggregate:
        yield from RecurrenceWalker(schedule, from_date, to_date, holidays, post_filter)


def _as_date(value: date | datetime | None) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    return value


def _latest(a: date | None, b: date | None) -> date | None:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def _earliest(a: date | None, b: date | None) -> date | None:
    if a is None:
        return b
    if b is None:
        return a
    return min(a, b)
