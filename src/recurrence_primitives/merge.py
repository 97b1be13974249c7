"""Layer 3: MergeSequencer, one time-ordered stream from many schedules.

Holds at most one buffered occurrence per schedule and picks the next one
by linear scan, so memory stays proportional to the number of schedules
rather than the number of occurrences.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING

from recurrence_primitives.expander import PostFilter, RecurrenceWalker
from recurrence_primitives.types import Occurrence

if TYPE_CHECKING:
    from recurrence_primitives.aggregate import ScheduleAggregate
    from recurrence_primitives.holidays import HolidayProvider
    from recurrence_primitives.schedule import Schedule

logger = logging.getLogger(__name__)


def dedup_key(occurrence: Occurrence) -> tuple[int, int]:
    """(start, end) as whole-second UTC timestamps."""
    # Instants, not local wall-clock strings: 10:00 Rome and 09:00 UTC collide,
    # 09:00 Rome and 09:00 UTC do not. Deliberate departure from wall-clock keys.
    return int(occurrence.start.timestamp()), int(occurrence.end.timestamp())


class MergeSequencer:
    """K-way merge over one RecurrenceWalker per schedule.

    Ascending order emits the buffered occurrence with the earliest start,
    descending the one with the latest; ties go to the schedule listed
    first. With unique=True an occurrence whose (start, end) was already
    emitted is dropped.

    Each walker yields in ascending start order, so descending mode only
    orders the heads of the walkers against each other.
    """

    def __init__(
        self,
        schedules: Iterable[Schedule],
        *,
        from_date: date | datetime | None = None,
        to_date: date | datetime | None = None,
        holidays: HolidayProvider | None = None,
        post_filter: PostFilter | None = None,
        ascending: bool = True,
        unique: bool = True,
    ) -> None:
        self.schedules = list(schedules)
        self.ascending = ascending
        self.unique = unique
        self._walkers = [
            RecurrenceWalker(s, from_date, to_date, holidays, post_filter)
            for s in self.schedules
        ]
        # (walker, buffered occurrence) in schedule order; None until started
        self._live: list[tuple[RecurrenceWalker, Occurrence]] | None = None
        self._seen: set[tuple[int, int]] = set()
        self._seen_start: int | None = None
        self.emitted = 0
        self.dropped = 0

    def __iter__(self) -> MergeSequencer:
        return self

    def __next__(self) -> Occurrence:
        if self._live is None:
            self._prime()

        while self._live:
            index = self._select()
            occurrence = self._live[index][1]
            self._refill(index)

            if self.unique and self._is_duplicate(occurrence):
                self.dropped += 1
                continue
            self.emitted += 1
            return occurrence

        raise StopIteration

    def _prime(self) -> None:
        logger.debug("Merging %d schedules (ascending=%s, unique=%s)",
                     len(self._walkers), self.ascending, self.unique)
        self._live = []
        for walker in self._walkers:
            head = next(walker, None)
            if head is not None:
                self._live.append((walker, head))

    def _select(self) -> int:
        """Index of the next head to emit. Strict comparison keeps the first on ties."""
        best = 0
        best_start = self._live[0][1].start.timestamp()
        for i in range(1, len(self._live)):
            start = self._live[i][1].start.timestamp()
            if (start < best_start) if self.ascending else (start > best_start):
                best, best_start = i, start
        return best

    def _refill(self, index: int) -> None:
        walker = self._live[index][0]
        head = next(walker, None)
        if head is None:
            del self._live[index]
        else:
            self._live[index] = (walker, head)

    def _is_duplicate(self, occurrence: Occurrence) -> bool:
        key = dedup_key(occurrence)
        if self.ascending and key[0] != self._seen_start:
            # Starts never decrease, so earlier keys cannot come back
            self._seen.clear()
            self._seen_start = key[0]
        if key in self._seen:
            logger.debug("Dropping duplicate occurrence %s from %s",
                         occurrence.start.isoformat(), occurrence.schedule_identifier[:12])
            return True
        self._seen.add(key)
        return False


def expand_aggregate_sorted(
    aggregate: ScheduleAggregate,
    from_date: date | datetime | None = None,
    to_date: date | datetime | None = None,
    holidays: HolidayProvider | None = None,
    post_filter: PostFilter | None = None,
    ascending: bool = True,
    unique: bool = True,
) -> MergeSequencer:
    """Expand every member of the aggregate into one chronological stream."""
    return MergeSequencer(
        aggregate,
        from_date=from_date,
        to_date=to_date,
        holidays=holidays,
        post_filter=post_filter,
        ascending=ascending,
        unique=unique,
    )
