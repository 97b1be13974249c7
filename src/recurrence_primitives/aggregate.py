"""ScheduleAggregate: an ordered, immutable collection of schedules."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from datetime import date

from recurrence_primitives.schedule import Schedule
from recurrence_primitives.types import ScheduleValidationError

# Sortable fields; wire names are accepted as aliases
SORT_FIELDS = ("start_date", "end_date", "start_time", "end_time")
_SORT_ALIASES = {
    "startDate": "start_date",
    "endDate": "end_date",
    "startTime": "start_time",
    "endTime": "end_time",
}


class ScheduleAggregate:
    """Schedules kept in insertion order. Every operation returns a new aggregate."""

    def __init__(self, schedules: Iterable[Schedule] = ()) -> None:
        schedules = tuple(schedules)
        for i, s in enumerate(schedules):
            if not isinstance(s, Schedule):
                raise ScheduleValidationError(
                    f"Element at index {i} is not a Schedule: {type(s).__name__}"
                )
        self._schedules = schedules

    def __iter__(self) -> Iterator[Schedule]:
        return iter(self._schedules)

    def __len__(self) -> int:
        return len(self._schedules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScheduleAggregate):
            return NotImplemented
        return self._schedules == other._schedules

    def __repr__(self) -> str:
        return f"ScheduleAggregate({len(self._schedules)} schedules)"

    def all(self) -> list[Schedule]:
        return list(self._schedules)

    def with_added(self, schedule: Schedule) -> ScheduleAggregate:
        return ScheduleAggregate((*self._schedules, schedule))

    def with_schedules(self, schedules: Iterable[Schedule]) -> ScheduleAggregate:
        return ScheduleAggregate(schedules)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def bounds(self) -> tuple[date | None, date | None]:
        """(earliest start_date, latest end_date) over members that set one."""
        starts = [s.start_date for s in self._schedules if s.start_date is not None]
        ends = [s.end_date for s in self._schedules if s.end_date is not None]
        return (min(starts) if starts else None, max(ends) if ends else None)

    @property
    def min_start_date(self) -> date | None:
        return self.bounds[0]

    @property
    def max_end_date(self) -> date | None:
        return self.bounds[1]

    def merge(self, *others: ScheduleAggregate) -> ScheduleAggregate:
        """Members of self followed by the members of each other aggregate."""
        merged = list(self._schedules)
        for other in others:
            merged.extend(other)
        return ScheduleAggregate(merged)

    def intersecting(self, from_date: date, to_date: date) -> ScheduleAggregate:
        """Members whose own date range overlaps [from_date, to_date].

        A missing start_date or end_date counts as open towards that side.
        """
        if to_date < from_date:
            raise ValueError(
                f"Invalid range: to_date {to_date.isoformat()} is before "
                f"from_date {from_date.isoformat()}"
            )
        kept = []
        for s in self._schedules:
            start = s.start_date if s.start_date is not None else from_date
            end = s.end_date if s.end_date is not None else to_date
            if not (end < from_date or start > to_date):
                kept.append(s)
        return ScheduleAggregate(kept)

    def sorted_by(self, field: str, ascending: bool = True) -> ScheduleAggregate:
        """Copy ordered by one date/time field. Members missing it go last.

        The sort is stable: members with equal values keep their order.
        """
        name = _SORT_ALIASES.get(field, field)
        if name not in SORT_FIELDS:
            raise ValueError(
                f"Invalid sort field: {field!r} (expected one of {', '.join(SORT_FIELDS)})"
            )
        present = [s for s in self._schedules if getattr(s, name) is not None]
        missing = [s for s in self._schedules if getattr(s, name) is None]
        present.sort(key=lambda s: getattr(s, name), reverse=not ascending)
        return ScheduleAggregate(present + missing)

    # ------------------------------------------------------------------
    # Wire shape
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        start, end = self.bounds
        return {
            "type": "ScheduleAggregate",
            "schedules": [s.to_dict() for s in self._schedules],
            "bounds": {
                "startDate": start.isoformat() if start is not None else None,
                "endDate": end.isoformat() if end is not None else None,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScheduleAggregate:
        """Build from the wire record. Supplied bounds are ignored and re-derived."""
        if not isinstance(data, dict):
            raise ScheduleValidationError(
                f"Aggregate record must be an object, got {type(data).__name__}"
            )
        if not data:
            return cls()
        schedules = data.get("schedules")
        if not isinstance(schedules, list):
            raise ScheduleValidationError('Missing or invalid "schedules" key')

        parsed = []
        for i, record in enumerate(schedules):
            if not isinstance(record, dict):
                raise ScheduleValidationError(
                    f'Element {i} of "schedules" must be an object'
                )
            try:
                parsed.append(Schedule.from_dict(record))
            except ScheduleValidationError as e:
                raise ScheduleValidationError(
                    [f"schedules[{i}]: {msg}" for msg in e.errors]
                ) from e
        return cls(parsed)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, s: str) -> ScheduleAggregate:
        try:
            data = json.loads(s)
        except json.JSONDecodeError as e:
            raise ScheduleValidationError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)
