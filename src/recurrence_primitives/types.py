"""Shared types: Occurrence, ScheduleValidationError and ExpansionError."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from recurrence_primitives.durations import format_duration

_UTC = timezone.utc


@dataclass(frozen=True)
class Occurrence:
    """One concrete, time-bounded instance produced by expanding a Schedule.

    Invariants:
        - start and end are timezone-aware and end >= start
        - duration == end - start, computed once at construction
    """

    start: datetime
    end: datetime
    timezone: str
    is_holiday: bool
    schedule_identifier: str
    duration: timedelta = field(init=False)

    def __post_init__(self) -> None:
        # Elapsed time between the two instants, not wall-clock difference
        elapsed = self.end.astimezone(_UTC) - self.start.astimezone(_UTC)
        object.__setattr__(self, "duration", elapsed)

    @property
    def day(self) -> date:
        """Calendar date the occurrence was expanded from."""
        return self.start.date()

    @property
    def spans_midnight(self) -> bool:
        return self.end.date() > self.start.date()

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration": format_duration(self.duration),
            "timezone": self.timezone,
            "isHoliday": self.is_holiday,
            "scheduleIdentifier": self.schedule_identifier,
        }

    def __str__(self) -> str:
        start = self.start.strftime("%d-%m-%Y %H:%M")
        end = self.end.strftime("%d-%m-%Y %H:%M")
        holiday = " holiday" if self.is_holiday else ""
        return f"{start} → {end} ({self.timezone}){holiday}"


class ScheduleValidationError(ValueError):
    """Raised while building a Schedule from invalid field values.

    All problems found are reported at once; ``errors`` holds one message
    per problem.
    """

    def __init__(self, errors: list[str] | str) -> None:
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__(
            "Invalid schedule:\n" + "\n".join(f"  - {e}" for e in self.errors)
        )


class ExpansionError(RuntimeError):
    """Raised when a validated schedule cannot be expanded in this environment."""

    def __init__(self, schedule_identifier: str, reason: str) -> None:
        self.schedule_identifier = schedule_identifier
        self.reason = reason
        super().__init__(
            f"Cannot expand schedule {schedule_identifier[:12]!r}: {reason}"
        )
