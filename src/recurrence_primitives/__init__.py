"""recurrence-primitives: Lazy expansion of recurring schedules into occurrences."""

from recurrence_primitives.aggregate import ScheduleAggregate
from recurrence_primitives.calendar import MonthOfYear, RecurrenceInterval, Weekday
from recurrence_primitives.expander import (
    RecurrenceWalker,
    WalkerState,
    expand,
    expand_aggregate,
)
from recurrence_primitives.holidays import DateSetHolidays, HolidayProvider
from recurrence_primitives.merge import MergeSequencer, expand_aggregate_sorted
from recurrence_primitives.metrics import (
    total_days,
    total_hours,
    total_minutes,
    total_seconds,
)
from recurrence_primitives.schedule import DEFAULT_TIMEZONE, Schedule
from recurrence_primitives.types import (
    ExpansionError,
    Occurrence,
    ScheduleValidationError,
)

__all__ = [
    "DEFAULT_TIMEZONE",
    "DateSetHolidays",
    "ExpansionError",
    "HolidayProvider",
    "MergeSequencer",
    "MonthOfYear",
    "Occurrence",
    "RecurrenceInterval",
    "RecurrenceWalker",
    "Schedule",
    "ScheduleAggregate",
    "ScheduleValidationError",
    "WalkerState",
    "Weekday",
    "expand",
    "expand_aggregate",
    "expand_aggregate_sorted",
    "total_days",
    "total_hours",
    "total_minutes",
    "total_seconds",
]
