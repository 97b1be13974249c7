"""Holiday lookup consumed by the expander.

Holiday determination lives outside this library. Expansion only asks one
question per occurrence, and the answer annotates the occurrence without
ever filtering it out.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol, runtime_checkable


@runtime_checkable
class HolidayProvider(Protocol):
    def is_holiday(self, d: date) -> bool:
        ...


class DateSetHolidays:
    """HolidayProvider backed by a fixed set of dates."""

    def __init__(self, dates: Iterable[date | str] = ()) -> None:
        self._dates = frozenset(
            date.fromisoformat(d) if isinstance(d, str) else d for d in dates
        )

    def is_holiday(self, d: date) -> bool:
        return d in self._dates

    def __len__(self) -> int:
        return len(self._dates)

    def __repr__(self) -> str:
        return f"DateSetHolidays({sorted(d.isoformat() for d in self._dates)})"
