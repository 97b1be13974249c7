"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from recurrence_primitives.types import Occurrence


def show_occurrences(
    occurrences: Iterable[Occurrence],
    start: date,
    end: date,
) -> str:
    """Print ASCII calendar view of occurrences for a date range.

    Each row is one day in the occurrences' own timezone. Occupied time is
    shown as '#', holidays as 'H', free time as '.'. Overnight occurrences
    continue on the next row. Returns the string and also prints to stdout.

    Args:
        occurrences: Occurrences to draw; consumed up to the last one
            starting before end
        start: First date to show (inclusive)
        end: Last date to show (exclusive)
    """
    lines: list[str] = []
    day_names = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

    # 24-hour timeline, each char = 30 minutes (48 chars per day)
    chars_per_day = 48
    minutes_per_char = 30

    rows: dict[date, list[str]] = {}
    current = start
    while current < end:
        rows[current] = list("." * chars_per_day)
        current += timedelta(days=1)

    for occ in occurrences:
        if occ.start.date() >= end:
            break
        mark = "H" if occ.is_holiday else "#"
        _paint(rows, occ.start, occ.end, mark, minutes_per_char)

    # Header
    header_hours = "".join(f"{h:02d}" if h % 3 == 0 else "  " for h in range(24))
    lines.append(f"{'':>16s}  {header_hours}")

    for day, row in rows.items():
        label = f"{day_names[day.weekday()]} {day.strftime('%d %b')}"
        lines.append(f"{label:>16s}  {''.join(row)}")

    result = "\n".join(lines)
    print(result)
    return result


def _paint(
    rows: dict[date, list[str]],
    begin: datetime,
    finish: datetime,
    mark: str,
    minutes_per_char: int,
) -> None:
    day = begin.date()
    while day <= finish.date():
        row = rows.get(day)
        day_start = datetime.combine(day, time(0, 0), tzinfo=begin.tzinfo)
        lo = max(begin, day_start)
        hi = min(finish, day_start + timedelta(days=1))
        if row is not None and (hi > lo or begin == finish):
            first = int((lo - day_start).total_seconds()) // 60 // minutes_per_char
            last = -(-int((hi - day_start).total_seconds()) // 60 // minutes_per_char)
            # Zero-length occurrences still get one cell
            for i in range(first, max(last, first + 1)):
                if i < len(row):
                    row[i] = mark
        day += timedelta(days=1)
