#!/usr/bin/env python
"""Visual verification report for recurrence-primitives.

Run:  python scripts/verify.py

Produces a formatted report showing:
  1. Named schedules (wire fields as tables, identifier, ASCII view)
  2. Expansion scenarios  -- expected vs actual start times
  3. Week-of-month table and month-week filter scenarios
  4. Merge scenarios  -- input schedules, merged stream, dedup counters
"""

from __future__ import annotations

import json
import sys
from datetime import date, datetime
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths and data loading
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"
SCENARIOS = FIXTURES / "scenarios"

sys.path.insert(0, str(ROOT / "src"))

from recurrence_primitives.aggregate import ScheduleAggregate
from recurrence_primitives.calendar import week_of_month
from recurrence_primitives.debug import show_occurrences
from recurrence_primitives.expander import expand
from recurrence_primitives.merge import expand_aggregate_sorted
from recurrence_primitives.schedule import Schedule


def _load(path: Path):
    with open(path) as f:
        return json.load(f)


_schedules = _load(FIXTURES / "schedules.json")

TIME_FORMAT = "%Y-%m-%d %H:%M"

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        padded = row + [""] * (len(headers) - len(row))
        print(fmt.format(*padded))


def _window(spec: dict) -> tuple[date | None, date | None]:
    window = spec.get("window") or [None, None]
    return tuple(date.fromisoformat(d) if d else None for d in window)


def _check(expected: list[str], actual: list[str]) -> str:
    return "ok" if expected == actual else "MISMATCH"


def _compact(values: list[str], limit: int = 4) -> str:
    if not values:
        return "(none)"
    shown = ", ".join(v[5:] for v in values[:limit])
    return shown + (f" +{len(values) - limit}" if len(values) > limit else "")


# ---------------------------------------------------------------------------
# Section 1: Named schedules
# ---------------------------------------------------------------------------
def section_schedules():
    banner("NAMED SCHEDULES")

    for name, record in _schedules.items():
        schedule = Schedule.from_dict(record)
        heading(f"Schedule: {name}")
        rows = [
            [key, json.dumps(value)]
            for key, value in schedule.to_dict().items()
            if value not in (None, [])
        ]
        table(["Field", "Value"], rows)

        if schedule.start_date is None:
            continue
        print()
        first = schedule.start_date
        show_occurrences(expand(schedule), first, date.fromordinal(first.toordinal() + 7))


# ---------------------------------------------------------------------------
# Section 2: Expansion scenarios
# ---------------------------------------------------------------------------
def section_expand():
    banner("LAYER 2: RECURRENCE WALKER")

    data = _load(SCENARIOS / "expand.json")
    for group in ("recurring", "single", "windowed"):
        heading(f"Scenarios: {group}")
        rows = []
        for spec in data[group]:
            schedule = Schedule.from_dict(spec["schedule"])
            from_date, to_date = _window(spec)
            actual = [o.start.strftime(TIME_FORMAT) for o in expand(schedule, from_date, to_date)]
            rows.append([
                spec["id"],
                schedule.repeat_interval.label,
                str(len(actual)),
                _compact(actual),
                _check(spec["expected"], actual),
            ])
        table(["Scenario", "Interval", "Count", "Starts", "Check"], rows)


# ---------------------------------------------------------------------------
# Section 3: Week of month
# ---------------------------------------------------------------------------
def section_month_week():
    banner("ORDINAL WEEK OF MONTH")

    data = _load(SCENARIOS / "month_week.json")

    heading("Function: week_of_month(d) -> (week, negative_week)")
    rows = []
    for spec in data["week_of_month"]:
        d = date.fromisoformat(spec["date"])
        week, negative = week_of_month(d)
        ok = (week, negative) == (spec["week"], spec["negative_week"])
        rows.append([spec["date"], d.strftime("%a"), str(week), str(negative), "ok" if ok else "MISMATCH"])
    table(["Date", "Day", "Week", "Negative", "Check"], rows)

    heading("Month-week filter")
    rows = []
    for spec in data["filter"]:
        schedule = Schedule.from_dict(spec["schedule"])
        actual = [o.day.isoformat() for o in expand(schedule)]
        rows.append([
            spec["id"],
            json.dumps(sorted(schedule.by_month_week)),
            ", ".join(actual) or "(none)",
            _check(spec["expected"], actual),
        ])
    table(["Scenario", "Weeks", "Dates", "Check"], rows)


# ---------------------------------------------------------------------------
# Section 4: Merge
# ---------------------------------------------------------------------------
def section_merge():
    banner("LAYER 3: K-WAY MERGE")

    data = _load(SCENARIOS / "merge.json")
    for spec in data["merge"]:
        heading(f"Scenario: {spec['id']}")
        print(f"    {spec['notes']}\n")
        aggregate = ScheduleAggregate(Schedule.from_dict(r) for r in spec["schedules"])
        merge = expand_aggregate_sorted(
            aggregate, ascending=spec["ascending"], unique=spec["unique"]
        )
        rows = [
            [o.start.strftime(TIME_FORMAT), o.end.strftime(TIME_FORMAT), o.schedule_identifier[:12]]
            for o in merge
        ]
        table(["Start", "End", "Schedule"], rows)
        actual = [row[0] for row in rows]
        print(f"\n    emitted={merge.emitted} dropped={merge.dropped} "
              f"check={_check(spec['expected'], actual)}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    banner("RECURRENCE-PRIMITIVES   --  VISUAL VERIFICATION REPORT")
    print(f"    Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print(f"    Fixture data: {FIXTURES.relative_to(ROOT)}/")

    section_schedules()
    section_expand()
    section_month_week()
    section_merge()

    banner("END OF REPORT")
    print()


if __name__ == "__main__":
    main()
