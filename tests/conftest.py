"""Shared test fixtures and data loading for recurrence-primitives.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Named schedules live in schedules.json as wire records; scenario files
under scenarios/ hold expansion inputs with expected local start times.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from recurrence_primitives.aggregate import ScheduleAggregate
from recurrence_primitives.schedule import Schedule

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_schedules = _load_json(FIXTURES_DIR / "schedules.json")

SCHEDULE_NAMES = sorted(_schedules)

# Format used for expected times in scenario files
TIME_FORMAT = "%Y-%m-%d %H:%M"


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def schedule_record(name: str, **overrides) -> dict:
    """Wire record from schedules.json, with wire-key overrides applied."""
    return {**_schedules[name], **overrides}


def make_schedule(name: str, **overrides) -> Schedule:
    """Build a Schedule from schedules.json by name.

    >>> make_schedule("daily_morning", repeatCount=2).repeat_count
    2
    """
    return Schedule.from_dict(schedule_record(name, **overrides))


def make_aggregate(*names: str) -> ScheduleAggregate:
    return ScheduleAggregate(make_schedule(n) for n in names)


def parse_window(spec: dict) -> tuple[date | None, date | None]:
    """Convert a scenario's optional ["from", "to"] into dates."""
    window = spec.get("window") or [None, None]
    return tuple(date.fromisoformat(d) if d else None for d in window)


def starts(occurrences) -> list[str]:
    """Local start times in scenario format."""
    return [o.start.strftime(TIME_FORMAT) for o in occurrences]


def ends(occurrences) -> list[str]:
    return [o.end.strftime(TIME_FORMAT) for o in occurrences]


# ---------------------------------------------------------------------------
# Scenario loader
# ---------------------------------------------------------------------------
def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def daily_morning() -> Schedule:
    """2025-01-01..05 at 09:00 for one hour, UTC."""
    return make_schedule("daily_morning")


@pytest.fixture
def open_ended() -> Schedule:
    """Daily from 2025-01-01 with no end date or count."""
    return make_schedule("open_ended")


@pytest.fixture
def overnight_rome() -> Schedule:
    """23:30 to 01:00 in Europe/Rome, 2024-01-08..12."""
    return make_schedule("overnight_rome")


@pytest.fixture
def office_hours() -> Schedule:
    """Every field populated."""
    return make_schedule("office_hours")
