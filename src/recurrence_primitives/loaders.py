"""Data loading utilities for schedule and aggregate JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from recurrence_primitives.aggregate import ScheduleAggregate
from recurrence_primitives.schedule import Schedule
from recurrence_primitives.types import ScheduleValidationError

logger = logging.getLogger(__name__)


def _read_json(path: Path):
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ScheduleValidationError(f"Invalid JSON in {path.name}: {e}") from e


def load_schedule_json(path: str | Path) -> Schedule:
    """Load a Schedule from a JSON file holding one wire record.

    The record may also be wrapped as {"id": "...", "schedule": {...}}.
    Raises ScheduleValidationError naming the file if validation fails.
    """
    path = Path(path)
    data = _read_json(path)
    if isinstance(data, dict) and isinstance(data.get("schedule"), dict):
        data = data["schedule"]

    try:
        schedule = Schedule.from_dict(data)
    except ScheduleValidationError as e:
        raise ScheduleValidationError(
            [f"{path.name}: {msg}" for msg in e.errors]
        ) from e

    logger.debug("Loaded schedule %s from %s", schedule.identifier[:12], path)
    return schedule


def load_aggregate_json(path: str | Path) -> ScheduleAggregate:
    """Load a ScheduleAggregate from a JSON file.

    The JSON must have the aggregate wire format:
    {
        "schedules": [ { "repeatInterval": "daily", ... }, ... ],
        "bounds": { ... }      (ignored, always re-derived)
    }
    """
    path = Path(path)
    data = _read_json(path)

    try:
        aggregate = ScheduleAggregate.from_dict(data)
    except ScheduleValidationError as e:
        raise ScheduleValidationError(
            [f"{path.name}: {msg}" for msg in e.errors]
        ) from e

    logger.debug("Loaded %d schedules from %s", len(aggregate), path)
    return aggregate
