"""Tests for the ASCII occurrence view."""

from __future__ import annotations

from datetime import date

from conftest import make_schedule
from recurrence_primitives.debug import show_occurrences
from recurrence_primitives.expander import expand
from recurrence_primitives.holidays import DateSetHolidays


class TestShowOccurrences:
    def test_rows_and_cells(self, capsys):
        s = make_schedule("daily_morning")
        out = show_occurrences(
            expand(s, holidays=DateSetHolidays(["2025-01-02"])),
            date(2025, 1, 1),
            date(2025, 1, 3),
        )
        lines = out.splitlines()
        assert len(lines) == 3  # header + 2 days
        assert lines[1].startswith("      Wed 01 Jan")
        row = lines[1].split("  ")[-1]
        assert row == "." * 18 + "##" + "." * 28
        assert lines[2].split("  ")[-1] == "." * 18 + "HH" + "." * 28
        assert capsys.readouterr().out.strip() == out.strip()

    def test_overnight_continues_next_row(self, overnight_rome, capsys):
        out = show_occurrences(expand(overnight_rome), date(2024, 1, 8), date(2024, 1, 10))
        first, second = (line.split("  ")[-1] for line in out.splitlines()[1:])
        assert first.endswith("#")
        assert second.startswith("##")
