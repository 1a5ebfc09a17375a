from pathlib import Path

import pytest
from openpyxl import Workbook

from timegrid.config import DEFAULT_CALENDAR


@pytest.fixture
def legacy_workbook(tmp_path: Path) -> Path:
    """Two-group Monday sheet in the legacy layout plus an unrelated legend sheet."""
    wb = Workbook()
    ws = wb.active
    ws.title = "MONDAY Spring25"
    ws.append(["Spring 2025 timetable"])
    ws.append(["Faculty of Engineering"])
    ws.append(["#", "Faculty", "Group"] + [s.label for s in DEFAULT_CALENDAR.slots])
    ws.append(["", "", "", "Room 1"])
    ws.append([1, "CS", "COMSE-25", "Algorithms\nDr.Ahmad Sarosh B110 LAB", None, "LUNCH"])
    ws.append([2, "CS", "COMSE-24", "Algorithms\nSarosh B111"])
    notes = wb.create_sheet("Legend")
    notes.append(["B = main building"])
    path = tmp_path / "legacy.xlsx"
    wb.save(path)
    return path
