from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .data.loader import load_json
from .models.period import TimeSlot


DAYS: List[str] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# (start, spreadsheet header label) as printed in the legacy workbook
SLOT_TABLE: List[Tuple[str, str]] = [
    ("08:00", "08.00-08.40"),
    ("08:45", "08.45-09.25"),
    ("09:30", "09.30-10.10"),
    ("10:15", "10.15-10.55"),
    ("11:00", "11.00-11.40"),
    ("11:45", "11.45-12.25"),
    ("12:30", "12:30-13.10"),
    ("13:10", "13.10-13.55"),
    ("14:00", "14.00-14.40"),
    ("14:45", "14:45 - 15:25"),
    ("15:30", "15:30 - 16:10"),
    ("16:15", "16:15 - 16:55"),
    ("17:00", "17:00 - 17:40"),
    ("17:45", "17:45 - 18:25"),
]

GROUP_PATTERN = r"^[A-Z]{2,}-\d{2}\b"


@dataclass(frozen=True)
class Calendar:
    days: List[str] = field(default_factory=lambda: list(DAYS))
    slots: List[TimeSlot] = field(
        default_factory=lambda: [TimeSlot(start, label) for start, label in SLOT_TABLE]
    )
    max_duration: int = 4
    header_scan_rows: int = 10
    group_pattern: str = GROUP_PATTERN
    lunch_marker: str = "LUNCH"

    @property
    def times(self) -> List[str]:
        return [s.start for s in self.slots]

    def slot_index(self, time: str) -> int | None:
        for i, s in enumerate(self.slots):
            if s.start == time:
                return i
        return None

    def day_index(self, day: str) -> int | None:
        try:
            return self.days.index(day)
        except ValueError:
            return None


DEFAULT_CALENDAR = Calendar()


def load_calendar(path: Path) -> Calendar:
    """Read a JSON calendar override; missing keys keep their defaults."""
    raw = load_json(path)
    kwargs = {}
    if "days" in raw:
        kwargs["days"] = [str(d) for d in raw["days"]]
    if "slots" in raw:
        kwargs["slots"] = [
            TimeSlot(str(s["start"]), str(s.get("label", s["start"]))) for s in raw["slots"]
        ]
    for key in ("max_duration", "header_scan_rows"):
        if key in raw:
            kwargs[key] = int(raw[key])
    for key in ("group_pattern", "lunch_marker"):
        if key in raw:
            kwargs[key] = str(raw[key])
    return Calendar(**kwargs)
