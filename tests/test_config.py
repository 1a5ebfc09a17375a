import json
from pathlib import Path

from timegrid.config import DEFAULT_CALENDAR, load_calendar
from timegrid.models.index import SlotIndex
from timegrid.ops.allocation import AllocationOps


def test_slot_lookup() -> None:
    assert DEFAULT_CALENDAR.slot_index("17:45") == 13
    assert DEFAULT_CALENDAR.slot_index("07:15") is None
    assert DEFAULT_CALENDAR.day_index("Sunday") is None


def test_override_keeps_missing_keys(tmp_path: Path) -> None:
    path = tmp_path / "calendar.json"
    path.write_text(
        json.dumps(
            {
                "days": ["Monday", "Tuesday"],
                "slots": [{"start": "09:00", "label": "09.00-10.20"}, {"start": "10:30"}],
                "max_duration": 2,
            }
        ),
        encoding="utf-8",
    )
    cal = load_calendar(path)
    assert cal.times == ["09:00", "10:30"]
    assert cal.slots[1].label == "10:30"
    assert cal.lunch_marker == DEFAULT_CALENDAR.lunch_marker

    ops = AllocationOps(SlotIndex(calendar=cal))
    assert ops.place("G1", "Tuesday", "09:00", {"course": "A", "duration": 4}).ok
    assert ops.index.get("G1", "Tuesday", "09:00").duration == 2
    assert not ops.place("G1", "Saturday", "09:00", {"course": "A"}).ok
