import csv
import io
from pathlib import Path

from timegrid.ops.allocation import AllocationOps
from timegrid.render.csv_out import HEADER, csv_blocks, write_csv_blocks


def build() -> AllocationOps:
    ops = AllocationOps()
    ops.place(
        "G1", "Monday", "08:00", {"course": "Algorithms", "teacher": "Dr. X", "room": "B110", "duration": 2}
    )
    ops.add_group("G2")
    return ops


def test_one_block_per_group() -> None:
    ops = build()
    text = csv_blocks(ops.index)
    blocks = text.split("\n\n")
    assert len([b for b in blocks if b.strip()]) == 2
    rows = list(csv.reader(io.StringIO(blocks[0])))
    cal = ops.index.calendar
    assert rows[0] == HEADER
    assert len(rows) == 1 + len(cal.days) * len(cal.times)


def test_continuation_and_blank_slots() -> None:
    rows = list(csv.reader(io.StringIO(csv_blocks(build().index, groups=["G1"]))))
    assert rows[1] == ["G1", "Monday", "08:00", "Algorithms", "Dr. X", "B110", "lecture"]
    assert rows[2] == ["G1", "Monday", "08:45", "Algorithms (cont.)", "Dr. X", "B110", "lecture"]
    assert rows[3] == ["G1", "Monday", "09:30", "", "", "", ""]


def test_write_csv_blocks(tmp_path: Path) -> None:
    path = write_csv_blocks(csv_blocks(build().index), tmp_path / "out")
    assert path.name == "timetable.csv"
    assert path.read_text(encoding="utf-8").startswith("Group,Day,Start")
