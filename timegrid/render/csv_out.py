from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import List

from ..models.index import SlotIndex

HEADER = ["Group", "Day", "Start", "Course", "Teacher", "Room", "Type"]


def csv_blocks(index: SlotIndex, groups: List[str] | None = None) -> str:
    # One block per group, one line per (day, slot); blank line between blocks
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    cal = index.calendar
    for g in groups if groups is not None else index.groups:
        writer.writerow(HEADER)
        for d in cal.days:
            for t in cal.times:
                e = index.get(g, d, t)
                if e is None:
                    cover = index.covering(g, d, t)
                    if cover is None:
                        writer.writerow([g, d, t, "", "", "", ""])
                    else:
                        writer.writerow(
                            [g, d, t, f"{cover.course} (cont.)", cover.teacher, cover.room, cover.subject_type]
                        )
                else:
                    writer.writerow([g, d, t, e.course, e.teacher, e.room, e.subject_type])
        buf.write("\n")
    return buf.getvalue()


def write_csv_blocks(text: str, outputs_dir: Path) -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / "timetable.csv"
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
    return path
