from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Iterable, List, Mapping, Sequence, Tuple

from ..config import DEFAULT_CALENDAR, Calendar
from ..data.names import NameNormalizer
from ..errors import NoDataFound
from ..models.entry import ClassEntry

Rows = Sequence[Sequence[object]]
Grid = Mapping[str, Rows]

LAB_TERMS = ("lab", "practicum", "практика", "лаборатор")
SEMINAR_TERMS = ("seminar", "семинар")


def cell_text(value: object) -> str:
    return "" if value is None else str(value).strip()


def infer_subject_type(course: str) -> str:
    lowered = course.lower()
    if any(term in lowered for term in LAB_TERMS):
        return "lab"
    if any(term in lowered for term in SEMINAR_TERMS):
        return "seminar"
    return "lecture"


def split_cell(text: str) -> Tuple[str, str, str]:
    """Split "Course\\nTeacher Name ROOM" into (course, raw teacher, room)."""
    lines = text.split("\n")
    course = lines[0].strip()
    parts = lines[1].split() if len(lines) > 1 else []
    if not parts:
        return course, "", ""
    return course, " ".join(parts[:-1]), parts[-1]


class ImportPipeline:
    """Legacy workbook grid -> ClassEntry list.

    One sheet per weekday; a header row carries the time-range labels and
    each data row starts with the group name within its first three columns.
    Teacher text is returned raw; see ``normalize_entries``.
    """

    def __init__(self, calendar: Calendar = DEFAULT_CALENDAR):
        self.calendar = calendar
        self.group_re = re.compile(calendar.group_pattern)

    def sheet_day(self, sheet_name: str) -> str | None:
        words = sheet_name.split()
        if not words:
            return None
        head = words[0].casefold()
        for day in self.calendar.days:
            if day.casefold() == head:
                return day
        return None

    def find_anchor(self, rows: Rows) -> Tuple[int, int] | None:
        marker = self.calendar.slots[0].label.replace(" ", "")
        for r, row in enumerate(rows[: self.calendar.header_scan_rows]):
            for c, value in enumerate(row):
                if marker in cell_text(value).replace(" ", ""):
                    return r, c
        return None

    def group_of(self, row: Sequence[object]) -> str | None:
        for value in row[:3]:
            text = cell_text(value)
            if text and self.group_re.search(text):
                return text
        return None

    def parse_sheet(self, day: str, rows: Rows) -> List[ClassEntry]:
        logger = logging.getLogger(__name__)
        anchor = self.find_anchor(rows)
        if anchor is None:
            logger.debug(f"{day}: no time header found, sheet skipped")
            return []
        header_row, first_col = anchor
        times = self.calendar.times
        lunch = self.calendar.lunch_marker

        out: List[ClassEntry] = []
        for row in rows[header_row + 2 :]:
            if len(row) < 3:
                continue
            group = self.group_of(row)
            if group is None:
                continue
            for offset, time in enumerate(times):
                col = first_col + offset
                if col >= len(row):
                    break
                text = cell_text(row[col])
                if not text or lunch in text:
                    continue
                course, teacher, room = split_cell(text)
                if not course:
                    continue
                out.append(
                    ClassEntry(
                        group=group,
                        day=day,
                        time=time,
                        course=course,
                        teacher=teacher,
                        room=room,
                        subject_type=infer_subject_type(course),
                        duration=1,
                    )
                )
        logger.info(f"{day}: {len(out)} classes read")
        return out

    def parse(self, grid: Grid) -> List[ClassEntry]:
        entries: List[ClassEntry] = []
        for name, rows in grid.items():
            day = self.sheet_day(name)
            if day is None:
                continue
            entries.extend(self.parse_sheet(day, rows))
        if not entries:
            raise NoDataFound(sheets_seen=len(grid))
        return entries


def normalize_entries(
    entries: Iterable[ClassEntry], normalizer: NameNormalizer | None = None
) -> List[ClassEntry]:
    normalizer = normalizer or NameNormalizer()
    return [replace(e, teacher=normalizer.normalize(e.teacher)) for e in entries]
