from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from ..data.names import coerce_text


SUBJECT_TYPES = ("lecture", "lab", "seminar", "other")

SlotKey = Tuple[str, str, str]  # (group, day, time)


@dataclass
class ClassEntry:
    group: str
    day: str
    time: str
    course: str
    teacher: str = ""
    room: str = ""
    subject_type: str = "lecture"
    duration: int = 1

    @property
    def key(self) -> SlotKey:
        return (self.group, self.day, self.time)

    def relocated(self, key: SlotKey) -> "ClassEntry":
        group, day, time = key
        return replace(self, group=group, day=day, time=time)

    def to_dict(self) -> dict:
        return {
            "group": self.group,
            "day": self.day,
            "time": self.time,
            "course": self.course,
            "teacher": self.teacher,
            "room": self.room,
            "subjectType": self.subject_type,
            "duration": self.duration,
        }


def coerce_subject_type(value: object) -> str:
    text = coerce_text(value).lower()
    if not text:
        return "lecture"
    return text if text in SUBJECT_TYPES else "other"


def coerce_duration(value: object, max_duration: int = 4) -> int:
    try:
        d = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, min(d, max_duration))
