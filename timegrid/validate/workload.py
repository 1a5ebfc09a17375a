from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..data.names import NameNormalizer
from ..models.entry import SUBJECT_TYPES, ClassEntry
from ..models.index import SlotIndex


@dataclass
class TeacherLoad:
    teacher: str
    classes: List[ClassEntry] = field(default_factory=list)
    by_day: Dict[str, int] = field(default_factory=dict)
    by_type: Dict[str, int] = field(default_factory=dict)
    free_days: List[str] = field(default_factory=list)
    heatmap: Dict[Tuple[str, str], int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.classes)

    @property
    def work_days(self) -> int:
        return sum(1 for n in self.by_day.values() if n)


def teacher_workload(index: SlotIndex, normalizer: NameNormalizer | None = None) -> List[TeacherLoad]:
    normalizer = normalizer or NameNormalizer()
    loads: Dict[str, TeacherLoad] = {}
    for e in index.sorted_entries():
        name = normalizer.normalize(e.teacher)
        if not name:
            continue
        load = loads.setdefault(name.casefold(), TeacherLoad(teacher=name))
        load.classes.append(e)

    days = index.calendar.days
    for load in loads.values():
        per_day = Counter(e.day for e in load.classes)
        load.by_day = {d: per_day.get(d, 0) for d in days}
        per_type = Counter(e.subject_type for e in load.classes)
        load.by_type = {t: per_type.get(t, 0) for t in SUBJECT_TYPES}
        load.free_days = [d for d in days if not per_day.get(d)]
        heat: Counter = Counter()
        for e in load.classes:
            for t in index.occupied_slots(e):
                heat[(e.day, t)] += 1
        load.heatmap = dict(heat)

    return sorted(loads.values(), key=lambda x: (-x.total, x.teacher.casefold()))


def format_workload(loads: List[TeacherLoad]) -> str:
    lines: List[str] = []
    for load in loads:
        free = ", ".join(d[:3] for d in load.free_days) or "-"
        types = " ".join(f"{t}={n}" for t, n in load.by_type.items() if n)
        lines.append(f"{load.teacher}: {load.total} classes, {load.work_days} days ({types}); free: {free}")
    return "\n".join(lines)
