from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..data.names import NameNormalizer
from ..models.entry import ClassEntry
from ..models.index import SlotIndex


KINDS = ("teacher", "room")


@dataclass(frozen=True)
class Conflict:
    kind: str  # teacher | room
    identity: str
    day: str
    time: str
    groups: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "identity": self.identity,
            "day": self.day,
            "time": self.time,
            "groups": list(self.groups),
        }


@dataclass
class ConflictReport:
    conflicts: List[Conflict] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.conflicts)

    def count(self, kind: str) -> int:
        return sum(1 for c in self.conflicts if c.kind == kind)

    def to_dict(self) -> dict:
        return {
            "conflict_count": self.total,
            "by_kind": {k: self.count(k) for k in KINDS},
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


def room_identity(room: str) -> str:
    return " ".join(room.split()).casefold()


class ConflictDetector:
    """Advisory teacher/room double-bookings across groups.

    Nothing is cached: every ``compute()`` walks the index as it is now.
    """

    def __init__(self, index: SlotIndex, normalizer: NameNormalizer | None = None):
        self.index = index
        self.normalizer = normalizer or NameNormalizer()

    def compute(self) -> ConflictReport:
        logger = logging.getLogger(__name__)
        # (day, time) -> entries whose occupied range covers that instant
        instants: Dict[Tuple[str, str], List[ClassEntry]] = defaultdict(list)
        for e in self.index.sorted_entries():
            for t in self.index.occupied_slots(e):
                instants[(e.day, t)].append(e)

        report = ConflictReport()
        for day in self.index.calendar.days:
            for time in self.index.calendar.times:
                present = instants.get((day, time))
                if not present or len(present) < 2:
                    continue
                report.conflicts.extend(self._at_instant(day, time, present))
        logger.debug(f"Conflict scan: {report.total} conflicts")
        return report

    def _at_instant(self, day: str, time: str, present: List[ClassEntry]) -> List[Conflict]:
        out: List[Conflict] = []
        for kind in KINDS:
            # identity -> (display name, groups)
            buckets: Dict[str, Tuple[str, set]] = {}
            for e in present:
                if kind == "teacher":
                    display = self.normalizer.normalize(e.teacher)
                    key = display.casefold()
                else:
                    display = " ".join(e.room.split())
                    key = room_identity(e.room)
                if not key:
                    continue
                buckets.setdefault(key, (display, set()))[1].add(e.group)
            for key in sorted(buckets):
                display, groups = buckets[key]
                if len(groups) >= 2:
                    out.append(Conflict(kind, display, day, time, tuple(sorted(groups))))
        return out
