from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Set

from ..config import DEFAULT_CALENDAR, Calendar
from ..data.names import identity, normalize
from ..errors import InvalidSlot
from .entry import ClassEntry, SlotKey


@dataclass
class SlotIndex:
    """(group, day, start time) -> the class entry starting there."""

    calendar: Calendar = DEFAULT_CALENDAR
    cells: Dict[SlotKey, ClassEntry] = field(default_factory=dict)
    groups: List[str] = field(default_factory=list)

    def get(self, group: str, day: str, time: str) -> ClassEntry | None:
        return self.cells.get((group, day, time))

    def all(self) -> Iterable[ClassEntry]:
        return self.cells.values()

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, key: object) -> bool:
        return key in self.cells

    def span(self, day: str, time: str, duration: int) -> List[str]:
        """Slots covered by a class of ``duration`` starting at ``time``, clipped to the day."""
        start = self.calendar.slot_index(time)
        if start is None or self.calendar.day_index(day) is None:
            raise InvalidSlot(day, time)
        times = self.calendar.times
        length = max(1, min(duration, self.calendar.max_duration, len(times) - start))
        return times[start : start + length]

    def occupied_slots(self, entry: ClassEntry) -> List[str]:
        return self.span(entry.day, entry.time, entry.duration)

    def iter_group_day(self, group: str, day: str) -> Iterable[ClassEntry]:
        for (g, d, _), e in self.cells.items():
            if g == group and d == day:
                yield e

    def covering(self, group: str, day: str, time: str) -> ClassEntry | None:
        for e in self.iter_group_day(group, day):
            if time in self.occupied_slots(e):
                return e
        return None

    def is_free(self, group: str, day: str, time: str) -> bool:
        return self.covering(group, day, time) is None

    def blocker(
        self, group: str, day: str, slots: List[str], ignore: Set[SlotKey] = frozenset()
    ) -> ClassEntry | None:
        wanted = set(slots)
        for e in self.iter_group_day(group, day):
            if e.key in ignore:
                continue
            if wanted.intersection(self.occupied_slots(e)):
                return e
        return None

    def put(self, entry: ClassEntry) -> None:
        self.cells[entry.key] = entry
        self.add_group(entry.group)

    def pop(self, key: SlotKey) -> ClassEntry | None:
        return self.cells.pop(key, None)

    def add_group(self, group: str) -> bool:
        if group in self.groups:
            return False
        self.groups.append(group)
        return True

    def drop_group(self, group: str) -> int:
        doomed = [k for k in self.cells if k[0] == group]
        for k in doomed:
            del self.cells[k]
        if group in self.groups:
            self.groups.remove(group)
        return len(doomed)

    def entries_for_day(self, day: str) -> List[ClassEntry]:
        return self.sorted_entries(e for e in self.cells.values() if e.day == day)

    def entries_for_teacher(self, teacher: str) -> List[ClassEntry]:
        wanted = identity(teacher)
        if not wanted:
            return []
        return self.sorted_entries(e for e in self.cells.values() if identity(e.teacher) == wanted)

    def teachers(self) -> List[str]:
        names = {normalize(e.teacher) for e in self.cells.values()}
        names.discard("")
        return sorted(names, key=str.casefold)

    def sorted_entries(self, entries: Iterable[ClassEntry] | None = None) -> List[ClassEntry]:
        days = {d: i for i, d in enumerate(self.calendar.days)}
        times = {t: i for i, t in enumerate(self.calendar.times)}
        source = self.cells.values() if entries is None else entries
        return sorted(
            source,
            key=lambda e: (days.get(e.day, len(days)), times.get(e.time, len(times)), e.group),
        )

    def copy(self) -> "SlotIndex":
        return SlotIndex(
            calendar=self.calendar,
            cells={k: replace(e) for k, e in self.cells.items()},
            groups=list(self.groups),
        )
