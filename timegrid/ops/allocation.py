from __future__ import annotations

import logging
from typing import Iterable, List, Mapping

from ..data.names import coerce_text
from ..errors import CourseRequired, InvalidSlot, Occupied, ValidationError
from ..models.entry import ClassEntry, SlotKey, coerce_duration, coerce_subject_type
from ..models.index import SlotIndex
from .results import BulkResult, EntryFailure, OpResult


logger = logging.getLogger(__name__)


class AllocationOps:
    """Mutations on one SlotIndex. Occupancy is enforced here; teacher/room
    double-bookings are left to the conflict detector."""

    def __init__(self, index: SlotIndex | None = None):
        self.index = index if index is not None else SlotIndex()

    def check_place(
        self, group: str, day: str, time: str, fields: Mapping[str, object]
    ) -> ClassEntry:
        """Build the entry ``place`` would store, or raise a ValidationError."""
        group, day, time = coerce_text(group), coerce_text(day), coerce_text(time)
        course = coerce_text(fields.get("course"))
        if not course:
            raise CourseRequired(group, day, time)
        max_duration = self.index.calendar.max_duration
        duration = coerce_duration(fields.get("duration", 1), max_duration)
        span = self.index.span(day, time, duration)
        key = (group, day, time)
        blocker = self.index.blocker(group, day, span, ignore={key})
        if blocker is not None:
            raise Occupied(group, day, time, blocker.key)
        return ClassEntry(
            group=group,
            day=day,
            time=time,
            course=course,
            teacher=coerce_text(fields.get("teacher")),
            room=coerce_text(fields.get("room")),
            subject_type=coerce_subject_type(fields.get("subject_type", fields.get("subjectType"))),
            duration=len(span),
        )

    def place(self, group: str, day: str, time: str, fields: Mapping[str, object]) -> OpResult:
        try:
            entry = self.check_place(group, day, time, fields)
        except ValidationError as err:
            logger.info(f"Rejected {group} {day} {time}: {err.message}")
            return OpResult.failure(err)
        replaced = entry.key in self.index
        self.index.put(entry)
        logger.info(f"{'Updated' if replaced else 'Placed'} {' '.join(entry.key)} -> {entry.course}")
        return OpResult.success()

    def remove(self, group: str, day: str, time: str) -> OpResult:
        gone = self.index.pop((group, day, time))
        if gone is None:
            return OpResult.success("nothing to remove")
        logger.info(f"Removed {group} {day} {time} ({gone.course})")
        return OpResult.success()

    def check_move(self, from_key: SlotKey, to_key: SlotKey) -> List[ClassEntry]:
        """Entries as they would sit after ``move``; raises on overlap.

        Durations travel unchanged, so a destination too close to the end of
        the day for the whole class is rejected rather than clipped.
        """
        src = self.index.cells[from_key]
        planned = [src.relocated(to_key)]
        dst = self.index.cells.get(to_key)
        if dst is not None:
            planned.append(dst.relocated(from_key))

        ignore = {from_key, to_key}
        spans = []
        for p in planned:
            span = self.index.span(p.day, p.time, p.duration)
            if len(span) < p.duration:
                raise InvalidSlot(p.day, p.time, f"{p.duration} periods do not fit before the end of the day")
            blocker = self.index.blocker(p.group, p.day, span, ignore=ignore)
            if blocker is not None:
                raise Occupied(p.group, p.day, p.time, blocker.key)
            spans.append(span)
        # A swap inside one (group, day) must not make the pair overlap each other
        if len(planned) == 2:
            a, b = planned
            if (a.group, a.day) == (b.group, b.day) and set(spans[0]) & set(spans[1]):
                raise Occupied(b.group, b.day, b.time, a.key)
        return planned

    def move(self, from_key: SlotKey, to_key: SlotKey) -> OpResult:
        if from_key == to_key or from_key not in self.index:
            return OpResult.success("nothing to move")
        try:
            planned = self.check_move(from_key, to_key)
        except ValidationError as err:
            logger.info(f"Rejected move {from_key} -> {to_key}: {err.message}")
            return OpResult.failure(err)
        self.index.pop(from_key)
        self.index.pop(to_key)
        for entry in planned:
            self.index.put(entry)
        verb = "Swapped" if len(planned) == 2 else "Moved"
        logger.info(f"{verb} {'/'.join(from_key)} <-> {'/'.join(to_key)}")
        return OpResult.success()

    def bulk_place(self, entries: Iterable[ClassEntry | Mapping[str, object]]) -> BulkResult:
        result = BulkResult()
        for item in entries:
            fields = item.to_dict() if isinstance(item, ClassEntry) else item
            key = (
                coerce_text(fields.get("group")),
                coerce_text(fields.get("day")),
                coerce_text(fields.get("time")),
            )
            outcome = self.place(*key, fields)
            if outcome.ok:
                result.applied += 1
            else:
                result.failures.append(EntryFailure(key, outcome.kind, outcome.detail))
        logger.info(f"Bulk place: {result.applied} applied, {len(result.failures)} failed")
        return result

    def add_group(self, name: str) -> OpResult:
        name = name.strip()
        if not name or not self.index.add_group(name):
            return OpResult.success("nothing to add")
        logger.info(f"Added group {name}")
        return OpResult.success()

    def delete_group(self, name: str) -> OpResult:
        dropped = self.index.drop_group(name)
        logger.info(f"Deleted group {name} and {dropped} classes")
        return OpResult.success(f"{dropped} classes removed")

    def clear(self) -> OpResult:
        count = len(self.index)
        self.index.cells.clear()
        logger.info(f"Cleared {count} classes")
        return OpResult.success()
