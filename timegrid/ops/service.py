from __future__ import annotations

import logging
from typing import Any, Awaitable, List, Mapping, Protocol

from ..config import Calendar
from ..data.names import coerce_text
from ..data.snapshot import parse_snapshot
from ..errors import ScheduleError, TransportError, ValidationError
from ..models.entry import ClassEntry, SlotKey
from ..models.index import SlotIndex
from .allocation import AllocationOps
from .results import BulkResult, EntryFailure, OpResult


logger = logging.getLogger(__name__)


class ScheduleTransport(Protocol):
    async def get_all_entries(self) -> List[Mapping[str, Any]]: ...

    async def upsert_entry(self, entry: Mapping[str, Any]) -> Any: ...

    async def delete_entry(self, group: str, day: str, time: str) -> Any: ...

    async def get_groups(self) -> List[str]: ...

    async def add_group(self, name: str) -> Any: ...

    async def delete_group(self, name: str) -> Any: ...


class ScheduleService:
    """AllocationOps mirrored to a persistence transport.

    Local state changes only after the transport call has succeeded; a
    failed call leaves the local index untouched. When a multi-call
    operation (a swap) fails half way, call ``reload()`` to resync.
    """

    def __init__(self, transport: ScheduleTransport, ops: AllocationOps | None = None):
        self.transport = transport
        self.ops = ops if ops is not None else AllocationOps()

    @property
    def index(self) -> SlotIndex:
        return self.ops.index

    async def _call(self, operation: str, pending: Awaitable[Any]) -> Any:
        try:
            return await pending
        except ScheduleError:
            raise
        except Exception as exc:
            logger.warning(f"Transport {operation} failed: {exc}")
            raise TransportError(operation, exc) from exc

    async def reload(self, calendar: Calendar | None = None) -> OpResult:
        """Replace local state with the stored one.

        Stored rows the index rejects are left out and the result fails with
        the first rejection's kind.
        """
        try:
            records = await self._call("get_all_entries", self.transport.get_all_entries())
            groups = await self._call("get_groups", self.transport.get_groups())
            _, rows = parse_snapshot(list(records))
        except ScheduleError as err:
            return OpResult.failure(err)
        fresh = AllocationOps(SlotIndex(calendar=calendar or self.index.calendar))
        for g in groups:
            fresh.add_group(coerce_text(g))
        loaded = fresh.bulk_place(rows)
        self.ops = fresh
        if not loaded.ok:
            logger.warning(f"Reload skipped {len(loaded.failures)} stored classes")
            first = loaded.failures[0]
            detail = f"{len(loaded.failures)} of {len(rows)} stored classes rejected"
            return OpResult(False, first.kind, f"{detail}, first {' '.join(first.key)}: {first.detail}")
        return OpResult.success(f"{loaded.applied} classes loaded")

    async def place(self, group: str, day: str, time: str, fields: Mapping[str, object]) -> OpResult:
        try:
            entry = self.ops.check_place(group, day, time, fields)
            await self._call("upsert_entry", self.transport.upsert_entry(entry.to_dict()))
        except ScheduleError as err:
            return OpResult.failure(err)
        return self.ops.place(group, day, time, entry.to_dict())

    async def remove(self, group: str, day: str, time: str) -> OpResult:
        if (group, day, time) not in self.index:
            return OpResult.success("nothing to remove")
        try:
            await self._call("delete_entry", self.transport.delete_entry(group, day, time))
        except TransportError as err:
            return OpResult.failure(err)
        return self.ops.remove(group, day, time)

    async def move(self, from_key: SlotKey, to_key: SlotKey) -> OpResult:
        if from_key == to_key or from_key not in self.index:
            return OpResult.success("nothing to move")
        try:
            planned = self.ops.check_move(from_key, to_key)
            for entry in planned:
                await self._call("upsert_entry", self.transport.upsert_entry(entry.to_dict()))
            if len(planned) == 1:
                await self._call("delete_entry", self.transport.delete_entry(*from_key))
        except ValidationError as err:
            return OpResult.failure(err)
        except TransportError as err:
            logger.warning(f"Move {from_key} -> {to_key} may be partially stored; reload advised")
            return OpResult.failure(err)
        return self.ops.move(from_key, to_key)

    async def bulk_place(self, entries: List[ClassEntry | Mapping[str, object]]) -> BulkResult:
        result = BulkResult()
        for item in entries:
            fields = item.to_dict() if isinstance(item, ClassEntry) else item
            key = (
                coerce_text(fields.get("group")),
                coerce_text(fields.get("day")),
                coerce_text(fields.get("time")),
            )
            outcome = await self.place(*key, fields)
            if outcome.ok:
                result.applied += 1
            else:
                result.failures.append(EntryFailure(key, outcome.kind, outcome.detail))
        return result

    async def add_group(self, name: str) -> OpResult:
        name = name.strip()
        if not name or name in self.index.groups:
            return OpResult.success("nothing to add")
        try:
            await self._call("add_group", self.transport.add_group(name))
        except TransportError as err:
            return OpResult.failure(err)
        return self.ops.add_group(name)

    async def delete_group(self, name: str) -> OpResult:
        try:
            await self._call("delete_group", self.transport.delete_group(name))
        except TransportError as err:
            return OpResult.failure(err)
        return self.ops.delete_group(name)
