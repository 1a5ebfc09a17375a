from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..errors import ErrorKind, ScheduleError
from ..models.entry import SlotKey


@dataclass(frozen=True)
class OpResult:
    ok: bool
    kind: ErrorKind | None = None
    detail: str = ""

    @classmethod
    def success(cls, detail: str = "") -> "OpResult":
        return cls(True, None, detail)

    @classmethod
    def failure(cls, err: ScheduleError) -> "OpResult":
        return cls(False, err.kind, err.message)


@dataclass(frozen=True)
class EntryFailure:
    key: SlotKey
    kind: ErrorKind
    detail: str


@dataclass
class BulkResult:
    applied: int = 0
    failures: List[EntryFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
