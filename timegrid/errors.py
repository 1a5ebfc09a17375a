from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    COURSE_REQUIRED = "CourseRequired"
    OCCUPIED = "Occupied"
    INVALID_SLOT = "InvalidSlot"
    NO_DATA_FOUND = "NoDataFound"
    INVALID_FORMAT = "InvalidFormat"
    TRANSPORT = "TransportError"


class ScheduleError(Exception):
    """Base class for all schedule exceptions."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str, details: dict | None = None):
        self.kind = kind
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ScheduleError):
    """Blocks a single operation before anything is mutated."""


class CourseRequired(ValidationError):
    def __init__(self, group: str, day: str, time: str):
        super().__init__(
            ErrorKind.COURSE_REQUIRED,
            f"Course name is required ({group} {day} {time})",
            {"group": group, "day": day, "time": time},
        )


class Occupied(ValidationError):
    def __init__(self, group: str, day: str, time: str, blocker: tuple[str, str, str]):
        super().__init__(
            ErrorKind.OCCUPIED,
            f"{group} {day} {time} overlaps the class starting at {blocker[2]}",
            {"group": group, "day": day, "time": time, "blocked_by": list(blocker)},
        )


class InvalidSlot(ValidationError):
    def __init__(self, day: str, time: str, reason: str | None = None):
        super().__init__(
            ErrorKind.INVALID_SLOT,
            f"{day} {time}: {reason}" if reason else f"Unknown day/time: {day} {time}",
            {"day": day, "time": time},
        )


class ScheduleImportError(ScheduleError):
    """Whole-import failure; nothing from the import is applied."""


class NoDataFound(ScheduleImportError):
    def __init__(self, sheets_seen: int = 0):
        super().__init__(
            ErrorKind.NO_DATA_FOUND,
            "No schedule data found. Please check the file format.",
            {"sheets_seen": sheets_seen},
        )


class InvalidFormat(ScheduleImportError):
    def __init__(self, reason: str):
        super().__init__(ErrorKind.INVALID_FORMAT, f"Invalid data format: {reason}")


class TransportError(ScheduleError):
    """Opaque failure raised by the persistence collaborator."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(
            ErrorKind.TRANSPORT,
            f"{operation} failed: {cause}",
            {"operation": operation},
        )
        self.cause = cause
