# Re-export common types
from .entry import SUBJECT_TYPES, ClassEntry, SlotKey
from .period import TimeSlot

__all__ = [
    "ClassEntry",
    "SlotKey",
    "SUBJECT_TYPES",
    "TimeSlot",
]
