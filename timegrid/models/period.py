from dataclasses import dataclass


@dataclass(frozen=True)
class TimeSlot:
    start: str
    label: str  # header text in the legacy workbook, e.g. "08.00-08.40"
