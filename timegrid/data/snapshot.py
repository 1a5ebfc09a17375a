from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from ..config import DEFAULT_CALENDAR, Calendar
from ..errors import InvalidFormat
from ..models.index import SlotIndex
from ..ops.allocation import AllocationOps
from ..ops.results import BulkResult
from .names import coerce_text


def snapshot_key(group: str, day: str, time: str) -> str:
    return f"{group}-{day}-{time}"


def export_schedule(index: SlotIndex, exported_at: datetime | None = None) -> Dict[str, Any]:
    stamp = exported_at or datetime.now(timezone.utc)
    return {
        "groups": list(index.groups),
        "schedule": {snapshot_key(*e.key): e.to_dict() for e in index.sorted_entries()},
        "exportDate": stamp.isoformat(),
    }


def dumps_schedule(index: SlotIndex) -> str:
    return json.dumps(export_schedule(index), indent=2, ensure_ascii=False)


def _split_key(key: str) -> Tuple[str, str, str] | None:
    # Group names contain dashes ("COMSE-25"); day and time never do
    parts = key.rsplit("-", 2)
    if len(parts) != 3:
        return None
    return parts[0], parts[1], parts[2]


def parse_snapshot(payload: Any) -> Tuple[List[str], List[Dict[str, Any]]]:
    """Accept a snapshot object, a bare list of entries, or their JSON text."""
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidFormat(f"invalid JSON ({exc})") from exc

    if isinstance(payload, dict) and "groups" in payload and "schedule" in payload:
        groups, schedule = payload["groups"], payload["schedule"]
        if not isinstance(groups, list) or not isinstance(schedule, dict):
            raise InvalidFormat("'groups' must be a list and 'schedule' an object")
        records = []
        for key, record in schedule.items():
            if not isinstance(record, dict):
                raise InvalidFormat(f"entry {key!r} is not an object")
            record = dict(record)
            parsed = _split_key(str(key))
            if parsed is not None:
                for name, value in zip(("group", "day", "time"), parsed):
                    record.setdefault(name, value)
            records.append(record)
        group_names = [coerce_text(g) for g in groups if coerce_text(g)]
    elif isinstance(payload, list):
        records = payload
        group_names = []
    else:
        raise InvalidFormat("expected {groups, schedule} or a list of classes")

    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise InvalidFormat(f"entry #{i} is not an object")
        missing = [k for k in ("group", "day", "time") if not coerce_text(record.get(k))]
        if missing:
            raise InvalidFormat(f"entry #{i} lacks {', '.join(missing)}")
    return group_names, records


def import_schedule(payload: Any, calendar: Calendar = DEFAULT_CALENDAR) -> Tuple[SlotIndex, BulkResult]:
    groups, records = parse_snapshot(payload)
    ops = AllocationOps(SlotIndex(calendar=calendar))
    for g in groups:
        ops.add_group(g)
    result = ops.bulk_place(records)
    logging.getLogger(__name__).info(
        f"Imported snapshot: {result.applied} classes, {len(ops.index.groups)} groups"
    )
    return ops.index, result
