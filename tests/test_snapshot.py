import json
from datetime import datetime

import pytest

from timegrid.data.snapshot import dumps_schedule, export_schedule, import_schedule, parse_snapshot
from timegrid.errors import ErrorKind, InvalidFormat
from timegrid.ops.allocation import AllocationOps


def sample_ops() -> AllocationOps:
    ops = AllocationOps()
    ops.add_group("COMSE-25")
    ops.add_group("MATH-23")
    ops.place(
        "COMSE-25",
        "Monday",
        "08:00",
        {"course": "Algorithms", "teacher": "Dr. Ahmad Sarosh", "room": "B110", "duration": 2},
    )
    ops.place("COMSE-25", "Wednesday", "11:00", {"course": "Networks Lab", "subjectType": "lab"})
    return ops


def test_export_layout() -> None:
    data = export_schedule(sample_ops().index)
    assert data["groups"] == ["COMSE-25", "MATH-23"]
    assert sorted(data["schedule"]) == ["COMSE-25-Monday-08:00", "COMSE-25-Wednesday-11:00"]
    record = data["schedule"]["COMSE-25-Monday-08:00"]
    assert record["subjectType"] == "lecture"
    assert record["duration"] == 2
    assert datetime.fromisoformat(data["exportDate"])


def test_round_trip_keeps_cells_and_empty_groups() -> None:
    ops = sample_ops()
    index, result = import_schedule(dumps_schedule(ops.index))
    assert result.ok and result.applied == 2
    assert index.groups == ops.index.groups
    assert {k: e.to_dict() for k, e in index.cells.items()} == {
        k: e.to_dict() for k, e in ops.index.cells.items()
    }


def test_bare_list_is_accepted() -> None:
    payload = json.dumps([{"group": "G1", "day": "Friday", "time": "13:10", "course": "Physics"}])
    index, result = import_schedule(payload)
    assert result.applied == 1
    assert index.groups == ["G1"]


def test_key_supplies_missing_fields() -> None:
    groups, records = parse_snapshot(
        {"groups": ["COMSE-25"], "schedule": {"COMSE-25-Monday-08:00": {"course": "Algorithms"}}}
    )
    assert groups == ["COMSE-25"]
    assert records[0]["group"] == "COMSE-25"
    assert records[0]["day"] == "Monday"
    assert records[0]["time"] == "08:00"


def test_teacher_objects_become_strings_without_renaming() -> None:
    payload = [
        {"group": "G1", "day": "Monday", "time": "08:00", "course": "A", "teacher": {"name": "Dr Sarosh"}}
    ]
    index, _ = import_schedule(payload)
    assert index.get("G1", "Monday", "08:00").teacher == "Dr Sarosh"


def test_overlapping_records_are_reported() -> None:
    payload = [
        {"group": "G1", "day": "Monday", "time": "08:00", "course": "A", "duration": 2},
        {"group": "G1", "day": "Monday", "time": "08:45", "course": "B"},
        {"group": "G1", "day": "Monday", "time": "07:00", "course": "C"},
    ]
    index, result = import_schedule(payload)
    assert result.applied == 1
    assert [f.kind for f in result.failures] == [ErrorKind.OCCUPIED, ErrorKind.INVALID_SLOT]
    assert len(index) == 1


@pytest.mark.parametrize(
    "payload",
    [
        "{}",
        "{not json",
        {"groups": "COMSE-25", "schedule": {}},
        [1, 2],
        [{"group": "G1", "day": "Monday"}],
        42,
    ],
)
def test_malformed_snapshots(payload) -> None:
    with pytest.raises(InvalidFormat) as err:
        import_schedule(payload)
    assert err.value.kind == ErrorKind.INVALID_FORMAT
