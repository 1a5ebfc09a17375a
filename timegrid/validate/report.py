from __future__ import annotations

from pathlib import Path

from ..data.loader import dump_json
from .conflicts import KINDS, ConflictReport


def write_conflict_report(report: ConflictReport, outputs_dir: Path) -> Path:
    path = outputs_dir / "conflicts.json"
    dump_json(report.to_dict(), path)
    return path


def format_conflict_report(report: ConflictReport) -> str:
    lines: list[str] = []
    lines.append(f"conflict_count: {report.total}")
    for kind in KINDS:
        lines.append(f"  - {kind}: {report.count(kind)}")
    for c in report.conflicts:
        lines.append(f"{c.day} {c.time} {c.kind} '{c.identity}': {', '.join(c.groups)}")
    return "\n".join(lines)
