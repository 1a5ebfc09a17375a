from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer

from ..config import DEFAULT_CALENDAR, Calendar, load_calendar
from ..data.loader import dump_json
from ..data.names import NameNormalizer
from ..data.snapshot import export_schedule, import_schedule
from ..errors import ScheduleImportError
from ..importer.grid import ImportPipeline, normalize_entries
from ..importer.workbook import read_workbook
from ..models.index import SlotIndex
from ..ops.allocation import AllocationOps
from ..ops.results import BulkResult
from ..render.csv_out import csv_blocks, write_csv_blocks
from ..validate.conflicts import ConflictDetector
from ..validate.report import format_conflict_report, write_conflict_report
from ..validate.workload import format_workload, teacher_workload


app = typer.Typer(add_completion=False, help="Group timetable allocation and conflict checks")


def _setup_logging(level: str, log_dir: Path | None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "timegrid.log", encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def _calendar(path: Path | None) -> Calendar:
    return load_calendar(path) if path is not None else DEFAULT_CALENDAR


def _load(snapshot: Path, calendar: Calendar) -> SlotIndex:
    try:
        index, result = import_schedule(snapshot.read_text(encoding="utf-8"), calendar)
    except ScheduleImportError as err:
        typer.echo(f"{err.kind.value}: {err.message}", err=True)
        raise typer.Exit(code=1)
    _report_failures(result)
    return index


def _report_failures(result: BulkResult) -> None:
    for f in result.failures:
        typer.echo(f"skipped {' '.join(f.key)}: {f.kind.value} ({f.detail})", err=True)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", help="Log level"),
    log_dir: Path | None = typer.Option(None, help="Also write timegrid.log into this directory"),
) -> None:
    _setup_logging(log_level, log_dir)


@app.command("import-workbook")
def cli_import_workbook(
    workbook: Path = typer.Argument(..., help="Legacy .xlsx timetable, one sheet per weekday"),
    out: Path = typer.Option(Path("schedule.json"), help="Snapshot JSON to write"),
    calendar: Path | None = typer.Option(None, help="Calendar override JSON"),
) -> None:
    cal = _calendar(calendar)
    try:
        grid = read_workbook(workbook)
        entries = ImportPipeline(cal).parse(grid)
    except ScheduleImportError as err:
        typer.echo(f"{err.kind.value}: {err.message}", err=True)
        raise typer.Exit(code=1)
    ops = AllocationOps(SlotIndex(calendar=cal))
    result = ops.bulk_place(normalize_entries(entries, NameNormalizer()))
    _report_failures(result)
    dump_json(export_schedule(ops.index), out)
    typer.echo(f"{result.applied} classes in {len(ops.index.groups)} groups written to {out}")


@app.command("conflicts")
def cli_conflicts(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON"),
    outputs: Path | None = typer.Option(None, help="Directory for conflicts.json"),
    calendar: Path | None = typer.Option(None, help="Calendar override JSON"),
) -> None:
    index = _load(snapshot, _calendar(calendar))
    report = ConflictDetector(index).compute()
    if outputs is not None:
        write_conflict_report(report, outputs)
    typer.echo(format_conflict_report(report))


@app.command("export-csv")
def cli_export_csv(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON"),
    outputs: Path | None = typer.Option(None, help="Directory for timetable.csv"),
    calendar: Path | None = typer.Option(None, help="Calendar override JSON"),
) -> None:
    index = _load(snapshot, _calendar(calendar))
    text = csv_blocks(index)
    if outputs is not None:
        write_csv_blocks(text, outputs)
    else:
        typer.echo(text)


@app.command("workload")
def cli_workload(
    snapshot: Path = typer.Argument(..., help="Snapshot JSON"),
    teacher: str | None = typer.Option(None, help="Only this teacher (any spelling)"),
    calendar: Path | None = typer.Option(None, help="Calendar override JSON"),
) -> None:
    index = _load(snapshot, _calendar(calendar))
    normalizer = NameNormalizer()
    loads = teacher_workload(index, normalizer)
    if teacher:
        wanted = normalizer.identity(teacher)
        loads = [x for x in loads if x.teacher.casefold() == wanted]
    typer.echo(format_workload(loads) or "no teachers")


@app.command("normalize")
def cli_normalize(names: List[str] = typer.Argument(..., help="Raw teacher cell text")) -> None:
    normalizer = NameNormalizer()
    for raw in names:
        typer.echo(f"{raw!r} -> {normalizer.normalize(raw)!r}")
