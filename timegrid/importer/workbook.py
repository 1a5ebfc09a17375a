from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Dict, List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import InvalidFormat


def read_workbook(path: Path) -> Dict[str, List[List[str]]]:
    """Every sheet of an .xlsx file as rows of cell strings ("" for empty cells)."""
    try:
        wb = load_workbook(filename=str(path), read_only=True, data_only=True)
    except (OSError, ValueError, KeyError, zipfile.BadZipFile, InvalidFileException) as exc:
        raise InvalidFormat(f"cannot read workbook {path.name} ({exc})") from exc
    try:
        grid: Dict[str, List[List[str]]] = {}
        for ws in wb.worksheets:
            grid[ws.title] = [
                ["" if v is None else str(v) for v in row] for row in ws.iter_rows(values_only=True)
            ]
        return grid
    finally:
        wb.close()
