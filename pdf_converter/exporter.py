"""
Spreadsheet export.

Writes a grid of strings to an .xlsx workbook with openpyxl: one sheet with
the converted content and, optionally, a second sheet describing the
conversion.
"""

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import Optional

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.worksheet.worksheet import Worksheet

from .exceptions import ExportError
from .logging_config import get_logger
from .models import Grid

logger = get_logger(__name__)

DEFAULT_SHEET_NAME = "PDF Content"
INFO_SHEET_NAME = "Conversion Info"
MAX_SHEET_NAME_LENGTH = 31

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)
_INVALID_SHEET_CHARS = re.compile(r"[:\\/?*\[\]]")


def output_file_name(source_name: str) -> str:
    """'report.pdf' -> 'report_converted.xlsx'."""
    stem = _PDF_SUFFIX.sub("", Path(source_name or "").name) or "document"
    return f"{stem}_converted.xlsx"


def clean_sheet_name(name: str) -> str:
    """Excel sheet names must be <=31 chars and cannot contain : \\ / ? * [ ]"""
    name = _INVALID_SHEET_CHARS.sub("", (name or "").strip())
    return name[:MAX_SHEET_NAME_LENGTH] or DEFAULT_SHEET_NAME


def clean_cell(value: Optional[str]) -> str:
    """Drop control characters openpyxl refuses to store."""
    if value is None:
        return ""
    return ILLEGAL_CHARACTERS_RE.sub("", str(value))


def write_rows(sheet: Worksheet, rows: Grid) -> None:
    """
    Write a grid to a sheet, one grid row per sheet row.

    Every cell is stored as a string, so a line such as "=== Summary ===" or
    "=SUM(A1:A2)" stays text instead of becoming a formula. Empty rows keep
    their place; empty cells are left unset.
    """
    for row_index, row in enumerate(rows, start=1):
        for column_index, value in enumerate(row, start=1):
            text = clean_cell(value)
            if not text:
                continue
            cell = sheet.cell(row=row_index, column=column_index, value=text)
            cell.data_type = "s"


class SpreadsheetExporter:
    def __init__(self, sheet_name: str = DEFAULT_SHEET_NAME) -> None:
        self.sheet_name = clean_sheet_name(sheet_name)

    def build_workbook(self, rows: Grid, info: Optional[Grid] = None) -> Workbook:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.sheet_name
        write_rows(sheet, rows)

        if info:
            info_sheet = workbook.create_sheet(title=INFO_SHEET_NAME)
            write_rows(info_sheet, info)

        return workbook

    def to_bytes(self, rows: Grid, info: Optional[Grid] = None) -> bytes:
        buffer = io.BytesIO()
        try:
            self.build_workbook(rows, info).save(buffer)
        except (OSError, ValueError, TypeError) as exc:
            raise ExportError(original_error=exc) from exc
        return buffer.getvalue()

    def save(self, rows: Grid, path: str | Path, info: Optional[Grid] = None) -> Path:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.build_workbook(rows, info).save(path)
        except (OSError, ValueError, TypeError) as exc:
            raise ExportError(f"Failed to write spreadsheet: {path}", original_error=exc) from exc
        logger.info("Wrote %d rows to %s", len(rows), path)
        return path
