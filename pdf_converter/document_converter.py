"""
Whole-document conversion of a PDF into an .xlsx workbook.

Every page becomes one worksheet ("Page 1", "Page 2", ...). Pages with
detected tables contribute those tables; other pages contribute their layout
text, split into columns on whitespace gaps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pdfplumber
from openpyxl import Workbook, load_workbook

from .exceptions import EngineError, PDFCorruptedError, PDFNotFoundError
from .exporter import write_rows
from .logging_config import get_logger
from .models import Grid
from .splitter import split_by_spaces

logger = get_logger(__name__)


class DocumentConverter:
    def __init__(self, table_settings: dict[str, Any] | None = None, layout: bool = True) -> None:
        self.table_settings = table_settings or {}
        self.layout = layout

    def convert(self, pdf_path: str | Path, output_path: str | Path) -> Path:
        pdf_path = Path(pdf_path)
        output_path = Path(output_path)
        if not pdf_path.exists():
            raise PDFNotFoundError(str(pdf_path))

        try:
            pdf = pdfplumber.open(str(pdf_path))
        except Exception as exc:
            raise PDFCorruptedError(str(pdf_path), exc) from exc

        workbook = Workbook()
        workbook.remove(workbook.active)
        with pdf:
            try:
                for page_number, page in enumerate(pdf.pages, start=1):
                    sheet = workbook.create_sheet(title=f"Page {page_number}")
                    write_rows(sheet, self._page_rows(page))
            except Exception as exc:
                raise EngineError("Document conversion failed", mode="document", original_error=exc) from exc

        if not workbook.worksheets:
            raise EngineError("Document has no pages", mode="document")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(output_path)
        logger.debug("Converted %s to %s", pdf_path.name, output_path)
        return output_path

    def _page_rows(self, page) -> Grid:
        rows: Grid = []
        tables = page.extract_tables(table_settings=self.table_settings) or []
        for table in tables:
            if rows:
                rows.append([])
            rows.extend([(cell or "").strip() for cell in row] for row in table)
        if rows:
            return rows
        return split_by_spaces(page.extract_text(layout=self.layout) or "")


def read_workbook_rows(path: str | Path) -> Grid:
    """
    Read every sheet of a workbook back into one grid.

    Sheets are separated by an empty row, None cells become "" and trailing
    empty cells are dropped.
    """
    workbook = load_workbook(filename=str(path), read_only=True, data_only=True)
    rows: Grid = []
    try:
        for sheet in workbook.worksheets:
            sheet_rows: Grid = []
            for values in sheet.iter_rows(values_only=True):
                row = ["" if value is None else str(value) for value in values]
                while row and not row[-1].strip():
                    row.pop()
                if row:
                    sheet_rows.append(row)
            if sheet_rows and rows:
                rows.append([])
            rows.extend(sheet_rows)
    finally:
        workbook.close()
    return rows
