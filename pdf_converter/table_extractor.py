"""
Table extraction helpers.

Uses pdfplumber to find tables on each page and writes every table to its own
delimited CSV file, the way the table export of a PDF engine does.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pdfplumber

from .exceptions import EngineError, NoTablesFoundError, PDFCorruptedError, PDFNotFoundError
from .logging_config import get_logger
from .models import Grid

logger = get_logger(__name__)


@dataclass
class ExtractedTable:
    """A table found on one page."""
    page_number: int
    index: int
    rows: Grid
    bbox: tuple | None = None

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)


@dataclass
class TableExtraction:
    tables: list[ExtractedTable] = field(default_factory=list)
    csv_files: list[Path] = field(default_factory=list)


class TableExtractor:
    def __init__(self, table_settings: dict[str, Any] | None = None) -> None:
        self.table_settings = table_settings or {}

    def extract_tables(self, pdf_path: str | Path) -> list[ExtractedTable]:
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise PDFNotFoundError(str(pdf_path))

        try:
            pdf = pdfplumber.open(str(pdf_path))
        except Exception as exc:
            raise PDFCorruptedError(str(pdf_path), exc) from exc

        tables: list[ExtractedTable] = []
        with pdf:
            try:
                for page_number, page in enumerate(pdf.pages, start=1):
                    tables.extend(self._extract_from_page(page, page_number))
            except Exception as exc:
                raise EngineError("Table detection failed", mode="tables", original_error=exc) from exc

        logger.debug("Found %d tables in %s", len(tables), pdf_path.name)
        return tables

    def tables_to_csv(
        self,
        pdf_path: str | Path,
        output_dir: str | Path,
        delimiter: str = "\t",
    ) -> TableExtraction:
        """Extract all tables and write one CSV per table into output_dir."""
        pdf_path = Path(pdf_path)
        tables = self.extract_tables(pdf_path)
        if not tables:
            raise NoTablesFoundError(pdf_path.name)

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        csv_files: list[Path] = []
        for table in tables:
            csv_path = output_dir / f"{pdf_path.stem}_p{table.page_number}_t{table.index}.csv"
            with csv_path.open("w", encoding="utf-8", newline="") as handle:
                writer = csv.writer(handle, delimiter=delimiter)
                writer.writerows(table.rows)
            csv_files.append(csv_path)

        return TableExtraction(tables=tables, csv_files=csv_files)

    def _extract_from_page(self, page, page_number: int) -> list[ExtractedTable]:
        tables: list[ExtractedTable] = []
        for t_idx, found in enumerate(page.find_tables(table_settings=self.table_settings), start=1):
            rows = self._clean_rows(found.extract())
            if rows:
                tables.append(
                    ExtractedTable(page_number=page_number, index=t_idx, rows=rows, bbox=found.bbox)
                )
        return tables

    @staticmethod
    def _clean_rows(raw_rows: list[list[str | None]] | None) -> Grid:
        rows: Grid = []
        for raw in raw_rows or []:
            row = [(cell or "").strip() for cell in raw]
            if any(row):
                rows.append(row)
        return rows
