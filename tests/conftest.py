"""
Pytest fixtures for PDF Converter tests.
"""

from pathlib import Path

import fitz  # PyMuPDF
import pytest

from pdf_converter import (
    ConversionOptions,
    ConversionResult,
    ConverterConfig,
    ExtractionMode,
    ModeAttempt,
    SourceFile,
    SpreadsheetExporter,
)
from pdf_converter.engine import PDFEngine
from pdf_converter.exceptions import EngineUnavailableError, NoTablesFoundError
from pdf_converter.models import ENGINE_MODES
from pdf_converter.table_extractor import ExtractedTable, TableExtraction


class FakeEngine:
    """
    Engine stand-in with scripted results per mode.

    Each of text/tables/document_rows may be a value or an exception instance,
    which is raised when the mode runs.
    """

    def __init__(self, text="", tables=None, document_rows=None, enabled_modes=ENGINE_MODES):
        self.text = text
        self.tables = tables
        self.document_rows = document_rows
        self._modes = [ExtractionMode(m) for m in enabled_modes]
        self.calls: list[ExtractionMode] = []

    @property
    def available_modes(self):
        return [m for m in ENGINE_MODES if m in self._modes]

    def supports(self, mode):
        return ExtractionMode(mode) in self._modes

    def is_ready(self):
        return bool(self._modes)

    @staticmethod
    def _outcome(value):
        if isinstance(value, Exception):
            raise value
        return value

    def extract_text(self, pdf_path):
        self.calls.append(ExtractionMode.TEXT)
        if not self.supports(ExtractionMode.TEXT):
            raise EngineUnavailableError("text")
        return self._outcome(self.text)

    def tables_to_csv(self, pdf_path, output_dir, delimiter="\t"):
        self.calls.append(ExtractionMode.TABLES)
        tables = self._outcome(self.tables)
        if not tables:
            raise NoTablesFoundError(Path(pdf_path).name)
        return TableExtraction(
            tables=[
                ExtractedTable(page_number=1, index=i, rows=rows)
                for i, rows in enumerate(tables, start=1)
            ],
            csv_files=[],
        )

    def convert_document(self, pdf_path, output_path):
        self.calls.append(ExtractionMode.DOCUMENT)
        rows = self._outcome(self.document_rows)
        return SpreadsheetExporter(sheet_name="Page 1").save(rows or [], output_path)


def write_pdf(path: Path, pages: list[list[str]]) -> Path:
    """Write a simple text PDF, one list of lines per page (Courier, 10pt)."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        y = 72
        for line in lines:
            page.insert_text((72, y), line, fontname="cour", fontsize=10)
            y += 14
    doc.save(str(path))
    doc.close()
    return path


def write_table_pdf(path: Path, rows: list[list[str]], cell_width: float = 120, cell_height: float = 22) -> Path:
    """Write a PDF with one ruled table drawn cell by cell."""
    doc = fitz.open()
    page = doc.new_page()
    top, left = 100, 72
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            x0 = left + c * cell_width
            y0 = top + r * cell_height
            page.draw_rect(fitz.Rect(x0, y0, x0 + cell_width, y0 + cell_height), color=(0, 0, 0), width=0.8)
            page.insert_text((x0 + 6, y0 + 15), value, fontname="helv", fontsize=10)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def fake_pdf(tmp_path):
    """A file the converter accepts; its content never reaches a real engine."""
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4\n% fake\n")
    return path


@pytest.fixture
def text_pdf(tmp_path):
    return write_pdf(
        tmp_path / "statement.pdf",
        [
            [
                "Quarterly Report",
                "Name        Amount      Date",
                "Alice       100.00      2024-01-05",
                "Bob         250.50      2024-02-11",
            ],
            ["Page two summary"],
        ],
    )


@pytest.fixture
def table_pdf(tmp_path):
    return write_table_pdf(
        tmp_path / "table.pdf",
        [
            ["Name", "Age", "City"],
            ["Alice", "30", "Berlin"],
            ["Bob", "25", "Munich"],
        ],
    )


@pytest.fixture
def sample_rows():
    return [
        ["Name", "Amount", "Date"],
        ["Alice", "100.00", "2024-01-05"],
        ["Bob", "250.50", "2024-02-11"],
    ]


@pytest.fixture
def sample_result(sample_rows):
    return ConversionResult(
        source=SourceFile(name="statement.pdf", size_bytes=2048),
        options=ConversionOptions(split_by_spaces=True),
        rows=sample_rows,
        mode=ExtractionMode.TEXT,
        attempts=[ModeAttempt(mode=ExtractionMode.TEXT, success=True, rows=3)],
    )


@pytest.fixture
def config(tmp_path):
    return ConverterConfig(data_dir=str(tmp_path / "data"))


@pytest.fixture
def real_engine():
    return PDFEngine()
