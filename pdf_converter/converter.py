"""
PDF to grid conversion with sequential fallback.

The converter asks the engine for content in a fixed order and keeps the
first mode that yields at least one row:

    1. tables   (only when table extraction is requested)
    2. text     (one row per line, optionally split on space gaps)
    3. document (whole-document conversion, read back as rows)

A mode that raises a ConversionError, or returns nothing, is recorded as a
failed attempt and the next mode runs. When every mode fails the grid
describes the file instead, so the user always gets something to download.

Usage:
    from pdf_converter import PDFConverter, ConversionOptions

    converter = PDFConverter()
    result = converter.convert("report.pdf", ConversionOptions(split_by_spaces=True))
    print(result.mode, result.total_rows)
"""

from __future__ import annotations

import tempfile
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from .document_converter import read_workbook_rows
from .engine import PDFEngine
from .exceptions import (
    ConversionError,
    EmptyExtractionError,
    InvalidFileTypeError,
    PDFNotFoundError,
    format_error_chain,
)
from .exporter import output_file_name
from .logging_config import get_logger
from .models import (
    ConversionOptions,
    ConversionResult,
    ExtractionMode,
    Grid,
    ModeAttempt,
    SourceFile,
)
from .splitter import text_to_rows

logger = get_logger(__name__)

FILE_INFO_NOTE = "PDF processing encountered an error. Displaying basic file info."


def file_info_rows(source: SourceFile, when: Optional[datetime] = None) -> Grid:
    when = when or datetime.now()
    return [
        ["PDF File Information"],
        ["File Name", source.name],
        ["File Size", source.size_kb],
        ["File Type", source.content_type],
        ["Upload Time", when.strftime("%Y-%m-%d %H:%M:%S")],
        ["Note", FILE_INFO_NOTE],
    ]


class PDFConverter:
    def __init__(self, engine: Optional[PDFEngine] = None) -> None:
        self.engine = engine or PDFEngine()

    def plan(self, options: ConversionOptions) -> list[ExtractionMode]:
        """Modes to try, in order, for the given options."""
        modes: list[ExtractionMode] = []
        if options.extract_tables and self.engine.supports(ExtractionMode.TABLES):
            modes.append(ExtractionMode.TABLES)
        for mode in (ExtractionMode.TEXT, ExtractionMode.DOCUMENT):
            if self.engine.supports(mode):
                modes.append(mode)
        return modes

    def convert(
        self,
        pdf_path: str | Path,
        options: Optional[ConversionOptions] = None,
        source: Optional[SourceFile] = None,
        work_dir: Optional[str | Path] = None,
    ) -> ConversionResult:
        """
        Convert a PDF into a grid of strings.

        Args:
            pdf_path: Path to the PDF file
            options: Conversion options (defaults: text only, no splitting)
            source: Description of the file as uploaded; derived from
                pdf_path when omitted
            work_dir: Directory for files written by the engine. When
                omitted a temporary directory is used and discarded.

        Raises:
            PDFNotFoundError: pdf_path does not exist
            InvalidFileTypeError: pdf_path is not a .pdf file
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.is_file():
            raise PDFNotFoundError(str(pdf_path))
        if pdf_path.suffix.lower() != ".pdf":
            raise InvalidFileTypeError(path=str(pdf_path))

        options = options or ConversionOptions()
        source = source or SourceFile.from_path(pdf_path)

        if work_dir is None:
            with tempfile.TemporaryDirectory(prefix="pdf_converter_") as tmp:
                result = self._convert(pdf_path, options, source, Path(tmp))
                result.output_files = []
                return result
        return self._convert(pdf_path, options, source, Path(work_dir))

    def _convert(
        self,
        pdf_path: Path,
        options: ConversionOptions,
        source: SourceFile,
        work_dir: Path,
    ) -> ConversionResult:
        start = time.perf_counter()
        result = ConversionResult(source=source, options=options, mode=ExtractionMode.FILE_INFO)
        failures: list[ConversionError] = []

        logger.info("Converting %s (%s)", source.name, source.size_kb)
        for mode in self.plan(options):
            try:
                rows = self._run_mode(mode, pdf_path, options, work_dir, result)
                if not rows:
                    raise EmptyExtractionError(mode.value)
            except ConversionError as exc:
                failures.append(exc)
                result.attempts.append(ModeAttempt(mode=mode, success=False, error=str(exc)))
                logger.warning("Mode '%s' failed for %s: %s", mode.value, source.name, exc)
                continue

            result.attempts.append(ModeAttempt(mode=mode, success=True, rows=len(rows)))
            result.rows = rows
            result.mode = mode
            break
        else:
            result.rows = file_info_rows(source, result.converted_at)
            result.warnings.append(FILE_INFO_NOTE)
            chain = "\n".join(format_error_chain(exc) for exc in failures) or "no extraction mode available"
            logger.error("Conversion failed for %s, returning file info:\n%s", source.name, chain)

        result.processing_time_seconds = round(time.perf_counter() - start, 3)
        logger.info(
            "Converted %s: mode=%s rows=%d (%.2fs)",
            source.name,
            result.mode.value,
            result.total_rows,
            result.processing_time_seconds,
        )
        return result

    def _run_mode(
        self,
        mode: ExtractionMode,
        pdf_path: Path,
        options: ConversionOptions,
        work_dir: Path,
        result: ConversionResult,
    ) -> Grid:
        if mode == ExtractionMode.TABLES:
            extraction = self.engine.tables_to_csv(
                pdf_path, work_dir / "tables", delimiter=options.csv_delimiter
            )
            result.tables_found = len(extraction.tables)
            result.output_files.extend(str(path) for path in extraction.csv_files)
            rows: Grid = []
            for table in extraction.tables:
                if rows:
                    rows.append([])
                rows.extend([cell or "" for cell in row] for row in table.rows)
            return rows

        if mode == ExtractionMode.TEXT:
            text = self.engine.extract_text(pdf_path)
            return text_to_rows(text, options.split_by_spaces)

        if mode == ExtractionMode.DOCUMENT:
            output_path = work_dir / output_file_name(pdf_path.name)
            converted = self.engine.convert_document(pdf_path, output_path)
            result.output_files.append(str(converted))
            return read_workbook_rows(converted)

        raise ValueError(f"Unsupported extraction mode: {mode}")

