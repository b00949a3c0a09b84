"""
Data Models for PDF to Excel conversion.

The only data structure that flows through the converter is a grid: an
ordered list of rows, each an ordered list of string cells. Everything else
here describes how that grid was produced.

Architecture:
    PDF → [tables] ─┐
        → [text]  ──┼→ rows → ConversionResult → Preview / .xlsx
        → [document]┘
        (first mode that yields rows wins; file info otherwise)
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

PDF_CONTENT_TYPE = "application/pdf"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

Grid = list[list[str]]


# =============================================================================
# ENUMS
# =============================================================================


class ExtractionMode(str, Enum):
    """
    How the rows of a conversion were produced.

    TABLES: detected tables, written to CSV by the engine
    TEXT: plain text, one row per line (optionally split into columns)
    DOCUMENT: whole-document conversion to a workbook, read back
    FILE_INFO: nothing could be extracted; rows describe the file
    """

    TABLES = "tables"
    TEXT = "text"
    DOCUMENT = "document"
    FILE_INFO = "file_info"


ENGINE_MODES = (ExtractionMode.TABLES, ExtractionMode.TEXT, ExtractionMode.DOCUMENT)


# =============================================================================
# OPTIONS
# =============================================================================


class ConversionOptions(BaseModel):
    """Options chosen on the upload form (or on the command line)."""

    extract_tables: bool = Field(
        False,
        description="Try table extraction first (recommended for structured PDFs)"
    )
    split_by_spaces: bool = Field(
        False,
        description="Split text lines into columns on runs of 2+ spaces"
    )
    csv_delimiter: str = Field(
        "\t",
        min_length=1,
        max_length=1,
        description="Delimiter of the CSV files written in table mode"
    )
    include_info_sheet: bool = Field(
        False,
        description="Add a 'Conversion Info' sheet to the exported workbook"
    )


# =============================================================================
# RESULT
# =============================================================================


class SourceFile(BaseModel):
    """The uploaded PDF as the user selected it."""

    name: str
    size_bytes: int = Field(0, ge=0)
    content_type: str = PDF_CONTENT_TYPE
    path: Optional[str] = None

    @computed_field
    @property
    def size_kb(self) -> str:
        return f"{self.size_bytes / 1024:.2f} KB"

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceFile":
        path = Path(path)
        return cls(name=path.name, size_bytes=path.stat().st_size, path=str(path))


class ModeAttempt(BaseModel):
    """Outcome of one step of the fallback chain."""

    mode: ExtractionMode
    success: bool
    rows: int = 0
    error: Optional[str] = None


class ConversionResult(BaseModel):
    """
    Complete result of one PDF conversion.

    Holds the grid, which mode produced it and the trail of modes that were
    tried before it.
    """

    conversion_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    source: SourceFile
    options: ConversionOptions = Field(default_factory=ConversionOptions)

    rows: Grid = Field(default_factory=list)
    mode: ExtractionMode

    attempts: list[ModeAttempt] = Field(default_factory=list)
    tables_found: int = 0
    output_files: list[str] = Field(
        default_factory=list,
        description="Files written by the engine (CSV tables or converted workbook)"
    )
    warnings: list[str] = Field(default_factory=list)

    processing_time_seconds: float = 0.0
    converted_at: datetime = Field(default_factory=datetime.now)

    @computed_field
    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def is_fallback(self) -> bool:
        """True when no extraction mode produced content."""
        return self.mode == ExtractionMode.FILE_INFO

    @property
    def output_file_name(self) -> str:
        from .exporter import output_file_name
        return output_file_name(self.source.name)

    def info_rows(self) -> Grid:
        """Summary of the conversion, used for the optional info sheet."""
        rows = [
            ["File Name", self.source.name],
            ["File Size", self.source.size_kb],
            ["Mode", self.mode.value],
            ["Rows", str(self.total_rows)],
            ["Converted At", self.converted_at.strftime("%Y-%m-%d %H:%M:%S")],
        ]
        if self.tables_found:
            rows.append(["Tables Found", str(self.tables_found)])
        for attempt in self.attempts:
            status = "ok" if attempt.success else (attempt.error or "failed")
            rows.append([f"Attempt: {attempt.mode.value}", status])
        return rows

    # --- Export Methods ---

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save conversion result to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "ConversionResult":
        """Load conversion result from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


class Preview(BaseModel):
    """First rows of a grid, as shown on the page."""

    rows: Grid
    total_rows: int
    truncated: bool
    message: str = ""


# =============================================================================
# API MODELS
# =============================================================================


class ConvertResponse(BaseModel):
    conversion_id: str
    file_name: str
    output_file_name: str
    mode: ExtractionMode
    is_fallback: bool
    attempts: list[ModeAttempt]
    tables_found: int
    preview: Preview


class StatusResponse(BaseModel):
    ready: bool
    modes: list[ExtractionMode]
    preview_rows: int
    max_upload_mb: int
