"""
PDF Converter - PDF to Excel conversion with a single-page web form

Extracts text or tables from a PDF, reshapes the result into a grid of
strings, previews the first rows and exports the grid as an .xlsx file.

Features:
- Table extraction (pdfplumber), written to one CSV per table
- Plain text extraction (PyMuPDF), one row per line
- Optional column splitting on runs of two or more spaces
- Whole-document conversion to a workbook as the last engine fallback
- File information rows when nothing can be extracted
- FastAPI web app and command line entry point

Quick Start:
    from pdf_converter import PDFConverter, ConversionOptions, SpreadsheetExporter

    converter = PDFConverter()
    result = converter.convert("statement.pdf", ConversionOptions(split_by_spaces=True))

    print(f"Mode: {result.mode.value}, rows: {result.total_rows}")
    SpreadsheetExporter().save(result.rows, result.output_file_name)

Web app:
    pdf-converter --serve --port 8002

Environment:
    PDF_CONVERTER_DATA_DIR, PDF_CONVERTER_MODES, PDF_CONVERTER_PREVIEW_ROWS, ...
    (see config.py)
"""

__version__ = "1.0.0"

from .converter import PDFConverter, file_info_rows
from .engine import PDFEngine
from .exporter import SpreadsheetExporter, output_file_name
from .preview import build_preview
from .service import ConversionService
from .config import ConverterConfig
from .splitter import split_by_spaces, split_lines, text_to_rows

from .models import (
    ExtractionMode,
    ConversionOptions,
    SourceFile,
    ModeAttempt,
    ConversionResult,
    Preview,
)

from .exceptions import (
    ConversionError,
    PDFError,
    PDFNotFoundError,
    PDFCorruptedError,
    InvalidFileTypeError,
    UploadError,
    FileTooLargeError,
    ConversionNotFoundError,
    EngineError,
    EngineUnavailableError,
    NoTablesFoundError,
    EmptyExtractionError,
    ExportError,
    format_error_chain,
)

__all__ = [
    "__version__",
    # Main classes
    "PDFConverter",
    "PDFEngine",
    "SpreadsheetExporter",
    "ConversionService",
    "ConverterConfig",
    # Helpers
    "file_info_rows",
    "output_file_name",
    "build_preview",
    "split_by_spaces",
    "split_lines",
    "text_to_rows",
    # Models
    "ExtractionMode",
    "ConversionOptions",
    "SourceFile",
    "ModeAttempt",
    "ConversionResult",
    "Preview",
    # Exceptions
    "ConversionError",
    "PDFError",
    "PDFNotFoundError",
    "PDFCorruptedError",
    "InvalidFileTypeError",
    "UploadError",
    "FileTooLargeError",
    "ConversionNotFoundError",
    "EngineError",
    "EngineUnavailableError",
    "NoTablesFoundError",
    "EmptyExtractionError",
    "ExportError",
    "format_error_chain",
]
