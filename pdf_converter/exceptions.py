"""
Custom Exceptions for PDF to Excel conversion.

Exception Hierarchy:
    ConversionError (base)
    ├── PDFError
    │   ├── PDFNotFoundError
    │   ├── PDFCorruptedError
    │   └── InvalidFileTypeError
    ├── UploadError
    │   ├── FileTooLargeError
    │   └── ConversionNotFoundError
    ├── EngineError
    │   ├── EngineUnavailableError
    │   ├── NoTablesFoundError
    │   └── EmptyExtractionError
    └── ExportError

Usage:
    from pdf_converter.exceptions import ConversionError, PDFNotFoundError

    try:
        result = converter.convert("document.pdf")
    except PDFNotFoundError as e:
        print(f"File not found: {e.path}")
    except ConversionError as e:
        print(f"Conversion failed: {e}")
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class ConversionError(Exception):
    """
    Base exception for all conversion-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A conversion error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# PDF ERRORS
# =============================================================================


class PDFError(ConversionError):
    """Base class for errors about the input file itself."""

    def __init__(
        self,
        message: str = "PDF error",
        path: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.path = path
        if path:
            message = f"{message} [{path}]"
        super().__init__(message, details)


class PDFNotFoundError(PDFError):
    """Raised when the PDF file cannot be found."""

    def __init__(self, path: str):
        super().__init__(
            message=f"PDF file not found: {path}",
            path=path,
        )


class PDFCorruptedError(PDFError):
    """
    Raised when the PDF file is corrupted or cannot be opened.

    Attributes:
        path: Path to the corrupted file
        original_error: The underlying error from the PDF library
    """

    def __init__(
        self,
        path: str,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(
            message=f"PDF file is corrupted or unreadable: {path}",
            path=path,
            details=details,
        )


class InvalidFileTypeError(PDFError):
    """Raised when the selected file is not a PDF."""

    def __init__(
        self,
        message: str = "Please select a PDF file",
        path: Optional[str] = None,
        content_type: Optional[str] = None,
    ):
        self.content_type = content_type
        details = f"content type: {content_type}" if content_type else None
        super().__init__(message, path=path, details=details)


# =============================================================================
# UPLOAD ERRORS
# =============================================================================


class UploadError(ConversionError):
    """Base class for errors in the upload/download lifecycle."""

    pass


class FileTooLargeError(UploadError):
    """
    Raised when an uploaded file exceeds the configured size limit.

    Attributes:
        size_bytes: Size of the rejected upload
        limit_bytes: Configured maximum
    """

    def __init__(self, size_bytes: int, limit_bytes: int):
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"File is too large ({size_bytes / 1024 / 1024:.1f} MB, "
            f"limit {limit_bytes / 1024 / 1024:.0f} MB)"
        )


class ConversionNotFoundError(UploadError):
    """Raised when a conversion id is unknown or was discarded."""

    def __init__(self, conversion_id: str):
        self.conversion_id = conversion_id
        super().__init__(f"Conversion not found: {conversion_id}")


# =============================================================================
# ENGINE ERRORS
# =============================================================================


class EngineError(ConversionError):
    """
    Base class for failures inside one extraction mode.

    Attributes:
        mode: The extraction mode that failed (e.g. "tables")
        original_error: The underlying library exception
    """

    def __init__(
        self,
        message: str = "PDF engine error",
        mode: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.mode = mode
        self.original_error = original_error
        if mode:
            message = f"{message} (mode: {mode})"
        details = str(original_error) if original_error else None
        super().__init__(message, details)


class EngineUnavailableError(EngineError):
    """Raised when a mode is disabled or the engine has no usable mode."""

    def __init__(self, mode: Optional[str] = None):
        if mode:
            message = f"PDF engine mode is not available: {mode}"
        else:
            message = "PDF library is still loading. Please wait a moment and try again."
        super().__init__(message)
        self.mode = mode


class NoTablesFoundError(EngineError):
    """Raised when table detection finds no tables in the document."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        message = "No tables found"
        if path:
            message = f"{message} in {path}"
        super().__init__(message, mode="tables")


class EmptyExtractionError(EngineError):
    """Raised when a mode ran but produced no rows."""

    def __init__(self, mode: str):
        super().__init__("Extraction produced no content", mode=mode)


# =============================================================================
# EXPORT ERRORS
# =============================================================================


class ExportError(ConversionError):
    """Raised when the spreadsheet cannot be written."""

    def __init__(
        self,
        message: str = "Failed to write spreadsheet",
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__(message, details)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def format_error_chain(error: Exception) -> str:
    """
    Format an exception and its chain for logging.

    Returns a multi-line string showing the error hierarchy.
    """
    lines = []
    current = error
    depth = 0

    while current is not None:
        prefix = "  " * depth + ("└─ " if depth > 0 else "")
        lines.append(f"{prefix}{type(current).__name__}: {current}")

        if getattr(current, "original_error", None):
            current = current.original_error
            depth += 1
        elif current.__cause__:
            current = current.__cause__
            depth += 1
        else:
            break

    return "\n".join(lines)
