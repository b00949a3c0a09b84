"""
PDF engine adapter.

Bundles the three engine operations the converter can fall back across:
table export to CSV, plain text extraction and whole-document conversion.
Each mode can be switched off; a disabled mode reports as unavailable and
raises EngineUnavailableError when called.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from .document_converter import DocumentConverter
from .exceptions import EngineUnavailableError
from .logging_config import get_logger
from .models import ENGINE_MODES, ExtractionMode
from .table_extractor import TableExtraction, TableExtractor
from .text_extractor import TextExtractor

logger = get_logger(__name__)


class PDFEngine:
    def __init__(
        self,
        enabled_modes: Optional[Iterable[ExtractionMode | str]] = None,
        text_extractor: Optional[TextExtractor] = None,
        table_extractor: Optional[TableExtractor] = None,
        document_converter: Optional[DocumentConverter] = None,
    ) -> None:
        modes = ENGINE_MODES if enabled_modes is None else enabled_modes
        self._modes = {ExtractionMode(mode) for mode in modes} & set(ENGINE_MODES)
        self.text_extractor = text_extractor or TextExtractor()
        self.table_extractor = table_extractor or TableExtractor()
        self.document_converter = document_converter or DocumentConverter()

    @property
    def available_modes(self) -> list[ExtractionMode]:
        return [mode for mode in ENGINE_MODES if mode in self._modes]

    def supports(self, mode: ExtractionMode | str) -> bool:
        return ExtractionMode(mode) in self._modes

    def is_ready(self) -> bool:
        return bool(self._modes)

    def _require(self, mode: ExtractionMode) -> None:
        if not self.supports(mode):
            raise EngineUnavailableError(mode.value)

    def extract_text(self, pdf_path: str | Path) -> str:
        self._require(ExtractionMode.TEXT)
        return self.text_extractor.extract(pdf_path)

    def tables_to_csv(
        self,
        pdf_path: str | Path,
        output_dir: str | Path,
        delimiter: str = "\t",
    ) -> TableExtraction:
        self._require(ExtractionMode.TABLES)
        return self.table_extractor.tables_to_csv(pdf_path, output_dir, delimiter=delimiter)

    def convert_document(self, pdf_path: str | Path, output_path: str | Path) -> Path:
        self._require(ExtractionMode.DOCUMENT)
        return self.document_converter.convert(pdf_path, output_path)
