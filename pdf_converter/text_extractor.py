"""
Text-native PDF extraction.

Extracts selectable text from PDFs via PyMuPDF. Whitespace inside lines is
left untouched so that column gaps survive for the space splitter.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF

from .exceptions import EngineError, PDFCorruptedError, PDFNotFoundError
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class PageText:
    page_number: int
    text: str


class TextExtractor:
    def __init__(self, sort: bool = True) -> None:
        self.sort = sort

    def extract_pages(self, pdf_path: str | Path) -> list[PageText]:
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise PDFNotFoundError(str(pdf_path))

        try:
            doc = fitz.open(pdf_path)
        except (RuntimeError, ValueError) as exc:
            raise PDFCorruptedError(str(pdf_path), exc) from exc

        with doc:
            try:
                pages = [
                    PageText(page_number=index + 1, text=page.get_text("text", sort=self.sort))
                    for index, page in enumerate(doc)
                ]
            except RuntimeError as exc:
                raise EngineError("Text extraction failed", mode="text", original_error=exc) from exc

        logger.debug("Extracted text from %d pages of %s", len(pages), pdf_path.name)
        return pages

    def extract(self, pdf_path: str | Path) -> str:
        pages = self.extract_pages(pdf_path)
        return "\n".join(self._clean_text(page.text) for page in pages).strip("\n")

    @staticmethod
    def _clean_text(text: str) -> str:
        if not text:
            return ""
        # Form feeds and CR line endings would otherwise end up inside cells
        return text.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")
