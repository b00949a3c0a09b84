from __future__ import annotations

import uuid
from collections import OrderedDict
from pathlib import Path
from typing import Any, Optional

from .config import ConverterConfig
from .converter import PDFConverter
from .engine import PDFEngine
from .exceptions import (
    ConversionNotFoundError,
    EngineUnavailableError,
    FileTooLargeError,
    InvalidFileTypeError,
)
from .exporter import SpreadsheetExporter
from .logging_config import get_logger
from .models import PDF_CONTENT_TYPE, ConversionOptions, ConversionResult, Preview, SourceFile
from .preview import build_preview
from .storage import ConversionStorage

logger = get_logger(__name__)


class ConversionService:
    """
    Upload -> convert -> preview -> download lifecycle.

    Results are kept in memory and in the data directory until discarded, so
    a download still works after a restart. Only the most recent
    `config.max_conversions` results are kept; older ones are released.
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        engine: Optional[PDFEngine] = None,
    ):
        self.config = config or ConverterConfig()
        self.engine = engine or PDFEngine(enabled_modes=self.config.enabled_modes)
        self.converter = PDFConverter(engine=self.engine)
        self.exporter = SpreadsheetExporter(sheet_name=self.config.sheet_name)
        self.storage = ConversionStorage(self.config.data_dir)
        self._results: OrderedDict[str, ConversionResult] = OrderedDict()

    def status(self) -> dict[str, Any]:
        return {
            "ready": self.engine.is_ready(),
            "modes": self.engine.available_modes,
            "preview_rows": self.config.preview_rows,
            "max_upload_mb": self.config.max_upload_mb,
        }

    def validate_upload(self, data: bytes, file_name: str, content_type: Optional[str]) -> None:
        is_pdf_type = (content_type or "").split(";")[0].strip().lower() == PDF_CONTENT_TYPE
        is_pdf_name = Path(file_name or "").suffix.lower() == ".pdf"
        if not (is_pdf_type or is_pdf_name):
            raise InvalidFileTypeError(path=file_name, content_type=content_type)
        if not data:
            raise InvalidFileTypeError("The selected file is empty", path=file_name)
        if len(data) > self.config.max_upload_bytes:
            raise FileTooLargeError(len(data), self.config.max_upload_bytes)

    def convert_upload(
        self,
        data: bytes,
        file_name: str,
        content_type: Optional[str] = PDF_CONTENT_TYPE,
        options: Optional[ConversionOptions] = None,
    ) -> ConversionResult:
        if not self.engine.is_ready():
            raise EngineUnavailableError()
        self.validate_upload(data, file_name, content_type)

        source = SourceFile(
            name=Path(file_name or "document.pdf").name,
            size_bytes=len(data),
            content_type=content_type or PDF_CONTENT_TYPE,
        )
        paths = self.storage.build_paths(source.name, uuid.uuid4().hex)
        upload_path = self.storage.save_upload(paths, data)
        source.path = str(upload_path)

        result = self.converter.convert(upload_path, options, source=source, work_dir=paths.work_dir)
        result.conversion_id = paths.conversion_id
        self.storage.save(paths, result)
        self._remember(result)
        return result

    def convert_file(
        self,
        pdf_path: str,
        options: Optional[ConversionOptions] = None,
    ) -> ConversionResult:
        """Convert a PDF on disk; nothing is copied into the data directory."""
        if not self.engine.is_ready():
            raise EngineUnavailableError()
        result = self.converter.convert(pdf_path, options)
        self._remember(result)
        return result

    def get(self, conversion_id: str) -> ConversionResult:
        result = self._results.get(conversion_id)
        if result is None:
            result = self.storage.load(conversion_id)
            if result is None:
                raise ConversionNotFoundError(conversion_id)
            self._remember(result)
        else:
            self._results.move_to_end(conversion_id)
        return result

    def preview(self, conversion_id: str, limit: Optional[int] = None) -> Preview:
        result = self.get(conversion_id)
        return build_preview(result.rows, limit or self.config.preview_rows)

    def export(self, conversion_id: str) -> tuple[bytes, str]:
        result = self.get(conversion_id)
        info = result.info_rows() if result.options.include_info_sheet else None
        data = self.exporter.to_bytes(result.rows, info)
        logger.info("Exported %s (%d rows)", result.output_file_name, result.total_rows)
        return data, result.output_file_name

    def export_to_path(self, result: ConversionResult, output_path: str | Path) -> Path:
        info = result.info_rows() if result.options.include_info_sheet else None
        return self.exporter.save(result.rows, output_path, info)

    def discard(self, conversion_id: str) -> None:
        in_memory = self._results.pop(conversion_id, None) is not None
        on_disk = self.storage.delete(conversion_id)
        if not (in_memory or on_disk):
            raise ConversionNotFoundError(conversion_id)
        logger.info("Discarded conversion %s", conversion_id)

    def _remember(self, result: ConversionResult) -> None:
        self._results[result.conversion_id] = result
        self._results.move_to_end(result.conversion_id)
        while len(self._results) > self.config.max_conversions:
            evicted_id, _ = self._results.popitem(last=False)
            self.storage.delete(evicted_id)
            logger.info("Released conversion %s", evicted_id)
