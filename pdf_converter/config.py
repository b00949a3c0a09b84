from dataclasses import dataclass, field
import os

from .models import ENGINE_MODES, ExtractionMode


def _default_modes() -> tuple[ExtractionMode, ...]:
    return ENGINE_MODES


@dataclass
class ConverterConfig:
    data_dir: str = "data/pdf_converter"
    host: str = "127.0.0.1"
    port: int = 8002
    preview_rows: int = 50
    sheet_name: str = "PDF Content"
    max_upload_mb: int = 50
    csv_delimiter: str = "\t"
    max_conversions: int = 20
    enabled_modes: tuple[ExtractionMode, ...] = field(default_factory=_default_modes)

    def __post_init__(self) -> None:
        if len(self.csv_delimiter) != 1:
            raise ValueError(
                f"CSV delimiter must be a single character, got {self.csv_delimiter!r}"
            )
        if self.max_conversions < 1:
            raise ValueError(f"max_conversions must be positive, got {self.max_conversions}")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _modes(name: str) -> tuple[ExtractionMode, ...]:
            value = os.environ.get(name)
            if value is None:
                return _default_modes()
            return tuple(
                ExtractionMode(part.strip().lower())
                for part in value.split(",")
                if part.strip()
            )

        def _delimiter(name: str) -> str:
            value = os.environ.get(name)
            if not value:
                return cls.csv_delimiter
            # A literal backslash-t means tab
            return "\t" if value == "\\t" else value

        return cls(
            data_dir=os.environ.get("PDF_CONVERTER_DATA_DIR", cls.data_dir),
            host=os.environ.get("PDF_CONVERTER_HOST", cls.host),
            port=_int("PDF_CONVERTER_PORT", cls.port),
            preview_rows=_int("PDF_CONVERTER_PREVIEW_ROWS", cls.preview_rows),
            sheet_name=os.environ.get("PDF_CONVERTER_SHEET_NAME", cls.sheet_name),
            max_upload_mb=_int("PDF_CONVERTER_MAX_UPLOAD_MB", cls.max_upload_mb),
            csv_delimiter=_delimiter("PDF_CONVERTER_CSV_DELIMITER"),
            max_conversions=_int("PDF_CONVERTER_MAX_CONVERSIONS", cls.max_conversions),
            enabled_modes=_modes("PDF_CONVERTER_MODES"),
        )
