"""
Tests for environment-based configuration.
"""

import pytest

from pdf_converter import ConverterConfig, ExtractionMode


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "PDF_CONVERTER_DATA_DIR",
        "PDF_CONVERTER_HOST",
        "PDF_CONVERTER_PORT",
        "PDF_CONVERTER_PREVIEW_ROWS",
        "PDF_CONVERTER_SHEET_NAME",
        "PDF_CONVERTER_MAX_UPLOAD_MB",
        "PDF_CONVERTER_CSV_DELIMITER",
        "PDF_CONVERTER_MODES",
        "PDF_CONVERTER_MAX_CONVERSIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConverterConfig:
    def test_defaults(self, clean_env):
        config = ConverterConfig.from_env()
        assert config.port == 8002
        assert config.preview_rows == 50
        assert config.sheet_name == "PDF Content"
        assert config.csv_delimiter == "\t"
        assert config.enabled_modes == (
            ExtractionMode.TABLES,
            ExtractionMode.TEXT,
            ExtractionMode.DOCUMENT,
        )

    def test_max_upload_bytes(self):
        assert ConverterConfig(max_upload_mb=2).max_upload_bytes == 2 * 1024 * 1024

    def test_overrides(self, clean_env):
        clean_env.setenv("PDF_CONVERTER_DATA_DIR", "/tmp/conversions")
        clean_env.setenv("PDF_CONVERTER_PORT", "9000")
        clean_env.setenv("PDF_CONVERTER_PREVIEW_ROWS", "20")
        clean_env.setenv("PDF_CONVERTER_CSV_DELIMITER", ";")
        config = ConverterConfig.from_env()
        assert config.data_dir == "/tmp/conversions"
        assert config.port == 9000
        assert config.preview_rows == 20
        assert config.csv_delimiter == ";"

    def test_modes_list(self, clean_env):
        clean_env.setenv("PDF_CONVERTER_MODES", " Text, document ")
        config = ConverterConfig.from_env()
        assert config.enabled_modes == (ExtractionMode.TEXT, ExtractionMode.DOCUMENT)

    def test_empty_modes_disables_engine(self, clean_env):
        clean_env.setenv("PDF_CONVERTER_MODES", "")
        assert ConverterConfig.from_env().enabled_modes == ()

    def test_literal_tab_delimiter(self, clean_env):
        clean_env.setenv("PDF_CONVERTER_CSV_DELIMITER", "\\t")
        assert ConverterConfig.from_env().csv_delimiter == "\t"

    def test_multi_character_delimiter_rejected(self, clean_env):
        clean_env.setenv("PDF_CONVERTER_CSV_DELIMITER", ";;")
        with pytest.raises(ValueError, match="single character"):
            ConverterConfig.from_env()

    def test_invalid_values_rejected_directly(self):
        with pytest.raises(ValueError):
            ConverterConfig(csv_delimiter="")
        with pytest.raises(ValueError):
            ConverterConfig(max_conversions=0)

    def test_max_conversions(self, clean_env):
        clean_env.setenv("PDF_CONVERTER_MAX_CONVERSIONS", "5")
        assert ConverterConfig.from_env().max_conversions == 5

    def test_unknown_mode_rejected(self, clean_env):
        clean_env.setenv("PDF_CONVERTER_MODES", "ocr")
        with pytest.raises(ValueError):
            ConverterConfig.from_env()
