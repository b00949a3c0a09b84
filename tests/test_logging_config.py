"""
Tests for logging setup.
"""

import logging

import pytest

from pdf_converter.logging_config import LOGGER_NAME, get_logger, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_loggers():
    yield
    for name in (LOGGER_NAME, "pdfminer"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


class TestResolveLevel:
    def test_names_and_numbers(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" WARNING ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_name_falls_back_to_info(self):
        assert resolve_level("chatty") == logging.INFO


class TestSetupLogging:
    def test_single_stdout_handler_after_repeat_calls(self):
        setup_logging("INFO")
        logger = setup_logging("DEBUG")
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "converter.log"
        setup_logging("INFO", log_file=log_file)
        get_logger("pdf_converter.converter").info("converted report.pdf")

        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()
        assert "converted report.pdf" in log_file.read_text(encoding="utf-8")

    def test_pdfminer_held_at_warning(self):
        setup_logging("DEBUG")
        assert logging.getLogger("pdfminer").level == logging.WARNING

    def test_quiet_can_be_disabled(self):
        logging.getLogger("pdfminer").setLevel(logging.NOTSET)
        setup_logging("DEBUG", quiet=())
        assert logging.getLogger("pdfminer").level == logging.NOTSET


class TestGetLogger:
    def test_package_module_name_kept(self):
        assert get_logger("pdf_converter.engine").name == "pdf_converter.engine"

    def test_other_names_nested(self):
        assert get_logger("scripts").name == "pdf_converter.scripts"
