"""
Logging setup shared by the converter, the web app and the CLI.

Everything logs below the ``pdf_converter`` logger. pdfplumber's pdfminer
backend is very chatty at DEBUG, so its loggers are held at WARNING unless
asked otherwise.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

LOGGER_NAME = "pdf_converter"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOISY_LIBRARIES = ("pdfminer", "multipart", "python_multipart")


def resolve_level(level: Union[int, str]) -> int:
    """Accept 10, "debug" or "DEBUG"; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    quiet: Iterable[str] = NOISY_LIBRARIES,
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        level: Level for the application logger (int or level name)
        log_file: Optional file that receives the same records as stdout
        format_string: Optional custom format string
        quiet: Third-party loggers to hold at WARNING

    Returns:
        The ``pdf_converter`` logger
    """
    level = resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a module.

    Names already inside the package (``pdf_converter.engine``) are used
    as-is; anything else is nested under the application logger.
    """
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
