"""Logging helpers for patientflow.

Modules log through ``logging.getLogger(__name__)`` under the ``patientflow``
logger and install no handlers themselves. Use these helpers to turn output
on:

    from patientflow.logging_config import enable_console_logging
    enable_console_logging(level="DEBUG")

Environment variables read by ``configure_from_env``:
    PF_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    PF_LOG_FILE: Path to log file (enables rotating file logging)
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5

LOGGER_NAME = "patientflow"

# Silent until one of the enable_* helpers is called
logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def _get_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def enable_console_logging(level: str | int = "INFO", format: str = DEFAULT_FORMAT) -> logging.StreamHandler:
    """Log to stderr at ``level``. Returns the created handler."""
    logger = _get_logger()
    logger.setLevel(_get_level(level))

    handler = logging.StreamHandler()
    handler.setLevel(_get_level(level))
    handler.setFormatter(logging.Formatter(format, DEFAULT_DATE_FORMAT))

    logger.addHandler(handler)
    return handler


def enable_file_logging(
    path: str | Path,
    level: str | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> RotatingFileHandler:
    """Log to a rotating file. Parent directories are created as needed."""
    logger = _get_logger()
    logger.setLevel(_get_level(level))

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setLevel(_get_level(level))
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT))

    logger.addHandler(handler)
    return handler


def configure_from_env() -> None:
    """Configure logging from PF_LOGGING / PF_LOG_FILE. Does nothing if neither is set."""
    level = os.environ.get("PF_LOGGING", "").upper()
    log_file = os.environ.get("PF_LOG_FILE", "")

    if not level and not log_file:
        return

    level = level or "INFO"
    if log_file:
        enable_file_logging(log_file, level=level)
    else:
        enable_console_logging(level=level)


def set_level(level: str | int) -> None:
    _get_logger().setLevel(_get_level(level))


def disable_logging() -> None:
    """Remove all handlers and silence the patientflow logger."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
