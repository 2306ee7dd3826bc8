"""Logging setup for the BUMBA CLI.

Log records from every ``bumba.*`` logger are written to stderr, so command
output on stdout stays machine-readable (``--json``). A rotating log file
can be added with ``--log-file``.

Format:
    [TIMESTAMP] [LEVEL] [COMPONENT] Message

Example:
    [2026-10-18 10:15:32] [DEBUG] [ANALYZER] Intent analysis: intent=build, ...
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO


# =============================================================================
# Constants
# =============================================================================

# Root of the package logger hierarchy
BUMBA_LOGGER_NAME = "bumba"

# Max log file size (10MB)
CLI_LOG_MAX_BYTES = 10 * 1024 * 1024

# Number of backup files to keep
CLI_LOG_BACKUP_COUNT = 5

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


# =============================================================================
# Formatter
# =============================================================================


class BumbaLogFormatter(logging.Formatter):
    """Log formatter that tags each line with the emitting component.

    The component defaults to the last part of the logger name, upper-cased
    (``bumba.routing.analyzer`` -> ``ANALYZER``). Pass ``extra={"component":
    ...}`` to override it.
    """

    STANDARD_FORMAT = "[%(asctime)s] [%(levelname)s] [%(component)s] %(message)s"

    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self) -> None:
        super().__init__(fmt=self.STANDARD_FORMAT, datefmt=self.DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1].upper()
        return super().format(record)


# =============================================================================
# Setup
# =============================================================================


def resolve_level(level: str | int) -> int:
    """Turn a level name or number into a logging level."""
    if isinstance(level, int):
        return level
    return LOG_LEVELS.get(level.upper(), logging.INFO)


def setup_cli_logging(
    level: str | int = logging.WARNING,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
    max_bytes: int = CLI_LOG_MAX_BYTES,
    backup_count: int = CLI_LOG_BACKUP_COUNT,
) -> logging.Logger:
    """Configure the ``bumba`` logger for CLI use.

    Calling it again replaces the handlers installed by the previous call,
    so repeated CLI invocations in one process do not duplicate output.

    Args:
        level: Logging level or level name.
        log_file: Optional path of a rotating log file.
        stream: Stream for console output (defaults to stderr).
        max_bytes: Max size of the log file before rotation.
        backup_count: Number of rotated files to keep.

    Returns:
        The configured ``bumba`` logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger(BUMBA_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = BumbaLogFormatter()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


__all__ = [
    "BumbaLogFormatter",
    "setup_cli_logging",
    "resolve_level",
    "BUMBA_LOGGER_NAME",
    "LOG_LEVELS",
]
