"""Logging setup for the music catalog CLI.

Log records go to stderr so the rich tables printed on stdout stay
readable when piped. An optional rotating file keeps a plain-text copy.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional

CONSOLE_FORMAT = "%(asctime)s - %(location)-30s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(location)-30s - %(levelname)-8s - %(message)s"

# Libraries whose INFO output drowns the catalog's own messages
NOISY_LOGGERS = ("sqlalchemy", "urllib3", "requests")

SQL_LOGGER = "sqlalchemy.engine"


class LocationFormatter(logging.Formatter):
    """Formatter exposing ``file:line`` as the ``location`` field."""

    def format(self, record: Any) -> str:
        """Format log record with combined location field."""
        record.location = f"{record.filename}:{record.lineno}"
        return super().format(record)


class ColoredFormatter(LocationFormatter):
    """Console formatter coloring the level name."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: Any) -> str:
        """Format log record with a colored, padded level name."""
        levelname = record.levelname
        color = self.COLORS.get(levelname, self.RESET)
        record.levelname = f"{color}{levelname:<8}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(
    log_file: Path, max_file_size: int, backup_count: int
) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=max_file_size, backupCount=backup_count
    )
    handler.setFormatter(
        LocationFormatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )
    return handler


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[Path] = None,
    console_output: bool = True,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """Replace the root logger's handlers for one CLI run.

    Handlers accept every record; logger levels decide what is emitted.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a rotating log file
        console_output: Whether to log to stderr
        max_file_size: Maximum size of the log file before rotation
        backup_count: Number of rotated log files to keep
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if console_output:
        root_logger.addHandler(_console_handler())
    if log_file:
        root_logger.addHandler(_file_handler(log_file, max_file_size, backup_count))

    logger = logging.getLogger(__name__)
    logger.debug("Logging initialized - Level: %s", log_level)
    if log_file:
        logger.info("Log file: %s", log_file)


def configure_third_party_loggers(log_sql: bool = False) -> None:
    """Quiet library loggers below WARNING.

    Args:
        log_sql: Keep the SQL statements SQLAlchemy emits at INFO
    """
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if log_sql:
        logging.getLogger(SQL_LOGGER).setLevel(logging.INFO)
