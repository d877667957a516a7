"""Logging setup for Taskboard.

Every ``taskboard.*`` logger writes to one rotating file. ``taskboard serve``
and ``-v`` also echo to the console. Directory and level come from
``TaskboardConfig`` (and so from ``taskboard.yaml`` / ``TASKBOARD_*``).
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE = "taskboard.log"
MAX_BYTES = 5 * 1024 * 1024  # 5MB
BACKUP_COUNT = 3

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

BODY_LIMIT = 300


def setup_logging(
    log_dir: str | Path,
    level: str = "INFO",
    console: bool = False,
    log_file: str = LOG_FILE,
    max_bytes: int = MAX_BYTES,
    backup_count: int = BACKUP_COUNT,
) -> logging.Logger:
    """Point the ``taskboard`` logger at a rotating file (and optionally stderr).

    Calling it again replaces the previous handlers, closing their files, so
    the CLI and tests can reconfigure freely.

    Args:
        log_dir: Directory for the log file; created if missing.
        level: Level name. Unknown names fall back to INFO with a warning.
        console: Also log to stderr.
        log_file: File name inside ``log_dir``.
        max_bytes: Size at which the file is rotated.
        backup_count: Rotated files to keep.

    Returns:
        The ``taskboard`` logger.
    """
    log_level = logging.getLevelNamesMapping().get(level.upper())

    logger = logging.getLogger("taskboard")
    logger.setLevel(log_level if log_level is not None else logging.INFO)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path / log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_level is None:
        logger.warning("Unknown log level %r, using INFO", level)
    logger.debug("Logging to %s", log_path / log_file)
    return logger


def shorten_body(body: str, limit: int = BODY_LIMIT) -> str:
    """Squash an HTTP response body onto one line and cap its length.

    Used when a server's error page or JSON ends up in an exception message
    or log record.
    """
    text = " ".join(body.split())
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [{len(text) - limit} more chars]"
