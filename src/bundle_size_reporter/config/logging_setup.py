from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from typing_extensions import override

# Loggers that report every watch poll; their INFO records are demoted to DEBUG.
WATCH_POLL_LOGGERS = ("apscheduler.scheduler", "apscheduler.executors.default")

_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class _DemoteInfoFilter(logging.Filter):
    def __init__(self, logger_names: tuple[str, ...]) -> None:
        super().__init__()
        self._logger_names = frozenset(logger_names)

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        if record.name in self._logger_names and record.levelno == logging.INFO:
            record.levelno = logging.DEBUG
            record.levelname = logging.getLevelName(logging.DEBUG)
        return True


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler(level: int) -> logging.Handler:
    # stdout carries the size report.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handler.setLevel(level)
    return handler


def _error_file_handler(error_log_path: Path) -> logging.Handler:
    handler = RotatingFileHandler(
        error_log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.setLevel(logging.WARNING)
    return handler


def configure_logging(level: str, error_log_path: Path) -> None:
    """Send diagnostics to stderr and WARNING+ records to a rotating error log."""
    error_log_path.parent.mkdir(parents=True, exist_ok=True)
    resolved_level = _resolve_level(level)

    root = logging.getLogger()
    root.setLevel(resolved_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(_console_handler(resolved_level))
    root.addHandler(_error_file_handler(error_log_path))

    demote = _DemoteInfoFilter(WATCH_POLL_LOGGERS)
    for logger_name in WATCH_POLL_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.filters.clear()
        logger.addFilter(demote)
