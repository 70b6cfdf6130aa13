"""Logging configuration for career-watch.

Every module logs through ``logging.getLogger(__name__)``, which places it
under the ``careerwatch`` logger configured here. Console output goes to
stderr so ``--json`` payloads on stdout stay parseable. Scheduled refreshes
can add a log file through the ``LOG_FILE`` setting.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOGGER_NAME = "careerwatch"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str | None) -> int:
    resolved = logging.getLevelName((level or "INFO").upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    level: str | None = None,
    log_file: Path | str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the ``careerwatch`` logger.

    Calling it again replaces the previous handlers, so the console handler
    is never stacked.

    Args:
        level: Log level name. Unknown names and None fall back to INFO.
        log_file: Optional file that receives the same records as stderr.
            Missing parent directories are created.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    log_level = _resolve_level(level)
    logger.setLevel(log_level)
    _drop_handlers(logger)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    formatter = logging.Formatter(format_string, datefmt=date_format)
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get ``careerwatch.<name>``, for code whose ``__name__`` is ``__main__``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Close handlers and restore the default logger state (for tests)."""
    logger = logging.getLogger(LOGGER_NAME)
    _drop_handlers(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
