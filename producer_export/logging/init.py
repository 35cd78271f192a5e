from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Labeled stdout logging for producer-export.

Each line is ``<LABEL> <message>`` where LABEL is one of
INFO|WARN|ERROR|SUMMARY (DEBUG with --debug). Module loggers obtained with
``logging.getLogger(__name__)`` are children of ``producer_export`` and reach
stdout through its single handler. Per-record failures are also kept as JSON
Lines by ``producer_export.logging.error_log``.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "set_debug",
    "reset_logging",
]

LOGGER_NAME = "producer_export"

# INFO(20) と WARNING(30) の間
SUMMARY_LEVEL = 25

LABELS: dict[int, str] = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Render ``<LABEL> <message>``; tracebacks follow on the next lines."""

    def format(self, record: logging.LogRecord) -> str:
        text = f"{LABELS.get(record.levelno, record.levelname)} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled handler to the ``producer_export`` logger.

    Calling it again returns the already configured logger unchanged.
    ``stream`` defaults to the current ``sys.stdout``.
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    _drop_handlers(logger)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    # root へ伝播させない (二重出力防止)
    logger.propagate = False

    _logger = logger
    _apply_level(logger, level)
    return logger


def _drop_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _apply_level(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def set_debug(enabled: bool = True) -> None:
    """Switch output to DEBUG (or back to INFO)."""
    _apply_level(get_logger(), logging.DEBUG if enabled else logging.INFO)


def log_summary(message: str) -> None:
    """Emit ``message`` at SUMMARY level; the label is added by the formatter."""
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger and detach its handler (used between tests)."""
    global _logger
    _drop_handlers(logging.getLogger(LOGGER_NAME))
    _logger = None
