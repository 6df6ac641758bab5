# src/logging/logger.py
"""Logger factory with JSON and text formatters.

Both formatters stamp records with the resource and operation of the cache
call that emitted them (see ``poscache.logging.context``).
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from poscache.logging.context import get_context

ROOT_LOGGER = "poscache"


def _created_at(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _traceback(formatter: logging.Formatter, record: logging.LogRecord) -> str | None:
    if record.exc_info and record.exc_info[1] is not None:
        return formatter.formatException(record.exc_info)
    return None


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _created_at(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context
        trace = _traceback(self, record)
        if trace:
            entry["exception"] = trace
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``<time> [LEVEL] logger [Resource] (operation) - message``"""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        head = f"{_created_at(record):%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
        if ctx.resource:
            head += f" [{ctx.resource}]"
        if ctx.operation:
            head += f" ({ctx.operation})"
        line = f"{head} - {record.getMessage()}"
        trace = _traceback(self, record)
        return f"{line}\n{trace}" if trace else line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger below the poscache root."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
    stream: IO[str] | None = None,
) -> None:
    """Install the console handler (and optionally a rotating file) on the poscache logger.

    Calling it again replaces the handlers it installed before.

    Args:
        level: LOG_LEVEL name; unknown names fall back to INFO.
        log_format: "json" or "text".
        log_file: Rotating log file, created with its parent directories.
        rotation: Size at which the file rolls ("10MB", "4096", "0" = never).
        retention: Rolled files kept next to the active one.
        stream: Console stream, stdout unless given.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        from poscache.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(log_file, rotation=rotation, retention=retention)
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
