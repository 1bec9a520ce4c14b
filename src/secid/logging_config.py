"""
Log handler setup for the ``secid`` package.

Modules only ever call ``logging.getLogger(__name__)``. Nothing is printed
until an application (or the ``secid`` command) calls setup_logging(), which
attaches one handler to the ``secid`` logger and leaves the root logger alone.

Two output styles:
- JSON lines, one object per record, for log shippers
- a compact coloured line for terminals

Usage:
    from secid.logging_config import setup_logging

    setup_logging(level="DEBUG", json_format=True)
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any

PACKAGE_LOGGER = "secid"

# LogRecord attributes that are not user-supplied ``extra=`` fields
_SKIP_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
})

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _SKIP_ATTRS and not key.startswith("_")
    }


def _json_safe(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JSONFormatter(logging.Formatter):
    """
    Render each record as a single JSON object.

    Keys: ``timestamp`` (UTC, ISO 8601, taken from the record), ``level``,
    ``logger`` and ``message``; ``source`` for WARNING and above;
    ``exception`` when the record carries exc_info; then every ``extra=``
    field, stringified when it is not JSON-serializable.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record).items():
            entry[key] = _json_safe(value)
        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """
    One readable line per record, extras appended as ``key=value``::

        2024-01-15 10:30:00 DEBUG    [secid.registry] Registered format 'isin' (generation 1)
    """

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors and level in _LEVEL_COLORS:
            level = f"{_LEVEL_COLORS[level]}{level}{_RESET}"

        line = (
            f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')} {level:8} "
            f"[{record.name}] {record.getMessage()}"
        )
        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{key}={value}" for key, value in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = "WARNING",
    json_format: bool = False,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """
    Attach a handler to the ``secid`` logger.

    Calling it again swaps the previous handler out, so the level and format
    can be changed at runtime.

    Args:
        level: DEBUG, INFO, WARNING or ERROR (case-insensitive)
        json_format: Emit JSON lines instead of the terminal format
        stream: Where to write; stderr by default so stdout stays clean

    Returns:
        The ``secid`` logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level.upper())
    for existing in package_logger.handlers[:]:
        package_logger.removeHandler(existing)

    target = sys.stderr if stream is None else stream
    handler = logging.StreamHandler(target)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter(use_colors=target.isatty()))
    package_logger.addHandler(handler)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``; use ``__name__`` so it sits under ``secid``."""
    return logging.getLogger(name)
