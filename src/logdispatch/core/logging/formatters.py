# src/logdispatch/core/logging/formatters.py

"""
Line formatters used by the built-in handlers.

This module provides three formatters:

  - TextFormatter: the plain "LEVEL - timestamp --> message" line, suitable for
    files that humans read and grep.

  - ColorFormatter: the same line with an ANSI-colored level, intended for
    local development consoles.

  - JsonFormatter: one JSON object per line, suitable for ingestion by log
    collectors (ELK, Fluentd, CloudWatch, etc.).

A formatter receives a finished message: placeholder interpolation already
happened in the dispatcher. The timestamp is rendered by the handler with the
date format the dispatcher pushed to it via `set_date_format()`.

The console and file handlers write through standard-library handlers;
`RecordFormatter` plugs a line formatter into them as a `logging.Formatter`.

How to use:
  - Handlers pick a formatter by name from their config:

    {"console": {"handles": ["error", "critical"], "format": "color"}}

  - `get_formatter(name)` raises LoggerConfigurationError for unknown names so a
    typo fails when the handler is first built, not on every record.
"""

import json
import logging
from datetime import datetime
from typing import Any

from logdispatch.exceptions import LoggerConfigurationError


class TextFormatter:
    """Plain text line: ``ERROR - 2025-09-26 12:31:45 --> message``."""

    def format(self, level: str, message: str, timestamp: str) -> str:
        return f"{level.upper()} - {timestamp} --> {message}"


class ColorFormatter(TextFormatter):
    """
    Development-friendly colored formatter.

    Only the level text is colorized; the reset code after it keeps the color
    from spilling into the message or into the next lines of output.

    ANSI codes may not render in all consoles (e.g., Windows without ANSI
    support); use the "text" format there.
    """

    COLOR_CODES = {
        # Bold cyan text on white background
        "debug": "\033[1;36;47m",
        # Green text
        "info": "\033[32m",
        "notice": "\033[32m",
        # Yellow text
        "warning": "\033[33m",
        # Red text
        "error": "\033[31m",
        # Bold text on red background
        "critical": "\033[1;41m",
        "alert": "\033[1;41m",
        "emergency": "\033[1;41m",
    }
    RESET = "\033[0m"

    def format(self, level: str, message: str, timestamp: str) -> str:
        color = self.COLOR_CODES.get(level, "")
        return f"{color}{level.upper():<9}{self.RESET} - {timestamp} --> {message}"


class JsonFormatter:
    """
    Structured JSON formatter.

    Construction:
      - service: logical service name to include in every line.

    `json.dumps(..., default=str)` is a fallback so the formatter never raises on
    odd values; `ensure_ascii=False` keeps unicode readable.
    """

    def __init__(self, *, service: str | None = None):
        self.service = service

    def format(self, level: str, message: str, timestamp: str) -> str:
        log_record: dict[str, Any] = {
            "timestamp": timestamp,
            "level": level.upper(),
            "message": message,
            "service": self.service,
        }
        return json.dumps(log_record, ensure_ascii=False, default=str)


class RecordFormatter(logging.Formatter):
    """
    Adapter letting the standard-library handlers use a line formatter.

    The built-in handlers build a `LogRecord` carrying the severity name in
    `record.severity`; this class renders it with the wrapped line formatter.
    `datefmt` is a `datetime.strftime` format, so directives such as %f work.
    """

    def __init__(self, line_formatter, datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.line_formatter = line_formatter

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return datetime.fromtimestamp(record.created).strftime(datefmt or self.datefmt or "%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        return self.line_formatter.format(record.severity, record.getMessage(), self.formatTime(record))


FORMATTERS = {
    "text": TextFormatter,
    "color": ColorFormatter,
    "json": JsonFormatter,
}


def get_formatter(name: str, **kwargs: Any):
    """Build the formatter registered under `name`; only JsonFormatter takes kwargs."""
    try:
        formatter_cls = FORMATTERS[name]
    except KeyError:
        raise LoggerConfigurationError(f"Unknown log format '{name}'.", error_code="unknown_format") from None
    if formatter_cls is JsonFormatter:
        return formatter_cls(**kwargs)
    return formatter_cls()


__all__ = ["TextFormatter", "ColorFormatter", "JsonFormatter", "RecordFormatter", "FORMATTERS", "get_formatter"]
