# src/logdispatch/core/logging/handlers.py
"""
Built-in output handlers and the handler contract.

A handler is what actually sends a finished log line somewhere. The dispatcher
talks to handlers through three calls only:

  - can_handle(level)      -> bool     gate, checked before anything else
  - set_date_format(fmt)   -> handler  returns self so calls can be chained
  - handle(level, message) -> bool     True keeps the chain going, False stops it
                                       for this record

Every handler is built from one opaque config mapping. The keys shared by the
built-in handlers are:

  - "handles": list of severity names this handler accepts (default: all)
  - "format":  "text" | "color" | "json" (see formatters.py)

The console and file handlers delegate the actual I/O to `logging.StreamHandler`
and `logging.FileHandler`, with a `RecordFormatter` rendering the line.

`HANDLER_FACTORIES` maps handler identifiers (the keys of the logger's handler
configuration) to constructors; the registry resolves identifiers through it.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from .formatters import RecordFormatter, get_formatter
from .levels import LOG_LEVELS

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@runtime_checkable
class HandlerInterface(Protocol):
    def can_handle(self, level: str) -> bool: ...

    def set_date_format(self, date_format: str) -> "HandlerInterface": ...

    def handle(self, level: str, message: str) -> bool: ...


HandlerFactory = Callable[[Mapping[str, Any]], HandlerInterface]


class BaseHandler:
    """
    Shared plumbing for the built-in handlers: level gating and date formatting.

    Subclasses implement `handle()`.
    """

    def __init__(self, config: Mapping[str, Any] | None = None):
        config = config or {}
        self.handles: frozenset[str] = frozenset(config.get("handles", LOG_LEVELS.keys()))
        self.date_format = DEFAULT_DATE_FORMAT

    def can_handle(self, level: str) -> bool:
        return level in self.handles

    def set_date_format(self, date_format: str) -> "BaseHandler":
        self.date_format = date_format
        return self

    def handle(self, level: str, message: str) -> bool:
        raise NotImplementedError


# Severity -> standard-library level, used for records handed to logging handlers.
STDLIB_LEVELS: Mapping[str, int] = {
    "emergency": logging.CRITICAL,
    "alert": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "notice": logging.INFO,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def make_record(level: str, message: str) -> logging.LogRecord:
    """Build the LogRecord the stdlib-backed handlers emit for one finished line."""
    levelno = STDLIB_LEVELS[level]
    return logging.makeLogRecord({
        "name": "logdispatch",
        "levelno": levelno,
        "levelname": logging.getLevelName(levelno),
        "msg": message,
        "severity": level,
    })


class _RaisingMixin:
    # logging.Handler.handleError() prints and carries on; a failing sink must
    # reach the caller like any other handler fault.
    def handleError(self, record):
        raise


class _StreamHandler(_RaisingMixin, logging.StreamHandler):
    pass


class _FileHandler(_RaisingMixin, logging.FileHandler):
    pass


class ConsoleHandler(BaseHandler):
    """
    Write each line to a console stream through a `logging.StreamHandler`.

    Config:
      - "stream": "stderr" (default) or "stdout", or any object with write()/flush()
      - "format": "text" (default), "color" or "json"
      - "service": service name included by the json format
    """

    def __init__(self, config: Mapping[str, Any] | None = None):
        super().__init__(config)
        config = config or {}
        self.stream = config.get("stream", "stderr")
        self.formatter = RecordFormatter(
            get_formatter(config.get("format", "text"), service=config.get("service")),
            datefmt=self.date_format,
        )
        self._handler = _StreamHandler(self._resolve_stream())
        self._handler.setFormatter(self.formatter)

    def _resolve_stream(self):
        # Looked up per call so redirected sys.stdout/sys.stderr are honoured.
        if self.stream == "stdout":
            return sys.stdout
        if self.stream == "stderr":
            return sys.stderr
        return self.stream

    def set_date_format(self, date_format: str) -> "ConsoleHandler":
        super().set_date_format(date_format)
        self.formatter.datefmt = date_format
        return self

    def handle(self, level: str, message: str) -> bool:
        self._handler.setStream(self._resolve_stream())
        self._handler.handle(make_record(level, message))
        return True


class FileHandler(BaseHandler):
    """
    Append each line to a per-day file: ``<path>/log-YYYY-MM-DD.<ext>``.

    Writes go through a `logging.FileHandler` that is swapped for a new one
    when the date changes.

    Config:
      - "path": directory for log files (created on first write)
      - "file_extension": extension without the dot (default "log")
      - "file_permissions": mode applied when a file is created (default 0o644)
      - "format": "text" (default) or "json"
      - "service": service name included by the json format
    """

    def __init__(self, config: Mapping[str, Any] | None = None):
        super().__init__(config)
        config = config or {}
        self.path = Path(config.get("path", "logs"))
        self.file_extension = str(config.get("file_extension", "log")).lstrip(".") or "log"
        self.file_permissions = int(config.get("file_permissions", 0o644))
        self.formatter = RecordFormatter(
            get_formatter(config.get("format", "text"), service=config.get("service")),
            datefmt=self.date_format,
        )
        self._handler: logging.FileHandler | None = None
        self._lock = threading.Lock()

    def filepath(self, when: datetime | None = None) -> Path:
        when = when or datetime.now()
        return self.path / f"log-{when:%Y-%m-%d}.{self.file_extension}"

    def set_date_format(self, date_format: str) -> "FileHandler":
        super().set_date_format(date_format)
        self.formatter.datefmt = date_format
        return self

    def _open(self, filepath: Path) -> logging.FileHandler:
        self.path.mkdir(parents=True, exist_ok=True)
        new_file = not filepath.exists()
        handler = _FileHandler(filepath, mode="a", encoding="utf-8")
        if new_file:
            os.chmod(filepath, self.file_permissions)
        handler.setFormatter(self.formatter)
        return handler

    def handle(self, level: str, message: str) -> bool:
        filepath = self.filepath()

        with self._lock:
            if self._handler is None or self._handler.baseFilename != os.path.abspath(filepath):
                self.close()
                self._handler = self._open(filepath)
            self._handler.handle(make_record(level, message))
        return True

    def close(self) -> None:
        if self._handler is not None:
            self._handler.close()
            self._handler = None


class StdlibHandler(BaseHandler):
    """
    Forward lines to a standard-library `logging.Logger`.

    Useful when the host application already has logging handlers configured
    (dictConfig, uvicorn, pytest's caplog). Config:
      - "logger": logger name (default "logdispatch")
    """

    LEVEL_MAP = STDLIB_LEVELS

    def __init__(self, config: Mapping[str, Any] | None = None):
        super().__init__(config)
        config = config or {}
        self.logger = logging.getLogger(config.get("logger", "logdispatch"))

    def handle(self, level: str, message: str) -> bool:
        self.logger.log(self.LEVEL_MAP[level], message, extra={"severity": level})
        return True


HANDLER_FACTORIES: Mapping[str, HandlerFactory] = {
    "console": ConsoleHandler,
    "file": FileHandler,
    "logging": StdlibHandler,
}


__all__ = [
    "DEFAULT_DATE_FORMAT",
    "HandlerInterface",
    "HandlerFactory",
    "BaseHandler",
    "ConsoleHandler",
    "FileHandler",
    "StdlibHandler",
    "STDLIB_LEVELS",
    "make_record",
    "HANDLER_FACTORIES",
]
