# src/logdispatch/core/logging/dispatcher.py
"""
The leveled logger: filter, interpolate and dispatch records to a handler chain.

The message may contain placeholders in the form {foo}, where foo is replaced
by the context entry under key "foo". If an exception is passed to produce its
location, it must be under the key "exception".

Per call to `Logger.log()`:
  1. normalize the level (name or numeric rank); unknown -> InvalidLevelError
  2. drop records whose level is not loggable (returns False, not an error)
  3. interpolate placeholders; non-text results are rendered with pformat
  4. append to the in-memory record cache when `cache_logs` is on
  5. hand the record to the external reporter, if any (failures swallowed)
  6. walk the handlers in configuration order; a handler whose `handle()`
     returns False stops the chain for this record only
  7. return True

Handlers are created lazily by the registry. A handler that raises is not
isolated: the exception reaches the caller and the rest of the chain is skipped.
"""

import logging
import threading
from pprint import pformat
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from logdispatch.exceptions import LoggerConfigurationError

from .context import RuntimeProvider, RuntimeSource
from .handlers import DEFAULT_DATE_FORMAT
from .interpolate import PathMarkers, interpolate
from .levels import expand_threshold, normalize_level
from .registry import HandlerRegistry
from .reporting import ExternalReporter, map_severity

logger = logging.getLogger(__name__)


class LoggerConfig(BaseModel):
    """
    Logger configuration.

    - threshold: a single maximum rank (4 -> emergency..error) or an explicit
      list of ranks and/or level names
    - date_format: strftime format pushed to every handler before it handles a record
    - handlers: ordered mapping of handler identifier -> handler config; the order
      is the chain order
    - cache_logs: keep every dispatched (level, message) in memory (debug aid)
    """

    model_config = ConfigDict(frozen=True)

    threshold: int | list[int | str] = 4
    date_format: str = DEFAULT_DATE_FORMAT
    handlers: dict[str, Any] = Field(default_factory=dict)
    cache_logs: bool = False


class LogEntry(NamedTuple):
    level: str
    message: str


class Logger:
    def __init__(
        self,
        config: LoggerConfig,
        *,
        registry: HandlerRegistry | None = None,
        reporter: ExternalReporter | None = None,
        runtime: RuntimeSource | None = None,
        paths: PathMarkers | None = None,
    ):
        self._loggable_levels = expand_threshold(config.threshold)
        self.date_format = config.date_format

        if not config.handlers:
            raise LoggerConfigurationError.for_no_handlers("LoggerConfig")

        # Save the handler configuration for later.
        # Instances will be created on demand.
        self._registry = registry or HandlerRegistry()
        self._factories = self._registry.resolve(config.handlers)
        self._handler_config: Mapping[str, Any] = MappingProxyType(dict(config.handlers))

        self.cache_logs = config.cache_logs
        self._cache: list[LogEntry] = []
        self._cache_lock = threading.Lock()

        self._reporter = reporter
        self._runtime = runtime or RuntimeProvider("development")
        self._paths = paths

    @property
    def loggable_levels(self) -> frozenset[str]:
        return self._loggable_levels

    @property
    def log_cache(self) -> list[LogEntry]:
        """Copy of the cached records, oldest first. Empty unless cache_logs is on."""
        with self._cache_lock:
            return list(self._cache)

    def reset_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    # ------------------------------------------------------------------

    def emergency(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """System is unusable."""
        return self.log("emergency", message, context)

    def alert(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """
        Action must be taken immediately.

        Example: Entire website down, database unavailable, etc. This should
        trigger the SMS alerts and wake you up.
        """
        return self.log("alert", message, context)

    def critical(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """
        Critical conditions.

        Example: Application component unavailable, unexpected exception.
        """
        return self.log("critical", message, context)

    def error(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """
        Runtime errors that do not require immediate action but should typically
        be logged and monitored.
        """
        return self.log("error", message, context)

    def warning(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """
        Exceptional occurrences that are not errors.

        Example: Use of deprecated APIs, poor use of an API, undesirable things
        that are not necessarily wrong.
        """
        return self.log("warning", message, context)

    def notice(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """Normal but significant events."""
        return self.log("notice", message, context)

    def info(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """
        Interesting events.

        Example: User logs in, SQL logs.
        """
        return self.log("info", message, context)

    def debug(self, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """Detailed debug information."""
        return self.log("debug", message, context)

    # ------------------------------------------------------------------

    def log(self, level: str | int, message: Any, context: Mapping[str, Any] | None = None) -> bool:
        """
        Log with an arbitrary level.

        Returns:
            True when the record went through the handler chain, False when the
            threshold suppressed it.

        Raises:
            InvalidLevelError: `level` is not one of the eight severities (or their ranks).
        """
        level = normalize_level(level)

        # Does the app want to log this right now?
        if level not in self._loggable_levels:
            return False

        message = interpolate(message, context, self._runtime(), paths=self._paths)
        if not isinstance(message, str):
            message = pformat(message)

        if self.cache_logs:
            with self._cache_lock:
                self._cache.append(LogEntry(level, message))

        if self._reporter is not None:
            self._report(level, message)

        for handler_id, handler_config in self._handler_config.items():
            handler = self._registry.get(handler_id, self._factories[handler_id], handler_config)

            if not handler.can_handle(level):
                continue

            # If the handler returns False, then we
            # don't execute any other handlers.
            if not handler.set_date_format(self.date_format).handle(level, message):
                break

        return True

    def _report(self, level: str, message: str) -> None:
        try:
            self._reporter.capture(map_severity(level), message)
        except Exception:
            # Reporting is best-effort and must never fail the primary dispatch.
            logger.debug("External reporter failed for a %s record", level, exc_info=True)


__all__ = ["LoggerConfig", "LogEntry", "Logger"]
