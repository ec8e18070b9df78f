# src/logdispatch/core/logging/builder.py
"""
Logger builder: create a `Logger` from Settings.

This module:
 - builds a `LoggerConfig` from Settings, filling file-handler defaults
   (directory, extension, permissions) and the line format for every handler
   that does not set its own
 - wires the runtime snapshot (environment name + request context) and the
   path markers used to sanitize file names
 - initializes Sentry once, when SENTRY_DSN is set and no reporter is given
 - exposes a cached process-wide logger (`get_logger`) and `log_message()` for
   code that does not want to carry a logger instance around.

Configuration knobs (on your Settings object):
 - LOG_THRESHOLD, LOG_DATE_FORMAT, LOG_HANDLERS, LOG_CACHE
 - LOG_DIR, LOG_FILE_EXTENSION, LOG_FILE_PERMISSIONS, LOG_FORMAT, LOG_SERVICE_NAME
 - APP_PATH, SYSTEM_PATH, PUBLIC_PATH, ENV, SENTRY_DSN
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping

# Settings type (avoid calling get_settings() at import time to prevent side effects)
from logdispatch.config.settings import Settings, get_settings

from .context import RuntimeProvider, RuntimeSource
from .dispatcher import Logger, LoggerConfig
from .interpolate import PathMarkers
from .registry import HandlerRegistry
from .reporting import ExternalReporter, init_sentry

logger = logging.getLogger(__name__)


def make_handler_config(settings: Settings) -> dict[str, dict[str, Any]]:
    """
    Return the ordered handler configuration with settings-level defaults applied.

    Explicit keys in LOG_HANDLERS always win over the defaults.
    """
    handlers: dict[str, dict[str, Any]] = {}
    for handler_id, config in settings.LOG_HANDLERS.items():
        defaults: dict[str, Any] = {"service": settings.LOG_SERVICE_NAME}
        if handler_id == "file":
            defaults.update(
                path=settings.LOG_DIR,
                file_extension=settings.LOG_FILE_EXTENSION,
                file_permissions=settings.LOG_FILE_PERMISSIONS,
                # color codes do not belong in files
                format="text" if settings.LOG_FORMAT == "color" else settings.LOG_FORMAT,
            )
        elif handler_id == "console":
            defaults["format"] = settings.LOG_FORMAT
        handlers[handler_id] = {**defaults, **(config or {})}
    return handlers


def make_logger_config(settings: Settings) -> LoggerConfig:
    return LoggerConfig(
        threshold=settings.LOG_THRESHOLD,
        date_format=settings.LOG_DATE_FORMAT,
        handlers=make_handler_config(settings),
        cache_logs=settings.LOG_CACHE,
    )


def make_path_markers(settings: Settings) -> PathMarkers:
    defaults = PathMarkers.default()
    return PathMarkers(
        app_path=settings.APP_PATH or defaults.app_path,
        system_path=settings.SYSTEM_PATH or defaults.system_path,
        public_path=settings.PUBLIC_PATH,
    )


def build_logger(
    settings: Settings,
    *,
    reporter: ExternalReporter | None = None,
    runtime: RuntimeSource | None = None,
    factories: Mapping[str, Any] | None = None,
) -> Logger:
    """
    Build a Logger from settings.

    Steps:
      1. Translate settings into a LoggerConfig (fails fast on an empty handler map).
      2. Initialize Sentry if SENTRY_DSN is set and the caller did not inject a reporter.
      3. Default the runtime snapshot to the environment name + request context.
    """
    if reporter is None and settings.SENTRY_DSN:
        reporter = init_sentry(settings.SENTRY_DSN, environment=settings.ENV)
        logger.debug("Sentry reporting enabled for environment %s", settings.ENV)

    return Logger(
        make_logger_config(settings),
        registry=HandlerRegistry(factories),
        reporter=reporter,
        runtime=runtime or RuntimeProvider(settings.ENV),
        paths=make_path_markers(settings),
    )


# get_logger() takes no arguments and always builds the same logger from the
# cached settings, so one instance is shared across the process.
@lru_cache()
def get_logger() -> Logger:
    return build_logger(get_settings())


def log_message(level: str | int, message: Any, context: Mapping[str, Any] | None = None) -> bool:
    """Log through the process-wide logger."""
    return get_logger().log(level, message, context)


__all__ = [
    "make_handler_config",
    "make_logger_config",
    "make_path_markers",
    "build_logger",
    "get_logger",
    "log_message",
]
