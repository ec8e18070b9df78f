# src/logdispatch/core/logging/registry.py
"""
Handler registry: lazy, cached handler instances keyed by handler identifier.

Identifiers are resolved to factories once, when the logger is configured, so a
typo in the handler configuration fails at startup. Instances are only created
when a record first reaches them and are reused for the lifetime of the
registry.

Concurrent first use is safe: a double-checked lock guarantees at most one
instance per identifier even when two threads race to build it.
"""

import logging
import threading
from typing import Any, Mapping

from logdispatch.exceptions import HandlerConfigurationError, LoggerConfigurationError

from .handlers import HANDLER_FACTORIES, HandlerFactory, HandlerInterface

logger = logging.getLogger(__name__)


class HandlerRegistry:
    def __init__(self, factories: Mapping[str, HandlerFactory] | None = None):
        self._factories: dict[str, HandlerFactory] = dict(HANDLER_FACTORIES if factories is None else factories)
        self._instances: dict[str, HandlerInterface] = {}
        self._lock = threading.Lock()

    def register(self, handler_id: str, factory: HandlerFactory) -> None:
        """Add or replace the factory used for `handler_id`."""
        with self._lock:
            self._factories[handler_id] = factory

    def resolve(self, handler_config: Mapping[str, Any]) -> dict[str, HandlerFactory]:
        """
        Map each configured identifier to its factory, preserving configuration order.

        Raises:
            LoggerConfigurationError: when an identifier has no registered factory.
        """
        resolved = {}
        for handler_id in handler_config:
            try:
                resolved[handler_id] = self._factories[handler_id]
            except KeyError:
                raise LoggerConfigurationError.for_unknown_handler(handler_id) from None
        return resolved

    def get(self, handler_id: str, factory: HandlerFactory, config: Mapping[str, Any]) -> HandlerInterface:
        """
        Return the handler for `handler_id`, building it with `factory(config)` on first use.

        `factory` is the one `resolve()` returned when the logger was configured;
        a later `register()` does not change which constructor it uses.

        Raises:
            HandlerConfigurationError: the factory raised while building the handler.
        """
        handler = self._instances.get(handler_id)
        if handler is not None:
            return handler

        with self._lock:
            # Another thread may have published it while we waited for the lock.
            handler = self._instances.get(handler_id)
            if handler is not None:
                return handler

            try:
                handler = factory(config)
            except Exception as exc:
                raise HandlerConfigurationError.for_failed_construction(handler_id, exc) from exc

            logger.debug("Created log handler %r (%s)", handler_id, type(handler).__name__)
            self._instances[handler_id] = handler
            return handler

    def instances(self) -> dict[str, HandlerInterface]:
        """Snapshot of the handlers created so far."""
        with self._lock:
            return dict(self._instances)


__all__ = ["HandlerRegistry"]
