# src/logdispatch/core/logging/reporting.py
"""
External reporting hook.

An optional collaborator that observes every record accepted by the logger
(after threshold filtering and interpolation). It receives the severity mapped
to its own, smaller vocabulary and the finished message.

The dispatcher treats the hook as best-effort: any exception it raises is
swallowed there, so a flaky error-tracking service never breaks logging.

`SentryReporter` forwards to the Sentry SDK. Call `init_sentry()` once during
process startup (the builder does this when SENTRY_DSN is configured).
"""

from typing import Protocol, runtime_checkable

import sentry_sdk

_INFO_LEVELS = frozenset({"alert", "notice", "info"})


@runtime_checkable
class ExternalReporter(Protocol):
    def capture(self, severity: str, message: str) -> None: ...


def map_severity(level: str) -> str:
    """
    Map a log level to the reporter vocabulary.

    alert/notice/info -> "info", debug -> "debug", error -> "error";
    everything else (emergency, critical, warning) -> "warning".
    """
    if level in _INFO_LEVELS:
        return "info"
    if level == "debug":
        return "debug"
    if level == "error":
        return "error"
    return "warning"


class SentryReporter:
    """Send each accepted record to Sentry as a message event."""

    def capture(self, severity: str, message: str) -> None:
        sentry_sdk.capture_message(message, level=severity)


def init_sentry(dsn: str, environment: str | None = None) -> SentryReporter:
    """Initialize the Sentry SDK and return a reporter bound to it."""
    sentry_sdk.init(dsn=dsn, environment=environment)
    return SentryReporter()


__all__ = ["ExternalReporter", "map_severity", "SentryReporter", "init_sentry"]
