"""
Core pytest configuration for the entire test suite.

Provides the test doubles and fixtures shared by the logging tests:

- RecordingHandler: a handler that records every call instead of writing anywhere
- calls / created: lists the recording handlers append to
- snapshot: a deterministic RuntimeSnapshot (no live request, no os.environ)
- make_logger: builds a Logger whose chain is made of RecordingHandlers
"""

from __future__ import annotations

# -------------------------------
# Standard library imports
# -------------------------------
import logging
from typing import Any, Mapping

# -------------------------------
# Early logging tuning (IMPORTANT)
# -------------------------------
# Silence noisy third-party loggers before they are imported by test modules.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "asyncio",
    "httpx",
    "urllib3",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

# -------------------------------
# Third-party / project imports
# -------------------------------
import pytest
from faker import Faker

from logdispatch.core.logging.context import RuntimeSnapshot
from logdispatch.core.logging.dispatcher import Logger, LoggerConfig
from logdispatch.core.logging.levels import LOG_LEVELS
from logdispatch.core.logging.registry import HandlerRegistry


class RecordingHandler:
    """
    Handler double.

    Config keys:
      - name: label written into each recorded call
      - calls: shared list receiving (name, level, message) tuples
      - created: shared list receiving every constructed instance
      - handles: accepted levels (default: all)
      - result: value returned by handle() (default True)
      - raises: exception instance raised by handle()
    """

    def __init__(self, config: Mapping[str, Any]):
        self.name = config["name"]
        self.calls = config["calls"]
        self.handles = set(config.get("handles", LOG_LEVELS))
        self.result = config.get("result", True)
        self.raises = config.get("raises")
        self.date_format = None
        config["created"].append(self)

    def can_handle(self, level: str) -> bool:
        return level in self.handles

    def set_date_format(self, date_format: str) -> "RecordingHandler":
        self.date_format = date_format
        return self

    def handle(self, level: str, message: str) -> bool:
        self.calls.append((self.name, level, message))
        if self.raises is not None:
            raise self.raises
        return self.result


class FakeReporter:
    """External reporter double collecting (severity, message) pairs."""

    def __init__(self, fail: bool = False):
        self.captured: list[tuple[str, str]] = []
        self.fail = fail

    def capture(self, severity: str, message: str) -> None:
        if self.fail:
            raise ConnectionError("reporting backend unreachable")
        self.captured.append((severity, message))


@pytest.fixture
def fake() -> Faker:
    fake = Faker()
    fake.seed_instance(1234)
    return fake


@pytest.fixture
def calls() -> list:
    return []


@pytest.fixture
def created() -> list:
    return []


@pytest.fixture
def snapshot() -> RuntimeSnapshot:
    """
    Deterministic ambient state for interpolation.

    Session is None: {session_vars} must stay untouched unless a test opts in.
    """
    return RuntimeSnapshot(
        environment="production",
        get_vars={"page": "2"},
        post_vars={"name": "ada"},
        session=None,
        env_vars={"APP_REGION": "eu-west-1"},
    )


@pytest.fixture
def reporter() -> FakeReporter:
    return FakeReporter()


@pytest.fixture
def failing_reporter() -> FakeReporter:
    return FakeReporter(fail=True)


@pytest.fixture
def make_logger(calls, created, snapshot):
    """
    Factory fixture building a Logger backed by RecordingHandlers.

    `handlers` maps handler id -> extra config; insertion order is the chain order.
    """

    def _make(
        handlers: dict[str, dict] | None = None,
        *,
        threshold: Any = 8,
        cache_logs: bool = False,
        date_format: str = "%Y-%m-%d %H:%M:%S",
        reporter=None,
        runtime=None,
        paths=None,
    ) -> Logger:
        handlers = {"first": {}, "second": {}} if handlers is None else handlers
        config = {
            handler_id: {"name": handler_id, "calls": calls, "created": created, **extra}
            for handler_id, extra in handlers.items()
        }
        registry = HandlerRegistry({handler_id: RecordingHandler for handler_id in handlers})
        return Logger(
            LoggerConfig(threshold=threshold, date_format=date_format, handlers=config, cache_logs=cache_logs),
            registry=registry,
            reporter=reporter,
            runtime=runtime or (lambda: snapshot),
            paths=paths,
        )

    return _make
