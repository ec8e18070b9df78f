# src/logdispatch/tests/test_logging/test_registry.py
import threading
import time

import pytest

from logdispatch.core.logging.handlers import ConsoleHandler, FileHandler, StdlibHandler
from logdispatch.core.logging.registry import HandlerRegistry
from logdispatch.exceptions import HandlerConfigurationError, LoggerConfigurationError


class CountingFactory:
    def __init__(self, delay: float = 0.0):
        self.count = 0
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self, config):
        with self._lock:
            self.count += 1
        time.sleep(self.delay)
        return ConsoleHandler(config)


def test_default_registry_knows_the_builtin_handlers():
    resolved = HandlerRegistry().resolve({"file": {}, "console": {}, "logging": {}})
    assert list(resolved) == ["file", "console", "logging"]
    assert resolved["file"] is FileHandler
    assert resolved["console"] is ConsoleHandler
    assert resolved["logging"] is StdlibHandler


def test_resolve_rejects_unknown_identifiers():
    with pytest.raises(LoggerConfigurationError) as exc_info:
        HandlerRegistry().resolve({"console": {}, "syslog": {}})
    assert exc_info.value.error_code == "unknown_handler"


def test_get_builds_once_and_caches():
    factory = CountingFactory()
    registry = HandlerRegistry({"console": factory})

    first = registry.get("console", factory, {})
    second = registry.get("console", factory, {"format": "json"})

    assert first is second
    assert factory.count == 1
    assert registry.instances() == {"console": first}


def test_register_adds_a_factory():
    registry = HandlerRegistry({})
    registry.register("console", ConsoleHandler)
    assert registry.resolve({"console": {}}) == {"console": ConsoleHandler}


def test_factory_failure_is_a_handler_configuration_error():
    def broken(config):
        raise OSError("disk not mounted")

    registry = HandlerRegistry({"file": broken})
    with pytest.raises(HandlerConfigurationError) as exc_info:
        registry.get("file", broken, {})

    assert exc_info.value.handler_id == "file"
    assert isinstance(exc_info.value.__cause__, OSError)
    # nothing half-built is cached
    assert registry.instances() == {}


def test_bad_handler_config_surfaces_on_first_use():
    registry = HandlerRegistry()
    with pytest.raises(HandlerConfigurationError):
        registry.get("console", ConsoleHandler, {"format": "xml"})


def test_concurrent_first_use_creates_a_single_instance():
    factory = CountingFactory(delay=0.05)
    registry = HandlerRegistry({"console": factory})
    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(registry.get("console", factory, {}))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert factory.count == 1
    assert len(results) == 8
    assert all(handler is results[0] for handler in results)
