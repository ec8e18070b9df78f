# logdispatch/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   └── base.py                    # Logger-level errors (configuration, invalid level)

from .base import (
    LogError,
    LoggerConfigurationError,
    HandlerConfigurationError,
    InvalidLevelError,
)

__all__ = [
    "LogError",
    "LoggerConfigurationError",
    "HandlerConfigurationError",
    "InvalidLevelError",
]
