from .core.logging import Logger, LoggerConfig, build_logger, get_logger, log_message
from .exceptions import LogError, LoggerConfigurationError, HandlerConfigurationError, InvalidLevelError

__version__ = "0.1.0"

__all__ = [
    "Logger",
    "LoggerConfig",
    "build_logger",
    "get_logger",
    "log_message",
    "LogError",
    "LoggerConfigurationError",
    "HandlerConfigurationError",
    "InvalidLevelError",
]
