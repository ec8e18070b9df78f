"""
Custom exceptions for logger construction and dispatch.
"""

from typing import Any

# canonical logger-level exception

class LogError(Exception):
    """
    Base exception for logging errors.

    - message: human-friendly message
    - error_code: canonical short code (e.g., 'invalid_level', 'configuration')
    """

    def __init__(self, message: str, *, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        if self.error_code:
            return f"{self.message} (code: {self.error_code})"
        return self.message


class LoggerConfigurationError(LogError):
    """
    Raised while building a Logger: the configuration cannot produce a working logger.

    These are setup defects and surface at construction time, never per record.
    """

    def __init__(self, message: str, *, error_code: str = "configuration"):
        super().__init__(message, error_code=error_code)

    @classmethod
    def for_no_handlers(cls, source: str) -> "LoggerConfigurationError":
        return cls(f"{source} must provide at least one handler.", error_code="no_handlers")

    @classmethod
    def for_unknown_handler(cls, handler_id: str) -> "LoggerConfigurationError":
        return cls(f"No handler is registered under '{handler_id}'.", error_code="unknown_handler")

    @classmethod
    def for_invalid_threshold(cls, value: Any) -> "LoggerConfigurationError":
        return cls(f"'{value}' is not a valid threshold entry.", error_code="invalid_threshold")


class HandlerConfigurationError(LoggerConfigurationError):
    """Raised when a handler factory fails to build an instance from its config."""

    def __init__(self, message: str, *, handler_id: str):
        super().__init__(message, error_code="handler_configuration")
        self.handler_id = handler_id

    @classmethod
    def for_failed_construction(cls, handler_id: str, cause: BaseException) -> "HandlerConfigurationError":
        return cls(f"Handler '{handler_id}' could not be created: {cause}", handler_id=handler_id)


class InvalidLevelError(LogError):
    """Raised when a caller passes a severity name or rank outside the fixed level table."""

    def __init__(self, message: str, *, level: Any = None):
        super().__init__(message, error_code="invalid_level")
        self.level = level

    @classmethod
    def for_invalid_level(cls, level: Any) -> "InvalidLevelError":
        return cls(f"{level!r} is an invalid log level.", level=level)


__all__ = [
    "LogError",
    "LoggerConfigurationError",
    "HandlerConfigurationError",
    "InvalidLevelError",
]
