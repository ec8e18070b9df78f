# src/logdispatch/core/logging/
# ├─ __init__.py            # public API: Logger, build_logger, get_logger, log_message
# ├─ levels.py              # level table: names <-> ranks, threshold expansion
# ├─ context.py             # RuntimeSnapshot + request-state contextvar
# ├─ interpolate.py         # {placeholder} expansion, file/line lookup, path markers
# ├─ formatters.py          # Text/Color/Json line formatters + RecordFormatter adapter
# ├─ handlers.py            # handler contract + console/file/stdlib handlers
# ├─ registry.py            # lazy, cached handler instances
# ├─ reporting.py           # external reporting hook (Sentry)
# ├─ dispatcher.py          # Logger: filter -> interpolate -> handler chain
# ├─ builder.py             # build_logger(settings), get_logger(), log_message()
# └─ middleware.py          # Starlette middleware capturing request data


from .builder import build_logger, get_logger, log_message, make_logger_config
from .context import RuntimeProvider, RuntimeSnapshot, RequestState, set_request_state, get_request_state
from .dispatcher import Logger, LoggerConfig, LogEntry
from .handlers import BaseHandler, ConsoleHandler, FileHandler, StdlibHandler, HandlerInterface
from .levels import LOG_LEVELS
from .middleware import RequestContextMiddleware
from .registry import HandlerRegistry

__all__ = [
    "Logger",
    "LoggerConfig",
    "LogEntry",
    "LOG_LEVELS",
    "build_logger",
    "get_logger",
    "log_message",
    "make_logger_config",
    "RuntimeProvider",
    "RuntimeSnapshot",
    "RequestState",
    "set_request_state",
    "get_request_state",
    "BaseHandler",
    "ConsoleHandler",
    "FileHandler",
    "StdlibHandler",
    "HandlerInterface",
    "HandlerRegistry",
    "RequestContextMiddleware",
]
