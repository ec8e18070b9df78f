# src/logdispatch/core/logging/context.py
"""
Runtime context for placeholder interpolation.

The interpolator never reads process-wide state directly. Instead it receives a
`RuntimeSnapshot`: the environment name, the current request's query and posted
parameters, the session (if any) and the environment-variable table.

Request data lives in a `contextvars.ContextVar` so that it is isolated per
request in async frameworks (FastAPI/Starlette) and survives `await` boundaries,
the same way the request id used to be carried for log records. The
`RequestContextMiddleware` (see middleware.py) fills it for each HTTP request;
outside a request the state is empty and no session is active.

Tests build `RuntimeSnapshot` objects directly to get deterministic output.
"""

import contextvars
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

@dataclass(frozen=True)
class RequestState:
    """Request-scoped data captured by the middleware."""

    get_vars: Mapping[str, Any] = field(default_factory=dict)
    post_vars: Mapping[str, Any] = field(default_factory=dict)
    # None means "no session store is active", which hides {session_vars}
    session: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Everything the interpolator may read besides the message and its context."""

    environment: str
    get_vars: Mapping[str, Any] = field(default_factory=dict)
    post_vars: Mapping[str, Any] = field(default_factory=dict)
    session: Mapping[str, Any] | None = None
    env_vars: Mapping[str, str] = field(default_factory=dict)


RuntimeSource = Callable[[], RuntimeSnapshot]

# Default is None to indicate "not inside a request".
_request_state_ctx: contextvars.ContextVar[RequestState | None] = contextvars.ContextVar(
    "request_state", default=None
)


def set_request_state(state: RequestState | None):
    """
    Set the request state for the current context.

    Returns:
        token: contextvars.Token which can be passed to reset_request_state(token)
    """
    return _request_state_ctx.set(state)


def reset_request_state(token) -> None:
    """Restore the request state saved by set_request_state()."""
    _request_state_ctx.reset(token)


def get_request_state() -> RequestState | None:
    return _request_state_ctx.get()


class RuntimeProvider:
    """
    Callable producing a fresh RuntimeSnapshot on every log call.

    Args:
        environment: the runtime environment name ("development", "production", ...).
        env_vars: environment-variable table; defaults to the live `os.environ`.
    """

    def __init__(self, environment: str, env_vars: Mapping[str, str] | None = None):
        self.environment = environment
        self._env_vars = env_vars

    def __call__(self) -> RuntimeSnapshot:
        state = get_request_state() or RequestState()
        return RuntimeSnapshot(
            environment=self.environment,
            get_vars=state.get_vars,
            post_vars=state.post_vars,
            session=state.session,
            env_vars=self._env_vars if self._env_vars is not None else os.environ,
        )


__all__ = [
    "RequestState",
    "RuntimeSnapshot",
    "RuntimeSource",
    "RuntimeProvider",
    "set_request_state",
    "reset_request_state",
    "get_request_state",
]
