# src/logdispatch/core/logging/middleware.py
"""
Request context middleware for FastAPI / Starlette.

Purpose
-------
Captures the data behind the {get_vars}, {post_vars} and {session_vars}
placeholders for the duration of one HTTP request:

1. query parameters from the URL;
2. posted form fields, for urlencoded and multipart bodies only;
3. `scope["session"]`, when a session middleware (e.g. Starlette's
   SessionMiddleware) is installed outside this one.

The data is stored in a `contextvars.ContextVar` (see context.py), so each
concurrent request has its own logical context, and is reset in a `finally`
block once the response is produced.

Integration notes
-----------------
- Register it inside SessionMiddleware so the session is already in the scope:

      app.add_middleware(RequestContextMiddleware)
      app.add_middleware(SessionMiddleware, secret_key=...)

- Reading the body caches it on the request, so endpoints can still read the
  form themselves.
- Posted values end up in logs when a message uses {post_vars}; do not use that
  placeholder on routes that receive passwords or tokens.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .context import RequestState, reset_request_state, set_request_state

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Starlette / FastAPI middleware that publishes request data for log interpolation.
    """

    async def dispatch(self, request: Request, call_next):
        post_vars = {}
        content_type = request.headers.get("content-type", "")
        if request.method in ("POST", "PUT", "PATCH") and content_type.startswith(_FORM_CONTENT_TYPES):
            # Cache the raw body first so the endpoint can read it again.
            await request.body()
            form = await request.form()
            post_vars = {key: value for key, value in form.items() if isinstance(value, str)}

        session = request.scope.get("session")
        state = RequestState(
            get_vars=dict(request.query_params),
            post_vars=post_vars,
            session=dict(session) if session is not None else None,
        )

        token = set_request_state(state)
        try:
            return await call_next(request)
        finally:
            reset_request_state(token)


__all__ = ["RequestContextMiddleware"]
