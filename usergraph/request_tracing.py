"""
Request ids for the usergraph API.

Each HTTP request is bound to one id, either taken from the client's
``X-Request-ID`` header or freshly generated.  The id is held in a
:mod:`contextvars` variable while the request runs.  It reaches the
resolvers as ``GraphQLContext.request_id``, is stamped on log records by
:class:`RequestIdFilter` and is echoed back in the response header.

Usage::

    from usergraph.request_tracing import install_tracing_middleware

    install_tracing_middleware(app)
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
import time
import uuid
from typing import Any, Callable, Iterator

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("usergraph.tracing")

REQUEST_ID_HEADER = "X-Request-ID"

_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None,
)


def get_request_id() -> str | None:
    """Get the current request ID from context.

    Returns ``None`` if called outside a request context.
    """
    return _request_id_var.get()


def set_request_id(request_id: str) -> contextvars.Token:
    """Manually set a request ID (useful for scripts and tests)."""
    return _request_id_var.set(request_id)


def generate_request_id() -> str:
    return str(uuid.uuid4())


@contextlib.contextmanager
def request_scope(request_id: str | None = None) -> Iterator[str]:
    """Bind *request_id*, or a new one, for the duration of the block."""
    request_id = request_id or generate_request_id()
    token = _request_id_var.set(request_id)
    try:
        yield request_id
    finally:
        _request_id_var.reset(token)


class RequestIdFilter(logging.Filter):
    """Sets ``record.request_id`` ("" outside a request) unless already given."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = _request_id_var.get() or ""
        return True


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Binds a request id around each request and logs its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        with request_scope(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            request.state.request_id = request_id
            start_time = time.monotonic()
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            log.info(
                "%s %s -> %d (%.3fs)",
                request.method,
                request.url.path,
                response.status_code,
                time.monotonic() - start_time,
            )
            return response


def install_tracing_middleware(app: Any) -> None:
    """Install :class:`RequestTracingMiddleware` on a FastAPI app.

    Also attaches :class:`RequestIdFilter` to the handlers of the
    ``usergraph`` logger so that ``request_id`` appears on every line.
    """
    app.add_middleware(RequestTracingMiddleware)
    install_request_id_filter(logging.getLogger("usergraph"))


def install_request_id_filter(logger: logging.Logger) -> None:
    """Add RequestIdFilter to every handler of *logger* (idempotent)."""
    for handler in logger.handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
