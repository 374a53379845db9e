"""
HTTP-level error envelope for the usergraph API.

Only failures that never reach the GraphQL gateway end up here: an
unknown route or method, a request body that is not a GraphQL request
(422) and unexpected exceptions (500).  GraphQL errors travel in the
GraphQL response body instead.

Response format::

    {"error": {"code": "VALIDATION_ERROR", "message": "Request validation failed",
               "status": 422, "request_id": "...", "timestamp": ..., "details": [...]}}
"""
from __future__ import annotations

import logging
import time
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from usergraph.request_tracing import REQUEST_ID_HEADER
from .models import ErrorDetail, ErrorResponse

log = logging.getLogger("usergraph.api.errors")

VALIDATION_ERROR = "VALIDATION_ERROR"


def error_code_for(status: int) -> str:
    """``404`` -> ``NOT_FOUND``, ``500`` -> ``INTERNAL_SERVER_ERROR``."""
    try:
        return HTTPStatus(status).name
    except ValueError:
        return f"HTTP_{status}"


def error_response(
    request: Request,
    status: int,
    message: str,
    details: Any = None,
    code: str | None = None,
) -> JSONResponse:
    # The 500 handler runs outside the tracing middleware, so the id is
    # read back from the request state rather than the contextvar.
    request_id = getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER)
    body = ErrorResponse(error=ErrorDetail(
        code=code or error_code_for(status),
        message=message,
        status=status,
        request_id=request_id,
        timestamp=time.time(),
        details=details,
    ))
    return JSONResponse(status_code=status, content=body.model_dump())


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(request, exc.status_code, detail)


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", [])),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    log.debug("Rejected malformed request body on %s: %d problem(s)", request.url.path, len(details))
    return error_response(request, 422, "Request validation failed", details, VALIDATION_ERROR)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return error_response(request, 500, "Internal server error")


def install_error_handlers(app: FastAPI) -> None:
    """Register the envelope handlers on *app*."""
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
