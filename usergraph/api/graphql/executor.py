"""
GraphQL execution gateway.

Runs one request through four strictly ordered stages:

1. **Parse**: syntax errors end the request (``GRAPHQL_PARSE_FAILED``).
2. **Validate**: the specified rules plus the depth limit; every
   violation is reported together (``GRAPHQL_VALIDATION_FAILED``) and no
   resolver, hence no store access, runs.
3. **Execute**: Strawberry executes the operation against a fresh
   :class:`GraphQLContext`; field errors are collected per field.
4. **Respond**: errors are normalised to ``{message, locations, path,
   extensions.code}``.  Domain errors flagged ``expose`` keep their
   message; anything else is logged and replaced by a generic message.

Usage::

    executor = GraphQLExecutor()
    response = await executor.execute(GraphQLRequest(query="{ users { id } }"), db)
    body = response.to_dict()
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from graphql import DocumentNode, GraphQLError, parse, specified_rules, validate

from usergraph.constants import MAX_QUERY_DEPTH
from usergraph.errors import UserGraphError
from usergraph.request_tracing import get_request_id, request_scope
from .context import GraphQLContext
from .depth import QueryDepthLimiter
from .resolvers import schema as default_schema

_log = logging.getLogger("usergraph.api.graphql.executor")

PARSE_FAILED = "GRAPHQL_PARSE_FAILED"
VALIDATION_FAILED = "GRAPHQL_VALIDATION_FAILED"
BAD_USER_INPUT = "BAD_USER_INPUT"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
INTERNAL_MESSAGE = "Internal server error"


@dataclass
class GraphQLRequest:
    """One GraphQL request: document text, variables and operation name."""

    query: str
    variables: Optional[dict[str, Any]] = None
    operation_name: Optional[str] = None


@dataclass
class GraphQLResponse:
    """Outcome of a request.

    ``executed`` is False when the request was rejected before execution;
    such responses carry no ``data`` key at all.
    """

    data: Optional[dict[str, Any]] = None
    errors: list[dict[str, Any]] = field(default_factory=list)
    executed: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.executed:
            out["data"] = self.data
        if self.errors:
            out["errors"] = self.errors
        return out


def format_error(error: GraphQLError, code: str, message: Optional[str] = None) -> dict[str, Any]:
    """Serialise *error* with ``extensions.code`` set to *code*."""
    formatted = dict(error.formatted)
    if message is not None:
        formatted["message"] = message
    extensions = dict(formatted.get("extensions") or {})
    extensions["code"] = code
    formatted["extensions"] = extensions
    return formatted


def internal_error_response() -> GraphQLResponse:
    return GraphQLResponse(errors=[{
        "message": INTERNAL_MESSAGE,
        "extensions": {"code": INTERNAL_SERVER_ERROR},
    }])


class GraphQLExecutor:
    """Parses, validates and executes GraphQL requests against a schema."""

    def __init__(self, schema=None, max_depth: int = MAX_QUERY_DEPTH) -> None:
        self.schema = schema or default_schema
        self.depth_limiter = QueryDepthLimiter(max_depth)
        self.rules = [*specified_rules, self.depth_limiter.rule]

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def prepare(self, request: GraphQLRequest) -> tuple[Optional[DocumentNode], Optional[GraphQLResponse]]:
        """Parse and validate.

        Returns:
            ``(document, None)`` when the request may be executed, or
            ``(None, response)`` carrying the parse/validation errors.
        """
        try:
            document = parse(request.query)
        except GraphQLError as e:
            return None, GraphQLResponse(errors=[format_error(e, PARSE_FAILED)])

        errors = validate(self.schema._schema, document, self.rules)
        if errors:
            _log.debug("Rejected GraphQL request with %d validation error(s)", len(errors))
            return None, GraphQLResponse(errors=[format_error(e, VALIDATION_FAILED) for e in errors])
        return document, None

    def build_response(self, result) -> GraphQLResponse:
        """Turn an engine execution result into a :class:`GraphQLResponse`.

        A result with no data whose errors all lack a path failed before
        execution started (variable coercion, operation selection) and is
        reported without a ``data`` key.
        """
        raw_errors = result.errors or []
        errors = [self._format_execution_error(e) for e in raw_errors]
        started = result.data is not None or not raw_errors or any(e.path for e in raw_errors)
        return GraphQLResponse(data=result.data, errors=errors, executed=started)

    def _format_execution_error(self, error: GraphQLError) -> dict[str, Any]:
        # Errors without a path are raised before any resolver runs
        # (variable coercion, operation selection)
        if not error.path:
            return format_error(error, BAD_USER_INPUT)
        original = error.original_error
        if original is None:
            return format_error(error, INTERNAL_SERVER_ERROR)
        if isinstance(original, UserGraphError) and original.expose:
            return format_error(error, original.code, original.message)

        _log.error(
            "GraphQL resolver error at %s: %s",
            ".".join(str(p) for p in error.path or []),
            original,
            exc_info=(type(original), original, original.__traceback__),
        )
        return format_error(error, INTERNAL_SERVER_ERROR, INTERNAL_MESSAGE)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def execute(self, request: GraphQLRequest, db: Any, request_id: Optional[str] = None) -> GraphQLResponse:
        """Run *request* against *db* and return the response."""
        try:
            _, rejected = self.prepare(request)
            if rejected is not None:
                return rejected
            with request_scope(request_id or get_request_id()) as request_id:
                result = await self.schema.execute(
                    request.query,
                    variable_values=request.variables,
                    context_value=GraphQLContext(db=db, request_id=request_id),
                    operation_name=request.operation_name,
                )
                return self.build_response(result)
        except Exception as e:
            _log.error("GraphQL execution failed: %s", e, exc_info=True)
            return internal_error_response()

    def execute_sync(self, request: GraphQLRequest, db: Any, request_id: Optional[str] = None) -> GraphQLResponse:
        """Synchronous variant of :meth:`execute`."""
        try:
            _, rejected = self.prepare(request)
            if rejected is not None:
                return rejected
            with request_scope(request_id or get_request_id()) as request_id:
                result = self.schema.execute_sync(
                    request.query,
                    variable_values=request.variables,
                    context_value=GraphQLContext(db=db, request_id=request_id),
                    operation_name=request.operation_name,
                )
                return self.build_response(result)
        except Exception as e:
            _log.error("GraphQL execution failed: %s", e, exc_info=True)
            return internal_error_response()
