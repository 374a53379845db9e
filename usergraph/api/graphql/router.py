"""
FastAPI router exposing the GraphQL endpoint.

Provides:
  - POST /graphql: JSON body ``{query, variables?, operationName?}``

GraphQL-level outcomes (parse, validation and field errors) are always
answered with HTTP 200 and the ``{data, errors}`` body; only a malformed
HTTP body is rejected with 422 by the API error handlers.

Usage in main.py:
    from usergraph.api.graphql.router import graphql_router
    app.include_router(graphql_router)
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from usergraph.api.dependencies import get_db, get_executor
from usergraph.api.models import ErrorResponse, GraphQLRequestBody
from usergraph.request_tracing import get_request_id
from .executor import GraphQLExecutor, GraphQLRequest

_log = logging.getLogger("usergraph.api.graphql")

graphql_router = APIRouter(tags=["graphql"])


@graphql_router.post(
    "/graphql",
    summary="Execute a GraphQL operation",
    responses={422: {"model": ErrorResponse, "description": "Body is not a GraphQL request"}},
)
async def graphql_endpoint(
    body: GraphQLRequestBody,
    db=Depends(get_db),
    executor: GraphQLExecutor = Depends(get_executor),
) -> JSONResponse:
    request = GraphQLRequest(
        query=body.query,
        variables=body.variables,
        operation_name=body.operation_name,
    )
    response = await executor.execute(request, db, request_id=get_request_id())
    if response.errors:
        _log.debug("GraphQL request finished with %d error(s)", len(response.errors))
    return JSONResponse(content=response.to_dict())
