"""
Dependencies and helpers for the usergraph API.

The application factory stores the shared database and executor on
``app.state``; routes reach them through these dependencies so tests can
build an app around any data-access object.
"""
from fastapi import Request

from usergraph.api.graphql.executor import GraphQLExecutor


def get_db(request: Request):
    """The ``UserGraphDb`` opened (or injected) by ``create_app``."""
    return request.app.state.db


def get_executor(request: Request) -> GraphQLExecutor:
    """The GraphQL gateway configured by ``create_app``."""
    return request.app.state.executor
