"""usergraph HTTP API package.

Contains the FastAPI application factory, the GraphQL router, request
models, error handlers and dependency injection helpers.
"""

from __future__ import annotations
