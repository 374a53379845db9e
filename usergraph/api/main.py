"""
FastAPI application factory for the usergraph API.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI

from usergraph import __version__
from usergraph.app_config import AppConfig
from usergraph.db import UserGraphDb
from usergraph.logging_config import configure_logging
from usergraph.request_tracing import install_tracing_middleware
from .error_handlers import install_error_handlers
from .graphql.executor import GraphQLExecutor
from .graphql.router import graphql_router
from .models import HealthResponse

log = logging.getLogger("usergraph.api")


def create_app(config: Optional[AppConfig] = None, db: Any = None) -> FastAPI:
    """Build the API application.

    Args:
        config: application configuration; defaults plus ``UG_*`` /
            ``POSTGRES_*`` environment overrides when omitted.
        db: data-access object to serve; when omitted a ``UserGraphDb``
            is opened from ``config.database`` and closed on shutdown.

    Raises:
        ValueError: the configuration is invalid
    """
    if config is None:
        config = AppConfig()
        config.apply_env_overrides()

    errors = config.validate()
    if errors:
        raise ValueError("Invalid configuration: " + "; ".join(str(e) for e in errors))

    configure_logging(config)

    owns_db = db is None
    if owns_db:
        db = UserGraphDb(config.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("usergraph API %s started: %s", __version__, config.summary())
        yield
        if owns_db:
            app.state.db.close()
            log.info("Database closed")

    app = FastAPI(
        title="usergraph API",
        description="GraphQL API over users, profiles, posts and member types",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.db = db
    app.state.executor = GraphQLExecutor(max_depth=config.api.max_query_depth)

    install_tracing_middleware(app)
    install_error_handlers(app)
    app.include_router(graphql_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app
