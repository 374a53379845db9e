import asyncio

import pytest

from usergraph.api.graphql.executor import GraphQLExecutor, GraphQLRequest
from usergraph.app_config import DatabaseConfig
from usergraph.db import UserGraphDb
from usergraph.logging_config import reset_logging


@pytest.fixture
def db_config():
    """In-memory SQLite configuration."""
    return DatabaseConfig(db_type="sqlite", db_path=":memory:")


@pytest.fixture
def db(db_config):
    """A fresh, seeded in-memory database."""
    database = UserGraphDb(db_config)
    yield database
    database.close()


@pytest.fixture
def executor():
    return GraphQLExecutor()


@pytest.fixture
def gql(executor, db):
    """Run a GraphQL document against the test database and return the body dict."""

    def run(query, variables=None, operation_name=None, target_db=None):
        request = GraphQLRequest(query=query, variables=variables, operation_name=operation_name)
        response = asyncio.run(executor.execute(request, target_db if target_db is not None else db))
        return response.to_dict()

    return run


@pytest.fixture
def make_user(db):
    """Create a user directly through the repository."""

    def create(name="Alice", balance=100.0):
        return db.users.create({"name": name, "balance": balance})

    return create


@pytest.fixture(autouse=True)
def _reset_logging():
    """Reset logging config between tests."""
    reset_logging()
    yield
    reset_logging()
