"""
Domain errors raised by the data-access layer and GraphQL resolvers.

Every error carries a machine-readable ``code`` that the execution
gateway copies into ``extensions.code`` of the GraphQL error.  Errors
flagged ``expose = True`` keep their message in the response; anything
else is reported as a generic internal error and only logged.
"""
from __future__ import annotations


class UserGraphError(Exception):
    """Base class for all usergraph errors."""

    code = "INTERNAL_SERVER_ERROR"
    expose = False

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class RecordNotFoundError(UserGraphError):
    """Raised when an update or delete targets a missing record."""

    code = "NOT_FOUND"
    expose = True

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class UniqueConstraintError(UserGraphError):
    """Raised when a write would duplicate a unique key."""

    code = "CONFLICT"
    expose = True


class ForeignKeyError(UserGraphError):
    """Raised when a write references a record that does not exist."""

    code = "BAD_USER_INPUT"
    expose = True


class InvalidInputError(UserGraphError):
    """Raised for input values the store cannot accept."""

    code = "BAD_USER_INPUT"
    expose = True


class DataStoreError(UserGraphError):
    """Raised on driver failures; never shown to clients."""
