"""
AbstractRepository — Base classes for the database repository pattern.

Repositories wrap a ``DbCore`` handle without exposing raw SQL, locking,
or connection details to the GraphQL layer.  ``AbstractRepository``
provides the read side (lookups by key, by foreign key, full listing);
``WritableRepository`` adds ``create`` / ``update`` / ``delete`` keyed by
the ``id`` primary key.
"""
from __future__ import annotations

import logging
import uuid
from abc import ABC
from typing import Any, Iterable

from usergraph.db.db_utils import get_bool_value, to_db_value
from usergraph.errors import InvalidInputError, RecordNotFoundError

log = logging.getLogger("usergraph.db.repositories")


class AbstractRepository(ABC):
    """Base repository over a single table.

    Subclasses set ``table``, ``entity`` (used in error messages),
    ``columns`` (SELECT order, matching ``record_type.from_row``) and
    ``record_type``.
    """

    table: str = ""
    entity: str = "Record"
    columns: tuple = ()
    key_column: str = "id"
    record_type: Any = None

    def __init__(self, dbh: Any = None) -> None:
        """
        Args:
            dbh: A ``DbCore`` instance (or compatible object).
                 When None, operations will raise ``RuntimeError``.
        """
        self._dbh = dbh

    @property
    def dbh(self) -> Any:
        """The underlying database handle."""
        if self._dbh is None:
            raise RuntimeError(
                f"{type(self).__name__} has no database handle; "
                "ensure a DbCore was provided"
            )
        return self._dbh

    @property
    def is_connected(self) -> bool:
        """Whether the underlying DB handle is available."""
        return self._dbh is not None

    @property
    def _ph(self) -> str:
        return self.dbh.placeholder

    def _select(self, alias: str = "") -> str:
        prefix = f"{alias}." if alias else ""
        cols = ", ".join(f"{prefix}{c}" for c in self.columns)
        table = f"{self.table} {alias}" if alias else self.table
        return f"SELECT {cols} FROM {table}"

    def _param(self, value: Any) -> Any:
        """Convert a Python value to a bound parameter for the active backend."""
        if isinstance(value, bool):
            return get_bool_value(self.dbh.db_type, value)
        return to_db_value(value)

    def _to_records(self, rows: Iterable) -> list:
        return [self.record_type.from_row(row) for row in (rows or [])]

    def find_unique(self, key: Any) -> Any:
        """Get a single record by primary key.

        Returns:
            The record, or None if not found.
        """
        row = self.dbh.fetch_one(
            f"{self._select()} WHERE {self.key_column} = {self._ph}",
            (self._param(key),),
            entity=self.entity,
        )
        if not row:
            return None
        return self.record_type.from_row(row)

    def find_many(self) -> list:
        """List every record in the table."""
        rows = self.dbh.fetch_all(self._select(), entity=self.entity)
        return self._to_records(rows)

    def _find_by(self, column: str, value: Any) -> list:
        rows = self.dbh.fetch_all(
            f"{self._select()} WHERE {column} = {self._ph}",
            (self._param(value),),
            entity=self.entity,
        )
        return self._to_records(rows)

    def __repr__(self) -> str:
        status = "connected" if self.is_connected else "disconnected"
        return f"<{type(self).__name__} {status}>"


class WritableRepository(AbstractRepository):
    """Repository whose records are created, updated and deleted by ``id``.

    ``required_fields`` must all be supplied to ``create``; ``update``
    accepts any subset of them (partial update).
    """

    required_fields: tuple = ()

    def _check_fields(self, data: dict) -> None:
        unknown = sorted(set(data) - set(self.required_fields))
        if unknown:
            raise InvalidInputError(f"Unknown {self.entity} field(s): {', '.join(unknown)}")
        nulls = sorted(k for k, v in data.items() if v is None)
        if nulls:
            raise InvalidInputError(f"{self.entity} field(s) cannot be null: {', '.join(nulls)}")

    def create(self, data: dict) -> Any:
        """Insert a new record with a generated UUID and return it."""
        self._check_fields(data)
        missing = [f for f in self.required_fields if f not in data]
        if missing:
            raise InvalidInputError(f"Missing required {self.entity} field(s): {', '.join(missing)}")

        values = {"id": str(uuid.uuid4())}
        values.update((f, data[f]) for f in self.required_fields)
        cols = ", ".join(values)
        marks = ", ".join([self._ph] * len(values))
        self.dbh.execute(
            f"INSERT INTO {self.table} ({cols}) VALUES ({marks})",
            [self._param(v) for v in values.values()],
            entity=self.entity,
        )
        log.debug("Created %s %s", self.entity, values["id"])
        return self.record_type(**{k: to_db_value(v) for k, v in values.items()})

    def update(self, key: Any, data: dict) -> Any:
        """Apply a partial update and return the updated record.

        Raises:
            RecordNotFoundError: no record has this key
        """
        self._check_fields(data)
        key = self._param(key)
        if not data:
            record = self.find_unique(key)
            if record is None:
                raise RecordNotFoundError(self.entity, key)
            return record

        assignments = ", ".join(f"{col} = {self._ph}" for col in data)
        params = [self._param(v) for v in data.values()] + [key]
        count = self.dbh.execute(
            f"UPDATE {self.table} SET {assignments} WHERE id = {self._ph}",
            params,
            entity=self.entity,
        )
        if count == 0:
            raise RecordNotFoundError(self.entity, key)
        log.debug("Updated %s %s (%s)", self.entity, key, ", ".join(data))
        return self.find_unique(key)

    def delete(self, key: Any) -> None:
        """Delete a record by primary key.

        Raises:
            RecordNotFoundError: no record has this key
        """
        key = self._param(key)
        count = self.dbh.execute(
            f"DELETE FROM {self.table} WHERE id = {self._ph}",
            (key,),
            entity=self.entity,
        )
        if count == 0:
            raise RecordNotFoundError(self.entity, key)
        log.debug("Deleted %s %s", self.entity, key)
