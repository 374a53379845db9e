"""Tests for usergraph.db.db_utils — backend helpers and error classification."""
from __future__ import annotations

import sqlite3
import uuid
from unittest.mock import MagicMock

import psycopg2
import pytest

from usergraph.constants import MemberTypeId
from usergraph.db.db_utils import (
    get_bool_value,
    get_placeholder,
    integrity_kind,
    is_transient_error,
    normalize_db_type,
    to_db_value,
)


@pytest.mark.parametrize("raw, expected", [
    ("sqlite", "sqlite"),
    ("SQLite3", "sqlite"),
    ("postgres", "postgresql"),
    ("psycopg2", "postgresql"),
])
def test_normalize_db_type(raw, expected):
    assert normalize_db_type(raw) == expected


def test_normalize_db_type_errors():
    with pytest.raises(ValueError):
        normalize_db_type("mysql")
    with pytest.raises(TypeError):
        normalize_db_type(None)


def test_placeholder_and_bool():
    assert get_placeholder("sqlite") == "?"
    assert get_placeholder("postgresql") == "%s"
    assert get_bool_value("sqlite", True) == 1
    assert get_bool_value("postgresql", False) is False


def test_to_db_value():
    value = uuid.uuid4()
    assert to_db_value(value) == str(value)
    assert to_db_value(MemberTypeId.BUSINESS) == "business"
    assert to_db_value(3) == 3


def test_transient_errors():
    assert is_transient_error(sqlite3.OperationalError("database is locked"))
    assert not is_transient_error(sqlite3.OperationalError("no such table: x"))
    assert is_transient_error(psycopg2.OperationalError("connection reset"))
    assert not is_transient_error(ValueError("x"))


def test_integrity_kind_sqlite():
    assert integrity_kind(sqlite3.IntegrityError("UNIQUE constraint failed: tbl_user.id")) == "unique"
    assert integrity_kind(sqlite3.IntegrityError("FOREIGN KEY constraint failed")) == "foreign_key"
    assert integrity_kind(sqlite3.IntegrityError("NOT NULL constraint failed: tbl_user.name")) == "not_null"
    assert integrity_kind(sqlite3.IntegrityError("CHECK constraint failed")) is None
    assert integrity_kind(sqlite3.OperationalError("x")) is None


def test_integrity_kind_postgresql():
    err = MagicMock(spec=psycopg2.IntegrityError)
    err.pgcode = "23503"
    assert integrity_kind(err) == "foreign_key"
    err.pgcode = "23505"
    assert integrity_kind(err) == "unique"
    err.pgcode = "99999"
    assert integrity_kind(err) is None
