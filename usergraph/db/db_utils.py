# -*- coding: utf-8 -*-
"""
Utility functions and error classification helpers for UserGraphDb.
"""
import sqlite3
import uuid
from enum import Enum

import psycopg2


def normalize_db_type(db_type):
    """Normalize and validate the db_type string."""
    if not isinstance(db_type, str):
        raise TypeError("db_type must be a string")
    db_type = db_type.lower()
    if db_type in ('sqlite', 'sqlite3'):
        return 'sqlite'
    elif db_type in ('postgresql', 'postgres', 'psycopg2'):
        return 'postgresql'
    raise ValueError(f"Unsupported db_type: {db_type}")


def get_placeholder(db_type):
    """Return the correct SQL placeholder for the given DB type."""
    db_type = normalize_db_type(db_type)
    if db_type == 'sqlite':
        return '?'
    return '%s'


def get_bool_value(db_type, value):
    """Return the correct boolean value for the backend."""
    db_type = normalize_db_type(db_type)
    if db_type == 'sqlite':
        return 1 if value else 0
    return True if value else False


def to_db_value(value):
    """Convert GraphQL-side values (UUIDs, enums) to plain column values."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


def is_transient_error(exc):
    """Classify if an exception is a transient DB error."""
    if isinstance(exc, sqlite3.OperationalError):
        msg = str(exc).lower()
        if 'database is locked' in msg or 'database is busy' in msg:
            return True
    if isinstance(exc, psycopg2.OperationalError):
        return True
    return False


def integrity_kind(exc):
    """Classify an integrity error as 'unique', 'foreign_key', 'not_null' or None."""
    if isinstance(exc, sqlite3.IntegrityError):
        msg = str(exc).upper()
        if 'UNIQUE CONSTRAINT' in msg or 'PRIMARY KEY' in msg:
            return 'unique'
        if 'FOREIGN KEY' in msg:
            return 'foreign_key'
        if 'NOT NULL' in msg:
            return 'not_null'
        return None
    if isinstance(exc, psycopg2.IntegrityError):
        return {
            '23505': 'unique',
            '23503': 'foreign_key',
            '23502': 'not_null',
        }.get(getattr(exc, 'pgcode', None))
    return None
