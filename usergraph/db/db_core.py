# -*- coding: utf-8 -*-
"""
Core DB connection, locking, schema management and statement execution
for UserGraphDb.
"""
import logging
import sqlite3
import threading
import time
from pathlib import Path

import psycopg2

from usergraph.constants import DB_RETRY_BACKOFF_BASE, DEFAULT_MAX_RETRIES, MEMBER_TYPE_SEED
from usergraph.errors import DataStoreError, ForeignKeyError, InvalidInputError, UniqueConstraintError
from .db_utils import get_placeholder, integrity_kind, is_transient_error, normalize_db_type

log = logging.getLogger("usergraph.db")


class DbCore:
    """
    Core database connection and management class for UserGraphDb.

    Every statement runs under ``dbhLock`` on a fresh cursor and writes are
    committed immediately, so each repository call is its own transaction.
    """
    createSchemaQueries = [
        "CREATE TABLE IF NOT EXISTS tbl_member_type ( \
            id                      VARCHAR NOT NULL PRIMARY KEY, \
            discount                REAL NOT NULL, \
            posts_limit_per_month   INT NOT NULL \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_user ( \
            id          VARCHAR NOT NULL PRIMARY KEY, \
            name        VARCHAR NOT NULL, \
            balance     REAL NOT NULL \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_profile ( \
            id              VARCHAR NOT NULL PRIMARY KEY, \
            is_male         INTEGER NOT NULL, \
            year_of_birth   INT NOT NULL, \
            user_id         VARCHAR NOT NULL UNIQUE REFERENCES tbl_user(id) ON DELETE CASCADE, \
            member_type_id  VARCHAR NOT NULL REFERENCES tbl_member_type(id) ON DELETE RESTRICT \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_post ( \
            id          VARCHAR NOT NULL PRIMARY KEY, \
            title       VARCHAR NOT NULL, \
            content     TEXT NOT NULL, \
            author_id   VARCHAR NOT NULL REFERENCES tbl_user(id) ON DELETE CASCADE \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_subscribers_on_authors ( \
            subscriber_id   VARCHAR NOT NULL REFERENCES tbl_user(id) ON DELETE CASCADE, \
            author_id       VARCHAR NOT NULL REFERENCES tbl_user(id) ON DELETE CASCADE, \
            PRIMARY KEY (subscriber_id, author_id) \
        )",
        "CREATE INDEX IF NOT EXISTS idx_post_author ON tbl_post (author_id)",
        "CREATE INDEX IF NOT EXISTS idx_profile_member_type ON tbl_profile (member_type_id)",
        "CREATE INDEX IF NOT EXISTS idx_subscribers_author ON tbl_subscribers_on_authors (author_id)",
    ]

    createPostgreSQLSchemaQueries = [
        "CREATE TABLE IF NOT EXISTS tbl_member_type ( \
            id                      VARCHAR NOT NULL PRIMARY KEY, \
            discount                DOUBLE PRECISION NOT NULL, \
            posts_limit_per_month   INT NOT NULL \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_user ( \
            id          VARCHAR NOT NULL PRIMARY KEY, \
            name        VARCHAR NOT NULL, \
            balance     DOUBLE PRECISION NOT NULL \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_profile ( \
            id              VARCHAR NOT NULL PRIMARY KEY, \
            is_male         BOOLEAN NOT NULL, \
            year_of_birth   INT NOT NULL, \
            user_id         VARCHAR NOT NULL UNIQUE REFERENCES tbl_user(id) ON DELETE CASCADE, \
            member_type_id  VARCHAR NOT NULL REFERENCES tbl_member_type(id) ON DELETE RESTRICT \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_post ( \
            id          VARCHAR NOT NULL PRIMARY KEY, \
            title       VARCHAR NOT NULL, \
            content     TEXT NOT NULL, \
            author_id   VARCHAR NOT NULL REFERENCES tbl_user(id) ON DELETE CASCADE \
        )",
        "CREATE TABLE IF NOT EXISTS tbl_subscribers_on_authors ( \
            subscriber_id   VARCHAR NOT NULL REFERENCES tbl_user(id) ON DELETE CASCADE, \
            author_id       VARCHAR NOT NULL REFERENCES tbl_user(id) ON DELETE CASCADE, \
            PRIMARY KEY (subscriber_id, author_id) \
        )",
        "CREATE INDEX IF NOT EXISTS idx_post_author ON tbl_post (author_id)",
        "CREATE INDEX IF NOT EXISTS idx_profile_member_type ON tbl_profile (member_type_id)",
        "CREATE INDEX IF NOT EXISTS idx_subscribers_author ON tbl_subscribers_on_authors (author_id)",
    ]

    def __init__(self, db_config, init: bool = True) -> None:
        """
        Args:
            db_config: ``DatabaseConfig`` section of the application config.
            init: create tables and seed member types if missing.

        Raises:
            DataStoreError: database could not be opened
        """
        self.db_type = normalize_db_type(db_config.db_type)
        self.dbhLock = threading.RLock()
        self.conn = self._connect(db_config)
        if init:
            self.create_schema()

    def _connect(self, db_config):
        if self.db_type == 'sqlite':
            database_path = db_config.db_path or ":memory:"
            try:
                if database_path != ":memory:":
                    Path(database_path).parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(database_path, check_same_thread=False)
                conn.execute("PRAGMA foreign_keys = ON")
                if database_path != ":memory:":
                    conn.execute("PRAGMA journal_mode=WAL")
            except (sqlite3.Error, OSError) as e:
                raise DataStoreError(f"Error connecting to internal database {database_path}") from e
            log.debug("Opened SQLite database %s", database_path)
            return conn

        try:
            conn = psycopg2.connect(
                host=db_config.pg_host,
                port=db_config.pg_port,
                dbname=db_config.pg_db,
                user=db_config.pg_user,
                password=db_config.pg_password,
            )
            conn.autocommit = True
        except psycopg2.Error as e:
            raise DataStoreError("Error connecting to PostgreSQL database") from e
        log.debug("Opened PostgreSQL database %s@%s", db_config.pg_db, db_config.pg_host)
        return conn

    @property
    def placeholder(self) -> str:
        return get_placeholder(self.db_type)

    def create_schema(self) -> None:
        """Create all tables and seed the member type reference data."""
        queries = self.createSchemaQueries if self.db_type == 'sqlite' else self.createPostgreSQLSchemaQueries
        with self.dbhLock:
            for qry in queries:
                self.execute(qry, entity="Schema")
            ph = self.placeholder
            for row in MEMBER_TYPE_SEED:
                self.execute(
                    "INSERT INTO tbl_member_type (id, discount, posts_limit_per_month) "
                    f"VALUES ({ph}, {ph}, {ph}) ON CONFLICT (id) DO NOTHING",
                    row,
                    entity="MemberType",
                )

    def fetch_one(self, qry: str, params=(), *, entity: str = "Record"):
        """Run a query and return its first row (or None)."""
        return self._run(qry, params, entity, "one")

    def fetch_all(self, qry: str, params=(), *, entity: str = "Record") -> list:
        """Run a query and return all rows."""
        return self._run(qry, params, entity, "all")

    def execute(self, qry: str, params=(), *, entity: str = "Record") -> int:
        """Run a write statement, commit it and return the affected row count."""
        return self._run(qry, params, entity, None)

    def _run(self, qry, params, entity, fetch):
        with self.dbhLock:
            for attempt in range(DEFAULT_MAX_RETRIES):
                cursor = self.conn.cursor()
                try:
                    cursor.execute(qry, tuple(params))
                    if fetch == "one":
                        return cursor.fetchone()
                    if fetch == "all":
                        return cursor.fetchall()
                    self.conn.commit()
                    return cursor.rowcount
                except (sqlite3.Error, psycopg2.Error) as e:
                    self._rollback()
                    if is_transient_error(e) and attempt < DEFAULT_MAX_RETRIES - 1:
                        time.sleep(DB_RETRY_BACKOFF_BASE * (attempt + 1))
                        continue
                    raise self._translate(e, entity) from e
                finally:
                    cursor.close()

    def _rollback(self) -> None:
        try:
            self.conn.rollback()
        except (sqlite3.Error, psycopg2.Error) as e:
            log.warning("Rollback failed: %s", e)

    @staticmethod
    def _translate(exc, entity: str):
        kind = integrity_kind(exc)
        if kind == 'unique':
            return UniqueConstraintError(f"{entity} already exists")
        if kind == 'foreign_key':
            return ForeignKeyError(f"{entity} references a record that does not exist")
        if kind == 'not_null':
            return InvalidInputError(f"{entity} is missing a required value")
        log.error("Database error on %s: %s", entity, exc)
        return DataStoreError(f"Unable to access {entity} data")

    def close(self) -> None:
        """Close the connection; safe to call more than once."""
        with self.dbhLock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
