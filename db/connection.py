"""
db/connection.py
----------------
Storage backends: each one knows how to open a connection, begin a
transaction, adapt bound parameters for its driver, and retrieve the
identity generated by the last insert on a connection.

PostgreSQL (psycopg2) is the production backend. SQLite (stdlib sqlite3)
is used for local development and the test suite.
"""

import sqlite3
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

import psycopg2

from config import DATABASE_URL, DB_BACKEND, SQLITE_PATH
from db.params import PLACEHOLDER, Parameter
from utils.logger import get_logger

logger = get_logger(__name__)


class Backend:
    """Base class for a relational storage backend."""

    name: str = ""
    # Column definition used for store-assigned identities in the schema.
    identity_column: str = ""
    last_identity_sql: str = ""

    def connect(self, autocommit: bool = False):
        """Open a new DB-API connection."""
        raise NotImplementedError

    def begin(self, conn) -> None:
        """Start a transaction on `conn`."""
        raise NotImplementedError

    def prepare(self, sql: str) -> str:
        """Translate ``%(name)s`` placeholders to the driver's paramstyle."""
        return sql

    def adapt(self, parameter: Parameter) -> Any:
        """Convert a bound Parameter to the value handed to the driver."""
        return parameter.value

    def run_script(self, conn, script: str) -> None:
        """Execute several `;`-separated statements."""
        raise NotImplementedError

    def last_identity(self, cursor) -> int:
        """
        Return the identity generated by the last insert on the
        cursor's connection.

        Raises:
            RuntimeError: If the store reports no generated identity.
        """
        cursor.execute(self.last_identity_sql)
        row = cursor.fetchone()
        if row is None or row[0] is None:
            raise RuntimeError("Failed to retrieve the generated identity")
        return int(row[0])


class PostgresBackend(Backend):
    """PostgreSQL via psycopg2. Placeholders are already in pyformat."""

    name = "postgres"
    identity_column = "SERIAL PRIMARY KEY"
    last_identity_sql = "SELECT lastval();"

    def __init__(self, dsn: str = DATABASE_URL):
        self.dsn = dsn

    def connect(self, autocommit: bool = False):
        try:
            conn = psycopg2.connect(self.dsn)
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            raise
        conn.autocommit = autocommit
        return conn

    def begin(self, conn) -> None:
        # psycopg2 opens the transaction on the first statement
        # whenever autocommit is off.
        conn.autocommit = False

    def run_script(self, conn, script: str) -> None:
        with conn.cursor() as cur:
            cur.execute(script)


class SqliteBackend(Backend):
    """SQLite via the stdlib driver, with explicit transaction control."""

    name = "sqlite"
    identity_column = "INTEGER PRIMARY KEY AUTOINCREMENT"
    last_identity_sql = "SELECT last_insert_rowid();"

    def __init__(self, path: str = SQLITE_PATH):
        self.path = path

    def connect(self, autocommit: bool = False):
        # isolation_level=None: no implicit BEGIN; writes call begin().
        conn = sqlite3.connect(self.path, isolation_level=None)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def begin(self, conn) -> None:
        conn.execute("BEGIN;")

    def prepare(self, sql: str) -> str:
        return PLACEHOLDER.sub(r":\1", sql)

    def adapt(self, parameter: Parameter) -> Any:
        value = parameter.value
        if isinstance(value, datetime):
            # full precision and any UTC offset survive fromisoformat()
            return value.isoformat(sep=" ")
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, Decimal):
            return float(value)
        if isinstance(value, bool):
            return int(value)
        return value

    def run_script(self, conn, script: str) -> None:
        conn.executescript(script)


_BACKENDS = {
    PostgresBackend.name: PostgresBackend,
    SqliteBackend.name: SqliteBackend,
}


def get_backend(name: Optional[str] = None, **kwargs) -> Backend:
    """
    Build a backend by name (defaults to DB_BACKEND from config).

    Args:
        name: 'postgres' or 'sqlite'.
        **kwargs: Passed to the backend constructor (dsn= or path=).

    Raises:
        ValueError: If the backend name is unknown.
    """
    name = (name or DB_BACKEND).lower()
    try:
        backend_cls = _BACKENDS[name]
    except KeyError:
        raise ValueError(f"Unknown storage backend: {name!r}") from None
    return backend_cls(**kwargs)
