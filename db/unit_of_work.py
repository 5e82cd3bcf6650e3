"""
db/unit_of_work.py
------------------
A unit of work owns one connection (and, for writes, one transaction)
for the duration of a single logical repository operation.

    with UnitOfWork(backend, transactional=True) as uow:
        uow.execute(sql, Parameters(order_id=10248))

Leaving the block commits (or rolls back on error) and always closes
the connection. A unit of work cannot be entered twice.
"""

from contextlib import closing
from enum import Enum
from typing import Any, Optional

from db.connection import Backend
from db.params import Parameters
from utils.logger import get_logger, get_sql_logger, one_line

logger = get_logger(__name__)
sql_logger = get_sql_logger()


class UnitOfWorkState(Enum):
    IDLE = "idle"
    CONNECTION_OPEN = "connection_open"
    TRANSACTION_BEGUN = "transaction_begun"
    STATEMENTS_EXECUTED = "statements_executed"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    CONNECTION_CLOSED = "connection_closed"


class UnitOfWork:
    """Scoped connection and transaction for one repository call."""

    def __init__(self, backend: Backend, transactional: bool = False):
        self.backend = backend
        self.transactional = transactional
        self.state = UnitOfWorkState.IDLE
        # Every state passed through, in order.
        self.history: list[UnitOfWorkState] = [self.state]
        self._conn = None

    def _move(self, state: UnitOfWorkState) -> None:
        self.state = state
        self.history.append(state)

    # ── SCOPE ─────────────────────────────────────────────

    def __enter__(self) -> "UnitOfWork":
        if self.state is not UnitOfWorkState.IDLE:
            raise RuntimeError(f"Unit of work already used (state: {self.state.value})")
        self._conn = self.backend.connect(autocommit=not self.transactional)
        self._move(UnitOfWorkState.CONNECTION_OPEN)
        if self.transactional:
            try:
                self.backend.begin(self._conn)
            except Exception:
                self._close()
                raise
            self._move(UnitOfWorkState.TRANSACTION_BEGUN)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if self.transactional:
                if exc_type is None:
                    self._commit()
                else:
                    self._rollback()
        finally:
            self._close()
        return False

    def _commit(self) -> None:
        try:
            self._conn.commit()
        except Exception:
            self._rollback()
            raise
        self._move(UnitOfWorkState.COMMITTED)

    def _rollback(self) -> None:
        try:
            self._conn.rollback()
        except Exception as e:
            logger.error(f"Rollback failed: {e}")
            raise
        finally:
            self._move(UnitOfWorkState.ROLLED_BACK)

    def _close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._move(UnitOfWorkState.CONNECTION_CLOSED)

    # ── STATEMENTS ────────────────────────────────────────

    def _cursor(self):
        if self._conn is None:
            raise RuntimeError("Unit of work is not open")
        return closing(self._conn.cursor())

    def _run(self, cur, sql: str, params: Optional[Parameters]) -> None:
        mapping = (params or Parameters()).render(sql, self.backend.adapt)
        sql_logger.debug(f"[{self.backend.name}] {one_line(sql)} | params: {sorted(mapping)}")
        cur.execute(self.backend.prepare(sql), mapping)
        if self.transactional:
            if self.state is not UnitOfWorkState.STATEMENTS_EXECUTED:
                self._move(UnitOfWorkState.STATEMENTS_EXECUTED)

    @staticmethod
    def _as_dict(cur, row: tuple) -> dict[str, Any]:
        """Map a row to {lowercased column name: value}."""
        return {col[0].lower(): value for col, value in zip(cur.description, row)}

    def execute(self, sql: str, params: Optional[Parameters] = None) -> int:
        """Run a statement and return the number of affected rows."""
        with self._cursor() as cur:
            self._run(cur, sql, params)
            return cur.rowcount

    def fetch_one(self, sql: str, params: Optional[Parameters] = None) -> Optional[dict]:
        """Run a query and return its first row as a dict, or None."""
        with self._cursor() as cur:
            self._run(cur, sql, params)
            row = cur.fetchone()
            return self._as_dict(cur, row) if row else None

    def fetch_all(self, sql: str, params: Optional[Parameters] = None) -> list[dict]:
        """Run a query and return every row as a dict."""
        with self._cursor() as cur:
            self._run(cur, sql, params)
            return [self._as_dict(cur, r) for r in cur.fetchall()]

    def scalar(self, sql: str, params: Optional[Parameters] = None) -> Any:
        """Run a query and return the first column of its first row, or None."""
        with self._cursor() as cur:
            self._run(cur, sql, params)
            row = cur.fetchone()
            return row[0] if row else None

    def last_identity(self) -> int:
        """Identity generated by the most recent insert in this unit of work."""
        with self._cursor() as cur:
            return self.backend.last_identity(cur)
