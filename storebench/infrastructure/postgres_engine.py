"""
PostgreSQL adapter for the engine-under-test interface.

Uses a single psycopg connection in autocommit mode; explicit transactions are
issued as BEGIN/COMMIT statements so both adapters share the same transaction
model. Connection establishment is retried for transient failures using
tenacity; statements are never retried.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, List, Optional, Sequence

import psycopg
from psycopg import Connection
from psycopg.conninfo import conninfo_to_dict
from psycopg.pq import TransactionStatus
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from storebench.config import get_settings
from storebench.domain.errors import EngineFailure
from storebench.domain.models import Point

INSERT_SQL = "INSERT INTO points (id, x, y) VALUES (%s, %s, %s)"
QUERY_SQL = "SELECT id FROM points WHERE x = %s AND y = %s"
UPDATE_SQL = "UPDATE points SET x = %s, y = %s WHERE id = %s"
COUNT_SQL = "SELECT COUNT(*) FROM points"


@contextmanager
def _engine_errors(action: str) -> Generator[None, None, None]:
    try:
        yield
    except psycopg.Error as exc:
        raise EngineFailure(f"postgres {action} failed: {exc}") from exc


_RETRY_WAIT = wait_exponential(multiplier=1, min=1, max=10)


def _connect(dsn: str, attempts: int) -> Connection:
    """
    Open an autocommit connection with automatic retry.

    Makes at most `attempts` tries with exponential backoff for transient
    connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=_RETRY_WAIT,
        retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
        reraise=True,
    )
    return retrying(psycopg.connect, dsn, autocommit=True)


def _redact(dsn: str) -> str:
    """Describe a DSN without its password."""
    try:
        params = conninfo_to_dict(dsn)
    except psycopg.ProgrammingError:
        return "postgres"
    return (
        f"{params.get('user', '')}@{params.get('host', '')}:"
        f"{params.get('port', '')}/{params.get('dbname', '')}"
    )


class PostgresEngine:
    """
    EngineHandle backed by a psycopg connection.
    """

    name: str = "postgres"

    def __init__(self, connection: Connection, dsn: str) -> None:
        self._conn = connection
        self.target = _redact(dsn)

    @classmethod
    def open(cls, dsn: str, attempts: Optional[int] = None) -> "PostgresEngine":
        """Connect to `dsn`, trying `attempts` times (default `DB_CONNECT_RETRIES`)."""
        attempts = attempts or get_settings().db_connect_retries
        with _engine_errors(f"connect to {_redact(dsn)}"):
            connection = _connect(dsn, attempts)
        return cls(connection, dsn)

    def define_schema(self, ddl_statements: Sequence[str]) -> None:
        with _engine_errors("schema definition"), self._conn.cursor() as cur:
            for statement in ddl_statements:
                cur.execute(statement)

    def begin(self) -> None:
        with _engine_errors("begin"):
            self._conn.execute("BEGIN")

    def commit(self) -> None:
        with _engine_errors("commit"):
            self._conn.execute("COMMIT")

    def rollback(self) -> None:
        with _engine_errors("rollback"):
            if self._conn.info.transaction_status != TransactionStatus.IDLE:
                self._conn.execute("ROLLBACK")

    def insert(self, point: Point) -> int:
        with _engine_errors("insert"), self._conn.cursor() as cur:
            cur.execute(INSERT_SQL, (point.id, point.x, point.y))
            return cur.rowcount

    def query(self, x: int, y: int) -> List[int]:
        with _engine_errors("query"), self._conn.cursor() as cur:
            cur.execute(QUERY_SQL, (x, y))
            return [row[0] for row in cur.fetchall()]

    def update(self, point_id: int, x: int, y: int) -> int:
        with _engine_errors("update"), self._conn.cursor() as cur:
            cur.execute(UPDATE_SQL, (x, y, point_id))
            return cur.rowcount

    def count_rows(self) -> int:
        with _engine_errors("count"), self._conn.cursor() as cur:
            cur.execute(COUNT_SQL)
            row = cur.fetchone()
            return int(row[0]) if row else 0

    def close(self) -> None:
        with _engine_errors("close"):
            self._conn.close()


__all__ = ["PostgresEngine"]
