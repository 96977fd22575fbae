"""
SQLite adapter for the engine-under-test interface.

The connection runs in autocommit mode (isolation_level=None) so every
statement commits on its own unless the workload opens an explicit
transaction with begin().
"""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Generator, List, Sequence

from storebench.domain.errors import EngineFailure
from storebench.domain.models import Point

INSERT_SQL = "INSERT INTO points (id, x, y) VALUES (?, ?, ?)"
QUERY_SQL = "SELECT id FROM points WHERE x = ? AND y = ?"
UPDATE_SQL = "UPDATE points SET x = ?, y = ? WHERE id = ?"
COUNT_SQL = "SELECT COUNT(*) FROM points"


@contextmanager
def _engine_errors(action: str) -> Generator[None, None, None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise EngineFailure(f"sqlite {action} failed: {exc}") from exc


class SqliteEngine:
    """
    EngineHandle backed by a single sqlite3 connection to a database file.
    """

    name: str = "sqlite"

    def __init__(self, connection: sqlite3.Connection, path: Path) -> None:
        self._conn = connection
        self.target = str(path)

    @classmethod
    def open(cls, path: Path | str) -> "SqliteEngine":
        path = Path(path)
        with _engine_errors(f"open of {path}"):
            connection = sqlite3.connect(str(path), isolation_level=None)
        return cls(connection, path)

    def define_schema(self, ddl_statements: Sequence[str]) -> None:
        with _engine_errors("schema definition"), closing(self._conn.cursor()) as cur:
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
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")

    def insert(self, point: Point) -> int:
        with _engine_errors("insert"), closing(self._conn.cursor()) as cur:
            cur.execute(INSERT_SQL, (point.id, point.x, point.y))
            return cur.rowcount

    def query(self, x: int, y: int) -> List[int]:
        with _engine_errors("query"), closing(self._conn.cursor()) as cur:
            cur.execute(QUERY_SQL, (x, y))
            return [row[0] for row in cur.fetchall()]

    def update(self, point_id: int, x: int, y: int) -> int:
        with _engine_errors("update"), closing(self._conn.cursor()) as cur:
            cur.execute(UPDATE_SQL, (x, y, point_id))
            return cur.rowcount

    def count_rows(self) -> int:
        with _engine_errors("count"), closing(self._conn.cursor()) as cur:
            cur.execute(COUNT_SQL)
            return int(cur.fetchone()[0])

    def close(self) -> None:
        with _engine_errors("close"):
            self._conn.close()


__all__ = ["SqliteEngine"]
