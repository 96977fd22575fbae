"""
Engine-under-test interface for storebench.

Workloads talk to the storage engine only through EngineHandle. Adapters
translate driver errors into EngineFailure so the runner and orchestrator
never depend on a specific driver's exception hierarchy.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence, runtime_checkable

from storebench.domain.models import Point

SCHEMA_DDL: tuple[str, ...] = (
    "DROP TABLE IF EXISTS points",
    "CREATE TABLE points (id INTEGER PRIMARY KEY, x INTEGER NOT NULL, y INTEGER NOT NULL)",
    "CREATE INDEX location ON points (x, y)",
)


@runtime_checkable
class EngineHandle(Protocol):
    """
    Narrow interface the harness consumes from the engine under test.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier for the engine.
    target : str
        Where the engine stores its data (file path or DSN without password).
    """

    name: str
    target: str

    def define_schema(self, ddl_statements: Sequence[str]) -> None:
        """Execute schema statements in order."""
        ...

    def begin(self) -> None:
        """Open an explicit transaction."""
        ...

    def commit(self) -> None:
        """Commit the explicit transaction."""
        ...

    def rollback(self) -> None:
        """Abandon the explicit transaction if one is open."""
        ...

    def insert(self, point: Point) -> int:
        """Persist a point and return the affected row count."""
        ...

    def query(self, x: int, y: int) -> List[int]:
        """Return the ids of rows at (x, y), possibly empty."""
        ...

    def update(self, point_id: int, x: int, y: int) -> int:
        """Move a row to new coordinates and return the affected row count."""
        ...

    def count_rows(self) -> int:
        """Return the number of persisted rows."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...


__all__ = ["EngineHandle", "SCHEMA_DDL"]
