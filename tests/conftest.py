"""
Pytest configuration for storebench.

Provides fixtures for:
- Settings isolation (cache reset, env cleanup)
- SQLite engines on temporary files
- An in-memory recording engine for runner/orchestrator tests
- PostgreSQL connectivity for integration tests
"""

from __future__ import annotations

import os
import random
import time
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence

import psycopg
import pytest

from storebench.config import Settings, get_settings
from storebench.domain.errors import EngineFailure
from storebench.domain.models import OperationKind, Point, ScenarioDescriptor
from storebench.infrastructure.db_factory import open_engine
from storebench.infrastructure.engine import EngineHandle

_SETTINGS_ENV = (
    "BENCH_SEED",
    "BENCH_ENGINE",
    "BENCH_TARGET",
    "BENCH_REPORT_FORMAT",
    "BENCH_FAILURE_POLICY",
    "DB_CONNECT_RETRIES",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch) -> Generator[None, None, None]:
    """
    Clear benchmark env vars and the settings cache around every test.
    """
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def sqlite_engine() -> Generator[EngineHandle, None, None]:
    """
    SQLite engine on a temporary file, closed and deleted after the test.
    """
    with open_engine("sqlite") as engine:
        yield engine


@pytest.fixture
def make_scenario() -> Callable[..., ScenarioDescriptor]:
    def _make(
        kind: OperationKind,
        setup_row_count: int = 10,
        operation_count: int = 10,
        use_explicit_transaction: bool = False,
        name: Optional[str] = None,
    ) -> ScenarioDescriptor:
        return ScenarioDescriptor(
            name=name or f"test-{kind.value}",
            setup_row_count=setup_row_count,
            operation_count=operation_count,
            operation_kind=kind,
            use_explicit_transaction=use_explicit_transaction,
        )

    return _make


class RecordingEngine:
    """
    In-memory EngineHandle that records every call.

    `fail_on` names an operation that raises EngineFailure; `insert_delay`
    sleeps inside each insert to make setup cost visible.
    """

    name = "recording"
    target = "memory"

    def __init__(self, fail_on: Optional[str] = None, insert_delay: float = 0.0) -> None:
        self.rows: Dict[int, tuple[int, int]] = {}
        self.calls: List[str] = []
        self.updates: List[tuple[int, int, int]] = []
        self.fail_on = fail_on
        self.insert_delay = insert_delay
        self.closed = False

    def _record(self, op: str) -> None:
        self.calls.append(op)
        if op == self.fail_on:
            raise EngineFailure(f"recording {op} failed")

    def define_schema(self, ddl_statements: Sequence[str]) -> None:
        self._record("define_schema")
        self.rows.clear()

    def begin(self) -> None:
        self._record("begin")

    def commit(self) -> None:
        self._record("commit")

    def rollback(self) -> None:
        self._record("rollback")

    def insert(self, point: Point) -> int:
        self._record("insert")
        if self.insert_delay:
            time.sleep(self.insert_delay)
        self.rows[point.id] = (point.x, point.y)
        return 1

    def query(self, x: int, y: int) -> List[int]:
        self._record("query")
        return [pid for pid, coords in self.rows.items() if coords == (x, y)]

    def update(self, point_id: int, x: int, y: int) -> int:
        self._record("update")
        self.updates.append((point_id, x, y))
        if point_id not in self.rows:
            return 0
        self.rows[point_id] = (x, y)
        return 1

    def count_rows(self) -> int:
        self._record("count_rows")
        return len(self.rows)

    def close(self) -> None:
        self._record("close")
        self.closed = True


@pytest.fixture
def recording_engine_factory() -> Callable[..., RecordingEngine]:
    def _factory(**kwargs: Any) -> RecordingEngine:
        return RecordingEngine(**kwargs)

    return _factory


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "storebench"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for integration tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if PostgreSQL is reachable.

    Used to conditionally skip integration tests when the database is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture
def postgres_engine(
    test_dsn: str, db_connection_available: bool
) -> Generator[EngineHandle, None, None]:
    """
    Provide a PostgreSQL engine for integration tests.

    Skips tests if the database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")
    with open_engine("postgres", test_dsn) as engine:
        yield engine
