"""
Engine factory utilities for storebench.

Provides scoped acquisition of the engine under test: the connection and any
temporary storage file are released on every exit path, including when a
scenario fails mid-run.
"""

from __future__ import annotations

import tempfile
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional

from storebench.config import Settings, get_settings
from storebench.domain.errors import InvalidArgumentError
from storebench.infrastructure.engine import EngineHandle
from storebench.infrastructure.postgres_engine import PostgresEngine
from storebench.infrastructure.sqlite_engine import SqliteEngine
from storebench.utils.logging import get_logger

log = get_logger(__name__)

SQLITE_FILENAME = "points.sqlite"


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a PostgreSQL DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@contextmanager
def temporary_database(prefix: str = "storebench_") -> Generator[Path, None, None]:
    """
    Yield a path for a throwaway SQLite file.

    The file lives in its own temporary directory so journal and WAL side
    files are removed together with it.
    """
    with tempfile.TemporaryDirectory(prefix=prefix) as tmpdir:
        yield Path(tmpdir) / SQLITE_FILENAME


def _open_sqlite(target: Optional[str], stack: ExitStack) -> EngineHandle:
    path = Path(target) if target else stack.enter_context(temporary_database())
    return SqliteEngine.open(path)


def _open_postgres(target: Optional[str], stack: ExitStack) -> EngineHandle:
    del stack
    return PostgresEngine.open(target or build_dsn())


def _engine_openers() -> Dict[str, Callable[[Optional[str], ExitStack], EngineHandle]]:
    """Registry of available engines."""
    return {
        "sqlite": _open_sqlite,
        "postgres": _open_postgres,
    }


def available_engines() -> List[str]:
    """List available engine names."""
    return sorted(_engine_openers().keys())


@contextmanager
def open_engine(kind: str, target: Optional[str] = None) -> Generator[EngineHandle, None, None]:
    """
    Open an engine under test and close it when the block exits.

    Parameters
    ----------
    kind : str
        Engine name (see `available_engines`).
    target : str | None
        SQLite file path or PostgreSQL DSN. When omitted, SQLite uses a
        temporary file and PostgreSQL a DSN built from settings.

    Example
    -------
        with open_engine("sqlite") as engine:
            engine.define_schema(SCHEMA_DDL)
    """
    openers = _engine_openers()
    if kind not in openers:
        raise InvalidArgumentError(
            f"Unknown engine '{kind}'. Available: {', '.join(available_engines())}"
        )
    with ExitStack() as stack:
        engine = openers[kind](target, stack)
        stack.callback(engine.close)
        log.debug("Engine opened", extra={"engine": engine.name, "target": engine.target})
        yield engine


__all__ = [
    "available_engines",
    "build_dsn",
    "open_engine",
    "temporary_database",
]
