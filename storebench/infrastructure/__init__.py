"""
Infrastructure package for storebench.

Centralizes engine-under-test concerns (adapters, schema, scoped acquisition).
Keep this layer focused on I/O and resource management, decoupled from
workload/orchestrator logic.
"""

from storebench.infrastructure.db_factory import (
    available_engines,
    build_dsn,
    open_engine,
    temporary_database,
)
from storebench.infrastructure.engine import SCHEMA_DDL, EngineHandle

__all__ = [
    "EngineHandle",
    "SCHEMA_DDL",
    "available_engines",
    "build_dsn",
    "open_engine",
    "temporary_database",
]
