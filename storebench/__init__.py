"""
storebench - micro-benchmark harness for embedded relational storage engines.

Creates a `points(id, x, y)` table with an `(x, y)` index and times named
scenarios against it:

- Bulk insert of generated points
- Indexed point lookups under load
- Primary-key updates on small, medium and huge tables

Runs are reproducible from a seed, scenarios are data, and the engine under
test (SQLite by default, PostgreSQL optionally) sits behind a narrow handle.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from storebench.config import Settings, get_settings
from storebench.domain import (
    BenchmarkError,
    EngineFailure,
    InvalidArgumentError,
    OperationKind,
    Point,
    ScenarioDescriptor,
    ScenarioResult,
    SetupFailure,
)
from storebench.fixtures import generate_points, make_random_source
from storebench.infrastructure import EngineHandle, open_engine
from storebench.orchestrator import RunConfig, RunOutcome, run_scenarios
from storebench.reporter import ReportEmitter
from storebench.runner import run_scenario
from storebench.scenarios import list_scenarios, load_scenarios, select_scenarios
from storebench.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "OperationKind",
    "Point",
    "ScenarioDescriptor",
    "ScenarioResult",
    # Errors
    "BenchmarkError",
    "EngineFailure",
    "InvalidArgumentError",
    "SetupFailure",
    # Fixtures
    "generate_points",
    "make_random_source",
    # Engines
    "EngineHandle",
    "open_engine",
    # Running and reporting
    "RunConfig",
    "RunOutcome",
    "run_scenario",
    "run_scenarios",
    "ReportEmitter",
    # Scenarios
    "list_scenarios",
    "load_scenarios",
    "select_scenarios",
    # Logging
    "configure_logging",
    "get_logger",
]
