"""
Domain package for storebench.

Exports the core domain models and the error taxonomy used across workloads,
engines, and the orchestrator. Keep this package focused on data definitions
and validation concerns.
"""

from storebench.domain.errors import (
    BenchmarkError,
    EngineFailure,
    InvalidArgumentError,
    SetupFailure,
)
from storebench.domain.models import (
    COORDINATE_MAX,
    COORDINATE_MIN,
    OperationKind,
    Point,
    ScenarioDescriptor,
    ScenarioResult,
)

__all__ = [
    "BenchmarkError",
    "COORDINATE_MAX",
    "COORDINATE_MIN",
    "EngineFailure",
    "InvalidArgumentError",
    "OperationKind",
    "Point",
    "ScenarioDescriptor",
    "ScenarioResult",
    "SetupFailure",
]
