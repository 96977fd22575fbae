"""
Error taxonomy for storebench.

Every failure a scenario can report derives from BenchmarkError so the
orchestrator can isolate a failing scenario without catching programming
errors.
"""
from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for scenario-level failures."""


class InvalidArgumentError(BenchmarkError, ValueError):
    """Bad scenario parameters, unknown scenario names, or malformed scenario files."""


class EngineFailure(BenchmarkError):
    """The engine under test reported an error while opening, executing, or closing."""


class SetupFailure(BenchmarkError):
    """Schema definition or baseline fixture persistence failed."""


__all__ = ["BenchmarkError", "EngineFailure", "InvalidArgumentError", "SetupFailure"]
