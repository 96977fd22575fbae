"""
Abstract workload interfaces for storebench.

Concrete workloads (insert, point query, update) implement the Workload
protocol and share the untimed setup helpers of AbstractWorkload: schema
definition, baseline persistence, and explicit transaction scoping.
"""

from __future__ import annotations

import abc
import random
from contextlib import contextmanager
from typing import Generator, Optional, Protocol, runtime_checkable

from storebench.domain.errors import EngineFailure, SetupFailure
from storebench.domain.models import OperationKind, ScenarioDescriptor, ScenarioResult
from storebench.fixtures import iter_points
from storebench.infrastructure.engine import SCHEMA_DDL, EngineHandle
from storebench.utils.logging import get_logger
from storebench.utils.profiler import PhaseStats

log = get_logger(__name__)


@contextmanager
def explicit_transaction(engine: EngineHandle, enabled: bool = True) -> Generator[None, None, None]:
    """
    Wrap a block in BEGIN/COMMIT, rolling back when the block raises.

    With `enabled=False` the block runs in the engine's autocommit mode.
    """
    if not enabled:
        yield
        return
    engine.begin()
    try:
        yield
    except BaseException:
        try:
            engine.rollback()
        except EngineFailure:
            log.warning("Rollback failed after workload error", exc_info=True)
        raise
    engine.commit()


@runtime_checkable
class Workload(Protocol):
    """
    Common interface all workloads must implement.

    Attributes
    ----------
    kind : OperationKind
        The operation kind this workload serves.
    description : str
        A human-friendly summary of the timed phase.
    """

    kind: OperationKind
    description: str

    def execute(
        self, scenario: ScenarioDescriptor, engine: EngineHandle, rng: random.Random
    ) -> ScenarioResult:
        """
        Run setup and the timed phase against the engine.

        Parameters
        ----------
        scenario : ScenarioDescriptor
            Row and operation counts plus transaction policy.
        engine : EngineHandle
            Open engine under test; mutated by the run.
        rng : random.Random
            Source for fixtures and operation parameters.
        """
        ...


class AbstractWorkload(abc.ABC):
    """
    ABC helper for class-based workloads.

    Subclasses set `kind` and `description` and implement `execute`.
    """

    kind: OperationKind
    description: str

    @abc.abstractmethod
    def execute(
        self, scenario: ScenarioDescriptor, engine: EngineHandle, rng: random.Random
    ) -> ScenarioResult:  # pragma: no cover - interface only
        """Run the workload and return its result."""
        raise NotImplementedError

    def _define_schema(self, engine: EngineHandle) -> None:
        try:
            engine.define_schema(SCHEMA_DDL)
        except EngineFailure as exc:
            raise SetupFailure(f"schema definition failed: {exc}") from exc

    def _persist_baseline(
        self, engine: EngineHandle, scenario: ScenarioDescriptor, rng: random.Random
    ) -> None:
        """Insert the untimed baseline rows inside a single transaction."""
        log.debug(
            "Persisting baseline",
            extra={"scenario": scenario.name, "rows": scenario.setup_row_count},
        )
        try:
            with explicit_transaction(engine):
                for point in iter_points(scenario.setup_row_count, rng):
                    engine.insert(point)
        except EngineFailure as exc:
            raise SetupFailure(
                f"baseline of {scenario.setup_row_count} points failed: {exc}"
            ) from exc

    def _result(
        self,
        scenario: ScenarioDescriptor,
        stats: PhaseStats,
        operations: int,
        matched: Optional[int] = None,
        affected: Optional[int] = None,
    ) -> ScenarioResult:
        return ScenarioResult(
            name=scenario.name,
            operation_kind=self.kind,
            elapsed_millis=stats.elapsed_millis,
            elapsed_seconds=stats.duration_seconds,
            operations=operations,
            matched=matched,
            affected=affected,
            rss_bytes=stats.rss_bytes,
        )


__all__ = [
    "AbstractWorkload",
    "Workload",
    "explicit_transaction",
]
