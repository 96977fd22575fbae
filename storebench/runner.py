"""
Workload runner for storebench.

Dispatches a scenario to the workload registered for its operation kind and
runs it against an already-open engine. Engine failures propagate to the
caller untouched; the runner never retries.
"""

from __future__ import annotations

import random
from typing import Callable, Dict

from storebench.domain.models import OperationKind, ScenarioDescriptor, ScenarioResult
from storebench.infrastructure.engine import EngineHandle
from storebench.utils.logging import get_logger
from storebench.workloads.abstract import Workload
from storebench.workloads.insert import InsertWorkload
from storebench.workloads.point_query import PointQueryWorkload
from storebench.workloads.update import UpdateWorkload

log = get_logger(__name__)


def _workload_factories() -> Dict[OperationKind, Callable[[], Workload]]:
    """Registry of workloads by operation kind."""
    return {
        OperationKind.INSERT: InsertWorkload,
        OperationKind.POINT_QUERY: PointQueryWorkload,
        OperationKind.UPDATE: UpdateWorkload,
    }


def resolve_workload(kind: OperationKind) -> Workload:
    factories = _workload_factories()
    if kind not in factories:
        raise ValueError(f"No workload registered for '{kind.value}'")
    return factories[kind]()


def run_scenario(
    scenario: ScenarioDescriptor, engine: EngineHandle, rng: random.Random
) -> ScenarioResult:
    """
    Run one scenario: untimed setup, timed phase, result.

    Parameters
    ----------
    scenario : ScenarioDescriptor
        What to run.
    engine : EngineHandle
        Open engine, exclusively owned by this call for its duration.
    rng : random.Random
        Seeded source for fixtures and operation parameters.

    Raises
    ------
    SetupFailure
        Schema or baseline rows could not be created.
    EngineFailure
        The engine reported an error during the timed phase.
    """
    workload = resolve_workload(scenario.operation_kind)
    log.info(
        f"[SCENARIO START] {scenario.name}",
        extra={
            "scenario": scenario.name,
            "kind": scenario.operation_kind.value,
            "engine": engine.name,
            "setup_rows": scenario.setup_row_count,
            "operations": scenario.operation_count,
            "explicit_transaction": scenario.use_explicit_transaction,
        },
    )
    result = workload.execute(scenario, engine, rng)
    log.info(
        f"[SCENARIO SUCCESS] {scenario.name}",
        extra={
            "scenario": scenario.name,
            "elapsed_ms": result.elapsed_millis,
            "count": result.count,
            "throughput_ops": round(result.throughput_ops_per_sec, 2),
        },
    )
    return result


__all__ = ["resolve_workload", "run_scenario"]
