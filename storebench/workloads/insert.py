"""
Insert workload: time persisting a freshly generated batch of points.
"""

from __future__ import annotations

import random

from storebench.domain.models import OperationKind, ScenarioDescriptor, ScenarioResult
from storebench.fixtures import generate_points
from storebench.infrastructure.engine import EngineHandle
from storebench.utils.profiler import timed_phase
from storebench.workloads.abstract import AbstractWorkload, explicit_transaction


class InsertWorkload(AbstractWorkload):
    """
    Insert `setup_row_count` points one statement at a time.

    Points are generated before the clock starts; only the insert statements
    (and the surrounding BEGIN/COMMIT when requested) are timed.
    """

    kind: OperationKind = OperationKind.INSERT
    description: str = "Insert N generated points, optionally in one transaction."

    def execute(
        self, scenario: ScenarioDescriptor, engine: EngineHandle, rng: random.Random
    ) -> ScenarioResult:
        self._define_schema(engine)
        points = generate_points(scenario.setup_row_count, rng)

        affected = 0
        with timed_phase(scenario.name) as stats:
            with explicit_transaction(engine, scenario.use_explicit_transaction):
                for point in points:
                    affected += engine.insert(point)

        return self._result(scenario, stats, operations=len(points), affected=affected)


__all__ = ["InsertWorkload"]
