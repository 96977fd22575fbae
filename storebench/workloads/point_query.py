"""
Point query workload: time indexed (x, y) lookups against a baseline table.

Query coordinates are drawn independently of the baseline, so with 1,000 rows
spread over 201 * 201 possible points most lookups miss.
"""

from __future__ import annotations

import random

from storebench.domain.models import OperationKind, ScenarioDescriptor, ScenarioResult
from storebench.fixtures import random_coordinate
from storebench.infrastructure.engine import EngineHandle
from storebench.utils.profiler import timed_phase
from storebench.workloads.abstract import AbstractWorkload, explicit_transaction


class PointQueryWorkload(AbstractWorkload):
    kind: OperationKind = OperationKind.POINT_QUERY
    description: str = "Random (x, y) lookups; counts lookups returning a row."

    def execute(
        self, scenario: ScenarioDescriptor, engine: EngineHandle, rng: random.Random
    ) -> ScenarioResult:
        self._define_schema(engine)
        self._persist_baseline(engine, scenario, rng)

        matched = 0
        with timed_phase(scenario.name) as stats:
            with explicit_transaction(engine, scenario.use_explicit_transaction):
                for _ in range(scenario.operation_count):
                    x = random_coordinate(rng)
                    y = random_coordinate(rng)
                    if engine.query(x, y):
                        matched += 1

        return self._result(
            scenario, stats, operations=scenario.operation_count, matched=matched
        )


__all__ = ["PointQueryWorkload"]
