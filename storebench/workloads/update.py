"""
Update workload: time moving random existing rows to fresh coordinates.
"""

from __future__ import annotations

import random

from storebench.domain.models import OperationKind, ScenarioDescriptor, ScenarioResult
from storebench.fixtures import random_coordinate
from storebench.infrastructure.engine import EngineHandle
from storebench.utils.profiler import timed_phase
from storebench.workloads.abstract import AbstractWorkload, explicit_transaction


class UpdateWorkload(AbstractWorkload):
    """
    Update `operation_count` rows picked uniformly from the baseline ids.

    Each update targets an id in [1, setup_row_count], so every statement
    references a row that exists; ids themselves are never rewritten.
    """

    kind: OperationKind = OperationKind.UPDATE
    description: str = "Single-row updates by primary key on a baseline table."

    def execute(
        self, scenario: ScenarioDescriptor, engine: EngineHandle, rng: random.Random
    ) -> ScenarioResult:
        self._define_schema(engine)
        self._persist_baseline(engine, scenario, rng)

        affected = 0
        with timed_phase(scenario.name) as stats:
            with explicit_transaction(engine, scenario.use_explicit_transaction):
                for _ in range(scenario.operation_count):
                    x = random_coordinate(rng)
                    y = random_coordinate(rng)
                    target = rng.randint(1, scenario.setup_row_count)
                    affected += engine.update(target, x, y)

        return self._result(
            scenario, stats, operations=scenario.operation_count, affected=affected
        )


__all__ = ["UpdateWorkload"]
