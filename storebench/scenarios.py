"""
Scenario registry for storebench.

Scenarios are data: each row below is validated into a ScenarioDescriptor and
the tuple order is the execution order. Additional scenarios can be loaded
from a JSON file holding a list of objects with the same fields.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from storebench.domain.errors import InvalidArgumentError
from storebench.domain.models import OperationKind, ScenarioDescriptor

_BUILTIN_SCENARIOS: tuple[Dict[str, Any], ...] = (
    {
        "name": "small-insert",
        "setup_row_count": 100,
        "operation_count": 100,
        "operation_kind": OperationKind.INSERT,
        "use_explicit_transaction": False,
        "description": "Insert 100 points, one autocommitted statement each.",
    },
    {
        "name": "point-query",
        "setup_row_count": 1_000,
        "operation_count": 10_000,
        "operation_kind": OperationKind.POINT_QUERY,
        "use_explicit_transaction": True,
        "description": "10k indexed (x, y) lookups against 1k points.",
    },
    {
        "name": "update-small",
        "setup_row_count": 1_000,
        "operation_count": 100,
        "operation_kind": OperationKind.UPDATE,
        "use_explicit_transaction": False,
        "description": "100 autocommitted updates on a 1k-row table.",
    },
    {
        "name": "update-medium",
        "setup_row_count": 10_000,
        "operation_count": 100,
        "operation_kind": OperationKind.UPDATE,
        "use_explicit_transaction": False,
        "description": "100 autocommitted updates on a 10k-row table.",
    },
    {
        "name": "update-huge",
        "setup_row_count": 1_000_000,
        "operation_count": 100,
        "operation_kind": OperationKind.UPDATE,
        "use_explicit_transaction": False,
        "description": "100 autocommitted updates on a 1M-row table.",
    },
)


def build_scenarios(rows: Iterable[Mapping[str, Any]]) -> List[ScenarioDescriptor]:
    """
    Validate raw scenario rows into descriptors, preserving order.

    Raises
    ------
    InvalidArgumentError
        If a row has bad parameters or a name appears twice.
    """
    scenarios: List[ScenarioDescriptor] = []
    seen: set[str] = set()
    for index, row in enumerate(rows):
        try:
            scenario = ScenarioDescriptor(**dict(row))
        except InvalidArgumentError as exc:
            raise InvalidArgumentError(f"scenario #{index + 1}: {exc}") from exc
        if scenario.name in seen:
            raise InvalidArgumentError(f"duplicate scenario name '{scenario.name}'")
        seen.add(scenario.name)
        scenarios.append(scenario)
    return scenarios


def list_scenarios() -> List[ScenarioDescriptor]:
    """Built-in scenarios in execution order."""
    return build_scenarios(_BUILTIN_SCENARIOS)


def available_scenarios(scenarios: Optional[Sequence[ScenarioDescriptor]] = None) -> List[str]:
    """List scenario names in execution order."""
    source = list_scenarios() if scenarios is None else scenarios
    return [scenario.name for scenario in source]


def select_scenarios(
    names: Optional[Iterable[str]] = None,
    scenarios: Optional[Sequence[ScenarioDescriptor]] = None,
) -> List[ScenarioDescriptor]:
    """
    Resolve scenario names against a registry.

    Parameters
    ----------
    names : iterable[str] | None
        Names to run, in the requested order. None or ["all"] selects every
        scenario in registry order.
    scenarios : sequence[ScenarioDescriptor] | None
        Registry to resolve against; defaults to the built-in scenarios.
    """
    registry = list_scenarios() if scenarios is None else list(scenarios)
    requested = [name.strip() for name in names] if names is not None else ["all"]
    requested = [name for name in requested if name]
    if not requested or requested == ["all"]:
        return registry

    by_name = {scenario.name: scenario for scenario in registry}
    unknown = [name for name in requested if name not in by_name]
    if unknown:
        raise InvalidArgumentError(
            f"Unknown scenario(s) {', '.join(repr(n) for n in unknown)}. "
            f"Available: {', '.join(by_name)}"
        )
    return [by_name[name] for name in requested]


def load_scenarios(path: Path | str) -> List[ScenarioDescriptor]:
    """
    Load scenarios from a JSON file containing a list of descriptor objects.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            rows = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidArgumentError(f"cannot read scenario file {path}: {exc}") from exc
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise InvalidArgumentError(f"scenario file {path} must hold a list of objects")
    return build_scenarios(rows)


__all__ = [
    "available_scenarios",
    "build_scenarios",
    "list_scenarios",
    "load_scenarios",
    "select_scenarios",
]
