"""
Orchestrator for running benchmark scenarios sequentially against fresh engines.

Usage (example from CLI):
    from storebench.orchestrator import RunConfig, run_scenarios

    outcome = run_scenarios(RunConfig(scenario_names=["small-insert"], seed=42))
    print(outcome.results)

Each scenario gets its own engine (opened and closed around the run) and its
own random stream derived from the seed and the scenario name. A failing
scenario is reported by name; under the default tolerant policy the run moves
on to the next scenario.

When `results_dir` is set, the payload is also written to:
- `<results_dir>/latest.json` (last run)
- `<results_dir>/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from storebench.config import get_settings
from storebench.domain.errors import BenchmarkError, InvalidArgumentError
from storebench.domain.models import ScenarioDescriptor, ScenarioResult
from storebench.fixtures import make_random_source
from storebench.infrastructure.db_factory import available_engines, open_engine
from storebench.reporter import ReportEmitter, result_payload
from storebench.runner import run_scenario
from storebench.scenarios import select_scenarios
from storebench.utils.logging import get_logger

log = get_logger(__name__)

FAILURE_POLICIES = ("tolerant", "strict")


@dataclass
class RunConfig:
    """
    Parameters of one harness run. Unset fields fall back to settings.
    """

    scenario_names: Optional[Iterable[str]] = None
    scenarios: Optional[Sequence[ScenarioDescriptor]] = None
    seed: Optional[int] = None
    engine: Optional[str] = None
    target: Optional[str] = None
    failure_policy: Optional[str] = None
    emitter: Optional[ReportEmitter] = None
    results_dir: Optional[Path | str] = None


@dataclass
class RunOutcome:
    seed: int
    engine: str
    results: List[ScenarioResult] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def _persist_results(outcome: RunOutcome, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "seed": outcome.seed,
        "engine": outcome.engine,
        "results": [result_payload(result) for result in outcome.results],
        "failures": outcome.failures,
    }
    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


def _run_one(
    scenario: ScenarioDescriptor, engine_kind: str, target: Optional[str], seed: int
) -> ScenarioResult:
    rng = make_random_source(seed, scenario.name)
    with open_engine(engine_kind, target) as engine:
        return run_scenario(scenario, engine, rng)


def run_scenarios(config: Optional[RunConfig] = None) -> RunOutcome:
    """
    Run the selected scenarios one at a time and report each result.

    Parameters
    ----------
    config : RunConfig | None
        Scenario selection, seed, engine and failure policy.

    Returns
    -------
    RunOutcome
        Successful results in execution order plus failure messages by name.

    Raises
    ------
    InvalidArgumentError
        Unknown scenario, engine, or failure policy (raised before any run).
    BenchmarkError
        The first scenario failure when the failure policy is "strict".
    """
    config = config or RunConfig()
    settings = get_settings()
    seed = settings.seed if config.seed is None else config.seed
    engine_kind = config.engine or settings.engine
    target = config.target if config.target is not None else settings.target
    policy = config.failure_policy or settings.failure_policy
    emitter = config.emitter or ReportEmitter(fmt=settings.report_format)

    if engine_kind not in available_engines():
        raise InvalidArgumentError(
            f"Unknown engine '{engine_kind}'. Available: {', '.join(available_engines())}"
        )
    if policy not in FAILURE_POLICIES:
        raise InvalidArgumentError(
            f"Unknown failure policy '{policy}'. Available: {', '.join(FAILURE_POLICIES)}"
        )
    selected = select_scenarios(config.scenario_names, config.scenarios)

    outcome = RunOutcome(seed=seed, engine=engine_kind)
    total = len(selected)
    for index, scenario in enumerate(selected, start=1):
        log.info(
            f"[RUN {index}/{total}] {scenario.name}",
            extra={"scenario": scenario.name, "seed": seed, "engine": engine_kind},
        )
        try:
            result = _run_one(scenario, engine_kind, target, seed)
        except BenchmarkError as exc:
            log.exception(
                f"[SCENARIO FAILED] {scenario.name}",
                extra={"scenario": scenario.name, "error_type": type(exc).__name__},
            )
            outcome.failures[scenario.name] = str(exc)
            emitter.emit_failure(scenario.name, exc)
            if policy == "strict":
                emitter.finish()
                raise
            continue
        outcome.results.append(result)
        emitter.emit(result)

    emitter.finish()

    if config.results_dir is not None:
        _persist_results(outcome, Path(config.results_dir))

    log.info(
        f"[ORCHESTRATOR COMPLETE] {len(outcome.results)}/{total} scenario(s) succeeded",
        extra={"failures": sorted(outcome.failures), "total_scenarios": total},
    )
    return outcome


__all__ = [
    "FAILURE_POLICIES",
    "RunConfig",
    "RunOutcome",
    "run_scenarios",
]
