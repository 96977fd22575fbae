from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer

from storebench.config import get_settings
from storebench.domain.errors import BenchmarkError, InvalidArgumentError
from storebench.infrastructure.db_factory import available_engines
from storebench.orchestrator import RunConfig, run_scenarios
from storebench.reporter import REPORT_FORMATS, ReportEmitter
from storebench.scenarios import list_scenarios, load_scenarios
from storebench.utils.logging import configure_logging

app = typer.Typer(help="storebench: storage-engine micro-benchmark harness.")

EXIT_SCENARIO_FAILED = 1
EXIT_INVALID_ARGUMENT = 2


def _split_names(value: str) -> List[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    target = settings.target or (
        "<temporary file>"
        if settings.engine == "sqlite"
        else f"{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )
    typer.echo(
        f"engine={settings.engine} target={target} seed={settings.seed} "
        f"format={settings.report_format} failure_policy={settings.failure_policy} "
        f"engines={','.join(available_engines())}"
    )


@app.command("scenarios")
def scenarios_command(
    scenario_file: Optional[Path] = typer.Option(
        None,
        "--scenario-file",
        help="JSON file with scenario definitions (default: built-in scenarios).",
    ),
) -> None:
    """
    List scenarios in execution order.
    """
    try:
        registry = load_scenarios(scenario_file) if scenario_file else list_scenarios()
    except InvalidArgumentError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=EXIT_INVALID_ARGUMENT)
    for scenario in registry:
        txn = "txn" if scenario.use_explicit_transaction else "autocommit"
        typer.echo(
            f"{scenario.name}: {scenario.operation_kind.value} "
            f"setup={scenario.setup_row_count} ops={scenario.operation_count} {txn}"
        )


@app.command()
def run(
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Deterministic RNG seed (default from settings, 42).",
    ),
    scenarios: str = typer.Option(
        "all",
        "--scenarios",
        "--scenario",
        "-s",
        help="Comma-separated scenario names, or 'all'.",
    ),
    engine: Optional[str] = typer.Option(
        None,
        "--engine",
        "-e",
        help=f"Engine under test ({', '.join(available_engines())}).",
    ),
    target: Optional[str] = typer.Option(
        None,
        "--target",
        help="SQLite file path or PostgreSQL DSN (default: temporary file / settings DSN).",
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help=f"Report format ({', '.join(REPORT_FORMATS)}).",
    ),
    scenario_file: Optional[Path] = typer.Option(
        None,
        "--scenario-file",
        help="JSON file with scenario definitions replacing the built-in ones.",
    ),
    failure_policy: Optional[str] = typer.Option(
        None,
        "--failure-policy",
        help="'tolerant' continues after a failed scenario, 'strict' stops at the first.",
    ),
    results_dir: Optional[Path] = typer.Option(
        None,
        "--results-dir",
        help="Also write JSON results to this directory.",
    ),
) -> None:
    """
    Run scenarios and write one report line per scenario to stdout.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        registry = load_scenarios(scenario_file) if scenario_file else None
        emitter = ReportEmitter(fmt=fmt or settings.report_format)
        outcome = run_scenarios(
            RunConfig(
                scenario_names=_split_names(scenarios),
                scenarios=registry,
                seed=seed,
                engine=engine,
                target=target,
                failure_policy=failure_policy,
                emitter=emitter,
                results_dir=results_dir,
            )
        )
    except InvalidArgumentError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=EXIT_INVALID_ARGUMENT)
    except BenchmarkError:
        # strict policy: the failure was already reported by name
        raise typer.Exit(code=EXIT_SCENARIO_FAILED)

    if not outcome.ok:
        raise typer.Exit(code=EXIT_SCENARIO_FAILED)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
