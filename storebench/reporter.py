"""
Report emitter for storebench.

Renders scenario results as one human line per scenario (default), as JSON
lines for machine consumption, or as a rich table once the run finishes.
Formatting is a pure function of the result; emitting the same result twice
writes identical bytes.
"""

from __future__ import annotations

import json
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from rich import box
from rich.console import Console
from rich.table import Table

from storebench.domain.errors import InvalidArgumentError
from storebench.domain.models import OperationKind, ScenarioResult

REPORT_FORMATS = ("line", "json", "table")


def format_line(result: ScenarioResult) -> str:
    """Render a result as a single human-readable line."""
    ms = result.elapsed_millis
    if result.operation_kind is OperationKind.INSERT:
        return f"{result.name}: inserted {result.affected} points in {ms}ms"
    if result.operation_kind is OperationKind.POINT_QUERY:
        return f"{result.name}: {result.operations} queries matched {result.matched} points in {ms}ms"
    return f"{result.name}: {result.operations} updates affected {result.affected} rows in {ms}ms"


def result_payload(result: ScenarioResult) -> Dict[str, Any]:
    payload = result.model_dump(mode="json")
    payload["elapsed_seconds"] = round(result.elapsed_seconds, 6)
    payload["throughput_ops_per_sec"] = round(result.throughput_ops_per_sec, 2)
    return payload


def format_json(result: ScenarioResult) -> str:
    """Render a result as one JSON object with sorted keys."""
    return json.dumps(result_payload(result), sort_keys=True)


class ReportEmitter:
    """
    Write scenario results to an output sink.

    Parameters
    ----------
    sink : TextIO | None
        Destination for reports; defaults to stdout.
    fmt : str
        One of "line", "json", "table".
    error_sink : TextIO | None
        Destination for failure notices; defaults to stderr.
    title : str
        Table title used by the "table" format.
    """

    def __init__(
        self,
        sink: Optional[TextIO] = None,
        fmt: str = "line",
        error_sink: Optional[TextIO] = None,
        title: str = "storebench results",
    ) -> None:
        if fmt not in REPORT_FORMATS:
            raise InvalidArgumentError(
                f"Unknown report format '{fmt}'. Available: {', '.join(REPORT_FORMATS)}"
            )
        self.sink = sink if sink is not None else sys.stdout
        self.error_sink = error_sink if error_sink is not None else sys.stderr
        self.fmt = fmt
        self.title = title
        self._rows: List[ScenarioResult] = []
        self._failures: List[str] = []

    def _writer(self) -> Optional[Callable[[ScenarioResult], str]]:
        return {"line": format_line, "json": format_json}.get(self.fmt)

    def emit(self, result: ScenarioResult) -> None:
        writer = self._writer()
        if writer is None:
            self._rows.append(result)
            return
        self.sink.write(writer(result) + "\n")
        self.sink.flush()

    def emit_failure(self, name: str, error: BaseException) -> None:
        """Report a failed scenario by name on the error sink."""
        self.error_sink.write(f"{name}: {error}\n")
        self.error_sink.flush()
        self._failures.append(name)

    def finish(self) -> None:
        """Render the collected table; a no-op for streaming formats."""
        if self.fmt != "table":
            return
        console = Console(file=self.sink)
        if not self._rows and not self._failures:
            console.print("[yellow]No results to display.[/yellow]")
            return
        console.print(render_table(self._rows, self._failures, title=self.title))


def render_table(
    results: List[ScenarioResult], failures: Optional[List[str]] = None, title: str = ""
) -> Table:
    """
    Build a rich table of results in execution order, failures last.
    """
    table = Table(title=title or None, box=box.ROUNDED)

    table.add_column("Scenario", style="cyan", no_wrap=True)
    table.add_column("Kind", style="blue")
    table.add_column("Operations", justify="right", style="magenta")
    table.add_column("Matched / Affected", justify="right")
    table.add_column("Elapsed (ms)", justify="right", style="green")
    table.add_column("Throughput (ops/s)", justify="right", style="bold green")
    table.add_column("RSS (MB)", justify="right", style="yellow")

    for res in results:
        mem_str = "N/A"
        if res.rss_bytes is not None:
            mem_str = f"{res.rss_bytes / (1024 * 1024):.2f}"
        table.add_row(
            res.name,
            res.operation_kind.value,
            f"{res.operations:,}",
            f"{res.count:,}",
            str(res.elapsed_millis),
            f"{res.throughput_ops_per_sec:,.2f}",
            mem_str,
        )
    for name in failures or []:
        table.add_row(name, "[red]FAILED[/red]", "", "", "", "", "")
    return table


__all__ = [
    "REPORT_FORMATS",
    "ReportEmitter",
    "format_json",
    "format_line",
    "render_table",
    "result_payload",
]
