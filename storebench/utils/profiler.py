"""
Timing utilities for storebench.

Provides a context manager that measures the timed phase of a scenario:
- Wall-clock time (perf_counter)
- Process RSS and CPU percent after the phase (psutil snapshot)

No sampling thread is started so the measured interval contains only the
caller's own work.

Usage example:
    from storebench.utils.profiler import timed_phase

    with timed_phase("update-small") as stats:
        run_updates()

    print(stats.elapsed_millis, stats.rss_bytes)
"""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from typing import Any, Generator, Optional

import psutil


@dataclass
class PhaseStats:
    """
    Container for timed phase measurements.
    """

    label: str
    start_ts: float = field(default=0.0)
    end_ts: float = field(default=0.0)
    duration_seconds: float = field(default=0.0)
    rss_bytes: Optional[int] = field(default=None)
    cpu_percent: Optional[float] = field(default=None)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def elapsed_millis(self) -> int:
        """Whole milliseconds elapsed, truncated."""
        return int(self.duration_seconds * 1000)


@contextlib.contextmanager
def timed_phase(label: str, sample_resources: bool = True) -> Generator[PhaseStats, None, None]:
    """
    Context manager timing a block of code.

    Parameters
    ----------
    label : str
        Human-friendly label for the timed block.
    sample_resources : bool
        Whether to snapshot RSS and CPU percent through psutil once the block ends.

    Notes
    -----
    The clock stops before resource sampling so psutil calls are never part
    of the reported duration. Stats are filled in even when the block raises.
    """
    stats = PhaseStats(label=label)
    process = psutil.Process() if sample_resources else None

    # CPU percent needs a priming call
    if process is not None:
        process.cpu_percent(interval=None)

    stats.start_ts = time.perf_counter()
    try:
        yield stats
    finally:
        stats.end_ts = time.perf_counter()
        stats.duration_seconds = stats.end_ts - stats.start_ts

        if process is not None:
            stats.rss_bytes = process.memory_info().rss
            stats.cpu_percent = process.cpu_percent(interval=None)


__all__ = ["PhaseStats", "timed_phase"]
