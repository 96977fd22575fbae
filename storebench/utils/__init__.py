"""
Utilities package for storebench.

Exports shared helpers for logging, timing, and other cross-cutting concerns.
Keep this package lightweight and free of domain-specific logic.
"""

from storebench.utils.logging import configure_logging, get_logger
from storebench.utils.profiler import PhaseStats, timed_phase

__all__ = [
    "configure_logging",
    "get_logger",
    "PhaseStats",
    "timed_phase",
]
