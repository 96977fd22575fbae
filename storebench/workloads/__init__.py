"""
Workloads package for storebench.

This module re-exports the abstract interfaces and the concrete workload
classes so downstream code can import from `storebench.workloads` directly.
"""

from storebench.workloads.abstract import (
    AbstractWorkload,
    Workload,
    explicit_transaction,
)
from storebench.workloads.insert import InsertWorkload
from storebench.workloads.point_query import PointQueryWorkload
from storebench.workloads.update import UpdateWorkload

__all__ = [
    # Abstracts
    "AbstractWorkload",
    "Workload",
    "explicit_transaction",
    # Concrete workloads
    "InsertWorkload",
    "PointQueryWorkload",
    "UpdateWorkload",
]
