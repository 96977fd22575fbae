"""
Domain models for storebench.

Defines the point row stored in the `points` table, the scenario descriptor
consumed by the workload runner, and the result record handed to the report
emitter. All models are frozen: updates produce new values, never mutate.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from storebench.domain.errors import InvalidArgumentError

COORDINATE_MIN = -100
COORDINATE_MAX = 100


class Point(BaseModel):
    """
    Representation of a single row in the `points` table.
    """

    id: int = Field(..., ge=1, description="Primary key, assigned by the fixture generator.")
    x: int = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX, description="X coordinate.")
    y: int = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX, description="Y coordinate.")

    model_config = {
        "frozen": True,
    }


class OperationKind(str, Enum):
    INSERT = "insert"
    POINT_QUERY = "point_query"
    UPDATE = "update"


class ScenarioDescriptor(BaseModel):
    """
    One named, parameterized benchmark run.

    For inserts the timed phase persists `setup_row_count` points; for point
    queries and updates those rows form the untimed baseline and
    `operation_count` operations are timed.

    Construction with bad parameters raises InvalidArgumentError chained to
    the underlying pydantic ValidationError.
    """

    name: str = Field(..., min_length=1, description="Unique scenario name.")
    setup_row_count: int = Field(..., ge=0, description="Fixture rows to generate.")
    operation_count: int = Field(..., ge=0, description="Timed operations to perform.")
    operation_kind: OperationKind = Field(..., description="Workload to run.")
    use_explicit_transaction: bool = Field(
        False, description="Wrap the timed phase in one explicit transaction."
    )
    description: str = Field("", description="Human-friendly summary.")

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            name = data.get("name") or "<unnamed>"
            raise InvalidArgumentError(f"scenario '{name}' is invalid: {exc}") from exc

    @model_validator(mode="after")
    def _check_update_targets(self) -> "ScenarioDescriptor":
        if (
            self.operation_kind is OperationKind.UPDATE
            and self.operation_count > 0
            and self.setup_row_count < 1
        ):
            raise ValueError("update scenarios need at least one baseline row to target")
        return self


class ScenarioResult(BaseModel):
    """
    Outcome of one scenario run.

    Exactly one of `matched` (point queries) or `affected` (inserts, updates)
    is populated.
    """

    name: str
    operation_kind: OperationKind
    elapsed_millis: int = Field(..., ge=0)
    elapsed_seconds: float = Field(..., ge=0.0)
    operations: int = Field(..., ge=0)
    matched: Optional[int] = Field(None, ge=0)
    affected: Optional[int] = Field(None, ge=0)
    rss_bytes: Optional[int] = None

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def _check_count(self) -> "ScenarioResult":
        if (self.matched is None) == (self.affected is None):
            raise ValueError("exactly one of matched or affected must be set")
        return self

    @property
    def count(self) -> int:
        return self.matched if self.matched is not None else self.affected  # type: ignore[return-value]

    @property
    def throughput_ops_per_sec(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.operations / self.elapsed_seconds


__all__ = [
    "COORDINATE_MAX",
    "COORDINATE_MIN",
    "OperationKind",
    "Point",
    "ScenarioDescriptor",
    "ScenarioResult",
]
