"""Task executor models."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TaskType(str, Enum):
    """Built-in task types."""

    CONTRAST = "contrast"
    PERMUTATIONS = "permutations"
    VALIDATE_SWATCH = "validate_swatch"
    VALIDATE_BATCH = "validate_batch"


class TaskStatus(str, Enum):
    """Task lifecycle: queued -> dispatched -> completed | failed."""

    QUEUED = "queued"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    FAILED = "failed"


class UnitState(str, Enum):
    """Worker unit state: idle -> busy(task_id) -> idle."""

    IDLE = "idle"
    BUSY = "busy"


@dataclass
class Task:
    """A unit of work owned by the executor.

    Callers only ever hold ``future``; the executor owns everything else.
    """

    id: str
    type: str
    payload: Any
    future: asyncio.Future[Any]
    status: TaskStatus = TaskStatus.QUEUED


@dataclass
class WorkerUnit:
    """One execution slot of the pool."""

    index: int
    state: UnitState = UnitState.IDLE
    task_id: str | None = None
    completed: int = 0

    @property
    def is_idle(self) -> bool:
        return self.state is UnitState.IDLE


@dataclass(frozen=True)
class TaskOutcome:
    """Result of running a task body, correlated by task id.

    Crosses the process boundary, so it carries the error as text rather
    than as an exception object.
    """

    task_id: str
    ok: bool
    value: Any = None
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def success(cls, task_id: str, value: Any) -> TaskOutcome:
        return cls(task_id=task_id, ok=True, value=value)

    @classmethod
    def failure(cls, task_id: str, error: str, error_type: str | None = None) -> TaskOutcome:
        return cls(task_id=task_id, ok=False, error=error, error_type=error_type)


class ExecutorStats(BaseModel):
    """Point-in-time view of the pool."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_workers: int = Field(ge=1)
    backend: str
    initialized: bool
    terminated: bool
    busy_units: int = 0
    queued: int = 0
    submitted: int = 0
    completed: int = 0
    failed: int = 0
    units: list[str] = Field(default_factory=list, description="Per-unit state labels")


__all__ = [
    "ExecutorStats",
    "Task",
    "TaskOutcome",
    "TaskStatus",
    "TaskType",
    "UnitState",
    "WorkerUnit",
]
