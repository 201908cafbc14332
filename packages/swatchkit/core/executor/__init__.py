"""Task executor: a bounded pool of worker units with FIFO dispatch."""

from swatchkit.core.executor.models import (
    ExecutorStats,
    Task,
    TaskOutcome,
    TaskStatus,
    TaskType,
    UnitState,
    WorkerUnit,
)
from swatchkit.core.executor.handlers import HANDLERS, TaskHandler, run_task
from swatchkit.core.executor.pool import Backend, TaskExecutor

__all__ = [
    "Backend",
    "ExecutorStats",
    "HANDLERS",
    "Task",
    "TaskExecutor",
    "TaskHandler",
    "TaskOutcome",
    "TaskStatus",
    "TaskType",
    "UnitState",
    "WorkerUnit",
    "run_task",
]
