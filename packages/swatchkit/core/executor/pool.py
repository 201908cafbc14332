"""Bounded worker pool with FIFO dispatch.

``submit`` returns an asyncio future immediately. Tasks wait in a FIFO queue
until a unit is idle; the unit hands the pure handler to a
``concurrent.futures`` pool (threads or processes) and the outcome is
correlated back to the submitter by task id. The queue and the per-unit busy
flags are only touched inside ``self._lock``.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from collections import deque
from collections.abc import Mapping
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Any, Literal

from swatchkit.core.device import clamp_workers, detect_concurrency
from swatchkit.core.errors import (
    ExecutorNotInitializedError,
    ExecutorTerminatedError,
    TaskExecutionError,
)
from swatchkit.core.executor.handlers import HANDLERS, TaskHandler, run_task
from swatchkit.core.executor.models import (
    ExecutorStats,
    Task,
    TaskOutcome,
    TaskStatus,
    TaskType,
    UnitState,
    WorkerUnit,
)

logger = logging.getLogger(__name__)

Backend = Literal["thread", "process"]


class TaskExecutor:
    """Fixed-size pool of worker units.

    Args:
        max_workers: Unit count, clamped to [1, 8]. Detected from the CPU
            count when omitted.
        backend: ``"thread"`` (default) or ``"process"``.
        handlers: Extra or replacement handlers keyed by task type. Handlers
            for the process backend must be top-level functions.

    Example:
        >>> async with TaskExecutor(max_workers=4) as executor:
        ...     result = await executor.submit("contrast", {"color1": "#FFF", "color2": "#000"})
        >>> result["ratio"]
        21.0
    """

    def __init__(
        self,
        max_workers: int | None = None,
        backend: Backend = "thread",
        handlers: Mapping[str, TaskHandler] | None = None,
    ) -> None:
        if backend not in ("thread", "process"):
            raise ValueError(f"Unknown executor backend: {backend!r}")

        self._max_workers = clamp_workers(
            max_workers if max_workers is not None else detect_concurrency()
        )
        self._backend = backend
        self._handlers: dict[str, TaskHandler] = {**HANDLERS, **(handlers or {})}

        self._lock = threading.Lock()
        self._queue: deque[Task] = deque()
        self._units = [WorkerUnit(index=i) for i in range(self._max_workers)]
        self._running: set[asyncio.Task[None]] = set()
        self._ids = itertools.count(1)

        self._pool: Executor | None = None
        self._initialized = False
        self._terminated = False

        self._submitted = 0
        self._completed = 0
        self._failed = 0

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def is_running(self) -> bool:
        return self._initialized and not self._terminated

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the backend pool. Safe to call multiple times."""
        with self._lock:
            if self._initialized:
                return
            if self._backend == "process":
                self._pool = ProcessPoolExecutor(max_workers=self._max_workers)
            else:
                self._pool = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="swatchkit-unit"
                )
            self._initialized = True
        logger.debug(
            "Task executor initialized (%d %s units)", self._max_workers, self._backend
        )

    async def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks and fail everything still queued.

        In-flight tasks finish normally. With ``wait`` the call returns once
        they have.
        """
        with self._lock:
            if self._terminated:
                return
            self._terminated = True
            drained = list(self._queue)
            self._queue.clear()

        for task in drained:
            task.status = TaskStatus.FAILED
            self._failed += 1
            if not task.future.done():
                task.future.set_exception(
                    ExecutorTerminatedError(f"Task {task.id} terminated: executor shut down")
                )
        if drained:
            logger.info("Executor shutdown rejected %d queued task(s)", len(drained))

        if wait and self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

        if self._pool is not None:
            self._pool.shutdown(wait=wait)
        logger.debug("Task executor shut down")

    async def __aenter__(self) -> TaskExecutor:
        self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()

    # ------------------------------------------------------------------
    # Submission and dispatch
    # ------------------------------------------------------------------

    def submit(self, task_type: TaskType | str, payload: Any = None) -> asyncio.Future[Any]:
        """Queue a task and return a future for its result.

        Must be called from a running event loop. The future fails with
        ExecutorNotInitializedError before ``initialize``, with
        ExecutorTerminatedError after ``shutdown``, and with
        TaskExecutionError if the task body raises.
        """
        _, future = self.submit_with_id(task_type, payload)
        return future

    def submit_with_id(
        self, task_type: TaskType | str, payload: Any = None
    ) -> tuple[str, asyncio.Future[Any]]:
        """Like ``submit``, also returning the task id for correlation."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        type_name = task_type.value if isinstance(task_type, TaskType) else str(task_type)

        with self._lock:
            task_id = f"task-{next(self._ids)}"
            if not self._initialized:
                future.set_exception(
                    ExecutorNotInitializedError(f"Task {task_id} rejected: executor not initialized")
                )
                return task_id, future
            if self._terminated:
                future.set_exception(
                    ExecutorTerminatedError(f"Task {task_id} rejected: executor shut down")
                )
                return task_id, future
            self._queue.append(Task(id=task_id, type=type_name, payload=payload, future=future))
            self._submitted += 1

        self._dispatch(loop)
        return task_id, future

    async def run(self, task_type: TaskType | str, payload: Any = None) -> Any:
        """Submit a task and await its result."""
        return await self.submit(task_type, payload)

    def _dispatch(self, loop: asyncio.AbstractEventLoop) -> None:
        assignments: list[tuple[WorkerUnit, Task]] = []
        with self._lock:
            for unit in self._units:
                if not self._queue:
                    break
                if unit.is_idle:
                    task = self._queue.popleft()
                    unit.state = UnitState.BUSY
                    unit.task_id = task.id
                    task.status = TaskStatus.DISPATCHED
                    assignments.append((unit, task))

        for unit, task in assignments:
            running = loop.create_task(self._run_on_unit(unit, task))
            self._running.add(running)
            running.add_done_callback(self._running.discard)

    async def _run_on_unit(self, unit: WorkerUnit, task: Task) -> None:
        loop = asyncio.get_running_loop()
        handler = self._handlers.get(task.type)
        if handler is None:
            outcome = TaskOutcome.failure(
                task.id, f"Unknown task type: {task.type}", "UnknownTaskType"
            )
        else:
            try:
                outcome = await loop.run_in_executor(
                    self._pool, run_task, handler, task.id, task.payload
                )
            except Exception as exc:
                # Pickling errors and broken process pools land here.
                logger.exception("Unit %d failed to run task %s", unit.index, task.id)
                outcome = TaskOutcome.failure(task.id, str(exc), type(exc).__name__)

        self._resolve(task, outcome)

        with self._lock:
            unit.state = UnitState.IDLE
            unit.task_id = None
            unit.completed += 1
        self._dispatch(loop)

    def _resolve(self, task: Task, outcome: TaskOutcome) -> None:
        if outcome.task_id != task.id:
            outcome = TaskOutcome.failure(
                task.id, f"Outcome correlated to {outcome.task_id}", "CorrelationError"
            )

        if outcome.ok:
            task.status = TaskStatus.COMPLETED
            self._completed += 1
            if not task.future.done():
                task.future.set_result(outcome.value)
            return

        task.status = TaskStatus.FAILED
        self._failed += 1
        logger.warning("Task %s (%s) failed: %s", task.id, task.type, outcome.error)
        if not task.future.done():
            task.future.set_exception(
                TaskExecutionError(task.id, task.type, outcome.error or "", outcome.error_type)
            )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def stats(self) -> ExecutorStats:
        with self._lock:
            return ExecutorStats(
                max_workers=self._max_workers,
                backend=self._backend,
                initialized=self._initialized,
                terminated=self._terminated,
                busy_units=sum(1 for u in self._units if not u.is_idle),
                queued=len(self._queue),
                submitted=self._submitted,
                completed=self._completed,
                failed=self._failed,
                units=[
                    u.state.value if u.task_id is None else f"{u.state.value}({u.task_id})"
                    for u in self._units
                ],
            )


__all__ = [
    "Backend",
    "TaskExecutor",
]
