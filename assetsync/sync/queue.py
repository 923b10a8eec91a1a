# AssetSync Task Queue
# Cooperative single-threaded queue draining one unit per host tick

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from assetsync.logger import get_logger
from assetsync.sync.errors import QueueTaskError

logger = get_logger(__name__)


class QueueState(str, Enum):
    """Draining state of the queue."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class QueuedTask:
    """A deferred unit of work."""

    run: Callable[[], Any]
    label: str = ""


class TaskQueue:
    """
    FIFO queue of deferred work units.

    Nothing runs on ``enqueue``; the host calls ``tick`` periodically and
    each tick drains exactly one unit while the queue is running. A unit
    that raises is reported through ``on_error`` and draining continues.
    """

    def __init__(
        self,
        *,
        on_drained: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[QueueTaskError], None]] = None,
    ):
        """
        Initialize the queue.

        Args:
            on_drained: Called each time the queue runs empty after draining work.
            on_error: Called with the wrapped error when a unit raises.
        """
        self._tasks: deque[QueuedTask] = deque()
        self._paused = False
        self._running = False
        self.total = 0
        self.completed = 0
        self.on_drained = on_drained
        self.on_error = on_error

    @property
    def state(self) -> QueueState:
        if self._paused:
            return QueueState.PAUSED
        if self._running:
            return QueueState.RUNNING
        return QueueState.IDLE

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def pending(self) -> int:
        """Number of units not yet drained."""
        return len(self._tasks)

    @property
    def progress(self) -> float:
        """Fraction of enqueued units drained so far."""
        return self.completed / self.total if self.total > 0 else 0.0

    def enqueue(self, task: Callable[[], Any], label: str = "") -> None:
        """Append a unit; starts draining unless paused."""
        self._tasks.append(QueuedTask(run=task, label=label))
        self.total += 1
        if not self._running and not self._paused:
            self._running = True

    def tick(self) -> bool:
        """
        Drain at most one unit.

        Returns:
            True if a unit was executed.
        """
        if self._paused or not self._running:
            return False

        if not self._tasks:
            self._running = False
            return False

        task = self._tasks.popleft()
        try:
            task.run()
        except Exception as e:
            error = QueueTaskError(task.label or repr(task.run), e)
            logger.error("Queued task failed", task=task.label, error=str(e))
            self._report_error(error)
        self.completed += 1

        if not self._tasks:
            self._running = False
            self.total = 0
            self.completed = 0
            self._notify_drained()

        return True

    def drain(self, max_units: int | None = None) -> int:
        """
        Tick until the queue stops running.

        Args:
            max_units: Optional cap on the number of units executed.

        Returns:
            Number of units executed.
        """
        executed = 0
        while max_units is None or executed < max_units:
            if not self.tick():
                break
            executed += 1
        return executed

    def pause(self) -> None:
        """Stop draining; queued units are kept."""
        self._paused = True
        self._running = False

    def resume(self) -> None:
        """Continue draining from where the queue was paused."""
        self._paused = False
        if self._tasks:
            self._running = True

    def cancel_all(self) -> int:
        """
        Drop every queued unit and reset counters.

        Units already executed are not undone.

        Returns:
            Number of units discarded.
        """
        cancelled = len(self._tasks)
        self._tasks.clear()
        self._paused = False
        self._running = False
        self.total = 0
        self.completed = 0
        if cancelled:
            logger.info("Cancelled queued tasks", count=cancelled)
        return cancelled

    def _report_error(self, error: QueueTaskError) -> None:
        if self.on_error is None:
            return
        try:
            self.on_error(error)
        except Exception as e:
            logger.warning("Queue error hook failed", error=str(e))

    def _notify_drained(self) -> None:
        if self.on_drained is None:
            return
        try:
            self.on_drained()
        except Exception as e:
            logger.warning("Queue drained hook failed", error=str(e))
