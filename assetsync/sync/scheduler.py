# AssetSync Scheduler
# Interval-based unattended syncs, polled from the host tick

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from assetsync.logger import get_logger
from assetsync.sync.errors import ConfigError
from assetsync.sync.groups import GroupMode

if TYPE_CHECKING:
    from assetsync.sync.engine import SyncEngine

logger = get_logger(__name__)

DEFAULT_CHECK_INTERVAL = 10.0


@dataclass
class ScheduledRun:
    """A sync triggered by the scheduler."""

    group_key: Optional[str]
    mode: Optional[GroupMode]
    enqueued: int
    error: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.group_key is None


def is_due(last_synced_at: Optional[datetime], interval_minutes: int, now: datetime) -> bool:
    """A schedule that never ran is always due."""
    if last_synced_at is None:
        return True
    return now - last_synced_at >= timedelta(minutes=interval_minutes)


class SyncScheduler:
    """
    Triggers global and per-group syncs when their intervals elapse.

    ``tick`` may be called on every host tick; evaluation is throttled to
    once per ``check_interval`` seconds of the monotonic clock.
    """

    def __init__(
        self,
        engine: SyncEngine,
        *,
        check_interval: float = DEFAULT_CHECK_INTERVAL,
        clock: Callable[[], datetime] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize scheduler.

        Args:
            engine: Engine whose state holds the schedules.
            check_interval: Minimum seconds between evaluations.
            clock: Wall clock for elapsed-time checks (defaults to the engine's clock).
            monotonic: Monotonic clock used for throttling.
        """
        self.engine = engine
        self.check_interval = check_interval
        self.clock = clock or engine.clock
        self.monotonic = monotonic
        self._last_check: Optional[float] = None

    def tick(self) -> list[ScheduledRun]:
        """Evaluate schedules if the check interval has elapsed."""
        now = self.monotonic()
        if self._last_check is not None and now - self._last_check < self.check_interval:
            return []
        self._last_check = now
        return self.evaluate()

    def evaluate(self) -> list[ScheduledRun]:
        """
        Run every due schedule once.

        Global and group schedules are evaluated independently.

        Returns:
            The syncs that were triggered.
        """
        state = self.engine.state
        runs: list[ScheduledRun] = []

        if state.auto_sync_enabled:
            now = self.clock()
            if is_due(state.last_auto_sync_at, state.auto_sync_interval_minutes, now):
                logger.info("Global auto-sync triggered")
                runs.append(self._run(None, None, lambda: self.engine.sync_all(force=False, silent=True)))
                state.last_auto_sync_at = now
                self.engine.state_manager.save()

        for schedule in list(state.group_schedules):
            if not schedule.enabled:
                continue
            now = self.clock()
            if not is_due(schedule.last_synced_at, schedule.interval_minutes, now):
                continue

            logger.info("Group auto-sync triggered", group=schedule.group_key, mode=schedule.mode.value)
            runs.append(
                self._run(
                    schedule.group_key,
                    schedule.mode,
                    lambda s=schedule: self.engine.sync_group(s.group_key, s.mode, force=False, silent=True),
                )
            )
            schedule.last_synced_at = now
            self.engine.state_manager.save()

        return runs

    def _run(self, key: Optional[str], mode: Optional[GroupMode], trigger: Callable[[], int]) -> ScheduledRun:
        try:
            return ScheduledRun(group_key=key, mode=mode, enqueued=trigger())
        except ConfigError as e:
            # Already recorded in history by the engine
            logger.warning("Scheduled sync not started", group=key, error=str(e))
            return ScheduledRun(group_key=key, mode=mode, enqueued=0, error=str(e))
