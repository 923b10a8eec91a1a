# AssetSync Tick Loop
# Periodic driver standing in for a host's update loop

import time
from collections.abc import Callable
from typing import Any, Optional

from assetsync.logger import get_logger

logger = get_logger(__name__)


class TickLoop:
    """
    Calls each registered callback once per tick, sleeping between ticks.

    Any periodic host (a GUI timer, an event loop, a test) can call the
    same callbacks instead.
    """

    def __init__(
        self,
        callbacks: list[Callable[[], Any]] | None = None,
        *,
        interval: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.callbacks: list[Callable[[], Any]] = list(callbacks or [])
        self.interval = interval
        self.sleep = sleep
        self.ticks = 0

    def add(self, callback: Callable[[], Any]) -> None:
        self.callbacks.append(callback)

    def tick(self) -> None:
        """Invoke every callback once."""
        for callback in self.callbacks:
            callback()
        self.ticks += 1

    def run(self, *, max_ticks: Optional[int] = None, until: Optional[Callable[[], bool]] = None) -> int:
        """
        Tick until ``until`` returns True or ``max_ticks`` is reached.

        Without either limit the loop runs until interrupted.

        Returns:
            Number of ticks performed by this call.
        """
        performed = 0
        logger.debug("Tick loop started", interval=self.interval, max_ticks=max_ticks)
        while max_ticks is None or performed < max_ticks:
            if until is not None and until():
                break
            self.tick()
            performed += 1
            self.sleep(self.interval)
        logger.debug("Tick loop stopped", ticks=performed)
        return performed
