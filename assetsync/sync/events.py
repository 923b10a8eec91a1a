# AssetSync Events
# Observation points for consuming layers (progress bars, notifications)

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetsync.sync.engine import SyncBatch


class SyncObserver:
    """
    Base observer; override the hooks you need.

    ``on_progress`` only fires for non-silent batches.
    """

    def on_pre_sync(self, batch: SyncBatch) -> None:
        """Called after a batch is validated, before its units are enqueued."""

    def on_progress(self, fraction: float, path: str) -> None:
        """Called as each unit starts, with queue progress and the item path."""

    def on_post_sync(self, batch: SyncBatch) -> None:
        """Called once the queue drains the batch."""
