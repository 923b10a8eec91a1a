# AssetSync Sync Engine
# Tracked-item management and batched, queued mirroring to a destination

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Optional

from assetsync.config.schema import AssetSyncConfig, ResolverKind
from assetsync.logger import get_logger
from assetsync.sync.actions import ActionResult, ActionType, sync_directory, sync_file
from assetsync.sync.errors import ConfigError, CopyError, QueueTaskError, ResolutionError
from assetsync.sync.events import SyncObserver
from assetsync.sync.groups import GroupMode, GroupResolver, GroupSchedule, group_items, group_key
from assetsync.sync.history import TIMESTAMP_FORMAT, HistoryEntry, Severity
from assetsync.sync.item import DEFAULT_CATEGORY, TrackedItem
from assetsync.sync.queue import TaskQueue
from assetsync.sync.resolver import MetaFileResolver, PathResolver, ProjectPathResolver
from assetsync.sync.state import StateManager, SyncState
from assetsync.sync.store import PreferenceStore, YamlPreferenceStore
from assetsync.utils.paths import expand_path

logger = get_logger(__name__)


@dataclass
class SyncBatch:
    """Aggregated outcome of one ``sync_items`` call."""

    destination: Path
    total: int = 0
    force: bool = False
    silent: bool = False
    started_at: Optional[datetime] = None
    changed: int = 0
    unchanged: int = 0
    skipped: int = 0
    failed: int = 0
    cancelled: bool = False
    results: list[ActionResult] = field(default_factory=list)

    @property
    def synced(self) -> int:
        """Items processed without resolution or copy failures."""
        return self.changed + self.unchanged

    @property
    def processed(self) -> int:
        return self.changed + self.unchanged + self.skipped + self.failed

    @property
    def success(self) -> bool:
        return self.failed == 0 and not self.cancelled

    def record(self, result: ActionResult) -> None:
        """Count one item result."""
        self.results.append(result)
        if result.action_type == ActionType.SKIPPED:
            self.skipped += 1
        elif result.action_type == ActionType.ERROR:
            self.failed += 1
        elif result.changed:
            self.changed += 1
        else:
            self.unchanged += 1

    def summary(self) -> str:
        """One-line completion message."""
        text = f"Synced {self.synced} items to {self.destination} ({self.changed} changed)"
        extras = []
        if self.skipped:
            extras.append(f"{self.skipped} skipped")
        if self.failed:
            extras.append(f"{self.failed} failed")
        if extras:
            text += f", {', '.join(extras)}"
        return text


class SyncEngine:
    """
    Main synchronization engine.

    Owns the sync state and the task queue. ``sync_items`` validates the
    destination and enqueues one unit per item; the host drains the queue
    through ``queue.tick``.
    """

    def __init__(
        self,
        state_manager: StateManager,
        resolver: PathResolver,
        project_root: Path,
        *,
        queue: TaskQueue | None = None,
        clock: Callable[[], datetime] = datetime.now,
        exclude_suffixes: Iterable[str] = (".meta",),
    ):
        """
        Initialize sync engine.

        Args:
            state_manager: Persistence for the sync state.
            resolver: Maps item ids to project-relative paths.
            project_root: Root of the source tree.
            queue: Optional task queue (creates new one if not provided).
            clock: Wall clock used for timestamps.
            exclude_suffixes: Sidecar suffixes skipped inside directory items.
        """
        self.state_manager = state_manager
        self.resolver = resolver
        self.project_root = project_root
        self.clock = clock
        self.exclude_suffixes = list(exclude_suffixes)
        self.groups = GroupResolver(state_manager)
        self.queue = queue or TaskQueue()
        self.queue.on_drained = self._on_queue_drained
        self.queue.on_error = self._on_queue_error
        self.current_batch: SyncBatch | None = None
        self.last_batch: SyncBatch | None = None
        self._observers: list[SyncObserver] = []

    @classmethod
    def from_config(
        cls,
        config: AssetSyncConfig,
        *,
        store: PreferenceStore | None = None,
        resolver: PathResolver | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> SyncEngine:
        """
        Build an engine from configuration.

        Args:
            config: AssetSync configuration.
            store: Optional preference store (defaults to the configured YAML file).
            resolver: Optional resolver (defaults to the configured strategy).
            clock: Wall clock used for timestamps.
        """
        project_root = config.project_root
        if store is None:
            store = YamlPreferenceStore(Path(config.store.path))
        if resolver is None:
            if config.project.resolver == ResolverKind.META:
                resolver = MetaFileResolver(project_root)
            else:
                resolver = ProjectPathResolver(project_root)

        state_manager = StateManager(store, key=config.store.key, history_limit=config.history.limit)
        return cls(
            state_manager,
            resolver,
            project_root,
            clock=clock,
            exclude_suffixes=config.project.exclude_suffixes,
        )

    @property
    def state(self) -> SyncState:
        return self.state_manager.state

    # Observers

    def add_observer(self, observer: SyncObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: SyncObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, hook: str, *args) -> None:
        for observer in list(self._observers):
            try:
                getattr(observer, hook)(*args)
            except Exception as e:
                logger.warning("Sync observer failed", hook=hook, error=str(e))

    # Tracked items

    def is_marked(self, item_id: str) -> bool:
        return self.state.get_item(item_id) is not None

    def mark_item(self, item_id: str, path: str) -> TrackedItem:
        """
        Start tracking an item. Marking an already tracked id is a no-op.

        Args:
            item_id: Stable id of the item.
            path: Current project-relative path.

        Returns:
            The tracked item.
        """
        existing = self.state.get_item(item_id)
        if existing is not None:
            return existing

        item = TrackedItem(id=item_id, path=path, is_directory=(self.project_root / path).is_dir())
        self.state.items.append(item)
        self.state_manager.save()
        logger.info("Marked item", item_id=item_id, path=path, directory=item.is_directory)
        return item

    def unmark_item(self, item_id: str) -> bool:
        """Stop tracking an item. Returns False if it wasn't tracked."""
        before = len(self.state.items)
        self.state.items = [item for item in self.state.items if item.id != item_id]
        removed = len(self.state.items) != before
        self.state_manager.save()
        if removed:
            logger.info("Unmarked item", item_id=item_id)
        return removed

    def clear_items(self) -> int:
        """Stop tracking every item."""
        count = len(self.state.items)
        self.state.items.clear()
        self.state_manager.save()
        return count

    def set_item_enabled(self, item_id: str, enabled: bool) -> bool:
        item = self.state.get_item(item_id)
        if item is None:
            return False
        item.enabled = enabled
        self.state_manager.save()
        return True

    def set_all_enabled(self, enabled: bool) -> int:
        """Enable or disable every tracked item."""
        for item in self.state.items:
            item.enabled = enabled
        self.state_manager.save()
        return len(self.state.items)

    def set_item_category(self, item_id: str, category: str) -> bool:
        item = self.state.get_item(item_id)
        if item is None:
            return False
        item.category = category.strip() or DEFAULT_CATEGORY
        self.state_manager.save()
        return True

    def set_destination(self, path: str) -> None:
        self.state.destination_path = path
        self.state_manager.save()

    def set_auto_sync(self, *, enabled: bool | None = None, interval_minutes: int | None = None) -> None:
        """Update the global auto-sync settings."""
        if interval_minutes is not None:
            if interval_minutes <= 0:
                raise ValueError("Auto-sync interval must be positive")
            self.state.auto_sync_interval_minutes = interval_minutes
        if enabled is not None:
            self.state.auto_sync_enabled = enabled
        self.state_manager.save()

    # History

    def add_history(self, message: str, severity: Severity = Severity.INFO) -> HistoryEntry:
        """Append a history entry and persist."""
        entry = HistoryEntry(
            message=message,
            timestamp=self.clock().strftime(TIMESTAMP_FORMAT),
            severity=severity,
        )
        self.state.history.append(entry)
        self.state_manager.save()
        return entry

    def clear_history(self) -> None:
        self.state.history.clear()
        self.state_manager.save()

    # Groups

    def get_or_create_group_schedule(self, key: str, mode: GroupMode) -> GroupSchedule:
        return self.groups.get_or_create_schedule(key, mode)

    def update_group_schedule(
        self,
        key: str,
        mode: GroupMode,
        *,
        enabled: bool | None = None,
        interval_minutes: int | None = None,
        destination_override: str | None = None,
    ) -> GroupSchedule:
        """Edit a group's schedule, creating it first if needed."""
        schedule = self.groups.get_or_create_schedule(key, mode)
        if interval_minutes is not None:
            if interval_minutes <= 0:
                raise ValueError("Group interval must be positive")
            schedule.interval_minutes = interval_minutes
        if enabled is not None:
            schedule.enabled = enabled
        if destination_override is not None:
            schedule.destination_override = destination_override
        self.state_manager.save()
        return schedule

    def rename_group(self, old_key: str, new_key: str) -> int:
        return self.groups.rename_group(old_key, new_key)

    def list_groups(self, mode: GroupMode) -> dict[str, list[TrackedItem]]:
        """Tracked items bucketed by group key."""
        return group_items(self.state.items, mode)

    # Sync

    def resolve_path(self, item: TrackedItem) -> str:
        """
        Re-resolve an item's id to its current path, refreshing the cached path.

        Raises:
            ResolutionError: If the id no longer maps to a path.
        """
        path = self.resolver.resolve(item.id)
        if not path:
            raise ResolutionError(item.id, item.path)
        if path != item.path:
            logger.info("Item moved", item_id=item.id, old=item.path, new=path)
            item.path = path
        return path

    def sync_all(self, *, force: bool = False, silent: bool = False, category: str | None = None) -> int:
        """
        Sync every enabled item to the global destination.

        Args:
            force: Copy regardless of digests.
            silent: Suppress per-item progress notifications.
            category: Optional category filter.

        Returns:
            Number of units enqueued.
        """
        items = self.state.enabled_items()
        if category is not None:
            items = [item for item in items if item.effective_category == category]
        return self.sync_items(items, force=force, silent=silent)

    def sync_group(self, key: str, mode: GroupMode, *, force: bool = False, silent: bool = False) -> int:
        """
        Sync the enabled items of one group, honoring its destination override.

        Returns:
            Number of units enqueued.
        """
        schedule = self.groups.get_or_create_schedule(key, mode)

        items = []
        for item in self.state.enabled_items():
            path = None
            if mode == GroupMode.DIRECTORY:
                path = self.resolver.resolve(item.id) or item.path
            if group_key(item, mode, path) == key:
                items.append(item)

        return self.sync_items(
            items,
            destination_override=schedule.destination_override or None,
            force=force,
            silent=silent,
        )

    def sync_items(
        self,
        items: list[TrackedItem],
        destination_override: str | None = None,
        *,
        force: bool = False,
        silent: bool = False,
    ) -> int:
        """
        Replace any queued work with one unit per item.

        Args:
            items: Items to sync; callers apply enable/category filters.
            destination_override: Destination root instead of the global one.
            force: Copy regardless of digests.
            silent: Suppress per-item progress notifications.

        Returns:
            Number of units enqueued.

        Raises:
            ConfigError: If no destination is set or it cannot be created.
        """
        destination = self._prepare_destination(destination_override)

        cancelled = self.queue.cancel_all()
        if self.current_batch is not None:
            self.current_batch.cancelled = True
            self.current_batch = None
        if cancelled:
            self.add_history(f"Previous sync cancelled with {cancelled} pending items", Severity.INFO)

        if not items:
            logger.info("Nothing to sync", destination=str(destination))
            return 0

        batch = SyncBatch(
            destination=destination,
            total=len(items),
            force=force,
            silent=silent,
            started_at=self.clock(),
        )
        self.current_batch = batch
        self._notify("on_pre_sync", batch)

        for item in items:
            self.queue.enqueue(partial(self._run_unit, batch, item), label=item.path or item.id)

        logger.info(
            "Sync enqueued",
            items=len(items),
            destination=str(destination),
            force=force,
            silent=silent,
        )
        return len(items)

    def sync_item(self, item: TrackedItem, destination: Path, *, force: bool = False) -> ActionResult:
        """
        Synchronously mirror one item; this is the body of each queued unit.

        Resolution failures become Warning entries and copy failures Error
        entries in the history; neither is raised.
        """
        try:
            rel_path = self.resolve_path(item)
        except ResolutionError as e:
            logger.warning("Item not resolvable", item_id=item.id, path=item.path)
            self.add_history(str(e), Severity.WARNING)
            return ActionResult(path=item.path, action_type=ActionType.SKIPPED)

        try:
            if item.is_directory:
                result = sync_directory(
                    self.project_root,
                    rel_path,
                    destination,
                    force=force,
                    exclude_suffixes=self.exclude_suffixes,
                )
                for error in result.errors:
                    logger.error("Copy failed", item_id=item.id, error=error)
                    self.add_history(error, Severity.ERROR)
            else:
                result = sync_file(
                    self.project_root,
                    rel_path,
                    destination,
                    last_checksum=item.last_checksum,
                    force=force,
                )
                item.last_checksum = result.checksum
        except CopyError as e:
            logger.error("Copy failed", item_id=item.id, path=rel_path, error=e.reason)
            self.add_history(str(e), Severity.ERROR)
            return ActionResult(path=rel_path, action_type=ActionType.ERROR, errors=[str(e)])

        item.last_synced_at = self.clock()
        self.state_manager.save()
        logger.debug(
            "Item synced",
            item_id=item.id,
            path=rel_path,
            action=result.action_type.value,
            copied=result.files_copied,
        )
        return result

    def _prepare_destination(self, destination_override: str | None) -> Path:
        raw = (destination_override or "").strip() or self.state.destination_path.strip()
        if not raw:
            message = "No destination path selected"
            logger.error(message)
            self.add_history(message, Severity.ERROR)
            raise ConfigError(message)

        destination = expand_path(raw)
        if not destination.is_dir():
            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                message = f"Failed to create destination directory {destination}: {e}"
                logger.error("Destination not creatable", destination=str(destination), error=str(e))
                self.add_history(message, Severity.ERROR)
                raise ConfigError(message) from e
        return destination

    def _run_unit(self, batch: SyncBatch, item: TrackedItem) -> bool:
        if not batch.silent:
            # Report where the item lives now, not where it was marked
            path = self.resolver.resolve(item.id) or item.path
            self._notify("on_progress", self.queue.progress, path)
        result = self.sync_item(item, batch.destination, force=batch.force)
        batch.record(result)
        return result.changed

    def _on_queue_drained(self) -> None:
        batch = self.current_batch
        if batch is None:
            return
        self.current_batch = None
        self.last_batch = batch

        severity = Severity.SUCCESS if batch.failed == 0 else Severity.WARNING
        self.add_history(batch.summary(), severity)
        logger.info(
            "Sync completed",
            destination=str(batch.destination),
            changed=batch.changed,
            unchanged=batch.unchanged,
            skipped=batch.skipped,
            failed=batch.failed,
        )
        self._notify("on_post_sync", batch)

    def _on_queue_error(self, error: QueueTaskError) -> None:
        self.add_history(str(error), Severity.ERROR)
        if self.current_batch is not None:
            self.current_batch.failed += 1
