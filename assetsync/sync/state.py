# AssetSync Sync State
# Aggregate state and its write-through persistence

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import yaml

from assetsync.logger import get_logger
from assetsync.sync.groups import GroupSchedule
from assetsync.sync.history import DEFAULT_HISTORY_LIMIT, HistoryLog
from assetsync.sync.item import TrackedItem, format_timestamp, parse_interval, parse_timestamp
from assetsync.sync.store import PreferenceStore

logger = get_logger(__name__)

STATE_VERSION = "1.0"
DEFAULT_STATE_KEY = "AssetSyncTool_Data"
DEFAULT_AUTO_SYNC_INTERVAL = 60


@dataclass
class SyncState:
    """
    Complete sync state.

    Tracked items, destinations, schedules and history, in one blob.
    """

    version: str = STATE_VERSION
    items: list[TrackedItem] = field(default_factory=list)
    destination_path: str = ""
    auto_sync_enabled: bool = False
    auto_sync_interval_minutes: int = DEFAULT_AUTO_SYNC_INTERVAL
    last_auto_sync_at: Optional[datetime] = None
    group_schedules: list[GroupSchedule] = field(default_factory=list)
    history: HistoryLog = field(default_factory=HistoryLog)

    def get_item(self, item_id: str) -> Optional[TrackedItem]:
        """Get a tracked item by id."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def find_by_path(self, path: str) -> Optional[TrackedItem]:
        """Get a tracked item by its cached path."""
        for item in self.items:
            if item.path == path:
                return item
        return None

    def enabled_items(self) -> list[TrackedItem]:
        """Items currently enabled for sync, in tracked order."""
        return [item for item in self.items if item.enabled]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "version": self.version,
            "destination_path": self.destination_path,
            "auto_sync": {
                "enabled": self.auto_sync_enabled,
                "interval_minutes": self.auto_sync_interval_minutes,
                "last_synced_at": format_timestamp(self.last_auto_sync_at),
            },
            "items": [item.to_dict() for item in self.items],
            "group_schedules": [schedule.to_dict() for schedule in self.group_schedules],
            "history": self.history.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, history_limit: int = DEFAULT_HISTORY_LIMIT) -> "SyncState":
        """Create from dictionary."""
        auto_sync = data.get("auto_sync")
        if not isinstance(auto_sync, dict):
            auto_sync = {}

        items: list[TrackedItem] = []
        seen: set[str] = set()
        for item_data in data.get("items") or []:
            if not isinstance(item_data, dict):
                logger.warning("Skipping malformed item entry", entry=repr(item_data))
                continue
            item = TrackedItem.from_dict(item_data)
            # Ids are unique within the tracked set
            if not item.id or item.id in seen:
                continue
            seen.add(item.id)
            items.append(item)

        schedules: list[GroupSchedule] = []
        for schedule_data in data.get("group_schedules") or []:
            if not isinstance(schedule_data, dict):
                logger.warning("Skipping malformed group schedule", entry=repr(schedule_data))
                continue
            try:
                schedules.append(GroupSchedule.from_dict(schedule_data))
            except ValueError as e:
                logger.warning("Skipping malformed group schedule", entry=repr(schedule_data), error=str(e))

        return cls(
            version=str(data.get("version", STATE_VERSION)),
            items=items,
            destination_path=str(data.get("destination_path") or ""),
            auto_sync_enabled=bool(auto_sync.get("enabled", False)),
            auto_sync_interval_minutes=parse_interval(auto_sync.get("interval_minutes"), DEFAULT_AUTO_SYNC_INTERVAL),
            last_auto_sync_at=parse_timestamp(auto_sync.get("last_synced_at")),
            group_schedules=schedules,
            history=HistoryLog.from_list(data.get("history"), limit=history_limit),
        )


class StateManager:
    """
    Manages sync state persistence.

    Loads lazily on first access and writes the whole state through to the
    preference store on every ``save``.
    """

    def __init__(
        self,
        store: PreferenceStore,
        *,
        key: str = DEFAULT_STATE_KEY,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        """
        Initialize state manager.

        Args:
            store: Preference store holding the serialized state.
            key: Preference key of the state blob.
            history_limit: Capacity of the history log.
        """
        self.store = store
        self.key = key
        self.history_limit = history_limit
        self._state: Optional[SyncState] = None

    @property
    def state(self) -> SyncState:
        """Get current state, loading if necessary."""
        if self._state is None:
            self._state = self.load()
        return self._state

    def load(self) -> SyncState:
        """Load state from the preference store."""
        blob = self.store.get(self.key, "")
        if not blob.strip():
            return SyncState(history=HistoryLog(limit=self.history_limit))

        try:
            data = yaml.safe_load(blob)
        except yaml.YAMLError as e:
            logger.warning("Discarding unreadable sync state", key=self.key, error=str(e))
            return SyncState(history=HistoryLog(limit=self.history_limit))

        if not isinstance(data, dict):
            return SyncState(history=HistoryLog(limit=self.history_limit))

        return SyncState.from_dict(data, history_limit=self.history_limit)

    def save(self) -> None:
        """Serialize state and write it to the preference store."""
        if self._state is None:
            return

        blob = yaml.safe_dump(self._state.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True)
        self.store.set(self.key, blob)

    def reset(self) -> None:
        """Reset state to empty."""
        self._state = SyncState(history=HistoryLog(limit=self.history_limit))
        self.save()
