# AssetSync Groups
# Group keys derived from items, and per-group schedules

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from assetsync.logger import get_logger
from assetsync.sync.item import DEFAULT_CATEGORY, TrackedItem, format_timestamp, parse_interval, parse_timestamp

if TYPE_CHECKING:
    from assetsync.sync.state import StateManager

logger = get_logger(__name__)

ROOT_GROUP = "Root"
DEFAULT_GROUP_INTERVAL = 60


class GroupMode(str, Enum):
    """How items are grouped."""

    DIRECTORY = "directory"
    CUSTOM = "custom"


@dataclass
class GroupSchedule:
    """Auto-sync schedule and destination for one group."""

    group_key: str
    mode: GroupMode
    enabled: bool = False
    interval_minutes: int = DEFAULT_GROUP_INTERVAL
    last_synced_at: Optional[datetime] = None
    destination_override: str = ""

    def matches(self, group_key: str, mode: GroupMode) -> bool:
        return self.group_key == group_key and self.mode == mode

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "group_key": self.group_key,
            "mode": self.mode.value,
            "enabled": self.enabled,
            "interval_minutes": self.interval_minutes,
            "last_synced_at": format_timestamp(self.last_synced_at),
            "destination_override": self.destination_override,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupSchedule":
        """
        Create from dictionary.

        Raises:
            ValueError: If the mode is not a known grouping mode.
        """
        return cls(
            group_key=str(data.get("group_key", "")),
            mode=GroupMode(data.get("mode", GroupMode.CUSTOM.value)),
            enabled=bool(data.get("enabled", False)),
            interval_minutes=parse_interval(data.get("interval_minutes"), DEFAULT_GROUP_INTERVAL),
            last_synced_at=parse_timestamp(data.get("last_synced_at")),
            destination_override=data.get("destination_override") or "",
        )


def group_key(item: TrackedItem, mode: GroupMode, path: str | None = None) -> str:
    """
    Map an item to its group key.

    Directory mode uses the second segment of the item's path
    (``Assets/Textures/wood.png`` -> ``Textures``), or ``Root`` when the
    item sits directly under the top-level folder. Custom mode uses the
    item's category.

    Args:
        item: The tracked item.
        mode: Grouping mode.
        path: Freshly resolved path; defaults to the item's cached path.
    """
    if mode == GroupMode.CUSTOM:
        return item.effective_category

    parts = [part for part in (path if path is not None else item.path).replace("\\", "/").split("/") if part]
    # A directory's own name counts as a nested segment; a file's name does not
    min_parts = 2 if item.is_directory else 3
    if len(parts) >= min_parts:
        return parts[1]
    return ROOT_GROUP


def group_items(
    items: Iterable[TrackedItem], mode: GroupMode, paths: dict[str, str] | None = None
) -> dict[str, list[TrackedItem]]:
    """
    Bucket items by group key, keeping first-seen key order.

    Args:
        items: Items to group.
        mode: Grouping mode.
        paths: Optional map of item id to freshly resolved path.
    """
    groups: dict[str, list[TrackedItem]] = {}
    for item in items:
        key = group_key(item, mode, (paths or {}).get(item.id))
        groups.setdefault(key, []).append(item)
    return groups


class GroupResolver:
    """
    Get-or-create access to group schedules, plus group renames.

    Schedules are keyed by ``(group_key, mode)`` and persisted on creation.
    """

    def __init__(self, state_manager: StateManager):
        self.state_manager = state_manager

    def find_schedule(self, key: str, mode: GroupMode) -> GroupSchedule | None:
        """Look up a schedule without creating it."""
        for schedule in self.state_manager.state.group_schedules:
            if schedule.matches(key, mode):
                return schedule
        return None

    def get_or_create_schedule(self, key: str, mode: GroupMode) -> GroupSchedule:
        """
        Look up the schedule for a group, creating a disabled default if absent.

        Args:
            key: Group key.
            mode: Grouping mode.

        Returns:
            The existing or newly persisted schedule.
        """
        schedule = self.find_schedule(key, mode)
        if schedule is not None:
            return schedule

        schedule = GroupSchedule(group_key=key, mode=mode)
        self.state_manager.state.group_schedules.append(schedule)
        self.state_manager.save()
        logger.debug("Created group schedule", group=key, mode=mode.value)
        return schedule

    def rename_group(self, old_key: str, new_key: str) -> int:
        """
        Move every item in custom group ``old_key`` to ``new_key``.

        Schedules keep their old key; the renamed items pick up whichever
        schedule exists under the new key on next lookup.

        Returns:
            Number of items reassigned.
        """
        new_key = new_key.strip() or DEFAULT_CATEGORY
        count = 0
        for item in self.state_manager.state.items:
            if item.effective_category == old_key:
                item.category = new_key
                count += 1
        if count > 0:
            self.state_manager.save()
        logger.info("Renamed group", old=old_key, new=new_key, items=count)
        return count
