# AssetSync Tracked Item
# A user-marked file or directory in the source tree

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

DEFAULT_CATEGORY = "General"


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Serialize an optional datetime as ISO text."""
    return value.isoformat() if value is not None else None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO text (or pass through a datetime) into an optional datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def parse_interval(value: Any, default: int) -> int:
    """Parse a positive minute interval, falling back to ``default``."""
    try:
        interval = int(value)
    except (TypeError, ValueError):
        return default
    return interval if interval > 0 else default


@dataclass
class TrackedItem:
    """
    A file or directory marked for mirroring.

    ``id`` is stable across renames and is resolved to a path before each
    sync; ``path`` only caches the last resolved location.
    """

    id: str
    path: str
    is_directory: bool = False
    enabled: bool = True
    category: str = DEFAULT_CATEGORY
    last_synced_at: Optional[datetime] = None
    last_checksum: Optional[str] = None

    @property
    def effective_category(self) -> str:
        """Category label, falling back to the default for blank values."""
        return self.category.strip() or DEFAULT_CATEGORY

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "id": self.id,
            "path": self.path,
            "is_directory": self.is_directory,
            "enabled": self.enabled,
            "category": self.category,
            "last_synced_at": format_timestamp(self.last_synced_at),
            "last_checksum": self.last_checksum,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackedItem":
        """Create from dictionary."""
        return cls(
            id=str(data.get("id", "")),
            path=str(data.get("path", "")),
            is_directory=bool(data.get("is_directory", False)),
            enabled=bool(data.get("enabled", True)),
            category=data.get("category") or DEFAULT_CATEGORY,
            last_synced_at=parse_timestamp(data.get("last_synced_at")),
            last_checksum=data.get("last_checksum"),
        )
