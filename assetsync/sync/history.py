# AssetSync History
# Bounded, append-only log of user-facing sync messages

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_HISTORY_LIMIT = 100


class Severity(str, Enum):
    """Severity of a history entry."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class HistoryEntry:
    """A single history message."""

    message: str
    timestamp: str = field(default_factory=lambda: datetime.now().strftime(TIMESTAMP_FORMAT))
    severity: Severity = Severity.INFO

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"message": self.message, "timestamp": self.timestamp, "severity": self.severity.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        """Create from dictionary."""
        try:
            severity = Severity(data.get("severity", Severity.INFO.value))
        except ValueError:
            severity = Severity.INFO
        return cls(
            message=str(data.get("message", "")),
            timestamp=str(data.get("timestamp", "")),
            severity=severity,
        )


class HistoryLog:
    """
    Capacity-bounded history.

    Appending past capacity evicts the oldest entry first.
    """

    def __init__(self, entries: list[HistoryEntry] | None = None, *, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit <= 0:
            raise ValueError("History limit must be positive")
        self.limit = limit
        self._entries: deque[HistoryEntry] = deque(entries or [], maxlen=limit)

    def append(self, entry: HistoryEntry) -> HistoryEntry:
        """Append an entry, evicting the oldest past capacity."""
        self._entries.append(entry)
        return entry

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def newest_first(self) -> list[HistoryEntry]:
        """Entries ordered from newest to oldest, for display."""
        return list(reversed(self._entries))

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def to_list(self) -> list[dict[str, Any]]:
        """Convert to list of dictionaries, oldest first."""
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]] | None, *, limit: int = DEFAULT_HISTORY_LIMIT) -> "HistoryLog":
        """Create from a list of dictionaries, keeping the newest entries within the limit."""
        if not isinstance(data, list):
            data = []
        entries = [HistoryEntry.from_dict(item) for item in data if isinstance(item, dict)]
        return cls(entries, limit=limit)
