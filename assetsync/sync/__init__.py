# AssetSync Sync Module
# Core synchronization engine and components

from assetsync.sync.actions import ActionResult, ActionType, sync_directory, sync_file
from assetsync.sync.engine import SyncBatch, SyncEngine
from assetsync.sync.errors import AssetSyncError, ConfigError, CopyError, QueueTaskError, ResolutionError
from assetsync.sync.events import SyncObserver
from assetsync.sync.groups import GroupMode, GroupResolver, GroupSchedule, group_key
from assetsync.sync.history import HistoryEntry, HistoryLog, Severity
from assetsync.sync.item import TrackedItem
from assetsync.sync.queue import QueueState, TaskQueue
from assetsync.sync.resolver import MetaFileResolver, PathResolver, ProjectPathResolver, StaticPathResolver
from assetsync.sync.scheduler import ScheduledRun, SyncScheduler
from assetsync.sync.state import StateManager, SyncState
from assetsync.sync.store import MemoryPreferenceStore, PreferenceStore, YamlPreferenceStore
from assetsync.sync.ticker import TickLoop

__all__ = [
    # Item
    "TrackedItem",
    # History
    "HistoryEntry",
    "HistoryLog",
    "Severity",
    # State
    "SyncState",
    "StateManager",
    "PreferenceStore",
    "MemoryPreferenceStore",
    "YamlPreferenceStore",
    # Groups
    "GroupMode",
    "GroupSchedule",
    "GroupResolver",
    "group_key",
    # Resolution
    "PathResolver",
    "StaticPathResolver",
    "ProjectPathResolver",
    "MetaFileResolver",
    # Actions
    "ActionType",
    "ActionResult",
    "sync_file",
    "sync_directory",
    # Queue
    "QueueState",
    "TaskQueue",
    # Engine
    "SyncEngine",
    "SyncBatch",
    "SyncObserver",
    # Scheduling
    "SyncScheduler",
    "ScheduledRun",
    "TickLoop",
    # Errors
    "AssetSyncError",
    "ResolutionError",
    "ConfigError",
    "CopyError",
    "QueueTaskError",
]
