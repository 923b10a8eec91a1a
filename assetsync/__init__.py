"""AssetSync - incremental mirroring of tracked project assets.

Tracks files and folders of a project by stable id and mirrors them into a
destination directory, copying only content that changed. Syncs run
through a cooperative task queue and can be scheduled globally or per group.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "AssetSyncConfig",
    "SyncEngine",
    "SyncScheduler",
    "TaskQueue",
    "TickLoop",
    "TrackedItem",
    "GroupMode",
    "Severity",
    "load_config",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("AssetSyncConfig", "load_config"):
        from assetsync import config

        return getattr(config, name)
    if name in ("SyncEngine", "SyncScheduler", "TaskQueue", "TickLoop", "TrackedItem", "GroupMode", "Severity"):
        from assetsync import sync

        return getattr(sync, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
