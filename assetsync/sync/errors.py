# AssetSync Errors
# Failure categories surfaced through the sync history


class AssetSyncError(Exception):
    """Base class for sync failures."""


class ResolutionError(AssetSyncError):
    """A tracked id no longer maps to a path."""

    def __init__(self, item_id: str, last_path: str = ""):
        self.item_id = item_id
        self.last_path = last_path
        hint = f" (last known path: {last_path})" if last_path else ""
        super().__init__(f"Asset with id {item_id} not found{hint}. Skipping.")


class ConfigError(AssetSyncError):
    """No destination configured, or the destination cannot be created."""


class CopyError(AssetSyncError):
    """I/O failure while copying a single file."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to copy {path}: {reason}")


class QueueTaskError(AssetSyncError):
    """A queued unit of work raised unexpectedly."""

    def __init__(self, label: str, cause: BaseException):
        self.label = label
        self.cause = cause
        super().__init__(f"Error processing task {label}: {cause}")
