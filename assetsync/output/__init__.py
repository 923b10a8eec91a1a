# AssetSync Output Module
# Rich console output

from assetsync.output.console import Console, ProgressObserver, create_console

__all__ = [
    "Console",
    "ProgressObserver",
    "create_console",
]
