# AssetSync Utilities Module
# Helper functions for path handling and content hashing

from assetsync.utils.hashing import file_hash, files_match
from assetsync.utils.paths import (
    ensure_dir,
    expand_path,
    find_files,
    has_excluded_suffix,
    relative_posix,
    safe_copy,
)

__all__ = [
    # Paths
    "expand_path",
    "ensure_dir",
    "safe_copy",
    "relative_posix",
    "has_excluded_suffix",
    "find_files",
    # Hashing
    "file_hash",
    "files_match",
]
