# AssetSync Path Utilities
# Safe file operations with atomic copies and file enumeration

import os
import shutil
from pathlib import Path


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables in path.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded Path object.
    """
    path_str = str(path)
    # Expand ~ first, then environment variables
    path_str = os.path.expanduser(path_str)
    path_str = os.path.expandvars(path_str)
    return Path(path_str).resolve()


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_copy(source: Path, dest: Path, *, preserve_metadata: bool = True) -> None:
    """
    Atomically copy a file, overwriting any existing destination.

    Copies into a temporary sibling first and renames it over the
    destination so a failed copy never leaves a truncated file behind.

    Args:
        source: Source file.
        dest: Destination file.
        preserve_metadata: Whether to preserve file metadata (default True).

    Raises:
        FileNotFoundError: If source doesn't exist.
        IsADirectoryError: If source is a directory.
    """
    if not source.exists():
        raise FileNotFoundError(f"Source does not exist: {source}")
    if source.is_dir():
        raise IsADirectoryError(f"Source is a directory: {source}")

    # Ensure parent directory exists
    ensure_dir(dest.parent)

    temp_dest = dest.with_suffix(dest.suffix + f".tmp.{os.getpid()}")
    try:
        if preserve_metadata:
            shutil.copy2(source, temp_dest)
        else:
            shutil.copy(source, temp_dest)
        os.replace(temp_dest, dest)
    except OSError:
        # Cleanup on failure
        if temp_dest.exists():
            temp_dest.unlink()
        raise


def relative_posix(path: Path, base: Path) -> str | None:
    """
    Get path relative to base in forward-slash form, or None if not relative.

    Args:
        path: Path to make relative.
        base: Base path.

    Returns:
        Relative path string or None if path is outside base.
    """
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return None


def has_excluded_suffix(path: str | Path, suffixes: list[str]) -> bool:
    """Check if a path ends with any of the excluded suffixes."""
    name = str(path)
    return any(name.endswith(suffix) for suffix in suffixes)


def find_files(directory: Path, *, exclude_suffixes: list[str] | None = None) -> list[Path]:
    """
    Recursively find files under a directory.

    Args:
        directory: Directory to search.
        exclude_suffixes: File name suffixes to skip (e.g. sidecar ".meta" files).

    Returns:
        Sorted list of file paths.
    """
    if not directory.is_dir():
        return []

    results: list[Path] = []

    for path in directory.rglob("*"):
        if not path.is_file():
            continue

        if exclude_suffixes and has_excluded_suffix(path.name, exclude_suffixes):
            continue

        results.append(path)

    return sorted(results)
