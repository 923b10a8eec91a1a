# AssetSync Hashing Utilities
# Content digests for change detection

import hashlib
from pathlib import Path


def file_hash(path: Path, *, algorithm: str = "sha256", chunk_size: int = 8192) -> str | None:
    """
    Calculate hash of file content.

    Args:
        path: Path to file.
        algorithm: Hash algorithm (default sha256).
        chunk_size: Chunk size for reading large files.

    Returns:
        Hex digest of hash, or None if file doesn't exist.
    """
    if not path.exists() or not path.is_file():
        return None

    hasher = hashlib.new(algorithm)

    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)

    return hasher.hexdigest()


def files_match(source: Path, dest: Path) -> bool:
    """
    Compare two files by content.

    Uses size first, then hash for confirmation. A missing file never matches.

    Args:
        source: First file.
        dest: Second file.

    Returns:
        True if both exist and contents are equal.
    """
    if not source.is_file() or not dest.is_file():
        return False

    # Quick size check first
    if source.stat().st_size != dest.stat().st_size:
        return False

    return file_hash(source) == file_hash(dest)
