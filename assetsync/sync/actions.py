# AssetSync Sync Actions
# Incremental diff-and-copy of single files and directory items

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from assetsync.sync.errors import CopyError
from assetsync.utils.hashing import file_hash, files_match
from assetsync.utils.paths import find_files, relative_posix, safe_copy


class ActionType(str, Enum):
    """Outcome of syncing one item."""

    COPIED = "copied"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class ActionResult:
    """Result of syncing one tracked item."""

    path: str
    action_type: ActionType
    checksum: Optional[str] = None
    files_copied: int = 0
    files_unchanged: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """True if any bytes were written to the destination."""
        return self.files_copied > 0


def sync_file(
    project_root: Path,
    rel_path: str,
    destination: Path,
    *,
    last_checksum: Optional[str] = None,
    force: bool = False,
) -> ActionResult:
    """
    Mirror one file under the destination, skipping unchanged content.

    The copy is skipped only when not forced, a previous digest is known,
    the destination copy exists and the source digest still matches.

    Args:
        project_root: Root of the source tree.
        rel_path: File path relative to the project root.
        destination: Destination root.
        last_checksum: Digest stored after the previous copy.
        force: Copy regardless of digests.

    Returns:
        ActionResult carrying the new source digest.

    Raises:
        CopyError: If the source is missing or the copy fails.
    """
    source = project_root / rel_path
    try:
        digest = file_hash(source)
    except OSError as e:
        raise CopyError(rel_path, str(e)) from e
    if digest is None:
        raise CopyError(rel_path, "source file is missing")

    dest = destination / rel_path
    if not force and last_checksum is not None and dest.exists() and digest == last_checksum:
        return ActionResult(path=rel_path, action_type=ActionType.UNCHANGED, checksum=digest, files_unchanged=1)

    try:
        safe_copy(source, dest)
    except OSError as e:
        raise CopyError(rel_path, str(e)) from e

    return ActionResult(path=rel_path, action_type=ActionType.COPIED, checksum=digest, files_copied=1)


def sync_directory(
    project_root: Path,
    rel_path: str,
    destination: Path,
    *,
    force: bool = False,
    exclude_suffixes: list[str] | None = None,
) -> ActionResult:
    """
    Mirror every file under a directory item.

    Each member is compared against its destination copy by content; no
    digest is cached for members. A member that fails to copy is recorded
    in ``errors`` and the remaining members are still processed.

    Args:
        project_root: Root of the source tree.
        rel_path: Directory path relative to the project root.
        destination: Destination root.
        force: Copy every member regardless of content.
        exclude_suffixes: Member suffixes to skip (sidecar files).

    Returns:
        ActionResult with per-member counts.

    Raises:
        CopyError: If the source directory is missing.
    """
    source_dir = project_root / rel_path
    if not source_dir.is_dir():
        raise CopyError(rel_path, "source directory is missing")

    result = ActionResult(path=rel_path, action_type=ActionType.UNCHANGED)

    for source in find_files(source_dir, exclude_suffixes=exclude_suffixes):
        # Destination mirrors the project-relative layout
        member = relative_posix(source, project_root) or f"{rel_path}/{relative_posix(source, source_dir)}"
        dest = destination / member

        try:
            if not force and files_match(source, dest):
                result.files_unchanged += 1
                continue
            safe_copy(source, dest)
            result.files_copied += 1
        except OSError as e:
            result.errors.append(str(CopyError(member, str(e))))

    if result.files_copied > 0:
        result.action_type = ActionType.COPIED
    elif result.errors:
        result.action_type = ActionType.ERROR

    return result
