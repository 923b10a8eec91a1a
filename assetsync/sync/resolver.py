# AssetSync Path Resolution
# Map stable item ids to their current project-relative paths

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import yaml

from assetsync.logger import get_logger
from assetsync.utils.paths import relative_posix

logger = get_logger(__name__)


class PathResolver(ABC):
    """Resolves stable ids to project-relative paths."""

    @abstractmethod
    def resolve(self, item_id: str) -> Optional[str]:
        """Return the current relative path for ``item_id``, or None if not found."""

    @abstractmethod
    def identify(self, path: str) -> Optional[str]:
        """Return the stable id of a relative path, or None if it has none."""


class StaticPathResolver(PathResolver):
    """Resolver backed by an explicit id to path mapping."""

    def __init__(self, mapping: dict[str, str] | None = None):
        self.mapping: dict[str, str] = dict(mapping or {})

    def add(self, item_id: str, path: str) -> None:
        self.mapping[item_id] = path

    def move(self, item_id: str, new_path: str) -> None:
        self.mapping[item_id] = new_path

    def remove(self, item_id: str) -> None:
        self.mapping.pop(item_id, None)

    def resolve(self, item_id: str) -> Optional[str]:
        return self.mapping.get(item_id)

    def identify(self, path: str) -> Optional[str]:
        for item_id, mapped in self.mapping.items():
            if mapped == path:
                return item_id
        return None


class ProjectPathResolver(PathResolver):
    """
    Resolver where the id is the relative path itself.

    Renames are not tracked: a moved file simply stops resolving.
    """

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def resolve(self, item_id: str) -> Optional[str]:
        if (self.project_root / item_id).exists():
            return item_id
        return None

    def identify(self, path: str) -> Optional[str]:
        absolute = (self.project_root / path).resolve()
        if not absolute.exists():
            return None
        return relative_posix(absolute, self.project_root.resolve())


class MetaFileResolver(PathResolver):
    """
    Resolver reading ``guid`` values from YAML sidecar files.

    Every asset ``X`` has a sidecar ``X.meta`` that moves with it, so the
    guid keeps resolving after renames. The index is rebuilt whenever a
    lookup misses or points at a path that no longer exists.
    """

    def __init__(self, project_root: Path, *, suffix: str = ".meta"):
        self.project_root = project_root
        self.suffix = suffix
        self._index: dict[str, str] | None = None

    def _read_guid(self, meta_path: Path) -> Optional[str]:
        try:
            with open(meta_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.debug("Skipping unreadable sidecar", path=str(meta_path), error=str(e))
            return None
        if not isinstance(data, dict) or not data.get("guid"):
            return None
        return str(data["guid"])

    def refresh(self) -> dict[str, str]:
        """Rescan the project for sidecar files."""
        index: dict[str, str] = {}
        root = self.project_root.resolve()
        for meta_path in root.rglob(f"*{self.suffix}"):
            asset_path = meta_path.with_name(meta_path.name[: -len(self.suffix)])
            if not asset_path.exists():
                continue
            guid = self._read_guid(meta_path)
            rel_path = relative_posix(asset_path, root)
            if guid and rel_path:
                index[guid] = rel_path
        self._index = index
        logger.debug("Indexed sidecar files", project=str(root), count=len(index))
        return index

    def resolve(self, item_id: str) -> Optional[str]:
        index = self._index if self._index is not None else self.refresh()
        path = index.get(item_id)
        if path is not None and (self.project_root / path).exists():
            return path
        return self.refresh().get(item_id)

    def identify(self, path: str) -> Optional[str]:
        asset_path = self.project_root / path
        if not asset_path.exists():
            return None
        return self._read_guid(asset_path.with_name(asset_path.name + self.suffix))
