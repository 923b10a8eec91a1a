# AssetSync Preference Store
# Opaque key/value string storage for the persisted state blob

from abc import ABC, abstractmethod
from pathlib import Path

import yaml

from assetsync.logger import get_logger
from assetsync.utils.paths import ensure_dir

logger = get_logger(__name__)


class PreferenceStore(ABC):
    """Key/value store of strings."""

    @abstractmethod
    def get(self, key: str, default: str = "") -> str:
        """Return the stored string for ``key`` or ``default``."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""


class MemoryPreferenceStore(PreferenceStore):
    """In-process store, used by tests and embedding hosts."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str, default: str = "") -> str:
        return self.values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class YamlPreferenceStore(PreferenceStore):
    """
    Preferences kept in a single YAML mapping file.

    The file is re-read on every ``get`` and rewritten on every ``set`` so
    other keys written by other tools are preserved.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning("Unreadable preference file", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def get(self, key: str, default: str = "") -> str:
        return self._read().get(key, default)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value

        ensure_dir(self.path.parent)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=True, allow_unicode=True)
