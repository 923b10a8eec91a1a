# AssetSync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "project": {
        "root": ".",
        "resolver": "path",
        "exclude_suffixes": [".meta"],
    },
    "store": {
        "path": "~/.config/assetsync/prefs.yaml",
        "key": "AssetSyncTool_Data",
    },
    "history": {
        "limit": 100,
    },
    "scheduler": {
        "check_interval_seconds": 10.0,
        "tick_interval_seconds": 0.05,
    },
    "output": {
        "verbose": False,
        "colored": True,
        "log_level": "WARNING",
        "json_logs": False,
    },
}

_HEADER = """\
# AssetSync configuration
#
# project.root        Source tree; tracked paths are relative to it
# project.resolver    "path" (id is the relative path) or "meta" (guid from *.meta sidecars)
# store.path          Preference file holding the tracked items, schedules and history
# scheduler.*         Auto-sync polling intervals (seconds)

"""


def default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config(project_root: str | None = None) -> str:
    """
    Generate default configuration YAML with header comments.

    Args:
        project_root: Optional project root to write instead of ".".

    Returns:
        YAML text.
    """
    data = default_config()
    if project_root:
        data["project"]["root"] = project_root

    body = yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return _HEADER + body
