# AssetSync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from assetsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from assetsync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from assetsync.config.schema import (
    AssetSyncConfig,
    HistoryConfig,
    OutputConfig,
    ProjectConfig,
    ResolverKind,
    SchedulerConfig,
    StoreConfig,
)

__all__ = [
    # Schema
    "AssetSyncConfig",
    "ProjectConfig",
    "StoreConfig",
    "HistoryConfig",
    "SchedulerConfig",
    "OutputConfig",
    "ResolverKind",
    # Loader
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
