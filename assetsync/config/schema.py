# AssetSync Configuration Schema
# Pydantic models for YAML configuration validation

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResolverKind(str, Enum):
    """How tracked ids are mapped back to project paths."""

    PATH = "path"
    META = "meta"


class ProjectConfig(BaseModel):
    """Source tree settings."""

    model_config = ConfigDict(validate_default=True)

    root: str = Field(default=".", description="Project root; item paths are relative to it")
    resolver: ResolverKind = Field(default=ResolverKind.PATH, description="Id to path resolution strategy")
    exclude_suffixes: list[str] = Field(
        default_factory=lambda: [".meta"],
        description="File suffixes never copied from directory items",
    )

    @field_validator("root")
    @classmethod
    def expand_root(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())


class StoreConfig(BaseModel):
    """Preference store holding the persisted sync state."""

    model_config = ConfigDict(validate_default=True)

    path: str = Field(default="~/.config/assetsync/prefs.yaml", description="Preference file path")
    key: str = Field(default="AssetSyncTool_Data", description="Key of the state blob")

    @field_validator("path")
    @classmethod
    def expand_path(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())


class HistoryConfig(BaseModel):
    """Sync history settings."""

    limit: int = Field(default=100, gt=0, description="Maximum number of history entries kept")


class SchedulerConfig(BaseModel):
    """Auto-sync polling settings."""

    check_interval_seconds: float = Field(default=10.0, gt=0, description="Minimum time between schedule checks")
    tick_interval_seconds: float = Field(default=0.05, gt=0, description="Host loop tick period")


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    model_config = ConfigDict(validate_default=True)

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    log_level: str = Field(default="WARNING", description="Console log level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")
    log_file: str | None = Field(default=None, description="Path to log file")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Upper-case and check the level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file")
    @classmethod
    def expand_optional_path(cls, v: str | None) -> str | None:
        """Expand ~ in optional path."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class AssetSyncConfig(BaseModel):
    """Root configuration model for AssetSync."""

    project: ProjectConfig = Field(default_factory=ProjectConfig, description="Project settings")
    store: StoreConfig = Field(default_factory=StoreConfig, description="State store settings")
    history: HistoryConfig = Field(default_factory=HistoryConfig, description="History settings")
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig, description="Scheduler settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @property
    def project_root(self) -> Path:
        """Resolved project root."""
        return Path(self.project.root).resolve()
