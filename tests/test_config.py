# AssetSync Config Tests
# Tests for configuration loading and validation

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from assetsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from assetsync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from assetsync.config.schema import AssetSyncConfig, OutputConfig, ResolverKind
from assetsync.sync.engine import SyncEngine
from assetsync.sync.resolver import MetaFileResolver, ProjectPathResolver
from assetsync.sync.store import MemoryPreferenceStore, YamlPreferenceStore


class TestAssetSyncConfig:
    """Tests for AssetSyncConfig schema."""

    def test_defaults(self):
        config = AssetSyncConfig()
        assert config.project.resolver == ResolverKind.PATH
        assert config.project.exclude_suffixes == [".meta"]
        assert config.store.key == "AssetSyncTool_Data"
        assert config.history.limit == 100
        assert config.scheduler.check_interval_seconds == 10.0

    def test_path_expansion(self):
        config = AssetSyncConfig.model_validate({"store": {"path": "~/prefs.yaml"}})
        assert "~" not in config.store.path

    def test_default_paths_expanded(self):
        config = AssetSyncConfig()
        assert "~" not in config.store.path
        assert config.store.path == str(Path("~/.config/assetsync/prefs.yaml").expanduser())

    def test_log_level_normalized(self):
        assert OutputConfig(log_level="debug").log_level == "DEBUG"

    def test_bad_log_level(self):
        with pytest.raises(ValidationError):
            OutputConfig(log_level="chatty")

    def test_history_limit_positive(self):
        with pytest.raises(ValidationError):
            AssetSyncConfig.model_validate({"history": {"limit": 0}})

    def test_resolver_enum(self):
        assert ResolverKind.PATH.value == "path"
        assert ResolverKind.META.value == "meta"


class TestConfigLoader:
    """Tests for config loading and saving."""

    def test_load_config(self, config_file: Path, project: Path):
        config = load_config(config_file)
        assert config.project_root == project.resolve()
        # Unspecified keys come from defaults
        assert config.history.limit == 100

    def test_load_missing_config(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError, match="assetsync init"):
            load_config(temp_dir / "nonexistent.yaml")

    def test_load_empty_config(self, temp_dir: Path):
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == AssetSyncConfig()

    def test_env_override(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ASSETSYNC_CONFIG", str(temp_dir / "custom.yaml"))
        assert get_config_path() == temp_dir / "custom.yaml"

    def test_save_config(self, temp_dir: Path):
        config = AssetSyncConfig.model_validate({"project": {"resolver": "meta"}})
        config_path = temp_dir / "saved.yaml"

        save_config(config, config_path)

        with open(config_path, encoding="utf-8") as f:
            saved = yaml.safe_load(f)
        assert saved["project"]["resolver"] == "meta"
        assert load_config(config_path).project.resolver == ResolverKind.META

    def test_ensure_config_exists(self, temp_dir: Path):
        path = temp_dir / "sub" / "config.yaml"

        created_path, created = ensure_config_exists(path, project_root=str(temp_dir))
        assert created is True
        assert created_path.exists()
        assert load_config(path).project.root == str(temp_dir)

        _, created_again = ensure_config_exists(path)
        assert created_again is False

    def test_validate_valid_config(self, config_file: Path):
        is_valid, errors = validate_config_file(config_file)
        assert is_valid is True
        assert errors == []

    def test_validate_invalid_yaml(self, temp_dir: Path):
        bad_file = temp_dir / "bad.yaml"
        bad_file.write_text("{ invalid yaml [", encoding="utf-8")

        is_valid, errors = validate_config_file(bad_file)
        assert is_valid is False
        assert errors

    def test_validate_schema_error(self, temp_dir: Path):
        bad_file = temp_dir / "bad.yaml"
        bad_file.write_text(yaml.dump({"history": {"limit": -1}}), encoding="utf-8")

        is_valid, errors = validate_config_file(bad_file)
        assert is_valid is False
        assert any(e.startswith("history -> limit") for e in errors)

    def test_validate_missing(self, temp_dir: Path):
        is_valid, errors = validate_config_file(temp_dir / "missing.yaml")
        assert is_valid is False


class TestDefaults:
    """Tests for default configuration."""

    def test_default_config_structure(self):
        for section in ("project", "store", "history", "scheduler", "output"):
            assert section in DEFAULT_CONFIG

    def test_generated_yaml_is_valid(self):
        text = generate_default_config("/work/game")
        assert text.startswith("#")
        data = yaml.safe_load(text)
        assert AssetSyncConfig.model_validate(data).project.root == "/work/game"


class TestEngineFromConfig:
    """Tests for building an engine from configuration."""

    def test_path_resolver(self, config_file: Path, project: Path):
        engine = SyncEngine.from_config(load_config(config_file), store=MemoryPreferenceStore())
        assert isinstance(engine.resolver, ProjectPathResolver)
        assert engine.project_root == project.resolve()

    def test_meta_resolver_and_yaml_store(self, project: Path, temp_dir: Path):
        config = AssetSyncConfig.model_validate(
            {
                "project": {"root": str(project), "resolver": "meta"},
                "store": {"path": str(temp_dir / "prefs.yaml"), "key": "k"},
                "history": {"limit": 5},
            }
        )
        engine = SyncEngine.from_config(config)
        assert isinstance(engine.resolver, MetaFileResolver)
        assert isinstance(engine.state_manager.store, YamlPreferenceStore)
        assert engine.state_manager.key == "k"
        assert engine.state.history.limit == 5

    def test_default_store_under_home(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOME", str(temp_dir / "home"))
        monkeypatch.chdir(temp_dir)

        engine = SyncEngine.from_config(AssetSyncConfig())
        engine.set_destination(str(temp_dir / "mirror"))

        assert (temp_dir / "home" / ".config" / "assetsync" / "prefs.yaml").exists()
        assert not (temp_dir / "~").exists()
