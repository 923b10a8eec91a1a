# AssetSync Test Fixtures
# Pytest fixtures for AssetSync tests

import tempfile
from collections.abc import Generator
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import yaml

from assetsync.sync.engine import SyncEngine
from assetsync.sync.resolver import StaticPathResolver
from assetsync.sync.state import StateManager
from assetsync.sync.store import MemoryPreferenceStore


class ManualClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class ManualMonotonic:
    """Monotonic seconds counter for throttling tests."""

    def __init__(self, value: float = 0.0):
        self.value = value

    def __call__(self) -> float:
        return self.value


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project(temp_dir: Path) -> Path:
    """
    Create a small project tree.

    Assets/a.txt, Assets/b.txt, Assets/Textures/{wood,stone}.png with a
    wood.png.meta sidecar, and Assets/Audio/theme.ogg.
    """
    root = temp_dir / "project"
    assets = root / "Assets"
    (assets / "Textures").mkdir(parents=True)
    (assets / "Audio").mkdir()

    (assets / "a.txt").write_text("alpha", encoding="utf-8")
    (assets / "b.txt").write_text("bravo", encoding="utf-8")
    (assets / "Textures" / "wood.png").write_text("wood", encoding="utf-8")
    (assets / "Textures" / "stone.png").write_text("stone", encoding="utf-8")
    (assets / "Textures" / "wood.png.meta").write_text("guid: tex-wood\n", encoding="utf-8")
    (assets / "Audio" / "theme.ogg").write_text("theme", encoding="utf-8")
    return root


@pytest.fixture
def destination(temp_dir: Path) -> Path:
    """Destination root (not created yet)."""
    return temp_dir / "mirror"


@pytest.fixture
def store() -> MemoryPreferenceStore:
    """In-memory preference store."""
    return MemoryPreferenceStore()


@pytest.fixture
def clock() -> ManualClock:
    """Manual wall clock starting at a fixed instant."""
    return ManualClock(datetime(2024, 5, 1, 12, 0, 0))


@pytest.fixture
def monotonic() -> ManualMonotonic:
    """Manual monotonic clock."""
    return ManualMonotonic()


@pytest.fixture
def resolver() -> StaticPathResolver:
    """Resolver mapping short ids to the project fixture's paths."""
    return StaticPathResolver(
        {
            "a": "Assets/a.txt",
            "b": "Assets/b.txt",
            "wood": "Assets/Textures/wood.png",
            "tex": "Assets/Textures",
            "theme": "Assets/Audio/theme.ogg",
        }
    )


@pytest.fixture
def state_manager(store: MemoryPreferenceStore) -> StateManager:
    """State manager over the in-memory store."""
    return StateManager(store)


@pytest.fixture
def engine(
    state_manager: StateManager,
    resolver: StaticPathResolver,
    project: Path,
    clock: ManualClock,
) -> SyncEngine:
    """Engine over the project fixture with no destination set."""
    return SyncEngine(state_manager, resolver, project, clock=clock)


@pytest.fixture
def config_file(temp_dir: Path, project: Path) -> Path:
    """Configuration file pointing at the project fixture."""
    data = {
        "project": {"root": str(project), "resolver": "path"},
        "store": {"path": str(temp_dir / "prefs.yaml")},
        "scheduler": {"check_interval_seconds": 1.0, "tick_interval_seconds": 0.001},
        "output": {"colored": False},
    }
    path = temp_dir / "config.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f)
    return path
