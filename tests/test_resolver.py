# Tests for assetsync.sync.resolver
# Id to path resolution strategies

import shutil
from pathlib import Path

from assetsync.sync.resolver import MetaFileResolver, ProjectPathResolver, StaticPathResolver


class TestStaticPathResolver:
    """Tests for StaticPathResolver."""

    def test_resolve_and_identify(self):
        resolver = StaticPathResolver({"a": "Assets/a.txt"})
        assert resolver.resolve("a") == "Assets/a.txt"
        assert resolver.identify("Assets/a.txt") == "a"
        assert resolver.resolve("missing") is None

    def test_move_and_remove(self):
        resolver = StaticPathResolver()
        resolver.add("a", "old")
        resolver.move("a", "new")
        assert resolver.resolve("a") == "new"
        resolver.remove("a")
        assert resolver.resolve("a") is None


class TestProjectPathResolver:
    """Tests for ProjectPathResolver."""

    def test_id_is_path(self, project: Path):
        resolver = ProjectPathResolver(project)
        assert resolver.identify("Assets/a.txt") == "Assets/a.txt"
        assert resolver.resolve("Assets/a.txt") == "Assets/a.txt"

    def test_normalizes_path(self, project: Path):
        resolver = ProjectPathResolver(project)
        assert resolver.identify("Assets/Textures/../a.txt") == "Assets/a.txt"

    def test_missing(self, project: Path):
        resolver = ProjectPathResolver(project)
        assert resolver.resolve("Assets/gone.txt") is None
        assert resolver.identify("Assets/gone.txt") is None

    def test_outside_project(self, project: Path):
        (project.parent / "outside.txt").write_text("x", encoding="utf-8")
        assert ProjectPathResolver(project).identify("../outside.txt") is None


class TestMetaFileResolver:
    """Tests for MetaFileResolver."""

    def test_identify_reads_guid(self, project: Path):
        resolver = MetaFileResolver(project)
        assert resolver.identify("Assets/Textures/wood.png") == "tex-wood"

    def test_no_sidecar(self, project: Path):
        assert MetaFileResolver(project).identify("Assets/a.txt") is None

    def test_resolve(self, project: Path):
        assert MetaFileResolver(project).resolve("tex-wood") == "Assets/Textures/wood.png"

    def test_follows_move(self, project: Path):
        resolver = MetaFileResolver(project)
        assert resolver.resolve("tex-wood") == "Assets/Textures/wood.png"

        target = project / "Assets" / "Audio"
        shutil.move(str(project / "Assets" / "Textures" / "wood.png"), str(target / "oak.png"))
        shutil.move(str(project / "Assets" / "Textures" / "wood.png.meta"), str(target / "oak.png.meta"))

        assert resolver.resolve("tex-wood") == "Assets/Audio/oak.png"

    def test_unknown_guid(self, project: Path):
        assert MetaFileResolver(project).resolve("nope") is None

    def test_directory_sidecar(self, project: Path):
        (project / "Assets" / "Textures.meta").write_text("guid: folder-tex\n", encoding="utf-8")
        resolver = MetaFileResolver(project)
        assert resolver.identify("Assets/Textures") == "folder-tex"
        assert resolver.resolve("folder-tex") == "Assets/Textures"

    def test_malformed_sidecar_ignored(self, project: Path):
        (project / "Assets" / "a.txt.meta").write_text("{ broken", encoding="utf-8")
        resolver = MetaFileResolver(project)
        assert resolver.identify("Assets/a.txt") is None
        assert resolver.resolve("tex-wood") == "Assets/Textures/wood.png"
