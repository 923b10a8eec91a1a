# Tests for assetsync.sync.scheduler and assetsync.sync.ticker
# Interval-based auto-sync and the tick loop

from datetime import datetime
from pathlib import Path

from assetsync.sync.engine import SyncEngine
from assetsync.sync.events import SyncObserver
from assetsync.sync.groups import GroupMode
from assetsync.sync.history import Severity
from assetsync.sync.scheduler import SyncScheduler, is_due
from assetsync.sync.state import StateManager
from assetsync.sync.ticker import TickLoop


class ProgressRecorder(SyncObserver):
    """Records progress and completion hooks."""

    def __init__(self):
        self.progress = []
        self.post = []

    def on_progress(self, fraction, path):
        self.progress.append(path)

    def on_post_sync(self, batch):
        self.post.append(batch)


def _ready(engine: SyncEngine, destination: Path) -> None:
    engine.mark_item("a", "Assets/a.txt")
    engine.mark_item("wood", "Assets/Textures/wood.png")
    engine.set_destination(str(destination))


class TestIsDue:
    """Tests for is_due."""

    def test_never_run_is_due(self):
        assert is_due(None, 60, datetime(2024, 1, 1)) is True

    def test_before_interval(self):
        assert is_due(datetime(2024, 1, 1, 12, 0), 60, datetime(2024, 1, 1, 12, 59)) is False

    def test_at_interval(self):
        assert is_due(datetime(2024, 1, 1, 12, 0), 60, datetime(2024, 1, 1, 13, 0)) is True


class TestGlobalAutoSync:
    """Tests for the global schedule."""

    def test_disabled_does_nothing(self, engine: SyncEngine, destination: Path, monotonic):
        _ready(engine, destination)
        scheduler = SyncScheduler(engine, monotonic=monotonic)
        assert scheduler.evaluate() == []

    def test_first_check_syncs(self, engine: SyncEngine, destination: Path, clock, monotonic):
        _ready(engine, destination)
        engine.set_auto_sync(enabled=True, interval_minutes=60)
        scheduler = SyncScheduler(engine, monotonic=monotonic)

        runs = scheduler.evaluate()

        assert len(runs) == 1
        assert runs[0].is_global
        assert runs[0].enqueued == 2
        assert engine.state.last_auto_sync_at == clock.now

    def test_interval_respected(self, engine: SyncEngine, destination: Path, clock, monotonic):
        _ready(engine, destination)
        engine.set_auto_sync(enabled=True, interval_minutes=60)
        scheduler = SyncScheduler(engine, monotonic=monotonic)
        scheduler.evaluate()
        engine.queue.drain()

        clock.advance(minutes=59)
        assert scheduler.evaluate() == []

        clock.advance(minutes=1)
        assert len(scheduler.evaluate()) == 1

    def test_unattended_sync_is_silent(self, engine: SyncEngine, destination: Path, monotonic):
        observer = ProgressRecorder()
        engine.add_observer(observer)
        _ready(engine, destination)
        engine.set_auto_sync(enabled=True)
        SyncScheduler(engine, monotonic=monotonic).evaluate()
        engine.queue.drain()

        assert observer.progress == []
        assert len(observer.post) == 1
        assert (destination / "Assets" / "a.txt").exists()

    def test_missing_destination_does_not_raise(self, engine: SyncEngine, monotonic):
        engine.mark_item("a", "Assets/a.txt")
        engine.set_auto_sync(enabled=True)

        runs = SyncScheduler(engine, monotonic=monotonic).evaluate()

        assert runs[0].enqueued == 0
        assert runs[0].error == "No destination path selected"
        assert engine.state.history[-1].severity == Severity.ERROR
        assert engine.state.last_auto_sync_at is not None

    def test_timestamp_persisted(self, engine: SyncEngine, destination: Path, store, monotonic):
        _ready(engine, destination)
        engine.set_auto_sync(enabled=True)
        SyncScheduler(engine, monotonic=monotonic).evaluate()

        assert StateManager(store).state.last_auto_sync_at is not None


class TestGroupAutoSync:
    """Tests for per-group schedules."""

    def test_enabled_group_runs(self, engine: SyncEngine, destination: Path, temp_dir: Path, clock, monotonic):
        _ready(engine, destination)
        other = temp_dir / "textures"
        schedule = engine.update_group_schedule(
            "Textures",
            GroupMode.DIRECTORY,
            enabled=True,
            interval_minutes=30,
            destination_override=str(other),
        )

        runs = SyncScheduler(engine, monotonic=monotonic).evaluate()
        engine.queue.drain()

        assert [(r.group_key, r.mode) for r in runs] == [("Textures", GroupMode.DIRECTORY)]
        assert runs[0].enqueued == 1
        assert schedule.last_synced_at == clock.now
        assert (other / "Assets" / "Textures" / "wood.png").exists()
        # Global schedule untouched
        assert engine.state.last_auto_sync_at is None

    def test_disabled_group_skipped(self, engine: SyncEngine, destination: Path, monotonic):
        _ready(engine, destination)
        engine.get_or_create_group_schedule("Textures", GroupMode.DIRECTORY)
        assert SyncScheduler(engine, monotonic=monotonic).evaluate() == []

    def test_groups_due_independently(self, engine: SyncEngine, destination: Path, clock, monotonic):
        _ready(engine, destination)
        engine.set_item_category("a", "Docs")
        engine.update_group_schedule("Docs", GroupMode.CUSTOM, enabled=True, interval_minutes=10)
        engine.update_group_schedule("Textures", GroupMode.DIRECTORY, enabled=True, interval_minutes=30)
        scheduler = SyncScheduler(engine, monotonic=monotonic)

        assert len(scheduler.evaluate()) == 2
        engine.queue.drain()

        clock.advance(minutes=10)
        assert [r.group_key for r in scheduler.evaluate()] == ["Docs"]
        engine.queue.drain()

        clock.advance(minutes=20)
        assert sorted(r.group_key for r in scheduler.evaluate()) == ["Docs", "Textures"]


class TestThrottling:
    """Tests for tick throttling."""

    def test_tick_throttled(self, engine: SyncEngine, destination: Path, monotonic):
        _ready(engine, destination)
        engine.set_auto_sync(enabled=True)
        scheduler = SyncScheduler(engine, check_interval=10.0, monotonic=monotonic)

        assert len(scheduler.tick()) == 1

        # Make the global schedule due again; only the throttle stands in the way
        engine.state.last_auto_sync_at = None
        monotonic.value = 5.0
        assert scheduler.tick() == []

        monotonic.value = 10.0
        assert len(scheduler.tick()) == 1


class TestTickLoop:
    """Tests for TickLoop."""

    def test_max_ticks(self):
        calls = []
        loop = TickLoop([lambda: calls.append("a"), lambda: calls.append("b")], sleep=lambda _: None)
        assert loop.run(max_ticks=2) == 2
        assert calls == ["a", "b", "a", "b"]
        assert loop.ticks == 2

    def test_until(self):
        counter = {"n": 0}

        def bump():
            counter["n"] += 1

        loop = TickLoop([bump], sleep=lambda _: None)
        assert loop.run(until=lambda: counter["n"] >= 3) == 3

    def test_sleeps_between_ticks(self):
        slept = []
        loop = TickLoop([lambda: None], interval=0.25, sleep=slept.append)
        loop.run(max_ticks=2)
        assert slept == [0.25, 0.25]

    def test_drives_engine_and_scheduler(self, engine: SyncEngine, destination: Path, monotonic):
        _ready(engine, destination)
        engine.set_auto_sync(enabled=True)
        scheduler = SyncScheduler(engine, monotonic=monotonic)
        loop = TickLoop(sleep=lambda _: None)
        loop.add(scheduler.tick)
        loop.add(engine.queue.tick)

        loop.run(max_ticks=5)

        assert (destination / "Assets" / "a.txt").exists()
        assert (destination / "Assets" / "Textures" / "wood.png").exists()
        assert engine.state.history[-1].severity == Severity.SUCCESS
