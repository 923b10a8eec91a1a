"""Click-based CLI for AssetSync - incremental asset mirroring."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from assetsync import __version__
from assetsync.config import AssetSyncConfig, ensure_config_exists, get_config_path, load_config
from assetsync.logger import setup_logging
from assetsync.output import Console, ProgressObserver, create_console
from assetsync.sync import ConfigError, GroupMode, SyncEngine, SyncScheduler, TickLoop, TrackedItem
from assetsync.utils.paths import relative_posix

MODE_CHOICE = click.Choice([mode.value for mode in GroupMode])


class CliContext:
    """Per-invocation settings shared by all commands."""

    def __init__(self, config_path: Optional[Path], verbose: bool):
        self.config_path = config_path
        self.verbose = verbose
        self._config: Optional[AssetSyncConfig] = None
        self._console: Optional[Console] = None
        self._engine: Optional[SyncEngine] = None

    @property
    def config(self) -> AssetSyncConfig:
        if self._config is None:
            try:
                self._config = load_config(self.config_path)
            except FileNotFoundError as e:
                create_console().print_error(str(e))
                sys.exit(1)
            except ValidationError as e:
                create_console().print_error(f"Invalid configuration: {e}")
                sys.exit(1)
            setup_logging(self._config.output, verbose=self.verbose)
        return self._config

    @property
    def console(self) -> Console:
        if self._console is None:
            output = self.config.output
            self._console = create_console(verbose=self.verbose or output.verbose, colored=output.colored)
        return self._console

    @property
    def engine(self) -> SyncEngine:
        if self._engine is None:
            self._engine = SyncEngine.from_config(self.config)
        return self._engine


pass_context = click.make_pass_decorator(CliContext)


def _find_item(engine: SyncEngine, target: str) -> Optional[TrackedItem]:
    """Look up a tracked item by id, then by path."""
    return engine.state.get_item(target) or engine.state.find_by_path(_to_project_path(engine, target))


def _to_project_path(engine: SyncEngine, raw: str) -> str:
    """Normalize a user-supplied path to a project-relative POSIX path."""
    path = Path(raw).expanduser()
    if path.is_absolute():
        return relative_posix(path.resolve(), engine.project_root.resolve()) or raw
    return path.as_posix()


def _require_item(ctx: CliContext, target: str) -> TrackedItem:
    item = _find_item(ctx.engine, target)
    if item is None:
        ctx.console.print_error(f"Not tracked: {target}")
        sys.exit(1)
    return item


def _drive_until_idle(ctx: CliContext) -> None:
    """Tick the queue until the current batch has drained."""
    engine = ctx.engine
    loop = TickLoop([engine.queue.tick], interval=0)
    loop.run(until=lambda: not engine.queue.is_running)


@click.group()
@click.version_option(version=__version__, prog_name="assetsync")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Configuration file (default: ~/.config/assetsync/config.yaml or $ASSETSYNC_CONFIG)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """AssetSync - incremental mirroring of tracked project assets.

    Mark files and folders of a project, then mirror them into a destination
    directory. Unchanged content is skipped; groups can sync on their own
    schedule and destination.
    """
    ctx.obj = CliContext(config_path, verbose)


# =============================================================================
# Setup
# =============================================================================


@cli.command()
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root to write into the new config",
)
@pass_context
def init(ctx: CliContext, project_root: Optional[Path]) -> None:
    """Create a default configuration file."""
    config_path = ctx.config_path or get_config_path()
    root = str(project_root.resolve()) if project_root else None
    path, created = ensure_config_exists(config_path, project_root=root)

    console = create_console()
    if created:
        console.print_success(f"Created configuration: {path}")
    else:
        console.print_info(f"Configuration already exists: {path}")


# =============================================================================
# Tracked items
# =============================================================================


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--id", "item_id", default=None, help="Explicit id (only with a single path)")
@pass_context
def mark(ctx: CliContext, paths: tuple[str, ...], item_id: Optional[str]) -> None:
    """Start tracking files or folders."""
    engine = ctx.engine
    console = ctx.console

    if item_id and len(paths) > 1:
        console.print_error("--id can only be used with a single path")
        sys.exit(1)

    failed = False
    for raw in paths:
        rel_path = _to_project_path(engine, raw)
        resolved_id = item_id or engine.resolver.identify(rel_path)
        if not resolved_id:
            console.print_error(f"Cannot identify {raw} (missing or outside the project)")
            failed = True
            continue
        if engine.is_marked(resolved_id):
            console.print_info(f"Already tracked: {rel_path}")
            continue
        item = engine.mark_item(resolved_id, rel_path)
        kind = "folder" if item.is_directory else "file"
        console.print_success(f"Tracking {kind}: {item.path}")

    if failed:
        sys.exit(1)


@cli.command()
@click.argument("targets", nargs=-1, required=True)
@pass_context
def unmark(ctx: CliContext, targets: tuple[str, ...]) -> None:
    """Stop tracking items (by id or path)."""
    for target in targets:
        item = _require_item(ctx, target)
        ctx.engine.unmark_item(item.id)
        ctx.console.print_success(f"No longer tracking: {item.path}")


@cli.command("list")
@click.option("--category", default=None, help="Only show one category")
@pass_context
def list_items(ctx: CliContext, category: Optional[str]) -> None:
    """List tracked items."""
    items = ctx.engine.state.items
    if category is not None:
        items = [item for item in items if item.effective_category == category]
    ctx.console.print_items(items)


def _set_enabled(ctx: CliContext, targets: tuple[str, ...], all_items: bool, enabled: bool) -> None:
    verb = "Enabled" if enabled else "Disabled"
    if all_items:
        count = ctx.engine.set_all_enabled(enabled)
        ctx.console.print_success(f"{verb} {count} items")
        return
    if not targets:
        ctx.console.print_error("Give at least one item or --all")
        sys.exit(1)
    for target in targets:
        item = _require_item(ctx, target)
        ctx.engine.set_item_enabled(item.id, enabled)
        ctx.console.print_success(f"{verb}: {item.path}")


@cli.command()
@click.argument("targets", nargs=-1)
@click.option("--all", "all_items", is_flag=True, help="Enable every tracked item")
@pass_context
def enable(ctx: CliContext, targets: tuple[str, ...], all_items: bool) -> None:
    """Include items in syncs."""
    _set_enabled(ctx, targets, all_items, True)


@cli.command()
@click.argument("targets", nargs=-1)
@click.option("--all", "all_items", is_flag=True, help="Disable every tracked item")
@pass_context
def disable(ctx: CliContext, targets: tuple[str, ...], all_items: bool) -> None:
    """Exclude items from syncs without untracking them."""
    _set_enabled(ctx, targets, all_items, False)


@cli.command()
@click.argument("target")
@click.argument("name")
@pass_context
def category(ctx: CliContext, target: str, name: str) -> None:
    """Assign an item to a category (custom group)."""
    item = _require_item(ctx, target)
    ctx.engine.set_item_category(item.id, name)
    ctx.console.print_success(f"{item.path} -> {item.effective_category}")


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@pass_context
def clear(ctx: CliContext, yes: bool) -> None:
    """Stop tracking every item."""
    if not yes and not click.confirm("Remove all tracked items?", default=False):
        ctx.console.print_info("Aborted")
        return
    count = ctx.engine.clear_items()
    ctx.console.print_success(f"Cleared {count} items")


@cli.command()
@click.argument("path", required=False)
@pass_context
def dest(ctx: CliContext, path: Optional[str]) -> None:
    """Show or set the global destination directory."""
    engine = ctx.engine
    if path is None:
        current = engine.state.destination_path
        if current:
            ctx.console.print(current, markup=False)
        else:
            ctx.console.print_warning("No destination set")
        return
    target = str(Path(path).expanduser().resolve())
    engine.set_destination(target)
    ctx.console.print_success(f"Destination: {target}")


# =============================================================================
# Sync
# =============================================================================


@cli.command()
@click.option("--force", "-f", is_flag=True, help="Copy everything, ignoring checksums")
@click.option("--category", default=None, help="Only sync one category")
@click.option("--group", "group", default=None, help="Sync one group (uses its destination override)")
@click.option("--mode", type=MODE_CHOICE, default=GroupMode.CUSTOM.value, help="Grouping mode for --group")
@pass_context
def sync(ctx: CliContext, force: bool, category: Optional[str], group: Optional[str], mode: str) -> None:
    """Mirror enabled items to the destination.

    Only files whose content changed since the last sync are copied,
    unless --force is given.
    """
    engine = ctx.engine
    console = ctx.console

    if group is not None and category is not None:
        console.print_error("--group and --category cannot be combined")
        sys.exit(1)

    progress = ProgressObserver(console)
    engine.add_observer(progress)
    try:
        if group is not None:
            enqueued = engine.sync_group(group, GroupMode(mode), force=force)
        else:
            enqueued = engine.sync_all(force=force, category=category)
    except ConfigError as e:
        console.print_error(str(e))
        sys.exit(1)

    if enqueued == 0:
        console.print_info("Nothing to sync")
        return

    try:
        _drive_until_idle(ctx)
    finally:
        progress.close()
        engine.remove_observer(progress)

    batch = engine.last_batch
    if batch is not None:
        console.print_batch_result(batch)
        if not batch.success:
            sys.exit(1)


@cli.command()
@click.option("--max-ticks", type=int, default=None, help="Stop after N ticks")
@pass_context
def run(ctx: CliContext, max_ticks: Optional[int]) -> None:
    """Run the host loop: drain syncs and fire due schedules until interrupted."""
    engine = ctx.engine
    settings = ctx.config.scheduler
    scheduler = SyncScheduler(engine, check_interval=settings.check_interval_seconds)
    loop = TickLoop([scheduler.tick, engine.queue.tick], interval=settings.tick_interval_seconds)

    ctx.console.print_info("Auto-sync running (Ctrl+C to stop)")
    try:
        ticks = loop.run(max_ticks=max_ticks)
    except KeyboardInterrupt:
        ticks = loop.ticks
        pending = engine.queue.cancel_all()
        if pending:
            ctx.console.print_warning(f"Stopped with {pending} pending items")
    ctx.console.print_info(f"Stopped after {ticks} ticks")


# =============================================================================
# Groups
# =============================================================================


@cli.group()
def group() -> None:
    """Inspect and schedule groups."""
    pass


@group.command("list")
@click.option("--mode", type=MODE_CHOICE, default=GroupMode.DIRECTORY.value, help="Grouping mode")
@pass_context
def group_list(ctx: CliContext, mode: str) -> None:
    """Show groups with their schedules."""
    group_mode = GroupMode(mode)
    engine = ctx.engine
    groups = engine.list_groups(group_mode)
    schedules = {s.group_key: s for s in engine.state.group_schedules if s.mode == group_mode}
    ctx.console.print_groups(groups, schedules, mode_label=group_mode.value)


@group.command("schedule")
@click.argument("key")
@click.option("--mode", type=MODE_CHOICE, default=GroupMode.CUSTOM.value, help="Grouping mode")
@click.option("--interval", type=click.IntRange(min=1), default=None, help="Interval in minutes")
@click.option("--enable/--disable", "enabled", default=None, help="Turn auto-sync on or off")
@click.option("--dest", "destination", default=None, help="Destination override ('' for the global one)")
@pass_context
def group_schedule(
    ctx: CliContext,
    key: str,
    mode: str,
    interval: Optional[int],
    enabled: Optional[bool],
    destination: Optional[str],
) -> None:
    """Create or edit a group's schedule."""
    if destination:
        destination = str(Path(destination).expanduser().resolve())
    schedule = ctx.engine.update_group_schedule(
        key,
        GroupMode(mode),
        enabled=enabled,
        interval_minutes=interval,
        destination_override=destination,
    )
    status = "enabled" if schedule.enabled else "disabled"
    target = schedule.destination_override or "global destination"
    ctx.console.print_success(
        f"{schedule.group_key} ({schedule.mode.value}): {status}, every {schedule.interval_minutes} min -> {target}"
    )


@group.command("rename")
@click.argument("old")
@click.argument("new")
@pass_context
def group_rename(ctx: CliContext, old: str, new: str) -> None:
    """Move every item of a custom group to a new category."""
    count = ctx.engine.rename_group(old, new)
    if count == 0:
        ctx.console.print_warning(f"No items in group {old}")
        return
    ctx.console.print_success(f"Moved {count} items from {old} to {new}")


@cli.command()
@click.option("--enable/--disable", "enabled", default=None, help="Turn global auto-sync on or off")
@click.option("--interval", type=click.IntRange(min=1), default=None, help="Interval in minutes")
@pass_context
def auto(ctx: CliContext, enabled: Optional[bool], interval: Optional[int]) -> None:
    """Show or change the global auto-sync settings."""
    engine = ctx.engine
    if enabled is not None or interval is not None:
        engine.set_auto_sync(enabled=enabled, interval_minutes=interval)
    state = engine.state
    status = "enabled" if state.auto_sync_enabled else "disabled"
    ctx.console.print_info(f"Auto-sync {status}, every {state.auto_sync_interval_minutes} min")


# =============================================================================
# History and status
# =============================================================================


@cli.group()
def history() -> None:
    """Show or clear the sync history."""
    pass


@history.command("show")
@click.option("--lines", "-n", type=click.IntRange(min=1), default=None, help="Number of entries to show")
@pass_context
def history_show(ctx: CliContext, lines: Optional[int]) -> None:
    """Show history, newest first."""
    ctx.console.print_history(ctx.engine.state.history.newest_first(), limit=lines)


@history.command("clear")
@pass_context
def history_clear(ctx: CliContext) -> None:
    """Delete all history entries."""
    ctx.engine.clear_history()
    ctx.console.print_success("History cleared")


@cli.command()
@pass_context
def status(ctx: CliContext) -> None:
    """Show destination, item counts and schedules."""
    engine = ctx.engine
    ctx.console.print_status(engine.state, engine.queue.state, engine.queue.pending)


if __name__ == "__main__":
    cli()
