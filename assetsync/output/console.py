# AssetSync Console Output
# Rich-based console output for user-friendly display

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn
from rich.table import Table

from assetsync.sync.events import SyncObserver
from assetsync.sync.history import HistoryEntry, Severity

if TYPE_CHECKING:
    from assetsync.sync.engine import SyncBatch
    from assetsync.sync.groups import GroupSchedule
    from assetsync.sync.item import TrackedItem
    from assetsync.sync.queue import QueueState
    from assetsync.sync.state import SyncState

_SEVERITY_STYLES = {
    Severity.INFO: ("blue", "ℹ"),
    Severity.SUCCESS: ("green", "✓"),
    Severity.WARNING: ("yellow", "⚠"),
    Severity.ERROR: ("red", "✗"),
}


def _format_time(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else "Never"


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def print_items(self, items: list[TrackedItem]) -> None:
        """
        Print tracked items as a table.

        Args:
            items: Items in tracked order.
        """
        if not items:
            self._console.print("[dim]No items marked. Use 'assetsync mark PATH' to track files.[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("", justify="center")
        table.add_column("Path", style="cyan")
        table.add_column("Type")
        table.add_column("Category")
        table.add_column("Last Sync", style="dim")
        if self.verbose:
            table.add_column("Id", style="dim")

        for item in items:
            enabled = "[green]●[/green]" if item.enabled else "[dim]○[/dim]"
            kind = "dir" if item.is_directory else "file"
            row = [enabled, escape(item.path), kind, escape(item.effective_category), _format_time(item.last_synced_at)]
            if self.verbose:
                row.append(escape(item.id))
            table.add_row(*row)

        self._console.print(table)

    def print_groups(
        self,
        groups: dict[str, list[TrackedItem]],
        schedules: dict[str, GroupSchedule],
        *,
        mode_label: str,
    ) -> None:
        """
        Print groups with their schedules.

        Args:
            groups: Group key to member items.
            schedules: Group key to existing schedule (missing keys have none yet).
            mode_label: Grouping mode shown in the title.
        """
        if not groups and not schedules:
            self._console.print("[dim]No groups to display[/dim]")
            return

        table = Table(title=f"Groups ({mode_label})", show_header=True, header_style="bold")
        table.add_column("Group", style="cyan")
        table.add_column("Items", justify="right")
        table.add_column("Auto-sync")
        table.add_column("Interval", justify="right")
        table.add_column("Destination", style="dim")
        table.add_column("Last Sync", style="dim")

        for key in sorted(set(groups) | set(schedules)):
            members = groups.get(key, [])
            schedule = schedules.get(key)
            if schedule is None:
                table.add_row(escape(key), str(len(members)), "[dim]-[/dim]", "", "", "Never")
                continue
            status = "[green]enabled[/green]" if schedule.enabled else "[dim]disabled[/dim]"
            table.add_row(
                escape(key),
                str(len(members)),
                status,
                f"{schedule.interval_minutes} min",
                escape(schedule.destination_override) if schedule.destination_override else "(global)",
                _format_time(schedule.last_synced_at),
            )

        self._console.print(table)

    def print_history(self, entries: list[HistoryEntry], *, limit: Optional[int] = None) -> None:
        """
        Print history entries, newest first.

        Args:
            entries: Entries ordered newest first.
            limit: Maximum number of entries to show.
        """
        if not entries:
            self._console.print("[dim]No history yet.[/dim]")
            return

        for entry in entries[:limit] if limit else entries:
            color, icon = _SEVERITY_STYLES.get(entry.severity, ("white", "•"))
            self._console.print(f"[dim]{entry.timestamp}[/dim] [{color}]{icon}[/{color}] {escape(entry.message)}")

    def print_batch_result(self, batch: SyncBatch) -> None:
        """Print the summary panel of a finished sync batch."""
        lines = [
            f"Destination: {escape(str(batch.destination))}",
            f"Items: {batch.total} ({batch.changed} changed, {batch.unchanged} unchanged)",
        ]
        if batch.skipped or batch.failed:
            lines.append(f"Skipped: {batch.skipped}, Failed: {batch.failed}")

        if self.verbose:
            for result in batch.results:
                lines.append(f"  {result.action_type.value:>9}  {escape(result.path)}")

        if batch.success:
            title = "[green]Sync completed[/green]"
            border = "green" if not batch.skipped else "yellow"
        else:
            title = "[red]Sync completed with errors[/red]"
            border = "red"

        self._console.print(Panel("\n".join(lines), title=title, border_style=border))

    def print_status(self, state: SyncState, queue_state: QueueState, pending: int) -> None:
        """Print destination, item counts and scheduling status."""
        enabled = len(state.enabled_items())
        auto = (
            f"[green]enabled[/green] every {state.auto_sync_interval_minutes} min"
            if state.auto_sync_enabled
            else "[dim]disabled[/dim]"
        )
        scheduled_groups = sum(1 for s in state.group_schedules if s.enabled)

        self._console.print(
            Panel(
                f"Destination: {escape(state.destination_path) if state.destination_path else '[yellow]not set[/yellow]'}\n"
                f"Items: {len(state.items)} marked, {enabled} enabled\n"
                f"Auto-sync: {auto} (last: {_format_time(state.last_auto_sync_at)})\n"
                f"Scheduled groups: {scheduled_groups}\n"
                f"Queue: {queue_state.value} ({pending} pending)",
                title="AssetSync",
                border_style="blue",
            )
        )


class ProgressObserver(SyncObserver):
    """Renders queue progress as a Rich progress bar."""

    def __init__(self, console: Console):
        self.console = console
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    def on_pre_sync(self, batch: SyncBatch) -> None:
        if batch.silent:
            return
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            console=self.console._console,
            transient=True,
        )
        self._progress.start()
        self._task = self._progress.add_task("Syncing...", total=batch.total)

    def on_progress(self, fraction: float, path: str) -> None:
        if self._progress is None or self._task is None:
            return
        total = self._progress.tasks[0].total or 0
        self._progress.update(self._task, completed=fraction * total, description=f"Syncing {escape(path)}")

    def on_post_sync(self, batch: SyncBatch) -> None:
        self.close()

    def close(self) -> None:
        """Stop the progress display if one is active."""
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task = None


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
