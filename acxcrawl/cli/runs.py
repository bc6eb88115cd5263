"""Runs command: inspect the run ledger."""

from pathlib import Path
from typing import Optional

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import Config
from ..db import RunManager, get_connection
from ..errors import StorageError

console = Console()


def runs_command(
    database: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLite database file. Default: acx-comments_YYYY-MM-DD.db",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    limit: int = typer.Option(10, "--limit", "-n", help="Number of runs to show", min=1),
    failures: Optional[int] = typer.Option(
        None,
        "--failures",
        help="List the items skipped by this run",
    ),
) -> None:
    """Show recent crawl runs, or the items one run skipped."""
    try:
        db_path = database or Config(config_path).database_path
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not db_path.exists():
        console.print(f"[red]Database not found: {db_path}[/red]")
        raise typer.Exit(1)

    try:
        with get_connection(db_path) as db:
            run_manager = RunManager(db)
            if failures is not None:
                _print_failures(run_manager, failures)
            else:
                _print_runs(run_manager, limit)
    except StorageError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def _print_runs(run_manager: RunManager, limit: int) -> None:
    runs = run_manager.get_recent_runs(limit)
    if not runs:
        console.print("[yellow]No runs recorded.[/yellow]")
        return

    table = Table(title="Recent Runs")
    table.add_column("ID", style="cyan")
    table.add_column("Pipeline", style="magenta")
    table.add_column("Status", style="bold")
    table.add_column("Started", style="dim")
    table.add_column("Finished", style="dim")
    table.add_column("Skipped", style="yellow")

    for run in runs:
        color = {"success": "green", "failed": "red"}.get(run.status, "yellow")
        skipped = (run.stats or {}).get("skipped", "-")
        table.add_row(
            str(run.id),
            run.pipeline,
            f"[{color}]{run.status}[/{color}]",
            _short_time(run.started_at),
            _short_time(run.finished_at),
            str(skipped),
        )

    console.print(table)


def _print_failures(run_manager: RunManager, run_id: int) -> None:
    run = run_manager.get_run(run_id)
    if run is None:
        console.print(f"[red]Run {run_id} not found.[/red]")
        raise typer.Exit(1)

    failures = run_manager.get_failures(run_id)
    if not failures:
        console.print(f"[green]Run {run_id} ({run.pipeline}) skipped nothing.[/green]")
        return

    table = Table(title=f"Run {run_id} ({run.pipeline}): {len(failures)} skipped")
    table.add_column("Item", style="cyan")
    table.add_column("Stage", style="magenta")
    table.add_column("Error", style="red")

    for failure in failures:
        table.add_row(escape(failure.item_key), failure.stage, escape(failure.error))

    console.print(table)


def _short_time(timestamp: Optional[str]) -> str:
    if not timestamp:
        return "-"
    return pendulum.parse(timestamp).in_tz("local").format("YYYY-MM-DD HH:mm")
