"""Crawl commands: articles, comments, bodies and crawl."""

import cProfile
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import Config
from ..db import get_connection
from ..errors import StorageError
from ..pipeline import PIPELINE_ORDER, PipelineOrchestrator

console = Console()
err_console = Console(stderr=True)

PROFILE_PATH = "cpu.prof"


def run_pipelines(
    names: List[str],
    database: Optional[Path],
    config_path: Optional[Path],
    cpu_profile: bool,
) -> None:
    """Open the database and run the named pipelines, exiting 1 on failure."""
    try:
        config = Config(config_path)
        db_path = database or config.database_path
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    profiler = cProfile.Profile() if cpu_profile else None
    console.print(f"[dim]Database: {db_path}[/dim]")

    try:
        with get_connection(db_path) as db:
            orchestrator = PipelineOrchestrator(config, db)
            if profiler is not None:
                profiler.enable()
            try:
                success = orchestrator.run(names)
            finally:
                if profiler is not None:
                    profiler.disable()
                    profiler.dump_stats(PROFILE_PATH)
                orchestrator.client.close()
    except StorageError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Crawl interrupted by user[/yellow]")
        raise typer.Exit(1)

    if not success:
        raise typer.Exit(1)


def articles_command(
    database: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLite database file. Default: acx-comments_YYYY-MM-DD.db",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    cpu_profile: bool = typer.Option(False, "--cpu-profile", "-c", help="Write a CPU profile to cpu.prof"),
) -> None:
    """Get all the articles from the archive and write them to the database."""
    run_pipelines(["articles"], database, config_path, cpu_profile)


def comments_command(
    database: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLite database file. Default: acx-comments_YYYY-MM-DD.db",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    cpu_profile: bool = typer.Option(False, "--cpu-profile", "-c", help="Write a CPU profile to cpu.prof"),
) -> None:
    """Get the comments of every article in the database and store them."""
    run_pipelines(["comments"], database, config_path, cpu_profile)


def bodies_command(
    database: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLite database file. Default: acx-comments_YYYY-MM-DD.db",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    cpu_profile: bool = typer.Option(False, "--cpu-profile", "-c", help="Write a CPU profile to cpu.prof"),
) -> None:
    """Get the HTML body of every article in the database and store it."""
    run_pipelines(["bodies"], database, config_path, cpu_profile)


def crawl_command(
    database: Optional[Path] = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLite database file. Default: acx-comments_YYYY-MM-DD.db",
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file path"),
    cpu_profile: bool = typer.Option(False, "--cpu-profile", "-c", help="Write a CPU profile to cpu.prof"),
) -> None:
    """Run articles, comments and bodies in sequence."""
    run_pipelines(PIPELINE_ORDER, database, config_path, cpu_profile)
