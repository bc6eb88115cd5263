"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, default_config_path, save_config
from ..ingestion import DEFAULT_BASE_URL

console = Console()


def init_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Config file to write. Default: ~/.config/acxcrawl/config.yaml",
    ),
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Publication site root"),
    database: Optional[str] = typer.Option(
        None,
        "--database",
        "-d",
        help="SQLite database file. Default: acx-comments_YYYY-MM-DD.db",
    ),
    delay: float = typer.Option(1.0, "--delay", help="Seconds between requests", min=0.0),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config file"),
) -> None:
    """Write a configuration file."""
    if config_path is None:
        config_path = default_config_path()

    if config_path.exists() and not force:
        console.print(f"[red]Config already exists: {config_path} (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    try:
        config = ConfigModel(
            api={"base_url": base_url},
            throttle={"delay_seconds": delay},
            database={"path": database},
        )
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    save_config(config, config_path)

    console.print(
        Panel(
            f"[green]✅ Created config: {config_path}[/green]\n\n"
            f"Site: {config.api.base_url}\n"
            f"Delay: {config.throttle.delay_seconds}s\n\n"
            f"Next steps:\n"
            f"1. [bold]acxcrawl articles[/bold]\n"
            f"2. [bold]acxcrawl comments[/bold]\n"
            f"3. [bold]acxcrawl bodies[/bold]",
            style="green",
        )
    )
