"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .crawl import articles_command, bodies_command, comments_command, crawl_command
from .init import init_command
from .runs import runs_command

app = typer.Typer(
    name="acxcrawl",
    help="Crawl articles, comments and article bodies into a SQLite database",
    no_args_is_help=True,
)

# Register commands
app.command("articles")(articles_command)
app.command("comments")(comments_command)
app.command("bodies")(bodies_command)
app.command("crawl")(crawl_command)
app.command("init")(init_command)
app.command("runs")(runs_command)


if __name__ == "__main__":
    app()
