"""Main CLI application."""

from typing import Optional

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from ..config import Config
from .common import setup_logging
from .feeds import feeds_app
from .fetch_url import fetch_url_command
from .images import refresh_images_command
from .ingest import ingest_command
from .init import init_command
from .keywords import keywords_app
from .runs import runs_command

app = typer.Typer(
    name="newsdesk",
    help="News Desk - keyword-filtered news ingestion for curators",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Default: from config",
    ),
) -> None:
    """News Desk command line."""
    if log_level is None:
        try:
            log_level = Config().config.log_level
        except (FileNotFoundError, ValueError):
            log_level = "INFO"
    setup_logging(log_level)


# Register commands
app.command("init")(init_command)
app.command("ingest")(ingest_command)
app.command("fetch-url")(fetch_url_command)
app.command("refresh-images")(refresh_images_command)
app.command("runs")(runs_command)
app.add_typer(feeds_app, name="feeds", help="Manage RSS feeds")
app.add_typer(keywords_app, name="keywords", help="Manage tracked keywords")


if __name__ == "__main__":
    app()
