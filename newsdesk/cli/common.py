"""Helpers shared by CLI commands."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Generator, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler

from ..config import Config
from ..db import PostgresStore, close_connection_pool, get_connection, validate_connection
from ..extraction import MetadataFetcher
from ..utils.dates import parse_timestamp

console = Console()


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: str) -> None:
    """Route library logging through rich; an unknown level exits with status 1."""
    name = (level or "").strip().upper()
    if name not in LOG_LEVELS:
        console.print(
            f"[red]Unknown log level: {level}. Choose one of {', '.join(LOG_LEVELS)}.[/red]"
        )
        raise typer.Exit(1)
    logging.basicConfig(
        level=name,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_config() -> Config:
    """Load configuration or exit with a hint to run init."""
    config = Config()
    try:
        config.config  # loads and validates the file
    except FileNotFoundError:
        console.print("[red]Config file not found. Run 'newsdesk init' first.[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config


@contextmanager
def open_store(config: Config) -> Generator[PostgresStore, None, None]:
    """Check the database and yield a store bound to one connection."""
    db_config = config.get_db_config()
    console.print("[dim]Checking database connection...[/dim]")
    if not validate_connection(db_config):
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)

    try:
        with get_connection(db_config) as conn:
            yield PostgresStore(conn)
    finally:
        close_connection_pool()


def build_metadata_fetcher(config: Config) -> MetadataFetcher:
    ingestion = config.config.ingestion
    return MetadataFetcher(
        timeout=ingestion.metadata_timeout,
        max_bytes=ingestion.max_response_bytes,
        user_agent=ingestion.metadata_user_agent,
    )


def parse_date_option(value: Optional[str], option: str) -> Optional[datetime]:
    """Parse a ``--from``/``--to`` value or exit with an error."""
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        console.print(f"[red]Invalid date for {option}: {value}[/red]")
        raise typer.Exit(1)
    return parsed


def hours_ago(hours: int) -> datetime:
    return pendulum.now("UTC").subtract(hours=hours)
