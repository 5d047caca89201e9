"""Init command implementation."""

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import Config, ConfigModel, FeedConfig, save_config, save_feeds
from ..db import (
    PostgresStore,
    close_connection_pool,
    get_connection,
    init_database,
    validate_connection,
)

console = Console()


def create_default_feeds() -> List[FeedConfig]:
    """Create default California news feeds."""
    return [
        FeedConfig(
            name="CalMatters",
            url="https://calmatters.org/feed/",
            outlet="CalMatters",
            domain="calmatters.org",
            enabled=True,
        ),
        FeedConfig(
            name="KQED News",
            url="https://www.kqed.org/news/feed",
            outlet="KQED",
            domain="kqed.org",
            enabled=True,
        ),
        FeedConfig(
            name="Los Angeles Times - California",
            url="https://www.latimes.com/california/rss2.0.xml",
            outlet="Los Angeles Times",
            domain="latimes.com",
            enabled=True,
        ),
        FeedConfig(
            name="Legal Sports Report",
            url="https://www.legalsportsreport.com/feed/",
            outlet="Legal Sports Report",
            domain="legalsportsreport.com",
            enabled=True,
        ),
    ]


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "newsdesk",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("newsdesk", "--db-name", help="Database name"),
    db_user: str = typer.Option("newsdesk", "--db-user", help="Database user"),
    seed_feeds: bool = typer.Option(
        True,
        "--seed-feeds/--no-seed-feeds",
        help="Seed default feeds",
    ),
    seed_keywords: bool = typer.Option(
        True,
        "--seed-keywords/--no-seed-keywords",
        help="Seed default tracked keywords",
    ),
) -> None:
    """Initialize News Desk configuration and database."""
    console.print(Panel.fit("📰 News Desk - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    feeds_path = config_dir / "feeds.yaml"

    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "NEWSDESK_DB_PASSWORD",
        },
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    feeds = create_default_feeds() if seed_feeds else []
    save_feeds(feeds, feeds_path)
    console.print(f"✅ Created feeds: {feeds_path} ({len(feeds)} feeds)")

    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = Config(config_path).get_db_config()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: "
            "[bold]export NEWSDESK_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        console.print("✅ Database schema initialized")
        if seed_keywords:
            with get_connection(db_config) as conn:
                inserted = PostgresStore(conn).seed_default_keywords()
            console.print(f"✅ Seeded {inserted} keywords")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()

    console.print(
        Panel(
            f"[green]✅ News Desk initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Feeds: {feeds_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export NEWSDESK_DB_PASSWORD=your_password[/bold]\n"
            f"2. Optionally set a news API key: [bold]export NEWS_API_KEY=your_key[/bold]\n"
            f"3. Run: [bold]newsdesk ingest[/bold]",
            style="green",
        )
    )
