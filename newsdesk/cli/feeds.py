"""Feeds management commands."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, FeedConfig, load_feeds, save_feeds
from ..ingestion import FetchOptions, RSSFetcher
from ..utils.urls import is_http_url, outlet_domain

console = Console()
feeds_app = typer.Typer(help="Manage RSS feeds")


@feeds_app.command("list")
def feeds_list() -> None:
    """List all configured feeds."""
    config = Config()

    try:
        feeds = load_feeds(config.feeds_path)
    except FileNotFoundError:
        console.print("[red]Feeds file not found. Run 'newsdesk init' first.[/red]")
        raise typer.Exit(1)

    if not feeds:
        console.print("[yellow]No feeds configured.[/yellow]")
        return

    table = Table(title="Configured Feeds")
    table.add_column("Name", style="cyan")
    table.add_column("Outlet", style="magenta")
    table.add_column("Domain", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for feed in feeds:
        table.add_row(
            feed.name,
            feed.outlet,
            feed.domain,
            "✓" if feed.enabled else "✗",
            feed.url,
        )

    console.print(table)


@feeds_app.command("add")
def feeds_add(
    name: str = typer.Option(..., "--name", "-n", help="Feed name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS or Atom feed URL"),
    outlet: Optional[str] = typer.Option(None, "--outlet", "-o", help="Outlet name. Default: feed name"),
    domain: Optional[str] = typer.Option(None, "--domain", "-d", help="Outlet domain. Default: from URL"),
) -> None:
    """Add a new RSS feed."""
    if not is_http_url(url):
        console.print(f"[red]Not an http(s) URL: {url}[/red]")
        raise typer.Exit(1)

    config = Config()

    try:
        feeds = load_feeds(config.feeds_path)
    except FileNotFoundError:
        feeds = []

    if any(f.name == name or f.url == url for f in feeds):
        console.print(f"[red]Feed '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    feeds.append(
        FeedConfig(
            name=name,
            url=url,
            outlet=outlet or name,
            domain=domain or outlet_domain(url),
            enabled=True,
        )
    )
    save_feeds(feeds, config.feeds_path)

    console.print(f"[green]✅ Added feed: {name}[/green]")


@feeds_app.command("remove")
def feeds_remove(
    name: str = typer.Argument(..., help="Feed name to remove"),
) -> None:
    """Remove a feed."""
    config = Config()

    try:
        feeds = load_feeds(config.feeds_path)
    except FileNotFoundError:
        console.print("[red]Feeds file not found.[/red]")
        raise typer.Exit(1)

    original_count = len(feeds)
    feeds = [f for f in feeds if f.name != name]

    if len(feeds) == original_count:
        console.print(f"[red]Feed '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_feeds(feeds, config.feeds_path)
    console.print(f"[green]✅ Removed feed: {name}[/green]")


@feeds_app.command("test")
def feeds_test(
    name: Optional[str] = typer.Argument(None, help="Feed name to test (or test all)"),
) -> None:
    """Fetch and parse feeds without storing anything."""
    config = Config()

    try:
        feeds = load_feeds(config.feeds_path)
    except FileNotFoundError:
        console.print("[red]Feeds file not found.[/red]")
        raise typer.Exit(1)

    if name:
        feeds = [f for f in feeds if f.name == name]
        if not feeds:
            console.print(f"[red]Feed '{name}' not found.[/red]")
            raise typer.Exit(1)

    try:
        ingestion = config.config.ingestion
        fetcher = RSSFetcher(timeout=ingestion.rss_timeout, user_agent=ingestion.rss_user_agent)
    except (FileNotFoundError, ValueError):
        fetcher = RSSFetcher()

    for feed in feeds:
        if not feed.enabled:
            console.print(f"[yellow]⚠️  {feed.name}: Disabled[/yellow]")

    results = asyncio.run(fetcher.fetch_all_feeds(feeds, FetchOptions()))
    for feed, result in results:
        if result.error:
            console.print(f"[red]❌ {feed.name}: {result.error}[/red]")
        else:
            console.print(f"[green]✅ {feed.name}: OK ({result.raw_fetched} entries)[/green]")
