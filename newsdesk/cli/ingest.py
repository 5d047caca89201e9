"""Ingest command implementation."""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..ingestion import IngestionOrchestrator, IngestionSummary, NewsApiAdapter, RSSFetcher
from .common import hours_ago, load_config, open_store, parse_date_option

console = Console()


def print_summary(summary: IngestionSummary) -> None:
    """Print per-source results and keyword hits."""
    table = Table(title="Ingestion Summary")
    table.add_column("Source", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Raw", justify="right")
    table.add_column("Matched", justify="right", style="yellow")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Duped", justify="right", style="dim")
    table.add_column("Errors", style="red")

    for result in summary.results:
        table.add_row(
            result.source,
            "[red]✗[/red]" if result.errors else "[green]✓[/green]",
            str(result.articles_raw),
            str(result.articles_found),
            str(result.articles_created),
            str(result.articles_duped),
            "; ".join(result.errors),
        )

    console.print(table)

    if summary.keyword_stats:
        stats = Table(title="Keyword Hits (new articles)")
        stats.add_column("Keyword", style="cyan")
        stats.add_column("Count", justify="right", style="green")
        for stat in summary.keyword_stats:
            stats.add_row(stat.term, str(stat.count))
        console.print(stats)

    console.print(
        Panel(
            f"[green]✅ Ingestion complete[/green]\n\n"
            f"Found: {summary.total_found} • "
            f"Created: {summary.total_created} • "
            f"Duplicates: {summary.total_duped}\n"
            f"Finished: {summary.finished_at.isoformat()}",
            style="green",
        )
    )


def ingest_command(
    date_from: Optional[str] = typer.Option(
        None,
        "--from",
        help="Only ingest articles published on or after this date (YYYY-MM-DD or ISO 8601)",
    ),
    date_to: Optional[str] = typer.Option(
        None,
        "--to",
        help="Only ingest articles published on or before this date (YYYY-MM-DD or ISO 8601)",
    ),
    hours: Optional[int] = typer.Option(
        None,
        "--hours",
        help="Only ingest articles from the last N hours (overrides --from)",
        min=1,
    ),
) -> None:
    """Fetch all enabled feeds and the news API, and store new matches."""
    config = load_config()

    start = parse_date_option(date_from, "--from")
    end = parse_date_option(date_to, "--to")
    lookback = hours or (None if start else config.config.ingestion.default_lookback_hours)
    if lookback:
        start = hours_ago(lookback)

    if start and end and start > end:
        console.print("[red]--from must not be later than --to[/red]")
        raise typer.Exit(1)

    feeds = config.get_enabled_feeds()
    ingestion = config.config.ingestion
    rss_fetcher = RSSFetcher(timeout=ingestion.rss_timeout, user_agent=ingestion.rss_user_agent)
    news_api = NewsApiAdapter.from_config(config.get_news_api_config())

    if not feeds and not news_api.enabled:
        console.print("[yellow]No enabled feeds and no news API key; nothing to ingest.[/yellow]")
        return

    try:
        with open_store(config) as store:
            orchestrator = IngestionOrchestrator(store, feeds, rss_fetcher, news_api)
            summary = orchestrator.run_sync(start, end)
    except KeyboardInterrupt:
        console.print("\n[yellow]Ingestion interrupted by user[/yellow]")
        raise typer.Exit(1)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Ingestion failed: {e}[/red]")
        raise typer.Exit(1)

    print_summary(summary)
