"""Fetch-url command implementation."""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from ..ingestion import DuplicateArticleError, UrlIngestError, ingest_url
from ..models import ArticleStatus
from .common import build_metadata_fetcher, load_config, open_store

console = Console()


def fetch_url_command(
    url: str = typer.Argument(..., help="Article URL to add"),
    actor: str = typer.Option(
        "curator@newsdesk",
        "--actor",
        envvar="NEWSDESK_ACTOR",
        help="Email recorded in the audit log",
    ),
) -> None:
    """Add one article by URL using its public page metadata."""
    config = load_config()
    fetcher = build_metadata_fetcher(config)

    try:
        with open_store(config) as store:
            article = asyncio.run(ingest_url(store, url, actor, fetcher=fetcher))
    except DuplicateArticleError as e:
        console.print(f"[yellow]{e} (article {e.article.id}: {e.article.title})[/yellow]")
        raise typer.Exit(1)
    except UrlIngestError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Failed to add URL: {e}[/red]")
        raise typer.Exit(1)

    style = "yellow" if article.status == ArticleStatus.NEEDS_MANUAL else "green"
    console.print(
        Panel(
            f"[bold]{article.title}[/bold]\n"
            f"{article.outlet} • {article.published_at:%Y-%m-%d}\n"
            f"{article.url}\n\n"
            f"Status: {article.status.value}\n"
            f"Image: {article.image_url or '-'}\n"
            f"Keywords: {', '.join(article.keywords_matched) or '-'}",
            title=f"Article {article.id}",
            style=style,
        )
    )
    if article.status == ArticleStatus.NEEDS_MANUAL:
        console.print("[yellow]Page looks paywalled; add a summary by hand.[/yellow]")
