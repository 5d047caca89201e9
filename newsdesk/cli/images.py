"""Refresh-images command implementation."""

import asyncio
from typing import Optional

import typer
from rich.console import Console

from ..ingestion import refresh_images
from .common import build_metadata_fetcher, load_config, open_store

console = Console()


def refresh_images_command(
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Maximum articles to check. Default: from config",
        min=1,
    ),
) -> None:
    """Look up images for articles that have none."""
    config = load_config()
    ingestion = config.config.ingestion
    fetcher = build_metadata_fetcher(config)

    try:
        with open_store(config) as store:
            result = asyncio.run(
                refresh_images(
                    store,
                    fetcher=fetcher,
                    limit=limit or ingestion.image_refresh_limit,
                    delay=ingestion.image_refresh_delay,
                )
            )
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Image refresh failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"✅ Checked {result.total} articles: "
        f"[green]{result.updated} updated[/green], "
        f"[yellow]{result.failed} without image[/yellow]"
    )
