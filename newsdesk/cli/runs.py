"""Runs command implementation."""

import typer
from rich.console import Console
from rich.table import Table

from .common import load_config, open_store

console = Console()


def runs_command(
    limit: int = typer.Option(10, "--limit", "-n", help="Number of runs to show", min=1),
) -> None:
    """Show recent ingest runs."""
    config = load_config()

    with open_store(config) as store:
        runs = store.get_recent_ingest_runs(limit)

    if not runs:
        console.print("[yellow]No ingest runs yet.[/yellow]")
        return

    table = Table(title="Recent Ingest Runs")
    table.add_column("Started", style="cyan")
    table.add_column("Source", style="magenta")
    table.add_column("Feed", style="blue")
    table.add_column("Found", justify="right", style="yellow")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Duped", justify="right", style="dim")
    table.add_column("Error", style="red")

    for run in runs:
        table.add_row(
            run.started_at.strftime("%Y-%m-%d %H:%M"),
            run.source,
            run.feed_url or "-",
            str(run.articles_found),
            str(run.articles_created),
            str(run.articles_duped),
            (run.error or "") if run.finished_at else "[dim]unfinished[/dim]",
        )

    console.print(table)
