"""Keyword management commands."""

import typer
from psycopg import errors
from rich.console import Console
from rich.table import Table

from .common import load_config, open_store

console = Console()
keywords_app = typer.Typer(help="Manage tracked keywords")


@keywords_app.command("list")
def keywords_list() -> None:
    """List tracked keywords."""
    config = load_config()

    with open_store(config) as store:
        keywords = store.list_keywords()

    if not keywords:
        console.print("[yellow]No keywords configured. Run 'newsdesk keywords seed'.[/yellow]")
        return

    table = Table(title="Tracked Keywords")
    table.add_column("Term", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("Added", style="dim")

    for keyword in keywords:
        table.add_row(
            keyword.term,
            "✓" if keyword.enabled else "✗",
            keyword.created_at.strftime("%Y-%m-%d") if keyword.created_at else "-",
        )

    console.print(table)


@keywords_app.command("add")
def keywords_add(
    term: str = typer.Argument(..., help="Keyword phrase"),
) -> None:
    """Track a new keyword."""
    term = term.strip()
    if not term:
        console.print("[red]Keyword cannot be empty.[/red]")
        raise typer.Exit(1)

    config = load_config()
    with open_store(config) as store:
        try:
            store.add_keyword(term)
        except errors.UniqueViolation:
            console.print(f"[red]Keyword '{term}' already exists.[/red]")
            raise typer.Exit(1)

    console.print(f"[green]✅ Added keyword: {term}[/green]")


@keywords_app.command("remove")
def keywords_remove(
    term: str = typer.Argument(..., help="Keyword phrase to remove"),
) -> None:
    """Stop tracking a keyword."""
    config = load_config()
    with open_store(config) as store:
        deleted = store.delete_keyword(term)

    if not deleted:
        console.print(f"[red]Keyword '{term}' not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ Removed keyword: {term}[/green]")


def _set_enabled(term: str, enabled: bool) -> None:
    config = load_config()
    with open_store(config) as store:
        keyword = store.set_keyword_enabled(term, enabled)

    if keyword is None:
        console.print(f"[red]Keyword '{term}' not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ {'Enabled' if enabled else 'Disabled'} keyword: {term}[/green]")


@keywords_app.command("enable")
def keywords_enable(
    term: str = typer.Argument(..., help="Keyword phrase"),
) -> None:
    """Enable a keyword."""
    _set_enabled(term, True)


@keywords_app.command("disable")
def keywords_disable(
    term: str = typer.Argument(..., help="Keyword phrase"),
) -> None:
    """Disable a keyword without deleting it."""
    _set_enabled(term, False)


@keywords_app.command("seed")
def keywords_seed() -> None:
    """Add the default keywords that are missing."""
    config = load_config()
    with open_store(config) as store:
        inserted = store.seed_default_keywords()

    console.print(f"[green]✅ Seeded {inserted} keywords[/green]")
