"""
Keyword management commands.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from demandscan.cli.context import load_config_or_exit, open_session
from demandscan.core.config.models import KeywordCategory

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Manage detection keywords",
    no_args_is_help=True,
)


@app.command("add")
def add_keywords(
    category: KeywordCategory = typer.Argument(..., help="product, intent or location"),
    keywords: list[str] = typer.Argument(..., help="One or more keywords"),
) -> None:
    """Add keywords to a category.

    Examples:
        demandscan keywords add product "solar panel" inverter
        demandscan keywords add intent "looking for" "need urgently"
    """
    from demandscan.persistence.repo import KeywordRepository

    cleaned = [k.strip() for k in keywords if k.strip()]
    if not cleaned:
        err_console.print("[red]No keywords given[/red]")
        raise typer.Exit(1)

    config = load_config_or_exit()
    with open_session(config) as session:
        repo = KeywordRepository(session)
        for keyword in cleaned:
            repo.create(keyword, category)

    console.print(f"[green]OK[/green] Added {len(cleaned)} {category.value} keyword(s)")


@app.command("list")
def list_keywords(
    category: Optional[KeywordCategory] = typer.Option(
        None,
        "--category",
        "-c",
        help="Only show one category",
    ),
) -> None:
    """List keywords."""
    from demandscan.persistence.repo import KeywordRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        rows = KeywordRepository(session).get_all(category)

        if not rows:
            console.print("[dim]No keywords configured.[/dim]")
            return

        table = Table(title="Keywords", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Keyword", style="cyan")
        table.add_column("Category")

        for row in rows:
            table.add_row(row.id, row.keyword, row.category)

        console.print(table)


@app.command("remove")
def remove_keyword(keyword_id: str = typer.Argument(..., help="Keyword ID")) -> None:
    """Delete a keyword."""
    from demandscan.persistence.repo import KeywordRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        if not KeywordRepository(session).delete(keyword_id):
            err_console.print(f"[red]Keyword not found:[/red] {keyword_id}")
            raise typer.Exit(1)

    console.print(f"[green]OK[/green] Removed keyword {keyword_id}")
