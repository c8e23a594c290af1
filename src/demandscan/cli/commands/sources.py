"""
Source management commands.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from demandscan.cli.context import load_config_or_exit, open_session
from demandscan.core.config.models import SourceType

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Manage crawl sources",
    no_args_is_help=True,
)


@app.command("add")
def add_source(
    name: str = typer.Argument(..., help="Display name"),
    url: str = typer.Argument(..., help="Page URL to poll"),
    source_type: SourceType = typer.Option(
        SourceType.WEBSITE,
        "--type",
        "-t",
        help="Kind of source",
    ),
    inactive: bool = typer.Option(
        False,
        "--inactive",
        help="Add the source without enabling it",
    ),
) -> None:
    """Register a page to poll for buyer-intent posts."""
    from demandscan.persistence.repo import SourceRepository

    if not url.startswith(("http://", "https://")):
        err_console.print(f"[red]URL must start with http:// or https://:[/red] {url}")
        raise typer.Exit(1)

    config = load_config_or_exit()
    with open_session(config) as session:
        source = SourceRepository(session).create(
            name=name,
            url=url,
            source_type=source_type.value,
            active=not inactive,
        )
        console.print(f"[green]OK[/green] Added source [cyan]{source.name}[/cyan] ({source.id})")


@app.command("list")
def list_sources(
    active_only: bool = typer.Option(
        False,
        "--active",
        "-a",
        help="Only show active sources",
    ),
) -> None:
    """List configured sources."""
    from demandscan.persistence.repo import FetchedContentRepository, SourceRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        sources = SourceRepository(session).get_all(active_only=active_only)
        contents = FetchedContentRepository(session)

        if not sources:
            console.print("[dim]No sources configured. Add one with:[/dim] demandscan sources add")
            return

        table = Table(title="Sources", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("URL")
        table.add_column("Active", justify="center")
        table.add_column("Fetches", justify="right")

        for source in sources:
            active = "[green]yes[/green]" if source.active else "[red]no[/red]"
            table.add_row(
                source.id,
                source.name,
                source.source_type,
                source.url,
                active,
                str(contents.count(source.id)),
            )

        console.print(table)


def _set_active(source_id: str, active: bool) -> None:
    from demandscan.persistence.repo import SourceRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        source = SourceRepository(session).set_active(source_id, active)
        if source is None:
            err_console.print(f"[red]Source not found:[/red] {source_id}")
            raise typer.Exit(1)

        state = "enabled" if active else "disabled"
        console.print(f"[green]OK[/green] Source [cyan]{source.name}[/cyan] {state}")


@app.command("enable")
def enable_source(source_id: str = typer.Argument(..., help="Source ID")) -> None:
    """Include a source in crawl passes."""
    _set_active(source_id, True)


@app.command("disable")
def disable_source(source_id: str = typer.Argument(..., help="Source ID")) -> None:
    """Exclude a source from crawl passes."""
    _set_active(source_id, False)


@app.command("remove")
def remove_source(
    source_id: str = typer.Argument(..., help="Source ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a source and its fetched content."""
    from demandscan.persistence.repo import SourceRepository

    if not yes and not typer.confirm(f"Delete source {source_id} and its fetched content?", default=False):
        raise typer.Abort()

    config = load_config_or_exit()
    with open_session(config) as session:
        if not SourceRepository(session).delete(source_id):
            err_console.print(f"[red]Source not found:[/red] {source_id}")
            raise typer.Exit(1)

    console.print(f"[green]OK[/green] Removed source {source_id}")
