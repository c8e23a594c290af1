"""
Fetched content inspection commands.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from demandscan.cli.context import load_config_or_exit, open_session

console = Console()

app = typer.Typer(
    help="Inspect fetched content",
    no_args_is_help=True,
)


@app.command("list")
def list_content(
    source_id: Optional[str] = typer.Option(None, "--source", "-s", help="Filter by source ID"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum rows", min=1),
) -> None:
    """List recent crawl attempts."""
    from demandscan.persistence.repo import FetchedContentRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        rows = FetchedContentRepository(session).list_recent(source_id=source_id, limit=limit)

        if not rows:
            console.print("[dim]No content fetched yet.[/dim]")
            return

        table = Table(title="Fetched Content", show_header=True, header_style="bold magenta")
        table.add_column("Fetched", no_wrap=True)
        table.add_column("URL", style="cyan")
        table.add_column("Status")
        table.add_column("Hash", style="dim")
        table.add_column("Chars", justify="right")
        table.add_column("Error")

        for row in rows:
            table.add_row(
                row.fetched_at.strftime("%Y-%m-%d %H:%M"),
                row.source_url,
                row.status,
                row.content_hash or "-",
                str(len(row.raw_text)) if row.raw_text else "-",
                row.error_message or "",
            )

        console.print(table)
