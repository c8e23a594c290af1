"""
Detection commands for scoring content and notifying admins.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from demandscan.cli.context import configure_logging, load_config_or_exit

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Run lead detection",
    no_args_is_help=True,
)


@app.command("run")
def run_detection_pass(
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Debug logging"),
) -> None:
    """Match stored content against keywords and notify admins of new leads."""
    from demandscan.core.errors import DemandScanError
    from demandscan.core.orchestrator import run_detection
    from demandscan.core.orchestrator.detection import DETECTION_COMPLETE

    config = load_config_or_exit()
    configure_logging(config, verbose)

    try:
        summary = asyncio.run(run_detection(config))
    except DemandScanError as e:
        err_console.print(f"[red]Detection failed:[/red] {e}")
        raise typer.Exit(1)

    if summary.message != DETECTION_COMPLETE:
        console.print(f"[dim]{summary.message}[/dim]")
        return

    fanout = summary.fanout
    console.print(
        f"[green]OK[/green] {summary.leads_inserted} new lead(s) from "
        f"{summary.content_analyzed} content item(s)"
    )
    console.print(
        f"Admins: {fanout.admins}  In-app: {fanout.notifications_created}  "
        f"Emails: {fanout.emails_sent} sent, {fanout.email_failures} failed"
    )

    if fanout.whatsapp_links:
        table = Table(title="WhatsApp Links")
        table.add_column("Number", style="cyan")
        table.add_column("Link")
        for link in fanout.whatsapp_links:
            table.add_row(link.number, link.link)
        console.print(table)
