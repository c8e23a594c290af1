"""
Lead review commands.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from demandscan.cli.context import load_config_or_exit, open_session
from demandscan.core.config.models import LeadStatus

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="View and triage leads",
    no_args_is_help=True,
)


@app.command("list")
def list_leads(
    status: Optional[LeadStatus] = typer.Option(
        None,
        "--status",
        "-s",
        help="Filter by status",
    ),
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum rows", min=1),
) -> None:
    """List detected leads, newest first."""
    from demandscan.persistence.repo import LeadRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        leads = LeadRepository(session).list_leads(status=status, limit=limit)

        if not leads:
            console.print("[dim]No leads found.[/dim]")
            return

        table = Table(title="Leads", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Score", justify="right")
        table.add_column("Status")
        table.add_column("Keywords", style="cyan")
        table.add_column("Source")
        table.add_column("Notified", justify="center")

        for lead in leads:
            table.add_row(
                lead.id,
                str(lead.confidence_score),
                lead.status,
                ", ".join(lead.matched_keywords),
                lead.source_url,
                "yes" if lead.notified else "no",
            )

        console.print(table)


@app.command("show")
def show_lead(lead_id: str = typer.Argument(..., help="Lead ID")) -> None:
    """Show a lead with its snippet."""
    from rich.panel import Panel

    from demandscan.persistence.repo import LeadRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        lead = LeadRepository(session).get_by_id(lead_id)
        if lead is None:
            err_console.print(f"[red]Lead not found:[/red] {lead_id}")
            raise typer.Exit(1)

        console.print(Panel(
            f"[bold]Score:[/bold] {lead.confidence_score}\n"
            f"[bold]Status:[/bold] {lead.status}\n"
            f"[bold]Keywords:[/bold] {', '.join(lead.matched_keywords)}\n"
            f"[bold]Source:[/bold] {lead.source_url}\n\n"
            f"{lead.snippet}",
            title=f"Lead {lead.id}",
        ))


@app.command("status")
def set_status(
    lead_id: str = typer.Argument(..., help="Lead ID"),
    new_status: LeadStatus = typer.Argument(..., help="contacted, converted or dismissed"),
) -> None:
    """Move a lead through the review workflow."""
    from demandscan.persistence.repo import LeadRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        try:
            lead = LeadRepository(session).update_status(lead_id, new_status)
        except LookupError as e:
            err_console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        except ValueError as e:
            err_console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

        console.print(f"[green]OK[/green] Lead {lead.id} is now [cyan]{lead.status}[/cyan]")
