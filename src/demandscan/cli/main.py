"""
DemandScan CLI - Main entry point.

Polls public pages for buyer-intent posts, scores them against keyword
sets and notifies admins of new leads.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from demandscan import __app_name__, __version__

# Load environment variables from .env (if present)
load_dotenv()

install_rich_traceback(show_locals=False, width=120)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name=__app_name__,
    help="Buyer-intent lead detection from public web pages",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """DemandScan - Buyer-intent lead detection."""
    pass


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import alerts, content, crawl, db, detect, keywords, leads, sources  # noqa: E402

app.add_typer(sources.app, name="sources", help="Manage crawl sources")
app.add_typer(keywords.app, name="keywords", help="Manage detection keywords")
app.add_typer(crawl.app, name="crawl", help="Run crawl passes")
app.add_typer(detect.app, name="detect", help="Run lead detection")
app.add_typer(leads.app, name="leads", help="View and triage leads")
app.add_typer(content.app, name="content", help="Inspect fetched content")
app.add_typer(alerts.app, name="alerts", help="Manage alert settings")
app.add_typer(alerts.admins_app, name="admins", help="Manage admin roles")
app.add_typer(db.app, name="db", help="Database operations")


# =============================================================================
# Init Command
# =============================================================================


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Initialize DemandScan database and configuration.

    Creates required directories, the default configuration file,
    and the database schema.
    """
    from demandscan.cli.context import load_config_or_exit
    from demandscan.core.config.loader import DEFAULT_APP_YAML, DEFAULT_CONFIG_PATH
    from demandscan.persistence.db import init_db

    for dir_path in (DEFAULT_CONFIG_PATH.parent, Path("data"), Path("logs")):
        dir_path.mkdir(parents=True, exist_ok=True)

    if not DEFAULT_CONFIG_PATH.exists() or force:
        DEFAULT_CONFIG_PATH.write_text(DEFAULT_APP_YAML, encoding="utf-8")

    config = load_config_or_exit()
    config.ensure_directories()
    init_db(config.database.url, echo=config.database.echo)

    console.print()
    console.print(Panel.fit(
        "[bold green]OK - DemandScan initialized successfully![/bold green]\n\n"
        "Created:\n"
        f"  - [cyan]{DEFAULT_CONFIG_PATH}[/cyan] - Application configuration\n"
        "  - [cyan]data/[/cyan] - Database storage\n"
        "  - [cyan]logs/[/cyan] - Log files\n\n"
        "Next steps:\n"
        "  1. Add a source: [yellow]demandscan sources add <name> <url>[/yellow]\n"
        "  2. Add keywords: [yellow]demandscan keywords add product <kw>...[/yellow]\n"
        "  3. Make yourself admin: [yellow]demandscan admins add <user-id>[/yellow]\n"
        "  4. Crawl and detect: [yellow]demandscan crawl run[/yellow], [yellow]demandscan detect run[/yellow]",
        title="[bold]Initialization Complete[/bold]",
        border_style="green",
    ))


# =============================================================================
# Status Command
# =============================================================================


@app.command()
def status() -> None:
    """Show source, content and lead statistics."""
    from rich.table import Table

    from demandscan.cli.context import load_config_or_exit, open_session
    from demandscan.core.config.models import KeywordCategory
    from demandscan.persistence.repo import (
        FetchedContentRepository,
        KeywordRepository,
        LeadRepository,
        SourceRepository,
    )

    config = load_config_or_exit()

    console.print()
    console.print("[bold]DemandScan Status[/bold]")
    console.print()

    with open_session(config) as session:
        sources = SourceRepository(session).get_all()
        active = sum(1 for s in sources if s.active)
        keywords = KeywordRepository(session)

        overview = Table(title="Overview", show_header=True, header_style="bold magenta")
        overview.add_column("Item", style="cyan")
        overview.add_column("Count", justify="right")
        overview.add_row("Sources (active)", f"{len(sources)} ({active})")
        overview.add_row("Fetched content", str(FetchedContentRepository(session).count()))
        for category in KeywordCategory:
            overview.add_row(f"Keywords: {category.value}", str(len(keywords.get_all(category))))
        console.print(overview)
        console.print()

        status_counts = LeadRepository(session).count_by_status()
        if status_counts:
            stats_table = Table(title="Lead Status", show_header=True, header_style="bold magenta")
            stats_table.add_column("Status", style="cyan")
            stats_table.add_column("Count", justify="right")

            for lead_status, count in sorted(status_counts.items()):
                stats_table.add_row(lead_status, str(count))

            console.print(stats_table)
        else:
            console.print("[dim]No leads detected yet.[/dim]")


# =============================================================================
# Serve Command
# =============================================================================


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Serve the crawl and detection operations over HTTP."""
    import uvicorn

    from demandscan.api import create_app
    from demandscan.cli.context import configure_logging, load_config_or_exit

    config = load_config_or_exit()
    configure_logging(config)

    uvicorn.run(
        create_app(),
        host=host or config.api.host,
        port=port or config.api.port,
    )


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
