"""
Crawl commands for polling sources.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from demandscan.cli.context import configure_logging, load_config_or_exit
from demandscan.core.config.models import FetchStatus

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Run crawl passes",
    no_args_is_help=True,
)

_STATUS_STYLES = {
    FetchStatus.SUCCESS: "green",
    FetchStatus.FAILED: "red",
    FetchStatus.SKIPPED: "yellow",
}


@app.command("run")
def run_crawl_pass(
    delay_ms: Optional[int] = typer.Option(
        None,
        "--delay-ms",
        help="Override the delay between sources",
        min=0,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Debug logging"),
) -> None:
    """Fetch every active source once and store changed content.

    Examples:
        demandscan crawl run
        demandscan crawl run --delay-ms 500
    """
    from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

    from demandscan.core.errors import DemandScanError
    from demandscan.core.orchestrator import run_crawl

    config = load_config_or_exit()
    if delay_ms is not None:
        config.crawler.rate_limit_ms = delay_ms
    configure_logging(config, verbose)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("[cyan]Crawling sources...[/cyan]", total=None)
        try:
            summary = asyncio.run(run_crawl(config))
        except DemandScanError as e:
            err_console.print(f"[red]Crawl failed:[/red] {e}")
            raise typer.Exit(1)

    if not summary.results:
        console.print("[dim]No active sources to fetch.[/dim]")
        return

    table = Table(title="Crawl Summary")
    table.add_column("Source", style="dim", no_wrap=True)
    table.add_column("URL", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Error")

    for result in summary.results:
        style = _STATUS_STYLES[result.status]
        table.add_row(
            result.source_id,
            result.url,
            f"[{style}]{result.status.value}[/{style}]",
            result.error or "",
        )

    console.print(table)
    duration = f" in {summary.duration_seconds:.1f}s" if summary.duration_seconds is not None else ""
    console.print(
        f"[bold]{summary.total}[/bold] sources: "
        f"[green]{summary.successful} success[/green], "
        f"[red]{summary.failed} failed[/red], "
        f"[yellow]{summary.skipped} skipped[/yellow]{duration}"
    )
