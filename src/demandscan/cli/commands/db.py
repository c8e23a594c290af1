"""
Database management commands.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from demandscan.cli.context import load_config_or_exit

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Database operations",
    no_args_is_help=True,
)

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "persistence" / "migrations"


def _alembic_config(database_url: str):
    from alembic.config import Config

    ini_path = Path("alembic.ini")
    alembic_cfg = Config(str(ini_path)) if ini_path.exists() else Config()
    alembic_cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    return alembic_cfg


@app.command("init")
def init_database(
    drop_existing: bool = typer.Option(
        False,
        "--drop",
        help="Drop existing tables before creating",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Initialize the database schema.

    Creates all tables. Use --drop to reset the database.
    """
    from demandscan.persistence.db import drop_db, init_db

    config = load_config_or_exit()

    if drop_existing:
        if not yes and not typer.confirm("This will DELETE ALL DATA. Continue?", default=False):
            raise typer.Abort()

        console.print("[yellow]Dropping existing tables...[/yellow]")
        drop_db(config.database.url)

    console.print("Creating database schema...")
    init_db(config.database.url, echo=config.database.echo)

    console.print("[green]OK[/green] Database initialized")


@app.command("migrate")
def run_migrations(
    revision: str = typer.Option(
        "head",
        "--revision",
        "-r",
        help="Target revision (default: head)",
    ),
) -> None:
    """Run database migrations."""
    from alembic import command

    config = load_config_or_exit()
    alembic_cfg = _alembic_config(config.database.url)

    console.print(f"Running migrations to: {revision}")

    try:
        command.upgrade(alembic_cfg, revision)
        console.print("[green]OK[/green] Migrations complete")
    except Exception as e:
        err_console.print(f"[red]Migration failed:[/red] {e}")
        raise typer.Exit(1)


@app.command("current")
def show_current() -> None:
    """Show current database revision."""
    from alembic import command

    config = load_config_or_exit()

    console.print("[bold]Current database revision:[/bold]")
    command.current(_alembic_config(config.database.url), verbose=True)
