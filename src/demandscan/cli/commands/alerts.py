"""
Alert settings and admin role commands.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from demandscan.cli.context import load_config_or_exit, open_session
from demandscan.core.config.models import UserRoleName

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Manage per-user alert settings",
    no_args_is_help=True,
)

admins_app = typer.Typer(
    help="Manage admin role assignments",
    no_args_is_help=True,
)


@app.command("show")
def show_settings(user_id: str = typer.Argument(..., help="User ID")) -> None:
    """Show a user's alert channels."""
    from demandscan.core.notify.fanout import ResolvedAlertSettings
    from demandscan.persistence.repo import AlertSettingsRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        row = AlertSettingsRepository(session).get_for_user(user_id)
        settings = ResolvedAlertSettings.from_row(user_id, row)

    table = Table(title=f"Alert settings for {user_id}")
    table.add_column("Channel", style="cyan")
    table.add_column("Enabled", justify="center")
    table.add_column("Target")

    def flag(value: bool) -> str:
        return "[green]yes[/green]" if value else "[red]no[/red]"

    table.add_row("in-app", flag(settings.in_app_enabled), "")
    table.add_row("email", flag(settings.email_enabled), settings.email_address or "")
    table.add_row("whatsapp", flag(settings.whatsapp_enabled), settings.whatsapp_number or "")

    console.print(table)
    if row is None:
        console.print("[dim]No settings saved; defaults shown.[/dim]")


@app.command("set")
def set_settings(
    user_id: str = typer.Argument(..., help="User ID"),
    email: Optional[bool] = typer.Option(None, "--email/--no-email", help="Email alerts"),
    email_address: Optional[str] = typer.Option(None, "--email-address", help="Email recipient"),
    whatsapp: Optional[bool] = typer.Option(None, "--whatsapp/--no-whatsapp", help="WhatsApp links"),
    whatsapp_number: Optional[str] = typer.Option(None, "--whatsapp-number", help="WhatsApp number"),
    in_app: Optional[bool] = typer.Option(None, "--in-app/--no-in-app", help="In-app notifications"),
) -> None:
    """Update a user's alert channels; unspecified options are left unchanged.

    Examples:
        demandscan alerts set admin-1 --email --email-address ops@example.com
        demandscan alerts set admin-1 --whatsapp --whatsapp-number "+234 801 234 5678"
    """
    from demandscan.persistence.repo import AlertSettingsRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        AlertSettingsRepository(session).upsert(
            user_id,
            email_enabled=email,
            email_address=email_address,
            whatsapp_enabled=whatsapp,
            whatsapp_number=whatsapp_number,
            in_app_enabled=in_app,
        )

    console.print(f"[green]OK[/green] Alert settings saved for {user_id}")


@admins_app.command("add")
def add_admin(user_id: str = typer.Argument(..., help="User ID")) -> None:
    """Grant the admin role."""
    from demandscan.persistence.repo import RoleRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        RoleRepository(session).assign(user_id, UserRoleName.ADMIN)

    console.print(f"[green]OK[/green] {user_id} is an admin")


@admins_app.command("list")
def list_admins() -> None:
    """List users holding the admin role."""
    from demandscan.persistence.repo import RoleRepository

    config = load_config_or_exit()
    with open_session(config) as session:
        admins = RoleRepository(session).principals(UserRoleName.ADMIN)

    if not admins:
        console.print("[dim]No admins assigned. Add one with:[/dim] demandscan admins add <user-id>")
        return

    for user_id in admins:
        console.print(f"  - [cyan]{user_id}[/cyan]")
