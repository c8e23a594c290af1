"""
Shared helpers for CLI commands: config loading and database sessions.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

import typer
from rich.console import Console
from sqlalchemy.orm import Session

from demandscan.core.config.loader import load_app_config
from demandscan.core.config.models import AppConfig
from demandscan.core.errors import ConfigError
from demandscan.core.logging import setup_logging
from demandscan.persistence.db import get_engine, get_session

err_console = Console(stderr=True)


def load_config_or_exit(path: Optional[Path] = None) -> AppConfig:
    """Load app config, printing the error and exiting on failure."""
    try:
        return load_app_config(path)
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)


def configure_logging(config: AppConfig, verbose: bool = False) -> None:
    setup_logging(
        level="DEBUG" if verbose else config.logging.level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        rich_console=config.logging.rich_console,
    )


@contextmanager
def open_session(config: AppConfig) -> Generator[Session, None, None]:
    """Session bound to the configured database."""
    get_engine(config.database.url, echo=config.database.echo)
    with get_session() as session:
        yield session
