"""
Database connection and session management.

Provides a process-wide engine, a session factory and session lifecycle
helpers.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

DEFAULT_DATABASE_URL = "sqlite:///data/demandscan.db"


# =============================================================================
# Global Engine References
# =============================================================================

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


# =============================================================================
# SQLite Configuration
# =============================================================================


def _configure_sqlite(engine: Engine) -> None:
    """Enable foreign keys and WAL on every SQLite connection."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or url.endswith(":memory:")


# =============================================================================
# Engine Creation
# =============================================================================


def create_db_engine(url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> Engine:
    """Create a new engine without touching the process-wide one.

    Args:
        url: SQLAlchemy database URL
        echo: Whether to log SQL statements

    Returns:
        SQLAlchemy Engine instance
    """
    if url.startswith("sqlite"):
        if _is_memory_url(url):
            engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            db_path = url.replace("sqlite:///", "")
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
            )
        _configure_sqlite(engine)
        return engine

    return create_engine(
        url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Build the session factory used across the application."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def get_engine(url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> Engine:
    """Get or create the process-wide database engine.

    The first call wins; later calls return the same engine regardless of
    the arguments. Use dispose_engines() to reconfigure.
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    _engine = create_db_engine(url, echo=echo)
    _session_factory = make_session_factory(_engine)
    return _engine


# =============================================================================
# Session Management
# =============================================================================


def _get_session_factory() -> sessionmaker[Session]:
    if _session_factory is None:
        return make_session_factory(get_engine())
    return _session_factory


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get a database session that commits on success and rolls back on error.

    Usage:
        with get_session() as session:
            session.execute(...)
    """
    session = _get_session_factory()()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# Database Initialization
# =============================================================================


def init_db(url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> None:
    """Create all tables if they don't exist.

    For production use, prefer Alembic migrations.
    """
    engine = get_engine(url, echo=echo)
    Base.metadata.create_all(bind=engine)


def drop_db(url: str = DEFAULT_DATABASE_URL) -> None:
    """Drop all database tables.

    WARNING: This will delete all data!
    """
    engine = get_engine(url)
    Base.metadata.drop_all(bind=engine)


def dispose_engines() -> None:
    """Dispose of the process-wide engine."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
