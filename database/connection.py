"""
COVID-19 Russia Monitor - Database Connection

Manages SQLAlchemy engine and session lifecycle.

Usage:
    from database.connection import get_session, init_database

    # Initialize at application start
    success = init_database()

    with get_session() as session:
        store = open_key_value_store(session, "COVID-19-RUSSIA")
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from config.settings import get_settings
from database.models import Base


logger = logging.getLogger(__name__)

# Module-level engine instance
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


# =============================================================================
# Engine Management
# =============================================================================

def _sqlite_file(database_url: str) -> Optional[Path]:
    """Path of a file-backed SQLite database, or None for anything else."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return None
    if not url.database or url.database == ":memory:":
        return None
    path = Path(url.database)
    if not path.is_absolute():
        path = get_settings().project_root / path
    return path


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite gets check_same_thread disabled and a relative file path is
    resolved against the project root, with its directory created.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        sqlite_path = _sqlite_file(database_url)
        if sqlite_path is not None:
            sqlite_path.parent.mkdir(parents=True, exist_ok=True)
            url = url.set(database=str(sqlite_path))
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before use
        echo=echo,
    )


def get_engine() -> Engine:
    """
    Engine for DATABASE_URL, built on first use and then reused.
    """
    global _engine

    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings.database_url, echo=settings.database_echo)
        logger.info(
            "Database engine created",
            extra={"backend": _engine.url.get_backend_name()},
        )

    return _engine


def close_engine() -> None:
    """
    Dispose of the engine so the next get_engine() builds a fresh one.

    Called by shutdown_application() at the end of a run.
    """
    global _engine, _session_factory

    if _engine is not None:
        logger.info("Closing database engine")
        _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> sessionmaker:
    """
    Session factory bound to the shared engine.

    Returns:
        sessionmaker; sessions keep loaded values after commit
    """
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    return _session_factory


# =============================================================================
# Session Management
# =============================================================================

@contextmanager
def get_session() -> Generator[Session, None, None]:
    """
    Get a database session in a context manager.

    Rolls back on exception and always closes the session. Repositories
    commit their own writes.

    Yields:
        SQLAlchemy Session instance
    """
    session = get_session_factory()()

    try:
        yield session
    except Exception:
        logger.error("Database session error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# Initialization
# =============================================================================

def init_database() -> bool:
    """
    Verify connectivity and make sure the store tables exist.

    Returns:
        True if initialization successful, False otherwise
    """
    try:
        engine = get_engine()

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        Base.metadata.create_all(engine)
        logger.info("Database ready")
        return True

    except Exception as e:
        logger.error(
            "Database initialization failed",
            extra={"error": str(e)},
        )
        return False


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "build_engine",
    "get_engine",
    "close_engine",
    "get_session",
    "get_session_factory",
    "init_database",
]
