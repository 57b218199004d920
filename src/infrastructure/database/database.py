"""
Synchronous Database Connection Module

This module manages database connections using SQLModel and SQLAlchemy. The
lead-capture stores are synchronous (the API layer runs them in the thread
pool), so a single synchronous engine serves the whole application.

The engine is created lazily on first use: an application configured for
spreadsheet or in-memory storage never opens a database connection.

**Security Note**: Ensure that DATABASE_URL uses SSL/TLS (via sslmode) over
untrusted networks, and never log connection strings or credentials.

Key Components:
    - get_engine: The lazily created, process-wide SQLAlchemy engine.
    - get_db_session: A context manager yielding a session that rolls back on error.
    - check_database_health: Verifies database connectivity.
    - create_db_and_tables: Creates tables on startup with retry logic.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql import text
from sqlmodel import Session, SQLModel, create_engine
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.core.config.settings import settings
from src.core.logging import logger


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """
    Creates the engine on first call and returns the same instance afterwards.

    SQLite URLs (handy for local development) skip the pool sizing options,
    which the SQLite dialect does not accept.
    """
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(url, echo=settings.DEBUG, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        echo=settings.DEBUG,
        pool_size=settings.POSTGRES_POOL_SIZE,
        max_overflow=settings.POSTGRES_MAX_OVERFLOW,
        pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
        pool_pre_ping=True,  # Check connection health before use
    )


@contextmanager
def get_db_session(engine: Engine | None = None) -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Rolls back on any error and always closes the session. Objects stay
    readable after commit (``expire_on_commit=False``) so repositories can
    return them.

    Yields:
        Session: A database session
    """
    session = Session(engine or get_engine(), expire_on_commit=False)
    try:
        yield session
    except Exception:
        session.rollback()
        logger.debug("database_session_rollback")
        raise
    finally:
        session.close()


def check_database_health(engine: Engine | None = None) -> bool:
    """
    Performs a health check on the database connection.

    Returns:
        bool: True if database is healthy and responsive, False otherwise
    """
    try:
        with Session(engine or get_engine()) as session:
            session.exec(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
def create_db_and_tables(engine: Engine | None = None) -> None:
    """
    Creates database tables with retry logic.

    Retries with exponential backoff while the database is still starting up.

    Raises:
        OperationalError: If the database stays unreachable after all attempts
    """
    # Registers the lead-capture tables on SQLModel.metadata.
    import src.domain.entities  # noqa: F401

    try:
        SQLModel.metadata.create_all(engine or get_engine())
        logger.info("database_tables_created")
    except OperationalError as e:
        logger.warning("database_tables_creation_retry", error=str(e))
        raise
