"""
Database Connection Management.

The service talks to Supabase through its plain Postgres endpoint with
SQLAlchemy, not through PostgREST. Tests point DATABASE_URL at sqlite.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from channelsite.core.config import get_settings
from channelsite.core.logging_config import get_logger

logger = get_logger(__name__)


def engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        # In-memory sqlite only lives as long as its one connection
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    # The Supabase pooler closes idle connections
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


class DatabaseConnection:
    """
    Engine plus session factory for the project tables.

    Example:
        >>> db = DatabaseConnection("sqlite://")
        >>> with db.get_session() as session:
        ...     session.execute(text("SELECT 1"))
    """

    def __init__(self, connection_url: Optional[str] = None):
        url = connection_url or get_settings().database_url

        self.engine = create_engine(url, echo=False, **engine_options(url))
        # Services hand ORM rows back to routes after the session closes
        self._session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

        logger.info(f"Database connection initialized: {make_url(url).render_as_string(hide_password=True)}")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Session that commits on success and rolls back on SQLAlchemyError.

        Yields:
            SQLAlchemy Session object
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error, rolling back: {e}")
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """True when SELECT 1 succeeds (readiness check)."""
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")


_db_connection: Optional[DatabaseConnection] = None


def get_database() -> DatabaseConnection:
    """Get or create the database connection (created lazily, after settings load)."""
    global _db_connection
    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection


def reset_database() -> None:
    """Dispose of and forget the global connection (used by tests)."""
    global _db_connection
    if _db_connection is not None:
        _db_connection.close()
    _db_connection = None
