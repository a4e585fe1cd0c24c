"""
Database Initialization - Create the builder's tables.

On Supabase the tables normally already exist (managed by migrations in
the dashboard); create_all only adds the ones that are missing.
"""
from channelsite.core.logging_config import get_logger
from channelsite.database.connection import get_database
from channelsite.database.models import Base

logger = get_logger(__name__)


def init_tables() -> bool:
    """
    Create tables if they don't exist.

    Returns:
        True if tables were created successfully
    """
    try:
        Base.metadata.create_all(get_database().engine)
        logger.info("Database tables initialized successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize tables: {e}")
        raise


def drop_tables() -> bool:
    """Drop all builder tables (tests and local development only)."""
    try:
        Base.metadata.drop_all(get_database().engine)
        logger.warning("Database tables dropped")
        return True
    except Exception as e:
        logger.error(f"Failed to drop tables: {e}")
        raise


if __name__ == "__main__":
    print("Initializing tables...")
    init_tables()
    print("Done!")
