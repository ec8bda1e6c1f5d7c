"""Database initialization utilities."""

import asyncio
import logging

# Import models to register with Base.metadata
import vita.infrastructure.persistence.sqlalchemy.models  # noqa: F401
from vita.infrastructure.persistence.sqlalchemy.models.base import Base
from vita.infrastructure.persistence.sqlalchemy.session import create_engine
from vita_config.settings import get_settings

logger = logging.getLogger(__name__)


async def create_tables(database_url: str | None = None) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    engine = create_engine(database_url or get_settings().database_url)
    logger.info("Ensuring all database tables exist...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await engine.dispose()
    logger.info("Database schema is up to date (missing tables created if needed)")


def display_url(database_url: str) -> str:
    """Strip credentials from a database URL for display."""
    return database_url.split("@")[-1] if "@" in database_url else database_url


async def _init_database() -> None:
    database_url = get_settings().database_url

    logger.info("Initializing database...")
    logger.info("Database: %s", display_url(database_url))

    await create_tables(database_url)

    logger.info("Database initialized successfully!")


def db_init() -> None:
    """Initialize database (create tables)."""
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_init_database())
