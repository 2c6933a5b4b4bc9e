"""Database connection and session management."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.settings import get_async_database_url

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def create_engine(database_url: str) -> AsyncEngine | None:
    """Create the async engine, or None when no database is configured.

    Args:
        database_url: Raw DATABASE_URL value (postgres:// URLs are converted for asyncpg)

    Returns:
        AsyncEngine or None
    """
    url = get_async_database_url(database_url)
    if not url:
        logger.warning("[DB] DATABASE_URL not set - analysis caching disabled")
        return None

    return create_async_engine(
        url,
        echo=False,
        future=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_database(engine: AsyncEngine | None) -> bool:
    """Create tables that don't exist yet.

    Failures are logged and swallowed so the API still starts without caching.

    Returns:
        True if the schema is ready, False otherwise
    """
    if engine is None:
        logger.warning("[DB] Skipping table creation - no database connection")
        return False

    # Import models so they register on Base.metadata
    from app.persistence import models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        logger.exception("[DB] Failed to initialize database")
        return False

    logger.info("[DB] conversation_analysis table ready")
    return True
