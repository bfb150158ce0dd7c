"""
Database connection management.

Provides the async engine, the session factory and get_async_session(),
the single entry point for opening a unit of work against the store.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shared.config import get_settings

logger = logging.getLogger(__name__)


def create_engine_from_settings() -> AsyncEngine:
    """
    Create the async engine from application settings.

    Every connection runs at DB_ISOLATION_LEVEL (SERIALIZABLE by default).
    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    settings = get_settings()
    db_url = settings.DATABASE_URL

    # Ensure we use asyncpg driver
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine_kwargs = {
        "echo": settings.DB_ECHO,
        "isolation_level": settings.DB_ISOLATION_LEVEL,
        "pool_pre_ping": True,
    }
    if not db_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW

    logger.info(
        f"Creating database engine (isolation_level={settings.DB_ISOLATION_LEVEL})"
    )
    return create_async_engine(db_url, **engine_kwargs)


engine = create_engine_from_settings()

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@asynccontextmanager
async def get_async_session() -> AsyncIterator[AsyncSession]:
    """
    Open one session for one unit of work.

    The caller owns commit/rollback. The session is always closed on exit,
    and closing rolls back anything still uncommitted.

    Example:
        >>> async with get_async_session() as session:
        ...     await session.execute(stmt)
        ...     await session.commit()
    """
    session = AsyncSessionLocal()
    try:
        yield session
    finally:
        await session.close()
