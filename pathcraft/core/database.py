"""Database configuration."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from pathcraft.core.config import get_settings
from pathcraft.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    future=True,
)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session factory with the settings every caller relies on."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


AsyncSessionLocal = create_session_factory(engine)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


async def init_db(bind: AsyncEngine = engine) -> None:
    """Initialize database tables."""
    # Register every mapped table on Base.metadata
    import pathcraft.models  # noqa: F401

    async with bind.begin() as conn:
        logger.info("Creating database tables")
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    logger.info("Closing database connections")
    await engine.dispose()


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session as a context manager."""
    session = AsyncSessionLocal()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for FastAPI dependency injection."""
    async with get_db_session() as session:
        yield session
