"""Database session and connection"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.orm import declarative_base

from app.config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    """Pool sizing only applies to server databases"""
    options = {"echo": settings.debug, "pool_pre_ping": True}
    if database_url.startswith("postgresql"):
        options.update(pool_size=20, max_overflow=10)
    return options


# Create async engine
engine = create_async_engine(
    settings.database_url, **_engine_options(settings.database_url)
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database session.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_models() -> None:
    """Create all tables that do not exist yet"""
    # Register models on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
