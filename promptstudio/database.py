"""
Database connection and session management.
Uses async SQLAlchemy for FastAPI compatibility.
"""
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from promptstudio.config import get_settings

settings = get_settings()


def _engine_options() -> dict:
    # SQLite connections are cheap and must not be shared across event loops
    if settings.is_sqlite:
        return {"poolclass": NullPool}
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}


async_engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    **_engine_options(),
)

AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that provides a database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create all tables (call on startup)."""
    # Registers the models on Base.metadata
    from promptstudio import models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db():
    """Drop all tables. Used by tests and the reset script."""
    from promptstudio import models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db():
    """Close database connections (call on shutdown)."""
    await async_engine.dispose()
