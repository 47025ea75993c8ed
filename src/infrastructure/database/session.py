"""Database engine and session management."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings


def _connect_args(database_url: str) -> dict[str, Any]:
    # Supavisor pools in transaction mode, which breaks asyncpg's
    # prepared statement cache
    if "supabase.com" in database_url:
        return {"statement_cache_size": 0}
    return {}


engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    connect_args=_connect_args(settings.database_url),
)

# Profiles are read back after commit, so instances must not expire
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency yielding a session for one request."""
    async with async_session_factory() as session:
        yield session


async def dispose_engine() -> None:
    """Close pooled connections on application shutdown."""
    await engine.dispose()
