"""Engine, session factory and the request-scoped session dependency."""

from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for the configured store.

    SQLite (local runs) gets no pool tuning. Postgres behind the Supabase
    pooler runs in transaction mode, where asyncpg's prepared statement
    cache breaks, so the cache is turned off there.
    """
    url = config.async_database_url
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=config.debug,
            connect_args={"check_same_thread": False},
        )

    connect_args: dict[str, Any] = {}
    if "pooler.supabase.com" in url:
        connect_args["statement_cache_size"] = 0

    return create_async_engine(
        url,
        echo=config.debug,
        pool_pre_ping=True,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_recycle=config.db_pool_recycle_seconds,
        connect_args=connect_args,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions keep loaded rows usable after commit; flushes are explicit."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings)
async_session_factory = build_session_factory(engine)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session_factory() as session:
        yield session


async def ping(session: AsyncSession) -> str:
    """Round-trip to the store; returns ``"healthy"`` or the failure reason."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        return f"unhealthy: {exc.__class__.__name__}"
    return "healthy"
