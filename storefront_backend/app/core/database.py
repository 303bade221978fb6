"""
Record store access

The shipping quote service only reads product dimensions, so request
sessions never commit: whatever happened in the session is rolled back
when the request ends.
"""
from typing import Any, AsyncIterator, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.core.config import Settings, settings

# Small pool outside production: one request holds at most one connection
DEVELOPMENT_POOL = {"pool_size": 2, "max_overflow": 5}


def build_pool_config(source: Settings) -> Dict[str, Any]:
    """Engine pool options for the configured environment."""
    if source.ENVIRONMENT != "production":
        return {**DEVELOPMENT_POOL, "pool_pre_ping": True}
    return {
        "pool_size": source.DB_POOL_SIZE,
        "max_overflow": source.DB_MAX_OVERFLOW,
        "pool_recycle": source.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **build_pool_config(settings),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Read-only request session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def ping_database() -> None:
    """Round-trip a trivial query; raises when the record store is unreachable."""
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1"))
