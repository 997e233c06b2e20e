"""FastAPI dependency injection helpers."""

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from reliefnet.infrastructure.database import async_session_factory
from reliefnet.infrastructure.redis_client import get_redis


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_redis_client() -> aioredis.Redis:
    return await get_redis()
