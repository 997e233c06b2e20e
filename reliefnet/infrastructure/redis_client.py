"""
Redis connection pool for issue-acceptance locks.

The pool is created on first use so importing the app (tests, migrations,
the seed script) never needs a reachable Redis.
"""

from typing import Optional

import redis.asyncio as aioredis

from reliefnet.config import settings

_pool: Optional[aioredis.ConnectionPool] = None


async def get_redis() -> aioredis.Redis:
    global _pool
    if _pool is None:
        _pool = aioredis.ConnectionPool.from_url(
            settings.redis_url, decode_responses=True
        )
    return aioredis.Redis(connection_pool=_pool)


async def close_redis() -> None:
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None
