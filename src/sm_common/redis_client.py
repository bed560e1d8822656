"""Redis client factory: backs the catalog cache only.

Balances never touch Redis; they go through PostgreSQL row locks.
"""

import redis.asyncio as aioredis

from config.settings import Settings


def build_redis(settings: Settings) -> aioredis.Redis:
    """Create the process-wide Redis client (connection pool is lazy)."""
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )


async def close_redis(client: aioredis.Redis) -> None:
    """Close the Redis connection pool."""
    await client.aclose()
