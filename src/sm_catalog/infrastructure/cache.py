"""CatalogCache: get / set-with-expiry of the whole catalog under one redis key.

A miss (key absent or expired) returns None and is never an error. A redis
failure raises CacheUnavailableError; the caller must not fall back to a fetch.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.sm_catalog.domain.models import CatalogItem, items_from_json, items_to_json
from src.sm_common.errors import CacheUnavailableError

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = "skins_data"
CATALOG_CACHE_TTL_SECONDS = 300


class CatalogCache:
    def __init__(
        self,
        redis: aioredis.Redis,
        key: str = CATALOG_CACHE_KEY,
        ttl_seconds: int = CATALOG_CACHE_TTL_SECONDS,
    ) -> None:
        self._redis = redis
        self.key = key
        self.ttl_seconds = ttl_seconds

    async def get(self) -> list[CatalogItem] | None:
        try:
            raw = await self._redis.get(self.key)
        except RedisError as exc:
            logger.exception("Redis error while reading %s", self.key)
            raise CacheUnavailableError() from exc
        except UnicodeDecodeError:
            # decode_responses=True decodes inside the client
            logger.warning("Discarding non-UTF-8 cache entry %s", self.key)
            return None

        if raw is None:
            return None
        try:
            return items_from_json(raw)
        except (ValueError, KeyError, TypeError):
            # An unreadable entry is as good as absent; the next fetch overwrites it
            logger.warning("Discarding undecodable cache entry %s", self.key)
            return None

    async def set(self, items: list[CatalogItem]) -> None:
        try:
            await self._redis.set(self.key, items_to_json(items), ex=self.ttl_seconds)
        except RedisError as exc:
            logger.exception("Redis error while writing %s", self.key)
            raise CacheUnavailableError() from exc
