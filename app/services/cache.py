import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class CacheService:
    """Best-effort Redis cache wrapper.

    A failing read is reported as a miss and a failing write is skipped, so
    the cache can never fail a request.
    """

    def __init__(self, redis_url: str):
        self.redis_url = redis_url
        self._redis: redis.Redis | None = None

    async def get_client(self) -> redis.Redis:
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url, decode_responses=True)
        return self._redis

    async def get(self, key: str) -> Any | None:
        client = await self.get_client()
        try:
            value = await client.get(key)
        except RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

        if value:
            return json.loads(value)
        return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        client = await self.get_client()
        try:
            await client.set(key, json.dumps(value), ex=ttl)
        except RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def close(self) -> None:
        if self._redis:
            await self._redis.close()
            self._redis = None
