"""
Redis-backed cache storage for provider lookups.

Lets several API workers share provider answers. Values are stored as JSON
with SETEX so Redis expires them. Redis errors are logged and treated as a
miss (fail open); the search then simply calls the provider.

Example:
    >>> from redis.asyncio import Redis
    >>> backend = RedisCacheBackend(Redis.from_url("redis://localhost:6379/0"),
    ...                             value_type=Optional[TransportOffer],
    ...                             key_prefix="holidayscout:transport:")
    >>> cache = ProviderCache("transport", ttl_seconds=900, backend=backend)
"""

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from holidayscout.cache.provider_cache import MISS, CacheBackend

logger = logging.getLogger(__name__)


class RedisCacheBackend(CacheBackend):
    """
    Cache backend storing JSON encoded values in Redis.

    Attributes:
        redis: Async Redis client
        key_prefix: Prefix for all keys written by this backend
    """

    def __init__(self, redis_client: Redis, value_type: Any, key_prefix: str = "holidayscout:"):
        """
        Initialize the Redis backend.

        Args:
            redis_client: Async Redis client
            value_type: Type of stored values, e.g. Optional[TransportOffer]
            key_prefix: Prefix for Redis keys
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self._adapter = TypeAdapter(value_type)

    async def get(self, key: str) -> Any:
        try:
            raw = await self.redis.get(f"{self.key_prefix}{key}")
        except RedisError as e:
            logger.warning(f"Error reading cache key {key}: {e}")
            return MISS

        if raw is None:
            return MISS

        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return MISS

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            payload = self._adapter.dump_json(value)
            await self.redis.setex(f"{self.key_prefix}{key}", ttl, payload)
        except RedisError as e:
            logger.warning(f"Error writing cache key {key}: {e}")
