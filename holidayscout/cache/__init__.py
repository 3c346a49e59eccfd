"""
Time-bounded memoization for provider lookups.
"""

from holidayscout.cache.provider_cache import (
    MISS,
    CacheBackend,
    CacheEntry,
    CacheKey,
    MemoryCacheBackend,
    ProviderCache,
)
from holidayscout.cache.redis_backend import RedisCacheBackend

__all__ = [
    "MISS",
    "CacheBackend",
    "CacheEntry",
    "CacheKey",
    "MemoryCacheBackend",
    "ProviderCache",
    "RedisCacheBackend",
]
