"""
Provider cache with per-provider TTL.

One ProviderCache exists per provider class (transport, hotel). Entries
expire purely by TTL; nothing is evicted manually. Only successful provider
answers are stored. A definite "no offer" (None) is a successful answer and
is cached, but a provider exception never is, so the next call retries the
live provider.

Example:
    >>> cache = ProviderCache("transport", ttl_seconds=900)
    >>> key = CacheKey(namespace="flight", origin="LON", destination="BCN",
    ...                outbound_date=date(2025, 3, 4), return_date=date(2025, 3, 8),
    ...                adults=2)
    >>> offer = await cache.get_or_fetch(key, lambda: provider.search(...))
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)


class _Miss:
    """Sentinel type for a cache miss."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS = _Miss()


class CacheKey(BaseModel):
    """
    Canonical request signature.

    Every parameter that affects a provider answer is a named field, so the
    rendered key never depends on the order a caller passed arguments in.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str
    destination: str
    outbound_date: date
    return_date: date
    adults: int
    origin: Optional[str] = None

    @field_validator("namespace", "destination", "origin")
    @classmethod
    def normalize_code(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v is not None else None

    def render(self) -> str:
        """Render the key as a stable string."""
        return ":".join(
            [
                self.namespace,
                self.origin or "-",
                self.destination,
                self.outbound_date.isoformat(),
                self.return_date.isoformat(),
                str(self.adults),
            ]
        )

    def __str__(self) -> str:
        return self.render()


@dataclass
class CacheEntry:
    """A stored value and the monotonic time it expires at."""

    key: str
    value: Any
    expires_at: float


class CacheBackend(ABC):
    """Storage used by ProviderCache."""

    @abstractmethod
    async def get(self, key: str) -> Any:
        """Return the stored value, or MISS if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a value for ttl seconds."""


class MemoryCacheBackend(CacheBackend):
    """
    In-process cache backend.

    Expired entries are dropped lazily on read and by a sweep that runs
    every `sweep_interval` writes.

    Attributes:
        clock: Monotonic time source, injectable for tests
        sweep_interval: Number of writes between expiry sweeps
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_interval: int = 100):
        self.clock = clock
        self.sweep_interval = max(1, sweep_interval)
        self._entries: Dict[str, CacheEntry] = {}
        self._writes = 0

    async def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return MISS

        if entry.expires_at <= self.clock():
            del self._entries[key]
            return MISS

        return entry.value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=self.clock() + ttl)

        self._writes += 1
        if self._writes % self.sweep_interval == 0:
            self.sweep()

    def sweep(self) -> int:
        """
        Remove all expired entries.

        Returns:
            Number of entries removed
        """
        now = self.clock()
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class ProviderCache:
    """
    TTL memoization in front of one provider class.

    Attributes:
        name: Provider class name used in logs ('transport', 'hotel')
        ttl_seconds: Default entry lifetime
        backend: Storage backend (in-process memory by default)
        hits: Number of lookups served from the cache
        misses: Number of lookups that went to the provider
    """

    def __init__(self, name: str, ttl_seconds: int, backend: Optional[CacheBackend] = None):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self.name = name
        self.ttl_seconds = ttl_seconds
        self.backend = backend if backend is not None else MemoryCacheBackend()
        self.hits = 0
        self.misses = 0

        logger.info(
            f"Initialized {name} cache with TTL {ttl_seconds}s "
            f"({type(self.backend).__name__})"
        )

    async def get(self, key: CacheKey) -> Any:
        """Return the cached value for key, or MISS."""
        return await self.backend.get(key.render())

    async def set(self, key: CacheKey, value: Any, ttl: Optional[int] = None) -> None:
        """Store value under key for ttl seconds (default: ttl_seconds)."""
        await self.backend.set(key.render(), value, ttl or self.ttl_seconds)

    async def get_or_fetch(self, key: CacheKey, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for key, calling fetch on a miss.

        Exceptions raised by fetch propagate and nothing is stored.
        """
        value = await self.get(key)
        if value is not MISS:
            self.hits += 1
            logger.debug(f"{self.name} cache HIT {key}")
            return value

        self.misses += 1
        logger.debug(f"{self.name} cache MISS {key}")

        value = await fetch()
        await self.set(key, value)
        return value

    def stats(self) -> Dict[str, Any]:
        """Get hit/miss statistics."""
        return {
            "name": self.name,
            "ttl": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
        }
