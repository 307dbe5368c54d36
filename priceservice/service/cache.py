"""Response caches for the prices endpoint.

Entries are keyed by (store_id, article_id, page, page_size). Two backends
are available: an in-process dict guarded by an asyncio lock, and Redis.
Backend failures are logged and treated as misses.
"""

from __future__ import annotations

import asyncio
import pickle
import time
from abc import ABC, abstractmethod
from typing import Any

import redis.asyncio as redis
import structlog

from priceservice.config import CacheConfig

logger = structlog.get_logger(__name__)

CacheKey = tuple[str, str, int, int]


class ResponseCache(ABC):
    """Key/value store for assembled responses."""

    @abstractmethod
    async def get(self, key: CacheKey) -> Any | None:
        """Return the cached value or None on a miss."""

    @abstractmethod
    async def set(self, key: CacheKey, value: Any) -> None:
        """Store a value under key."""

    @abstractmethod
    async def clear(self) -> int:
        """Drop every entry, returning how many were removed."""


class InMemoryResponseCache(ResponseCache):
    """Process-local cache with optional expiry."""

    def __init__(self, ttl_seconds: int | None = None, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, tuple[float, Any]] = {}
        self._lock = asyncio.Lock()

    def _expired(self, stored_at: float, now: float) -> bool:
        return bool(self.ttl_seconds) and now - stored_at > self.ttl_seconds

    async def get(self, key: CacheKey) -> Any | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                return None
            return value

    async def set(self, key: CacheKey, value: Any) -> None:
        async with self._lock:
            now = self._clock()
            # evict every entry past its TTL, not only this key
            stale = [
                k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)
            ]
            for stale_key in stale:
                del self._entries[stale_key]
            self._entries[key] = (now, value)

    async def clear(self) -> int:
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        return len(self._entries)


class RedisResponseCache(ResponseCache):
    """Redis-backed cache storing pickled responses with a TTL."""

    prefix = "prices"

    def __init__(self, client: redis.Redis, ttl_seconds: int = 300):
        self.client = client
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int = 300) -> RedisResponseCache:
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=False,  # values are pickled bytes
        )
        return cls(client, ttl_seconds)

    def _redis_key(self, key: CacheKey) -> str:
        store_id, article_id, page, page_size = key
        return f"{self.prefix}:{store_id}:{article_id}:{page}:{page_size}"

    async def get(self, key: CacheKey) -> Any | None:
        redis_key = self._redis_key(key)
        try:
            cached_bytes = await self.client.get(redis_key)
            if cached_bytes:
                return pickle.loads(cached_bytes)
        except Exception as exc:
            logger.warning("cache_get_failed", key=redis_key, error=str(exc))
        return None

    async def set(self, key: CacheKey, value: Any) -> None:
        redis_key = self._redis_key(key)
        try:
            await self.client.setex(redis_key, self.ttl_seconds, pickle.dumps(value))
        except Exception as exc:
            logger.warning("cache_set_failed", key=redis_key, error=str(exc))

    async def clear(self) -> int:
        try:
            keys = await self.client.keys(f"{self.prefix}:*")
            if keys:
                return await self.client.delete(*keys)
        except Exception as exc:
            logger.warning("cache_clear_failed", error=str(exc))
        return 0


def build_cache(config: CacheConfig) -> ResponseCache | None:
    """Create the configured cache backend, or None when caching is disabled."""
    if not config.enabled:
        return None
    if config.backend == "redis":
        return RedisResponseCache.from_url(config.redis_url, config.ttl_seconds)
    return InMemoryResponseCache(config.ttl_seconds)
