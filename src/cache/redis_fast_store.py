# src/cache/redis_fast_store.py (v1)
"""Redis-based fast tier (FAST_STORE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Values are plain strings written with ``SET key value EX ttl``; similarity
scans use ``SCAN MATCH`` rather than the blocking ``KEYS`` command.
"""

from __future__ import annotations

import logging

from smartcache.cache.base_fast_store import BaseFastStore

logger = logging.getLogger(__name__)


class RedisFastStore(BaseFastStore):
    """Redis-backed fast tier for multi-instance deployments."""

    def __init__(self, redis_url: str, key_prefix: str = "") -> None:
        try:
            import redis.asyncio as aioredis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = aioredis.from_url(redis_url, decode_responses=True)
        self._prefix = key_prefix

    async def get(self, key: str) -> str | None:
        return await self._client.get(f"{self._prefix}{key}")

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(f"{self._prefix}{key}", value, ex=ttl_seconds)

    async def keys(self, pattern: str) -> list[str]:
        found: list[str] = []
        async for redis_key in self._client.scan_iter(match=f"{self._prefix}{pattern}"):
            found.append(redis_key[len(self._prefix):])
        return found

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()
