# src/cache/memory_fast_store.py (v1)
"""In-process fast tier (FAST_STORE_BACKEND=memory).

Keys are enumerated in insertion order; re-setting an existing key keeps its
original position. Expired entries are dropped lazily on access.
"""

from __future__ import annotations

import fnmatch
import logging
import time
from typing import Callable

from smartcache.cache.base_fast_store import BaseFastStore

logger = logging.getLogger(__name__)


class MemoryFastStore(BaseFastStore):
    """Dict-backed fast tier with per-key expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[str, float]] = {}

    async def get(self, key: str) -> str | None:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at <= self._clock():
            del self._data[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._data[key] = (value, self._clock() + ttl_seconds)

    async def keys(self, pattern: str) -> list[str]:
        now = self._clock()
        expired = [k for k, (_, exp) in self._data.items() if exp <= now]
        for key in expired:
            del self._data[key]
        if expired:
            logger.debug("Evicted %d expired fast-tier keys", len(expired))
        return [k for k in self._data if fnmatch.fnmatchcase(k, pattern)]

    def __len__(self) -> int:
        return len(self._data)
