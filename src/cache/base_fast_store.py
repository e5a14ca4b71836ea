# src/cache/base_fast_store.py (v1)
"""Abstract fast-tier (key/value with expiry) interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseFastStore(ABC):
    """Low-latency key/value tier holding summaries under structured keys."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None when absent/expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key, replacing any previous value and expiry."""

    @abstractmethod
    async def keys(self, pattern: str) -> list[str]:
        """List live keys matching a glob pattern, in enumeration order."""

    async def close(self) -> None:
        """Release the underlying connection, if any."""
