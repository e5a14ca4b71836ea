# src/cache/base_record_store.py (v1)
"""Abstract durable-tier (document store) interface.

Only the query shapes the lookup engine needs are exposed: equality on the
hash fields, category + word-count range ordered by recency, and free-text
search with a word-count range.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from smartcache.cache.models import CacheRecord


class BaseRecordStore(ABC):
    """Persistent store of summary records. Records are never updated or deleted."""

    @abstractmethod
    async def find_by_hash(self, text_hash: str) -> CacheRecord | None:
        """Record whose text_hash (or legacy normalized_hash) equals text_hash."""

    @abstractmethod
    async def find_by_category(
        self, category: str, min_words: int, max_words: int, limit: int = 3
    ) -> list[CacheRecord]:
        """Records of a category within an inclusive word-count range, newest first."""

    @abstractmethod
    async def search_text(
        self, terms: str, min_words: int, max_words: int, limit: int = 5
    ) -> list[CacheRecord]:
        """Records matching any of the space-separated terms, within the range."""

    @abstractmethod
    async def insert(self, record: CacheRecord) -> CacheRecord:
        """Persist a record. A duplicate text_hash is logged and ignored."""

    async def close(self) -> None:
        """Release the underlying connection, if any."""
