# src/cache/mongo_record_store.py (v1)
"""MongoDB-based durable tier (RECORD_STORE_BACKEND=mongodb).

Uses the native asyncio client of the pymongo SDK (``AsyncMongoClient``).
Requires: pip install pymongo.
Indexes are created on first use, since the constructor cannot await.
"""

from __future__ import annotations

import logging
from typing import Any

from smartcache.cache.base_record_store import BaseRecordStore
from smartcache.cache.models import CacheRecord

logger = logging.getLogger(__name__)

_PROJECTION = {"_id": 0}


class MongoRecordStore(BaseRecordStore):
    """Durable tier backed by a MongoDB collection."""

    def __init__(
        self,
        url: str,
        database: str = "smartcache",
        collection: str = "summaries",
    ) -> None:
        try:
            from pymongo import AsyncMongoClient
        except ImportError as e:
            raise ImportError(
                "pymongo package required: pip install pymongo"
            ) from e

        self._client = AsyncMongoClient(url, tz_aware=True)
        self._col = self._client[database][collection]
        self._indexes_ready = False

    async def _ensure_indexes(self) -> None:
        """Create the unique hash, range and text indexes if missing."""
        if self._indexes_ready:
            return
        from pymongo import ASCENDING, DESCENDING, TEXT, IndexModel

        await self._col.create_indexes([
            IndexModel([("text_hash", ASCENDING)], unique=True),
            IndexModel([("normalized_hash", ASCENDING), ("created_at", DESCENDING)]),
            IndexModel([
                ("content_type", ASCENDING),
                ("word_count", ASCENDING),
                ("created_at", DESCENDING),
            ]),
            # A collection holds at most one text index.
            IndexModel([("normalized_text", TEXT), ("input_text", TEXT)]),
        ])
        self._indexes_ready = True

    async def find_by_hash(self, text_hash: str) -> CacheRecord | None:
        await self._ensure_indexes()
        doc = await self._col.find_one(
            {"$or": [{"text_hash": text_hash}, {"normalized_hash": text_hash}]},
            _PROJECTION,
        )
        return CacheRecord(**doc) if doc else None

    async def find_by_category(
        self, category: str, min_words: int, max_words: int, limit: int = 3
    ) -> list[CacheRecord]:
        from pymongo import DESCENDING

        await self._ensure_indexes()
        cursor = (
            self._col.find(
                {
                    "content_type": category,
                    "word_count": _word_range(min_words, max_words),
                },
                _PROJECTION,
            )
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        return [CacheRecord(**doc) for doc in await cursor.to_list()]

    async def search_text(
        self, terms: str, min_words: int, max_words: int, limit: int = 5
    ) -> list[CacheRecord]:
        if not terms.strip():
            return []
        await self._ensure_indexes()
        cursor = self._col.find(
            {
                "$text": {"$search": terms},
                "word_count": _word_range(min_words, max_words),
            },
            _PROJECTION,
        ).limit(limit)
        return [CacheRecord(**doc) for doc in await cursor.to_list()]

    async def insert(self, record: CacheRecord) -> CacheRecord:
        from pymongo.errors import DuplicateKeyError

        await self._ensure_indexes()
        try:
            await self._col.insert_one(record.model_dump())
        except DuplicateKeyError:
            logger.warning(
                "Duplicate record for hash %s ignored", record.text_hash[:12]
            )
        return record

    async def close(self) -> None:
        """Close the MongoDB client."""
        await self._client.close()


def _word_range(min_words: int, max_words: int) -> dict[str, Any]:
    return {"$gte": min_words, "$lte": max_words}
