# tests/integration/cache/test_int_cache_tiers.py (v1)
"""Integration tests for the cache tiers against real backends.

Redis and MongoDB run in testcontainers (skipped without Docker); the
SQLite + in-memory engine flow needs no external service.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from smartcache.cache.key_builder import describe
from smartcache.cache.lookup_engine import TieredLookupEngine
from smartcache.cache.memory_fast_store import MemoryFastStore
from smartcache.cache.models import CacheRecord
from smartcache.cache.sqlite_record_store import SqliteRecordStore
from smartcache.llm.summarizer import SummaryGenerator

RESEARCH_A = "Summarize this research paper about protein folding in cells"
RESEARCH_B = "Summarize the research study about gene editing in plants today"


class CountingGenerator(SummaryGenerator):
    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, text: str) -> str:
        self.calls += 1
        return f"summary #{self.calls}"


def _record(text: str, created_at: datetime) -> CacheRecord:
    d = describe(text)
    return CacheRecord(
        text_hash=d.content_hash, normalized_hash=d.content_hash, input_text=text,
        normalized_text=d.normalized_text, content_type=d.category,
        word_count=d.word_count, summary=f"summary of {text[:20]}",
        created_at=created_at,
    )


class TestEngineOverSqlite:
    @pytest.mark.asyncio
    async def test_restart_keeps_durable_hits(self, tmp_path):
        gen = CountingGenerator()
        db = tmp_path / "summaries.db"

        first = TieredLookupEngine(MemoryFastStore(), SqliteRecordStore(db), gen)
        assert (await first.resolve_detailed(RESEARCH_A)).hit_level == "generated"
        await first.close()

        second = TieredLookupEngine(MemoryFastStore(), SqliteRecordStore(db), gen)
        assert (await second.resolve_detailed(RESEARCH_A)).hit_level == "durable_exact"
        assert (await second.resolve_detailed(RESEARCH_B)).hit_level == "fast_similar"
        await second.close()
        assert gen.calls == 1


@pytest.mark.redis
class TestRedisFastStore:
    @pytest.mark.asyncio
    async def test_set_get_and_scan(self, redis_fast_store):
        await redis_fast_store.set("research_9_aaa", "s1", 60)
        await redis_fast_store.set("news_4_bbb", "s2", 60)
        assert await redis_fast_store.get("research_9_aaa") == "s1"
        assert await redis_fast_store.keys("research_*") == ["research_9_aaa"]
        await redis_fast_store.close()

    @pytest.mark.asyncio
    async def test_engine_fast_similar(self, redis_fast_store, tmp_path):
        gen = CountingGenerator()
        engine = TieredLookupEngine(
            redis_fast_store, SqliteRecordStore(tmp_path / "db.sqlite"), gen
        )
        await engine.resolve(RESEARCH_A)
        assert (await engine.resolve_detailed(RESEARCH_B)).hit_level == "fast_similar"
        await engine.close()


@pytest.mark.mongodb
class TestMongoRecordStore:
    @pytest.mark.asyncio
    async def test_insert_find_and_duplicate(self, mongo_record_store):
        now = datetime.now(timezone.utc)
        record = _record(RESEARCH_A, now)
        await mongo_record_store.insert(record)
        await mongo_record_store.insert(record)
        found = await mongo_record_store.find_by_hash(record.text_hash)
        assert found.summary == record.summary
        assert await mongo_record_store._col.count_documents({}) == 1

    @pytest.mark.asyncio
    async def test_category_newest_first(self, mongo_record_store):
        now = datetime.now(timezone.utc)
        await mongo_record_store.insert(_record(RESEARCH_A, now - timedelta(hours=1)))
        await mongo_record_store.insert(_record(RESEARCH_B, now))
        results = await mongo_record_store.find_by_category("research", 8, 12)
        assert results[0].input_text == RESEARCH_B

    @pytest.mark.asyncio
    async def test_text_search(self, mongo_record_store):
        await mongo_record_store.insert(_record(RESEARCH_A, datetime.now(timezone.utc)))
        results = await mongo_record_store.search_text("protein folding", 5, 12)
        assert [r.input_text for r in results] == [RESEARCH_A]
