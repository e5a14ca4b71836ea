# tests/unit/cache/test_unit_cache_factory.py (v1)
"""Tests for cache/cache_factory.py: backend selection and engine wiring."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from smartcache.cache.cache_factory import (
    create_fast_store,
    create_lookup_engine,
    create_record_store,
)
from smartcache.cache.memory_fast_store import MemoryFastStore
from smartcache.cache.sqlite_record_store import SqliteRecordStore
from smartcache.config.settings import Settings


class TestCreateFastStore:
    def test_default_is_memory(self):
        assert isinstance(create_fast_store(), MemoryFastStore)

    def test_memory_from_settings(self):
        s = Settings(_env_file=None, fast_store_backend="memory")
        assert isinstance(create_fast_store(s), MemoryFastStore)

    def test_redis_backend(self):
        s = Settings(
            _env_file=None,
            fast_store_backend="redis",
            cache_redis_url="redis://localhost:6379/0",
            cache_key_prefix="sc:",
        )
        with patch("smartcache.cache.redis_fast_store.RedisFastStore") as cls:
            store = create_fast_store(s)
        cls.assert_called_once_with(redis_url="redis://localhost:6379/0", key_prefix="sc:")
        assert store is cls.return_value


class TestCreateRecordStore:
    def test_sqlite_under_cache_root(self, tmp_path):
        s = Settings(_env_file=None, cache_root=tmp_path)
        store = create_record_store(s)
        assert isinstance(store, SqliteRecordStore)
        assert (tmp_path / "summaries.db").exists()
        store._conn.close()

    def test_mongodb_backend(self):
        s = Settings(
            _env_file=None,
            record_store_backend="mongodb",
            cache_mongodb_url="mongodb://localhost:27017",
            cache_mongodb_collection="docs",
        )
        with patch("smartcache.cache.mongo_record_store.MongoRecordStore") as cls:
            store = create_record_store(s)
        cls.assert_called_once_with(
            url="mongodb://localhost:27017", database="smartcache", collection="docs"
        )
        assert store is cls.return_value


class TestCreateLookupEngine:
    def test_settings_flow_into_engine(self, fast_store, record_store, generator):
        s = Settings(
            _env_file=None,
            fast_ttl_seconds=60,
            similarity_ratio=0.5,
            fallback_chars=20,
            coalesce_inflight=True,
        )
        engine = create_lookup_engine(
            s, generator, fast_store=fast_store, record_store=record_store
        )
        assert engine._fast is fast_store
        assert engine._records is record_store
        assert engine._ttl == 60
        assert engine._ratio == 0.5
        assert engine._fallback_chars == 20
        assert engine._coalesce is True

    def test_empty_memory_store_is_kept(self, record_store, generator):
        empty = MemoryFastStore()
        engine = create_lookup_engine(
            Settings(_env_file=None), generator, fast_store=empty, record_store=record_store
        )
        assert engine._fast is empty

    @pytest.mark.asyncio
    async def test_builds_default_stores(self, tmp_path, generator):
        engine = create_lookup_engine(Settings(_env_file=None, cache_root=tmp_path), generator)
        assert isinstance(engine._fast, MemoryFastStore)
        assert isinstance(engine._records, SqliteRecordStore)
        await engine.close()
