# src/cache/cache_factory.py (v1)
"""Factories for the fast tier, the durable tier and the lookup engine."""

from __future__ import annotations

from smartcache.cache.base_fast_store import BaseFastStore
from smartcache.cache.base_record_store import BaseRecordStore
from smartcache.cache.lookup_engine import TieredLookupEngine
from smartcache.config.settings import Settings
from smartcache.llm.summarizer import SummaryGenerator


def create_fast_store(settings: Settings | None = None) -> BaseFastStore:
    """Instantiate the configured fast-tier backend (memory when unset)."""
    backend = "memory" if settings is None else settings.fast_store_backend

    if backend == "memory":
        from smartcache.cache.memory_fast_store import MemoryFastStore
        return MemoryFastStore()

    if backend == "redis":
        from smartcache.cache.redis_fast_store import RedisFastStore
        if settings is None or not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when FAST_STORE_BACKEND=redis"
            )
        return RedisFastStore(
            redis_url=settings.cache_redis_url,
            key_prefix=settings.cache_key_prefix,
        )

    raise ValueError(f"Unsupported fast store backend: {backend!r}")


def create_record_store(settings: Settings | None = None) -> BaseRecordStore:
    """Instantiate the configured durable-tier backend (sqlite when unset)."""
    settings = settings or Settings(_env_file=None)
    backend = settings.record_store_backend

    if backend == "sqlite":
        from smartcache.cache.sqlite_record_store import SqliteRecordStore
        return SqliteRecordStore(db_path=settings.sqlite_path)

    if backend == "mongodb":
        from smartcache.cache.mongo_record_store import MongoRecordStore
        if not settings.cache_mongodb_url:
            raise ValueError(
                "CACHE_MONGODB_URL must be set when RECORD_STORE_BACKEND=mongodb"
            )
        return MongoRecordStore(
            url=settings.cache_mongodb_url,
            database=settings.cache_mongodb_database,
            collection=settings.cache_mongodb_collection,
        )

    raise ValueError(f"Unsupported record store backend: {backend!r}")


def create_lookup_engine(
    settings: Settings,
    generator: SummaryGenerator,
    fast_store: BaseFastStore | None = None,
    record_store: BaseRecordStore | None = None,
) -> TieredLookupEngine:
    """Wire a lookup engine from settings; explicit stores take precedence."""
    if fast_store is None:
        fast_store = create_fast_store(settings)
    if record_store is None:
        record_store = create_record_store(settings)
    return TieredLookupEngine(
        fast_store=fast_store,
        record_store=record_store,
        generator=generator,
        ttl_seconds=settings.fast_ttl_seconds,
        similarity_ratio=settings.similarity_ratio,
        similarity_search_limit=settings.similarity_search_limit,
        text_search_limit=settings.text_search_limit,
        text_search_terms=settings.text_search_terms,
        fallback_chars=settings.fallback_chars,
        coalesce_inflight=settings.coalesce_inflight,
    )
