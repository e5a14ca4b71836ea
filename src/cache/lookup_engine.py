# src/cache/lookup_engine.py (v1)
"""Tiered summary lookup across the fast and durable cache tiers.

Lookup order, first success wins:
  1. fast tier, exact key
  2. fast tier, similar key (same category, word count in band)
  3. durable tier, exact normalized-text hash
  4. durable tier, similar record (category + band, then keyword search)
  5. summary generator; on failure a truncated-input fallback

Hits from steps 2-4 are written back to the fast tier under the exact key.
A step-4 hit also stores a new durable record for the new text, duplicating
the found summary. Tier errors never escape resolve(): the fast tier
soft-fails through to the durable tier, and write failures are only logged.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from smartcache.cache.base_fast_store import BaseFastStore
from smartcache.cache.base_record_store import BaseRecordStore
from smartcache.cache.key_builder import DEFAULT_SIMILARITY_RATIO, describe
from smartcache.cache.models import (
    CacheRecord,
    HitLevel,
    KeyDescriptor,
    LookupResult,
    LookupStats,
)
from smartcache.cache.similarity import find_similar_fast_key, find_similar_record
from smartcache.llm.summarizer import SummaryGenerator
from smartcache.logging.context import (
    clear_context,
    set_request_context,
    set_step_context,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60 * 24


class TieredLookupEngine:
    """Sole reader/writer of both cache tiers for summary lookups."""

    def __init__(
        self,
        fast_store: BaseFastStore,
        record_store: BaseRecordStore,
        generator: SummaryGenerator,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        similarity_ratio: float = DEFAULT_SIMILARITY_RATIO,
        similarity_search_limit: int = 3,
        text_search_limit: int = 5,
        text_search_terms: int = 5,
        fallback_chars: int = 100,
        coalesce_inflight: bool = False,
    ) -> None:
        self._fast = fast_store
        self._records = record_store
        self._generator = generator
        self._ttl = ttl_seconds
        self._ratio = similarity_ratio
        self._search_limit = similarity_search_limit
        self._text_limit = text_search_limit
        self._text_terms = text_search_terms
        self._fallback_chars = fallback_chars
        self._coalesce = coalesce_inflight
        self._inflight: dict[str, asyncio.Future[LookupResult]] = {}
        self._stats = LookupStats()

    @property
    def stats(self) -> LookupStats:
        return self._stats

    async def resolve(self, raw_text: str) -> str:
        """Return a summary for raw_text. Never raises for tier or generator errors."""
        result = await self.resolve_detailed(raw_text)
        return result.summary

    async def resolve_detailed(self, raw_text: str) -> LookupResult:
        """Like resolve(), but also report which step produced the summary."""
        descriptor = describe(raw_text, self._ratio)
        if not self._coalesce:
            return await self._lookup(raw_text, descriptor)

        key = str(descriptor.key)
        pending = self._inflight.get(key)
        if pending is not None:
            self._stats.coalesced += 1
            logger.debug("Joining in-flight lookup for %s", key)
            result = await asyncio.shield(pending)
            if result.hit_level == "fallback":
                # the fallback quotes the caller's own input
                return result.model_copy(update={"summary": self._fallback(raw_text)})
            return result

        task = asyncio.ensure_future(self._lookup(raw_text, descriptor))
        self._inflight[key] = task
        try:
            return await asyncio.shield(task)
        finally:
            if self._inflight.get(key) is task:
                del self._inflight[key]

    async def close(self) -> None:
        """Close both tier clients."""
        await self._fast.close()
        await self._records.close()

    # --- Protocol ---

    async def _lookup(self, raw_text: str, descriptor: KeyDescriptor) -> LookupResult:
        key = str(descriptor.key)
        set_request_context(uuid.uuid4().hex[:12], key)
        logger.debug(
            "Resolving %s (normalized: %s)", key, descriptor.normalized_text[:100]
        )
        try:
            # 1. fast tier, exact key
            set_step_context("fast_exact")
            cached = await self._fast_get(key)
            if cached is not None:
                return self._finish(cached, "fast_exact", key)

            # 2. fast tier, similar key
            set_step_context("fast_similar")
            similar_key = await find_similar_fast_key(self._fast, descriptor)
            if similar_key is not None:
                cached = await self._fast_get(similar_key)
                if cached is not None:
                    await self._fast_set(key, cached)
                    return self._finish(cached, "fast_similar", key, matched_key=similar_key)

            # 3. durable tier, exact hash
            set_step_context("durable_exact")
            record = await self._find_record(descriptor.content_hash)
            if record is not None:
                await self._fast_set(key, record.summary)
                return self._finish(
                    record.summary, "durable_exact", key, matched_hash=record.text_hash
                )

            # 4. durable tier, similar record
            set_step_context("durable_similar")
            record = await find_similar_record(
                self._records,
                descriptor,
                search_limit=self._search_limit,
                text_search_limit=self._text_limit,
                text_search_terms=self._text_terms,
            )
            if record is not None:
                await self._fast_set(key, record.summary)
                await self._insert_record(
                    self._build_record(raw_text, descriptor, record.summary)
                )
                return self._finish(
                    record.summary, "durable_similar", key, matched_hash=record.text_hash
                )

            # 5. generate
            set_step_context("generate")
            return await self._generate(raw_text, descriptor)
        finally:
            clear_context()

    async def _generate(self, raw_text: str, descriptor: KeyDescriptor) -> LookupResult:
        key = str(descriptor.key)
        try:
            summary = await self._generator.generate(raw_text)
        except Exception as e:
            logger.error("Summary generation failed, serving fallback: %s", e)
            return self._finish(self._fallback(raw_text), "fallback", key)

        await self._fast_set(key, summary)
        await self._insert_record(self._build_record(raw_text, descriptor, summary))
        return self._finish(summary, "generated", key)

    def _finish(
        self,
        summary: str,
        hit_level: HitLevel,
        key: str,
        matched_key: str | None = None,
        matched_hash: str | None = None,
    ) -> LookupResult:
        self._stats.record(hit_level)
        logger.info(
            "Lookup resolved: %s", hit_level,
            extra={"data": {"hit_level": hit_level, "matched_key": matched_key}},
        )
        return LookupResult(
            summary=summary,
            hit_level=hit_level,
            cache_key=key,
            matched_key=matched_key,
            matched_hash=matched_hash,
        )

    def _fallback(self, raw_text: str) -> str:
        return f"Summary: {raw_text[:self._fallback_chars]}..."

    @staticmethod
    def _build_record(
        raw_text: str, descriptor: KeyDescriptor, summary: str
    ) -> CacheRecord:
        return CacheRecord(
            text_hash=descriptor.content_hash,
            normalized_hash=descriptor.content_hash,
            input_text=raw_text,
            normalized_text=descriptor.normalized_text,
            content_type=descriptor.category,
            word_count=descriptor.word_count,
            summary=summary,
        )

    # --- Soft-failing tier access ---

    async def _fast_get(self, key: str) -> str | None:
        try:
            return await self._fast.get(key)
        except Exception as e:
            self._stats.fast_tier_errors += 1
            logger.warning("Fast tier read failed, falling through: %s", e)
            return None

    async def _fast_set(self, key: str, value: str) -> None:
        try:
            await self._fast.set(key, value, self._ttl)
        except Exception as e:
            self._stats.fast_tier_errors += 1
            logger.warning("Fast tier write-back failed for %s: %s", key, e)

    async def _find_record(self, text_hash: str) -> CacheRecord | None:
        try:
            return await self._records.find_by_hash(text_hash)
        except Exception as e:
            self._stats.durable_tier_errors += 1
            logger.warning("Durable tier lookup failed, falling through: %s", e)
            return None

    async def _insert_record(self, record: CacheRecord) -> None:
        try:
            await self._records.insert(record)
        except Exception as e:
            self._stats.durable_tier_errors += 1
            logger.warning("Durable tier insert failed for %s: %s", record.text_hash[:12], e)
