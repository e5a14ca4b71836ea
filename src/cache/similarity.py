# src/cache/similarity.py (v1)
"""Near-duplicate search on both cache tiers.

Candidates are never ranked by closeness: the first entry inside the word-count
band wins (fast tier: key enumeration order; durable tier: most recent record,
then first text-search result). A failing tier query counts as "nothing found".
"""

from __future__ import annotations

import logging

from smartcache.cache.base_fast_store import BaseFastStore
from smartcache.cache.base_record_store import BaseRecordStore
from smartcache.cache.models import CacheKey, CacheRecord, KeyDescriptor

logger = logging.getLogger(__name__)


async def find_similar_fast_key(
    fast_store: BaseFastStore, descriptor: KeyDescriptor
) -> str | None:
    """First fast-tier key of the same category whose word count is in band.

    Args:
        fast_store: Fast tier to scan.
        descriptor: Derived values of the query text.

    Returns:
        The matching key, or None.
    """
    try:
        keys = await fast_store.keys(f"{descriptor.category}_*")
    except Exception as e:
        logger.warning("Fast-tier similarity scan failed: %s", e)
        return None

    for key in keys:
        candidate_words = CacheKey.parse_word_count(key)
        if candidate_words is not None and descriptor.in_band(candidate_words):
            logger.debug(
                "Similar fast-tier key %s (%d words, band %d-%d)",
                key, candidate_words, descriptor.min_words, descriptor.max_words,
            )
            return key
    return None


async def find_similar_record(
    record_store: BaseRecordStore,
    descriptor: KeyDescriptor,
    search_limit: int = 3,
    text_search_limit: int = 5,
    text_search_terms: int = 5,
) -> CacheRecord | None:
    """Most recent same-category record in band, else first keyword match in band.

    Args:
        record_store: Durable tier to query.
        descriptor: Derived values of the query text.
        search_limit: Max records fetched by the category query.
        text_search_limit: Max records fetched by the keyword query.
        text_search_terms: Number of leading normalized words used as keywords.

    Returns:
        The matching record, or None.
    """
    try:
        by_category = await record_store.find_by_category(
            descriptor.category,
            descriptor.min_words,
            descriptor.max_words,
            limit=search_limit,
        )
        if by_category:
            return by_category[0]

        terms = " ".join(descriptor.normalized_text.split()[:text_search_terms])
        if not terms:
            return None
        by_text = await record_store.search_text(
            terms,
            descriptor.min_words,
            descriptor.max_words,
            limit=text_search_limit,
        )
        if by_text:
            return by_text[0]
    except Exception as e:
        logger.warning("Durable-tier similarity search failed: %s", e)

    return None
