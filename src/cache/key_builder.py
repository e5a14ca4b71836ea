# src/cache/key_builder.py (v1)
"""Structured cache key derivation.

Key layout: ``{category}_{word_count}_{sha256(normalized_text)}``. The category
and word count segments let the fast tier find near-duplicates by scanning
keys; the digest makes the key content-addressed.
"""

from __future__ import annotations

import hashlib
import math
from fractions import Fraction

from smartcache.cache.classifier import classify
from smartcache.cache.models import CacheKey, KeyDescriptor
from smartcache.cache.normalizer import normalize, word_count

DEFAULT_SIMILARITY_RATIO = 0.2


def content_digest(text: str) -> str:
    """SHA-256 hex digest of a string (UTF-8)."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def similarity_band(
    count: int, ratio: float = DEFAULT_SIMILARITY_RATIO
) -> tuple[int, int]:
    """Inclusive word-count band ``[floor(n*(1-r)), ceil(n*(1+r))]``.

    Computed with exact fractions so 10 words at 20% gives (8, 12), not 13.
    """
    r = Fraction(str(ratio))
    low = math.floor(count * (1 - r))
    high = math.ceil(count * (1 + r))
    return low, high


def build_key(text: str) -> CacheKey:
    """Derive the structured cache key of a raw text."""
    return describe(text).key


def build_pattern(text: str, ratio: float = DEFAULT_SIMILARITY_RATIO) -> str:
    """Glob-style pattern describing similar keys: same category, banded count."""
    return describe(text, ratio).pattern


def describe(text: str, ratio: float = DEFAULT_SIMILARITY_RATIO) -> KeyDescriptor:
    """Normalize, classify and count once, returning every derived value."""
    normalized = normalize(text)
    category = classify(normalized)
    count = word_count(normalized)
    low, high = similarity_band(count, ratio)
    key = CacheKey(
        category=category, word_count=count, content_hash=content_digest(normalized)
    )
    return KeyDescriptor(
        normalized_text=normalized,
        category=category,
        word_count=count,
        min_words=low,
        max_words=high,
        key=key,
        pattern=f"{category}_[{low}-{high}]_*",
    )
