# src/cache/models.py (v1)
"""Cache domain models: CacheKey, KeyDescriptor, CacheRecord, LookupResult, LookupStats."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

ContentCategory = Literal["email", "news", "research", "article", "document", "general"]

# Classification priority order; "general" is the fallback.
CONTENT_CATEGORIES: tuple[str, ...] = (
    "email", "news", "research", "article", "document", "general",
)

HitLevel = Literal[
    "fast_exact",
    "fast_similar",
    "durable_exact",
    "durable_similar",
    "generated",
    "fallback",
]

CACHE_HIT_LEVELS: tuple[str, ...] = (
    "fast_exact", "fast_similar", "durable_exact", "durable_similar",
)


class CacheKey(BaseModel):
    """Structured fast-tier key: ``{category}_{word_count}_{content_hash}``."""

    category: ContentCategory
    word_count: int = Field(ge=0)
    content_hash: str

    def __str__(self) -> str:
        return f"{self.category}_{self.word_count}_{self.content_hash}"

    @staticmethod
    def parse_word_count(key: str) -> int | None:
        """Word count embedded in a rendered key, or None if unparseable.

        A configured key prefix is expected to be stripped beforehand.
        """
        parts = key.split("_")
        if len(parts) < 2:
            return None
        try:
            return int(parts[1])
        except ValueError:
            return None


class KeyDescriptor(BaseModel):
    """Everything derived from one input text for a lookup."""

    normalized_text: str
    category: ContentCategory
    word_count: int
    min_words: int
    max_words: int
    key: CacheKey
    pattern: str

    @property
    def content_hash(self) -> str:
        return self.key.content_hash

    def in_band(self, word_count: int) -> bool:
        """Whether a candidate word count falls inside this query's band."""
        return self.min_words <= word_count <= self.max_words


class CacheRecord(BaseModel):
    """Durable-tier document linking a text hash to its summary."""

    text_hash: str
    normalized_hash: str | None = None
    input_text: str
    normalized_text: str | None = None
    content_type: ContentCategory | None = None
    word_count: int | None = None
    summary: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LookupResult(BaseModel):
    """Outcome of one tiered resolve."""

    summary: str
    hit_level: HitLevel
    cache_key: str
    matched_key: str | None = None
    matched_hash: str | None = None

    @property
    def from_cache(self) -> bool:
        return self.hit_level in CACHE_HIT_LEVELS


class LookupStats(BaseModel):
    """Per-engine counters, one per hit level plus error counters."""

    fast_exact: int = 0
    fast_similar: int = 0
    durable_exact: int = 0
    durable_similar: int = 0
    generated: int = 0
    fallback: int = 0
    fast_tier_errors: int = 0
    durable_tier_errors: int = 0
    coalesced: int = 0

    def record(self, hit_level: HitLevel) -> None:
        setattr(self, hit_level, getattr(self, hit_level) + 1)

    @property
    def total(self) -> int:
        return (
            self.fast_exact + self.fast_similar + self.durable_exact
            + self.durable_similar + self.generated + self.fallback
        )

    @property
    def hit_rate(self) -> float:
        """Share of lookups answered by any cache tier."""
        if self.total == 0:
            return 0.0
        hits = sum(getattr(self, level) for level in CACHE_HIT_LEVELS)
        return hits / self.total
