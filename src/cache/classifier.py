# src/cache/classifier.py (v1)
"""Keyword-based content category detection on normalized text."""

from __future__ import annotations

from smartcache.cache.models import ContentCategory

# Evaluated top to bottom; first category with a matching keyword wins.
_CATEGORY_KEYWORDS: tuple[tuple[ContentCategory, tuple[str, ...]], ...] = (
    ("email", ("email", "message", "correspondence")),
    ("news", ("news", "breaking", "report")),
    ("research", ("research", "study", "paper", "journal")),
    ("article", ("article", "blog", "post")),
    ("document", ("document", "file", "pdf")),
)


def classify(normalized_text: str) -> ContentCategory:
    """Return the content category of already-normalized text.

    Plain substring containment, so "reporting" counts as "report".
    """
    text = normalized_text.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return "general"
