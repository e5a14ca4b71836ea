# src/cache/normalizer.py (v1)
"""Text canonicalization for cache matching.

Variations that do not change what a summary should say (case, punctuation,
spacing, politeness, a few synonym groups) are folded away so that near-duplicate
requests share a cache key.
"""

from __future__ import annotations

import re

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_POLITE_RE = re.compile(r"\b(please|kindly|can you|could you)\s+")

# Applied in order; each canonical form is a member of its own group.
_SYNONYM_GROUPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(summarize|summary|summarise)\b"), "summarize"),
    (re.compile(r"\b(artificial intelligence|ai)\b"), "ai"),
    (re.compile(r"\b(machine learning|ml)\b"), "ml"),
    (re.compile(r"\b(article|post|piece|content)\b"), "article"),
)


def normalize(text: str) -> str:
    """Canonicalize text for matching.

    Order: lowercase, punctuation to spaces, collapse whitespace, trim,
    strip polite prefixes, canonicalize synonyms, trim.
    """
    if not text:
        return ""
    result = text.lower()
    result = _PUNCTUATION_RE.sub(" ", result)
    result = _WHITESPACE_RE.sub(" ", result).strip()
    result = _strip_polite(result)
    for pattern, canonical in _SYNONYM_GROUPS:
        result = pattern.sub(canonical, result)
    return result.strip()


def word_count(text: str) -> int:
    """Number of whitespace-separated non-empty tokens."""
    return len(text.split())


def _strip_polite(text: str) -> str:
    # Removing one filler can bring two words together into another
    # ("can kindly you"), so repeat until stable to keep normalize idempotent.
    while True:
        stripped = _POLITE_RE.sub("", text)
        if stripped == text:
            return stripped
        text = stripped
