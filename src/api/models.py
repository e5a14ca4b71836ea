# src/api/models.py (v1)
"""API-level models: SummaryResponse."""

from __future__ import annotations

from pydantic import BaseModel

from smartcache.cache.models import HitLevel


class SummaryResponse(BaseModel):
    """Return value of facade.summarize()."""

    summary: str
    original_length: int
    summary_length: int
    hit_level: HitLevel
    cache_key: str
