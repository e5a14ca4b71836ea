# src/api/facade.py (v1)
"""Public API facade: validated, cached summarization.

Usage:
    from smartcache.api.facade import summarize
    response = await summarize("Please summarize this research paper on ML ...")
"""

from __future__ import annotations

import logging
from typing import Any

from smartcache.api.models import SummaryResponse
from smartcache.cache.cache_factory import create_lookup_engine
from smartcache.cache.lookup_engine import TieredLookupEngine
from smartcache.config.settings import Settings
from smartcache.llm.client_factory import create_llm_client
from smartcache.llm.summarizer import LLMSummaryGenerator, SummaryGenerator
from smartcache.validation.validator import (
    InputValidationError,
    validate_request_body,
    validate_text,
)

logger = logging.getLogger(__name__)


def build_engine(
    settings: Settings | None = None,
    generator: SummaryGenerator | None = None,
) -> TieredLookupEngine:
    """Build a lookup engine with stores and generator taken from settings."""
    settings = settings or Settings()
    if generator is None:
        client = create_llm_client(
            settings.llm_provider, settings.llm_model, settings=settings
        )
        generator = LLMSummaryGenerator(
            client,
            target_words=settings.summary_target_words,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
    return create_lookup_engine(settings, generator)


async def summarize(
    text: str,
    settings: Settings | None = None,
    engine: TieredLookupEngine | None = None,
) -> SummaryResponse:
    """Validate text and resolve its summary through the cache tiers.

    Args:
        text: Raw user text.
        settings: Global settings. Loaded from .env if None.
        engine: Lookup engine to use. When None, one is built from settings
            and closed afterwards.

    Returns:
        SummaryResponse with the summary and the step that produced it.

    Raises:
        InputValidationError: If the text fails sanitization or injection checks.
    """
    settings = settings or Settings()
    validation = validate_text(
        text, min_chars=settings.input_min_chars, max_chars=settings.input_max_chars
    )
    if not validation.is_valid:
        logger.warning(
            "Rejected input: %s", validation.error,
            extra={"data": {
                "attack_type": validation.attack_type,
                "attack_details": validation.attack_details,
            }},
        )
        raise InputValidationError(validation)

    owns_engine = engine is None
    if engine is None:
        engine = build_engine(settings)
    try:
        result = await engine.resolve_detailed(validation.sanitized_text or "")
    finally:
        if owns_engine:
            await engine.close()

    return SummaryResponse(
        summary=result.summary,
        original_length=len(text),
        summary_length=len(result.summary),
        hit_level=result.hit_level,
        cache_key=result.cache_key,
    )


async def summarize_request(
    body: Any,
    settings: Settings | None = None,
    engine: TieredLookupEngine | None = None,
) -> SummaryResponse:
    """Same as summarize(), for a raw request payload ``{"text": ...}``."""
    check = validate_request_body(body)
    if not check.is_valid:
        raise InputValidationError(check)
    return await summarize(body["text"], settings=settings, engine=engine)
