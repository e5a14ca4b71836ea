# src/llm/summarizer.py (v1)
"""Summary generation collaborator used on a total cache miss.

The lookup engine only sees ``SummaryGenerator.generate(text) -> str``; errors
propagate to the engine, which owns the fallback. No retry here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from smartcache.llm.base_client import BaseLLMClient
from smartcache.llm.models import Message

logger = logging.getLogger(__name__)

EMPTY_SUMMARY = "No summary generated"


class SummaryGenerator(ABC):
    """Produces a summary for text that no cache tier could answer."""

    @abstractmethod
    async def generate(self, text: str) -> str:
        """Summarize text. May raise on provider failure."""


class LLMSummaryGenerator(SummaryGenerator):
    """Single-prompt summarizer on top of any BaseLLMClient."""

    def __init__(
        self,
        client: BaseLLMClient,
        target_words: int = 100,
        max_tokens: int = 512,
        temperature: float = 0.2,
    ) -> None:
        self._client = client
        self._target_words = target_words
        self._max_tokens = max_tokens
        self._temperature = temperature

    def build_prompt(self, text: str) -> str:
        return f"Summarize the following text in {self._target_words} words: {text}"

    async def generate(self, text: str) -> str:
        response = await self._client.complete(
            [Message(role="user", content=self.build_prompt(text))],
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        logger.info(
            "Generated summary via %s/%s in %d ms (%d+%d tokens)",
            response.provider, response.model, response.latency_ms,
            response.input_tokens, response.output_tokens,
        )
        return response.content or EMPTY_SUMMARY
