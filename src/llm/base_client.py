# src/llm/base_client.py (v1)
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from smartcache.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for LLM providers used by the summary generator."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 512,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (e.g. openai)."""
