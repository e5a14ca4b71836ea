# tests/unit/llm/test_unit_summarizer.py (v1)
"""Tests for llm/summarizer.py: prompt building and response handling."""

from __future__ import annotations

import pytest

from smartcache.llm.base_client import BaseLLMClient
from smartcache.llm.models import LLMResponse, Message
from smartcache.llm.summarizer import EMPTY_SUMMARY, LLMSummaryGenerator, SummaryGenerator


class ScriptedClient(BaseLLMClient):
    def __init__(self, content: str = "A summary.", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    async def complete(self, messages, system=None, max_tokens=512, temperature=0.2):
        self.calls.append({
            "messages": messages, "max_tokens": max_tokens, "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(
            content=self.content, model="test-model", provider="test", latency_ms=3,
        )

    @property
    def provider_name(self) -> str:
        return "test"


class TestSummaryGenerator:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            SummaryGenerator()  # type: ignore[abstract]


class TestLLMSummaryGenerator:
    def test_build_prompt(self):
        gen = LLMSummaryGenerator(ScriptedClient(), target_words=50)
        assert gen.build_prompt("some text") == (
            "Summarize the following text in 50 words: some text"
        )

    @pytest.mark.asyncio
    async def test_generate_sends_single_user_message(self):
        client = ScriptedClient()
        gen = LLMSummaryGenerator(client, max_tokens=256, temperature=0.0)
        assert await gen.generate("input text") == "A summary."
        call = client.calls[0]
        assert call["messages"] == [
            Message(role="user", content="Summarize the following text in 100 words: input text")
        ]
        assert call["max_tokens"] == 256
        assert call["temperature"] == 0.0

    @pytest.mark.asyncio
    async def test_content_returned_verbatim(self):
        gen = LLMSummaryGenerator(ScriptedClient(content="  padded \n"))
        assert await gen.generate("x") == "  padded \n"

    @pytest.mark.asyncio
    async def test_empty_content(self):
        gen = LLMSummaryGenerator(ScriptedClient(content=""))
        assert await gen.generate("x") == EMPTY_SUMMARY

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        gen = LLMSummaryGenerator(ScriptedClient(error=RuntimeError("rate limited")))
        with pytest.raises(RuntimeError, match="rate limited"):
            await gen.generate("x")
