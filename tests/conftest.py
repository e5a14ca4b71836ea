# tests/conftest.py (v1)
"""Shared test fixtures for unit tests.

Provides an in-memory fast tier, a temp-file SQLite durable tier, a scripted
summary generator and an engine wired from them. No network access.
"""

from __future__ import annotations

import pytest

from smartcache.cache.lookup_engine import TieredLookupEngine
from smartcache.cache.memory_fast_store import MemoryFastStore
from smartcache.cache.sqlite_record_store import SqliteRecordStore
from smartcache.llm.summarizer import SummaryGenerator


class FakeGenerator(SummaryGenerator):
    """Records every call; returns a fixed summary or raises a given error."""

    def __init__(self, summary: str = "A short summary.", error: Exception | None = None):
        self.summary = summary
        self.error = error
        self.calls: list[str] = []

    async def generate(self, text: str) -> str:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.summary


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# === FIXTURES: Stores and engine ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_store(clock: FakeClock) -> MemoryFastStore:
    return MemoryFastStore(clock=clock)


@pytest.fixture
def record_store(tmp_path) -> SqliteRecordStore:
    store = SqliteRecordStore(db_path=tmp_path / "summaries.db")
    yield store
    store._conn.close()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def generator_factory() -> type[FakeGenerator]:
    return FakeGenerator


@pytest.fixture
def engine(fast_store, record_store, generator) -> TieredLookupEngine:
    return TieredLookupEngine(
        fast_store=fast_store, record_store=record_store, generator=generator
    )
