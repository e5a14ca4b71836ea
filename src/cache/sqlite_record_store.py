# src/cache/sqlite_record_store.py (v1)
"""SQLite-based durable tier (RECORD_STORE_BACKEND=sqlite).

Uses stdlib sqlite3, no external dependency. Indexes mirror the query shapes
of the lookup engine: unique text hash, normalized hash, and
(content_type, word_count, created_at).
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from smartcache.cache.base_record_store import BaseRecordStore
from smartcache.cache.models import CacheRecord

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS summaries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    text_hash TEXT NOT NULL UNIQUE,
    normalized_hash TEXT,
    input_text TEXT NOT NULL,
    normalized_text TEXT,
    content_type TEXT,
    word_count INTEGER,
    summary TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_normalized_hash ON summaries(normalized_hash);
CREATE INDEX IF NOT EXISTS idx_type_words_created
    ON summaries(content_type, word_count, created_at DESC);
"""

_COLUMNS = (
    "text_hash, normalized_hash, input_text, normalized_text, "
    "content_type, word_count, summary, created_at"
)


class SqliteRecordStore(BaseRecordStore):
    """SQLite-backed durable tier for single-node deployments."""

    def __init__(self, db_path: Path | str) -> None:
        if str(db_path) == ":memory:":
            target = ":memory:"
        else:
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)
        self._conn = sqlite3.connect(target)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def find_by_hash(self, text_hash: str) -> CacheRecord | None:
        cursor = self._conn.execute(
            f"SELECT {_COLUMNS} FROM summaries "
            "WHERE text_hash = ? OR normalized_hash = ? ORDER BY id LIMIT 1",
            (text_hash, text_hash),
        )
        row = cursor.fetchone()
        return _row_to_record(row) if row else None

    async def find_by_category(
        self, category: str, min_words: int, max_words: int, limit: int = 3
    ) -> list[CacheRecord]:
        cursor = self._conn.execute(
            f"SELECT {_COLUMNS} FROM summaries "
            "WHERE content_type = ? AND word_count BETWEEN ? AND ? "
            "ORDER BY created_at DESC, id DESC LIMIT ?",
            (category, min_words, max_words, limit),
        )
        return [_row_to_record(row) for row in cursor.fetchall()]

    async def search_text(
        self, terms: str, min_words: int, max_words: int, limit: int = 5
    ) -> list[CacheRecord]:
        """Whole-word match of any term against normalized text."""
        words = terms.split()
        if not words:
            return []
        clauses = " OR ".join(
            "(' ' || COALESCE(normalized_text, '') || ' ') LIKE ? ESCAPE '\\'"
            for _ in words
        )
        params: list[object] = [f"% {_escape_like(w)} %" for w in words]
        params.extend([min_words, max_words, limit])
        cursor = self._conn.execute(
            f"SELECT {_COLUMNS} FROM summaries "
            f"WHERE ({clauses}) "
            "AND word_count BETWEEN ? AND ? ORDER BY id LIMIT ?",
            params,
        )
        return [_row_to_record(row) for row in cursor.fetchall()]

    async def insert(self, record: CacheRecord) -> CacheRecord:
        try:
            self._conn.execute(
                f"INSERT INTO summaries ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.text_hash,
                    record.normalized_hash,
                    record.input_text,
                    record.normalized_text,
                    record.content_type,
                    record.word_count,
                    record.summary,
                    record.created_at.isoformat(),
                ),
            )
            self._conn.commit()
        except sqlite3.IntegrityError:
            self._conn.rollback()
            logger.warning(
                "Duplicate record for hash %s ignored", record.text_hash[:12]
            )
        return record

    def count(self) -> int:
        """Total number of stored records."""
        return self._conn.execute("SELECT COUNT(*) FROM summaries").fetchone()[0]

    async def close(self) -> None:
        """Close the database connection."""
        self._conn.close()


def _escape_like(word: str) -> str:
    return word.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_record(row: tuple) -> CacheRecord:
    return CacheRecord(
        text_hash=row[0],
        normalized_hash=row[1],
        input_text=row[2],
        normalized_text=row[3],
        content_type=row[4],
        word_count=row[5],
        summary=row[6],
        created_at=datetime.fromisoformat(row[7]),
    )
