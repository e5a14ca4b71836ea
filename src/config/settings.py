# src/config/settings.py (v1)
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for cache tiers, the summary generator, input limits
and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Summary generator ===
    llm_provider: str = "openai"
    llm_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 512
    llm_temperature: float = 0.2
    openai_api_key: str = ""
    summary_target_words: int = 100

    # === Fast tier ===
    fast_store_backend: Literal["memory", "redis"] = "memory"
    cache_redis_url: str = ""
    cache_key_prefix: str = ""
    fast_ttl_seconds: int = 60 * 60 * 24

    # === Durable tier ===
    record_store_backend: Literal["sqlite", "mongodb"] = "sqlite"
    cache_root: Path = Path("~/.smartcache")
    cache_mongodb_url: str = ""
    cache_mongodb_database: str = "smartcache"
    cache_mongodb_collection: str = "summaries"

    # === Similarity ===
    similarity_ratio: float = 0.2
    similarity_search_limit: int = 3
    text_search_limit: int = 5
    text_search_terms: int = 5
    fallback_chars: int = 100
    coalesce_inflight: bool = False

    # === Input limits ===
    input_min_chars: int = 10
    input_max_chars: int = 300

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "fast_ttl_seconds",
        "fallback_chars",
        "text_search_terms",
        "similarity_search_limit",
        "text_search_limit",
    )
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.fast_store_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_REDIS_URL must be set when FAST_STORE_BACKEND=redis")

        if self.record_store_backend == "mongodb" and not self.cache_mongodb_url:
            errors.append(
                "CACHE_MONGODB_URL must be set when RECORD_STORE_BACKEND=mongodb"
            )

        if not 0.0 < self.similarity_ratio < 1.0:
            errors.append("SIMILARITY_RATIO must be between 0 and 1")

        if self.input_min_chars >= self.input_max_chars:
            errors.append("INPUT_MIN_CHARS must be < INPUT_MAX_CHARS")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def sqlite_path(self) -> Path:
        """Location of the SQLite record database."""
        return Path(self.cache_root).expanduser() / "summaries.db"


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-call config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
