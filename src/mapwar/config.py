"""Lightweight configuration for the mapwar server."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(
        env_prefix="MAPWAR_", env_file=".env", env_file_encoding="utf-8"
    )

    tick_interval_seconds: float = Field(
        default=1.0,
        description="Real-time seconds between automatic steps of a ticking match",
        gt=0.0,
    )
    default_seed: int | None = Field(
        default=None,
        description="Seed used for new matches that do not supply one; unset means live entropy",
        ge=0,
    )
    event_history: int = Field(
        default=50,
        description="How many resolved steps of events each match keeps for polling clients",
        ge=1,
    )
    max_matches: int = Field(default=100, description="Concurrent match limit", ge=1)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
