"""
Central application configuration using pydantic-settings.

Environment variables (prefix: SUBWAY_):
    SUBWAY_HOST          - Bind host for the API server (default: 127.0.0.1)
    SUBWAY_PORT          - Bind port for the API server (default: 8000)
    SUBWAY_LOG_LEVEL     - Root log level (default: INFO)
    SUBWAY_MAX_SESSIONS  - Maximum concurrent game sessions (default: 100)
    SUBWAY_DEFAULT_SEED  - Shuffle seed for games created without one
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings for the Subway Deal server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="SUBWAY_",
    )

    host: str = Field(default="127.0.0.1", description="Bind host for the API server.")
    port: int = Field(default=8000, gt=0, lt=65536, description="Bind port for the API server.")
    log_level: str = Field(default="INFO", description="Root logger level.")
    max_sessions: int = Field(
        default=100,
        gt=0,
        description="Maximum number of game sessions held in memory.",
    )
    default_seed: Optional[int] = Field(
        default=None,
        description="Shuffle seed used when a game is created without one.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Optional[str]) -> str:
        """Accept any case; fall back to INFO when unset."""
        if not value:
            return "INFO"
        return str(value).upper()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
