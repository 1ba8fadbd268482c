"""
Configuration settings for the Lumina learning-style engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Durable Profile Store
    # ========================================
    profile_backend: Literal["sql", "rest", "memory"] = Field(
        default="sql",
        description="Where learning style profiles are persisted",
    )
    database_url: str = Field(
        default="sqlite:///lumina_profiles.db",
        description="SQLAlchemy connection string (PostgreSQL in production)",
    )

    # ─── Hosted backend (PostgREST-style) ───────────────────────────────────────
    rest_base_url: str = Field(
        default="http://127.0.0.1:54321",
        description="Base URL of the hosted backend REST API",
    )
    rest_api_key: str | None = Field(
        default=None,
        description="API key sent as apikey / Bearer token",
    )
    rest_profiles_endpoint: str = Field(
        default="/rest/v1/learning_style_profiles",
        description="Table endpoint holding one profile record per user",
    )
    rest_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for profile reads and writes",
    )

    # ========================================
    # Local Behavioral Cache
    # ========================================
    behavior_cache_dir: Path = Field(
        default=Path.home() / ".lumina" / "behavior",
        description="Directory of per-learner JSON files holding tracked behavioral data points",
    )
    behavior_cache_limit: int = Field(
        default=500,
        description="Maximum data points retained in the local cache (oldest dropped)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Helper Methods
    # ========================================

    def has_rest_configured(self) -> bool:
        """Check if the hosted backend can be reached."""
        return bool(self.rest_base_url and self.rest_api_key)

    def get_rest_config(self) -> dict[str, object]:
        """Get hosted backend configuration as a dictionary."""
        return {
            "base_url": self.rest_base_url,
            "api_key": self.rest_api_key,
            "endpoint": self.rest_profiles_endpoint,
            "timeout": self.rest_timeout_seconds,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
