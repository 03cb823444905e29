"""
Configuration settings for cardsmith.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
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
    # Anthropic (Claude) API
    # ========================================
    anthropic_api_key: str | None = Field(
        default=None,
        description="Server-side Anthropic API key (takes precedence over user keys)",
    )
    anthropic_api_url: str = Field(
        default="https://api.anthropic.com/v1/messages",
        description="Anthropic Messages API endpoint",
    )
    claude_model: str = Field(
        default="claude-3-7-sonnet-20250219",
        description="Claude model used for generation and analysis",
    )
    anthropic_version: str = Field(
        default="2023-06-01",
        description="Value of the anthropic-version header",
    )
    claude_max_tokens: int = Field(
        default=4000,
        description="max_tokens for card/question generation",
    )
    claude_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for generation requests",
    )
    analysis_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for text analysis requests",
    )

    # ========================================
    # Mochi Cards
    # ========================================
    mochi_api_key: str | None = Field(
        default=None,
        description="Mochi API key (HTTP Basic username)",
    )
    mochi_api_url: str = Field(
        default="https://app.mochi.cards/api",
        description="Mochi API base URL",
    )
    mochi_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout per Mochi request",
    )
    mochi_upload_workers: int = Field(
        default=1,
        description="Parallel card uploads (1 = serial)",
    )

    # ========================================
    # Prompt Sizing
    # ========================================
    selection_max_chars: int = Field(
        default=8000,
        description="Selected text is truncated beyond this length",
    )
    context_max_chars: int = Field(
        default=1500,
        description="Document context is truncated beyond this length",
    )
    analysis_max_chars: int = Field(
        default=10000,
        description="Text sent for analysis is truncated beyond this length",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
