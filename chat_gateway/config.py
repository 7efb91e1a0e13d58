"""Centralized application configuration using Pydantic Settings.

Loads configuration from environment variables and `.env` file with
full validation, type coercion, and sensible defaults.

Usage:
    from chat_gateway.config import get_settings

    settings = get_settings()  # cached singleton
    print(settings.OPENAI_MODEL)
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PLACEHOLDER_KEYS = {"your-api-key-here", "sk-xxxxx", "changeme"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file.

    Provider API keys are optional at startup: a provider without a key
    answers every request with a CONFIGURATION_ERROR instead of refusing
    to boot the whole gateway.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # silently ignore unknown env vars
    )

    # ── Flask ──────────────────────────────────────────────────────────
    FLASK_ENV: str = Field(default="development", description="Flask environment (development/production)")
    FLASK_DEBUG: bool = Field(default=False, description="Enable Flask debug mode")
    HOST: str = Field(default="0.0.0.0", description="Development server bind address")
    PORT: int = Field(default=5000, ge=1, le=65535, description="Development server port")
    CORS_ORIGINS: str = Field(default="*", description="Allowed CORS origins for the chat API")

    # ── Provider credentials ──────────────────────────────────────────
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")
    OPENAI_ORG_ID: Optional[str] = Field(default=None, description="Optional OpenAI organization ID")
    GEMINI_API_KEY: Optional[str] = Field(default=None, description="Gemini API key")
    DEEPSEEK_API_KEY: Optional[str] = Field(default=None, description="DeepSeek API key")
    DEEPSEEK_REQUIRE_API_KEY: bool = Field(
        default=True,
        description="Reject DeepSeek requests when no key is configured",
    )

    # ── Provider endpoints & models ───────────────────────────────────
    OPENAI_BASE_URL: str = Field(default="https://api.openai.com/v1", description="OpenAI API base URL")
    OPENAI_MODEL: str = Field(default="gpt-3.5-turbo", description="OpenAI chat model")
    GEMINI_BASE_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini API base URL",
    )
    GEMINI_MODEL: str = Field(default="gemini-2.0-flash-001", description="Gemini chat model")
    DEEPSEEK_BASE_URL: str = Field(default="https://api.deepseek.com", description="DeepSeek API base URL")
    DEEPSEEK_MODEL: str = Field(default="deepseek-chat", description="DeepSeek chat model")

    # ── Request shaping ───────────────────────────────────────────────
    STRICT_PROVIDER_PARAMETERS: bool = Field(
        default=True,
        description="Forward only provider-declared parameter overrides",
    )

    # ── HTTP Client ───────────────────────────────────────────────────
    HTTP_TIMEOUT: int = Field(default=60, ge=1, le=300, description="Outbound provider timeout (seconds)")

    # ── Logging ───────────────────────────────────────────────────────
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    LOG_FORMAT: str = Field(default="json", description="Log output format ('json' for prod, 'console' for dev)")

    # ── Validators ────────────────────────────────────────────────────

    @field_validator("OPENAI_API_KEY", "GEMINI_API_KEY", "DEEPSEEK_API_KEY", "OPENAI_ORG_ID")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty and placeholder credentials as not configured."""
        if v is None:
            return None
        v = v.strip()
        if not v or v.lower() in _PLACEHOLDER_KEYS:
            return None
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level."""
        v = v.upper().strip()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got '{v}'")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        v = v.lower().strip()
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    @field_validator("OPENAI_BASE_URL", "GEMINI_BASE_URL", "DEEPSEEK_BASE_URL")
    @classmethod
    def validate_urls(cls, v: str) -> str:
        """Ensure base URLs don't have trailing slashes."""
        return v.rstrip("/")

    def provider_keys(self) -> dict[str, Optional[str]]:
        """Configured credential per model name."""
        return {
            "openai": self.OPENAI_API_KEY,
            "gemini": self.GEMINI_API_KEY,
            "deepseek": self.DEEPSEEK_API_KEY,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Uses `lru_cache` so the `.env` file is only read once.
    Call this everywhere instead of instantiating Settings directly.
    """
    return Settings()
