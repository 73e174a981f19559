"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AurSettings(BaseModel):
    base_url: AnyHttpUrl = Field(
        default="https://aur.archlinux.org",
        description="AUR web root; the RPC endpoint and package pages hang off it.",
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0, le=60)
    max_results: int = Field(default=50, ge=1, le=50)
    max_attempts: int = Field(default=3, ge=1, le=10)
    retry_base_delay: float = Field(default=0.2, ge=0)
    retry_multiplier: float = Field(default=4.0, ge=1)
    user_agent: str = "aursearch-bot"


class InlineSettings(BaseModel):
    debounce_interval_seconds: float = Field(default=0.3, ge=0)
    debounce_ttl_seconds: float = Field(default=60.0, gt=0)
    debounce_max_entries: int = Field(default=10_000, ge=1)
    description_limit: int = Field(default=100, ge=10, le=512)
    error_message_limit: int = Field(default=120, ge=10, le=512)
    page_size: int = Field(default=50, ge=1, le=50)
    cache_time_seconds: int = Field(default=300, ge=0)
    placeholder_cache_time_seconds: int = Field(default=5, ge=0)


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    default_language: str = "en"
    admin_telegram_id: int | None = None

    aur: AurSettings = Field(default_factory=AurSettings)
    inline: InlineSettings = Field(default_factory=InlineSettings)


@lru_cache
def get_settings() -> BotSettings:
    """Return cached settings instance."""

    return BotSettings()  # type: ignore[call-arg]


__all__ = [
    "AurSettings",
    "BotSettings",
    "InlineSettings",
    "get_settings",
]
