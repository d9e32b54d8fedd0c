"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from optionkit.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.cache.ttl
    300.0
    >>> settings.sentinel.all_label
    '全部'

    # Or with environment variables:
    # OPTIONKIT_CACHE_TTL=60
    # OPTIONKIT_RESOLUTION_REACTIVE_MODE=live
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Global option cache (zero-argument results only)."""

    model_config = SettingsConfigDict(
        env_prefix="OPTIONKIT_CACHE_",
        extra="ignore",
    )

    enabled: bool = True
    ttl: PositiveFloat = Field(default=300.0, description="Cache TTL in seconds")
    max_entries: PositiveInt = Field(default=1000, description="Max cached option lists")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="OPTIONKIT_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class ResolutionSettings(BaseSettings):
    """How definitions are resolved."""

    model_config = SettingsConfigDict(
        env_prefix="OPTIONKIT_RESOLUTION_",
        extra="ignore",
    )

    reactive_mode: Literal["sampled_once", "live"] = Field(
        default="sampled_once",
        description="Mode for reactive references registered without live()/sampled()",
    )
    block_without_loop: bool = Field(
        default=True,
        description="Drive async definitions to completion when read outside an event loop",
    )


class SentinelSettings(BaseSettings):
    """Synthetic items added by the with_all and other views."""

    model_config = SettingsConfigDict(
        env_prefix="OPTIONKIT_SENTINEL_",
        extra="ignore",
    )

    all_label: str = "全部"
    all_value: str = ""
    other_label: str = "其他"
    other_value: str = "other"


class OptionkitSettings(BaseSettings):
    """Root settings for optionkit.

    Example environment variables:
        OPTIONKIT_CACHE_TTL=60
        OPTIONKIT_LOG_LEVEL=DEBUG
        OPTIONKIT_LOG_FORMAT=json
        OPTIONKIT_RESOLUTION_BLOCK_WITHOUT_LOOP=false
        OPTIONKIT_SENTINEL_ALL_LABEL=All
    """

    model_config = SettingsConfigDict(
        env_prefix="OPTIONKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    resolution: ResolutionSettings = Field(default_factory=ResolutionSettings)
    sentinel: SentinelSettings = Field(default_factory=SentinelSettings)


@lru_cache(maxsize=1)
def get_settings() -> OptionkitSettings:
    """Get the global settings instance (cached)."""
    return OptionkitSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
