"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation.
"""

from .settings import (
    CacheSettings,
    LoggingSettings,
    OptionkitSettings,
    ResolutionSettings,
    SentinelSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "OptionkitSettings",
    "ResolutionSettings",
    "SentinelSettings",
    "clear_settings_cache",
    "get_settings",
]
