"""Foundation - Core building blocks for optionkit.

Contains: error handling, configuration, definition registry.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "ErrorCode", "OptionError", "OptionException", "classify_exception",
    # Config
    "OptionkitSettings", "get_settings", "clear_settings_cache",
    # Registry
    "OptionItem", "DefinitionRegistry", "StaticList", "PureFunction", "AsyncFunction", "ReactiveSource",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ErrorCode", "OptionError", "OptionException", "classify_exception"):
        from . import errors
        return getattr(errors, name)
    if name in ("OptionkitSettings", "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)
    if name in ("OptionItem", "DefinitionRegistry", "StaticList", "PureFunction", "AsyncFunction", "ReactiveSource"):
        from . import registry
        return getattr(registry, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
