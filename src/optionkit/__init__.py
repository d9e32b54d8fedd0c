"""Optionkit - Lazy, memoized option lists for select/dropdown data.

An option list is declared once as a static list, a function, a coroutine
function or a reactive reference, and read as an object that is at the same
time a sequence of OptionItem, a callable taking the definition's parameters,
and a provider of derived views.

Quick Start:
    >>> from optionkit import register_definitions, get_options
    >>>
    >>> async def countries():
    ...     return await api.get_countries()
    >>>
    >>> register_definitions({
    ...     "status": [{"label": "啟用", "value": "ACTIVE"}, {"label": "停用", "value": "INACTIVE"}],
    ...     "countries": countries,
    ...     "townships": fetch_townships,
    ... })
    >>> options = get_options()
    >>> options.status.label("ACTIVE")
    '啟用'
    >>> options.status.with_all[0].label
    '全部'
    >>> tpe = options.townships("TPE")      # separate cache bucket
    >>> await options.countries.reload()   # forced refresh

Explicit service (dependency injection, test isolation):
    >>> from optionkit import OptionService
    >>> from optionkit.catalog import default_registry
    >>> service = OptionService(default_registry())
    >>> service.options.cities.values[:2]
    ['TPE', 'NTPC']
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import ErrorCode, OptionError, OptionException, classify_exception

# Config
from .foundation.config import OptionkitSettings, clear_settings_cache, get_settings

# Registry
from .foundation.registry import (
    AsyncFunction,
    Computed,
    Definition,
    DefinitionRegistry,
    OptionItem,
    PureFunction,
    Reactive,
    ReactiveMode,
    ReactiveSource,
    Ref,
    StaticList,
    computed,
    live,
    sampled,
)

# Cache
from .io.cache import DEFAULT_TTL, MemoryCache, NullCache, OptionCache, get_cache, reset_cache, set_cache

# Resolution
from .runtime.resolution import OptionResolver, ResolutionPhase, ResolutionState

# Facade
from .facade import ExtensionContext, OptionArray, register_extension, unregister_extension

# Service
from .service import (
    Options,
    OptionService,
    fetch_option,
    get_option_label,
    get_option_sync,
    get_options,
    get_service,
    register_definitions,
    reset_service,
    set_service,
)

# Logging
from .runtime.observability.logging import configure_logging, get_logger

__all__ = [
    "__version__",
    # Errors
    "ErrorCode", "OptionError", "OptionException", "classify_exception",
    # Config
    "OptionkitSettings", "get_settings", "clear_settings_cache",
    # Registry
    "OptionItem", "Definition", "DefinitionRegistry",
    "StaticList", "PureFunction", "AsyncFunction", "ReactiveSource",
    "Reactive", "ReactiveMode", "Ref", "Computed", "computed", "live", "sampled",
    # Cache
    "OptionCache", "MemoryCache", "NullCache", "DEFAULT_TTL", "get_cache", "set_cache", "reset_cache",
    # Resolution
    "OptionResolver", "ResolutionState", "ResolutionPhase",
    # Facade
    "OptionArray", "ExtensionContext", "register_extension", "unregister_extension",
    # Service
    "OptionService", "Options", "register_definitions", "get_options",
    "get_service", "set_service", "reset_service",
    "fetch_option", "get_option_sync", "get_option_label",
    # Logging
    "configure_logging", "get_logger",
]
