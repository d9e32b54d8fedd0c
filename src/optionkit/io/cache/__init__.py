"""Option list caching with TTL support.

Backends:
    - MemoryCache: Thread-safe in-memory (default)
    - NullCache: Disabled cache
"""

from .cache import (
    DEFAULT_TTL,
    CacheEntry,
    MemoryCache,
    NullCache,
    OptionCache,
    get_cache,
    reset_cache,
    set_cache,
)

__all__ = [
    "OptionCache",
    "MemoryCache",
    "NullCache",
    "CacheEntry",
    "get_cache",
    "set_cache",
    "reset_cache",
    "DEFAULT_TTL",
]
