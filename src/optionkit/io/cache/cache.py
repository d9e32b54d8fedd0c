"""Global option cache with TTL support.

Holds the zero-argument result of async definitions so that a resolver that
has never touched a key (a fresh service, a remounted view) can reuse a recent
fetch instead of calling the definition again. Entries are keyed by option key
and evicted lazily when read past expiry.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Callable

from optionkit.foundation.registry import OptionItem

DEFAULT_TTL: float = 300.0  # 5 minutes

Clock = Callable[[], float]


@dataclass(slots=True)
class CacheEntry:
    """A cached option list with expiration tracking."""
    items: tuple[OptionItem, ...]
    stored_at: float
    expires_at: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


class OptionCache(ABC):
    """Abstract base for option caches."""

    @abstractmethod
    def get(self, key: str) -> list[OptionItem] | None:
        """Get a copy of cached items if present and not expired."""
        ...

    @abstractmethod
    def set(self, key: str, items: Iterable[OptionItem], ttl: float | None = None) -> None:
        """Store items for key."""
        ...

    @abstractmethod
    def invalidate(self, key: str) -> bool:
        """Remove entry for key."""
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemoryCache(OptionCache):
    """Thread-safe in-memory cache with TTL-based expiration.

    Uses RLock for synchronization, safe under concurrent access.
    Automatic eviction when capacity is reached.

    Args:
        default_ttl: Default TTL in seconds for entries
        max_entries: Maximum number of entries before eviction
        clock: Time source, seconds (``time.time`` by default)

    Example:
        >>> cache = MemoryCache(default_ttl=60)
        >>> cache.set("countries", [OptionItem(label="台灣", value="TW")])
        >>> cache.get("countries")
        [OptionItem(label='台灣', value='TW', color=None, disabled=None)]
    """

    __slots__ = ("_cache", "_default_ttl", "_max_entries", "_lock", "_clock")

    def __init__(self, default_ttl: float = DEFAULT_TTL, max_entries: int = 1000, *, clock: Clock = time.time) -> None:
        self._cache: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._lock = threading.RLock()  # RLock allows reentrant calls (e.g. set -> _evict)
        self._clock = clock

    def get(self, key: str) -> list[OptionItem] | None:
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if entry.expired(self._clock()):
                del self._cache[key]
                return None
            return list(entry.items)

    def set(self, key: str, items: Iterable[OptionItem], ttl: float | None = None) -> None:
        now = self._clock()
        with self._lock:
            if key not in self._cache and len(self._cache) >= self._max_entries:
                self._evict_unlocked(now)
            self._cache[key] = CacheEntry(
                items=tuple(items),
                stored_at=now,
                expires_at=now + (ttl or self._default_ttl),
            )

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _evict_unlocked(self, now: float) -> None:
        """Remove expired entries, then oldest if still over capacity. Caller must hold lock."""
        for key in [k for k, v in self._cache.items() if v.expired(now)]:
            del self._cache[key]

        if len(self._cache) >= self._max_entries:
            sorted_keys = sorted(self._cache, key=lambda k: self._cache[k].stored_at)
            for key in sorted_keys[: max(1, self._max_entries // 4)]:
                del self._cache[key]

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._cache)

    def stats(self) -> dict[str, object]:
        """Get cache statistics for monitoring."""
        now = self._clock()
        with self._lock:
            expired = sum(1 for v in self._cache.values() if v.expired(now))
            return {
                "total_entries": len(self._cache),
                "expired_entries": expired,
                "active_entries": len(self._cache) - expired,
                "default_ttl": self._default_ttl,
                "max_entries": self._max_entries,
            }


class NullCache(OptionCache):
    """Cache that stores nothing (``OPTIONKIT_CACHE_ENABLED=false``)."""

    __slots__ = ()

    def get(self, key: str) -> list[OptionItem] | None:
        return None

    def set(self, key: str, items: Iterable[OptionItem], ttl: float | None = None) -> None:
        pass

    def invalidate(self, key: str) -> bool:
        return False

    def clear(self) -> None:
        pass


# Global cache instance
_cache: OptionCache | None = None


def get_cache() -> OptionCache:
    """Get the global option cache (created from settings if unset)."""
    global _cache
    if _cache is None:
        from optionkit.foundation.config import get_settings
        cfg = get_settings().cache
        _cache = MemoryCache(default_ttl=cfg.ttl, max_entries=cfg.max_entries) if cfg.enabled else NullCache()
    return _cache


def set_cache(cache: OptionCache) -> None:
    """Set a custom cache backend."""
    global _cache
    _cache = cache


def reset_cache() -> None:
    """Reset the global cache (useful for testing)."""
    global _cache
    if _cache is not None:
        _cache.clear()
    _cache = None
