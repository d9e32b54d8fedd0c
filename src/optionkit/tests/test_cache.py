"""Tests for the global option cache."""

from optionkit import MemoryCache, NullCache, OptionItem, get_cache, reset_cache, set_cache


def _items(*values: str) -> list[OptionItem]:
    return [OptionItem(label=v.title(), value=v) for v in values]


def test_memory_cache_basic() -> None:
    """Test basic get/set operations."""
    cache = MemoryCache()

    cache.set("countries", _items("tw", "jp"))
    assert cache.get("countries") == _items("tw", "jp")
    assert cache.get("currencies") is None


def test_memory_cache_returns_copies() -> None:
    cache = MemoryCache()
    cache.set("countries", _items("tw"))

    first = cache.get("countries")
    assert first is not None
    first.clear()
    assert cache.get("countries") == _items("tw")


def test_memory_cache_ttl(clock) -> None:
    """Entries expire once the TTL has elapsed and are evicted on read."""
    cache = MemoryCache(default_ttl=300, clock=clock)

    cache.set("countries", _items("tw"))
    clock.advance(299)
    assert cache.get("countries") == _items("tw")

    clock.advance(1)
    assert cache.get("countries") is None
    assert cache.size == 0


def test_memory_cache_ttl_override(clock) -> None:
    cache = MemoryCache(default_ttl=300, clock=clock)

    cache.set("countries", _items("tw"), ttl=10)
    clock.advance(11)
    assert cache.get("countries") is None


def test_memory_cache_invalidate() -> None:
    """Test single entry invalidation."""
    cache = MemoryCache()

    cache.set("a", _items("x"))
    cache.set("b", _items("y"))

    assert cache.invalidate("a")
    assert not cache.invalidate("a")
    assert cache.get("a") is None
    assert cache.get("b") == _items("y")


def test_memory_cache_clear() -> None:
    cache = MemoryCache()

    cache.set("a", _items("x"))
    cache.set("b", _items("y"))
    cache.clear()

    assert cache.size == 0


def test_memory_cache_eviction() -> None:
    """Test eviction when max_entries reached."""
    cache = MemoryCache(max_entries=10)

    for i in range(15):
        cache.set(f"key{i}", _items(f"v{i}"))

    assert cache.size <= 10
    assert cache.get("key14") == _items("v14")


def test_memory_cache_stats(clock) -> None:
    cache = MemoryCache(default_ttl=5, clock=clock)
    cache.set("a", _items("x"))
    cache.set("b", _items("y"), ttl=100)
    clock.advance(10)

    stats = cache.stats()
    assert stats["total_entries"] == 2
    assert stats["expired_entries"] == 1
    assert stats["active_entries"] == 1


def test_null_cache_stores_nothing() -> None:
    cache = NullCache()
    cache.set("a", _items("x"))
    assert cache.get("a") is None
    assert not cache.invalidate("a")


def test_global_cache_singleton() -> None:
    """Test global cache instance management."""
    cache1 = get_cache()
    cache2 = get_cache()
    assert cache1 is cache2
    assert isinstance(cache1, MemoryCache)
    assert cache1.default_ttl == 300.0

    custom = MemoryCache(default_ttl=1.0)
    set_cache(custom)
    assert get_cache() is custom

    reset_cache()
    assert get_cache() is not custom


def test_global_cache_disabled_by_settings(monkeypatch) -> None:
    from optionkit import clear_settings_cache

    monkeypatch.setenv("OPTIONKIT_CACHE_ENABLED", "false")
    clear_settings_cache()
    reset_cache()

    assert isinstance(get_cache(), NullCache)
