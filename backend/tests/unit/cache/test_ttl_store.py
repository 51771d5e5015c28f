"""Tests for the TTL store and the page cache built on top of it."""

import pytest

from linguaedge.core.cache.page_cache import PageCache, PageCacheEntry
from linguaedge.core.cache.ttl_store import TTLStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


class TestTTLStore:
    """TTL expiry, replacement and bounded size."""

    @pytest.mark.asyncio
    async def test_get_returns_value_before_expiry(self, clock):
        store = TTLStore(default_ttl=60, clock=clock)
        await store.set("k", "v")
        clock.advance(59)
        assert await store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_expired_entry_is_a_miss_and_dropped(self, clock):
        store = TTLStore(default_ttl=60, clock=clock)
        await store.set("k", "v")
        clock.advance(60)
        assert await store.get("k") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_explicit_ttl_overrides_default(self, clock):
        store = TTLStore(default_ttl=60, clock=clock)
        await store.set("short", 1, ttl=5)
        await store.set("long", 2)
        clock.advance(10)
        assert await store.get("short") is None
        assert await store.get("long") == 2

    @pytest.mark.asyncio
    async def test_oldest_entry_evicted_first(self, clock):
        store = TTLStore(default_ttl=60, max_entries=2, clock=clock)
        await store.set("a", 1)
        await store.set("b", 2)
        await store.set("c", 3)
        assert await store.get("a") is None
        assert await store.get("b") == 2
        assert await store.get("c") == 3

    @pytest.mark.asyncio
    async def test_replacing_a_key_refreshes_its_age(self, clock):
        store = TTLStore(default_ttl=60, max_entries=2, clock=clock)
        await store.set("a", 1)
        await store.set("b", 2)
        await store.set("a", 10)
        await store.set("c", 3)
        assert await store.get("a") == 10
        assert await store.get("b") is None

    @pytest.mark.asyncio
    async def test_stats_count_expired_entries(self, clock):
        store = TTLStore(default_ttl=60, clock=clock)
        await store.set("a", 1, ttl=5)
        await store.set("b", 2)
        clock.advance(10)
        stats = store.get_stats()
        assert stats == {"total_entries": 2, "expired_entries": 1, "active_entries": 1}


class BrokenStore:
    async def get(self, key):
        raise RuntimeError("store offline")

    async def set(self, key, value, ttl=None):
        raise RuntimeError("store offline")


class TestPageCache:
    """Keyed by (URL, language); failures behave as miss / no-op."""

    @pytest.mark.asyncio
    async def test_entries_are_keyed_by_url_and_language(self, clock):
        cache = PageCache(TTLStore(default_ttl=3600, clock=clock))
        entry = PageCacheEntry(status=200, headers=(("content-type", "text/html"),), body=b"<p>fr</p>")
        await cache.put("https://shop.test/fr/about", "fr", entry)

        assert await cache.get("https://shop.test/fr/about", "fr") == entry
        assert await cache.get("https://shop.test/fr/about", "de") is None

    @pytest.mark.asyncio
    async def test_read_failure_is_a_miss(self):
        cache = PageCache(BrokenStore())
        assert await cache.get("https://shop.test/fr/", "fr") is None

    @pytest.mark.asyncio
    async def test_write_failure_is_swallowed(self):
        cache = PageCache(BrokenStore())
        await cache.put("https://shop.test/fr/", "fr", PageCacheEntry(status=200))
