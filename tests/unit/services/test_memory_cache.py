"""
Unit tests for the in-memory TTL/LRU cache.
"""

import pytest

from prompt_refiner.services import InMemoryCache


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(max_entries=3, default_ttl=60, key_prefix="test:", clock=clock)


@pytest.mark.unit
@pytest.mark.asyncio
class TestInMemoryCache:
    """Test get/set, expiry and eviction."""

    async def test_set_and_get(self, cache):
        await cache.set("a", {"value": 1})

        assert await cache.get("a") == {"value": 1}
        assert await cache.has("a") is True

    async def test_missing_key(self, cache):
        assert await cache.get("missing") is None

    async def test_expiry(self, cache, clock):
        await cache.set("a", 1, ttl=10)

        clock.advance(9.9)
        assert await cache.get("a") == 1

        clock.advance(0.1)
        assert await cache.get("a") is None
        assert await cache.has("a") is False

    async def test_default_ttl(self, cache, clock):
        await cache.set("a", 1)

        clock.advance(61)

        assert await cache.get("a") is None

    async def test_lru_eviction(self, cache):
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.set("c", 3)
        # Touch "a" so "b" becomes least recently used
        await cache.get("a")
        await cache.set("d", 4)

        assert await cache.get("b") is None
        assert await cache.get("a") == 1
        assert (await cache.stats())["size"] == 3

    async def test_delete_and_clear(self, cache):
        await cache.set("a", 1)

        assert await cache.delete("a") is True
        assert await cache.delete("a") is False

        await cache.set("b", 2)
        await cache.clear()
        assert (await cache.stats())["size"] == 0

    async def test_stats(self, cache):
        await cache.set("a", 1)
        await cache.get("a")
        await cache.get("nope")

        stats = await cache.stats()

        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5

    async def test_get_or_set(self, cache):
        calls = []

        async def factory():
            calls.append(1)
            return "computed"

        assert await cache.get_or_set("k", factory) == "computed"
        assert await cache.get_or_set("k", factory) == "computed"
        assert len(calls) == 1

    async def test_prefix_namespaces(self, clock):
        first = InMemoryCache(key_prefix="one:", clock=clock)
        await first.set("k", 1)

        assert first._entries.keys() == {"one:k"}

    async def test_disconnect(self, cache):
        await cache.set("a", 1)
        assert await cache.ping() is True

        await cache.disconnect()

        assert await cache.ping() is False
        assert await cache.get("a") is None
