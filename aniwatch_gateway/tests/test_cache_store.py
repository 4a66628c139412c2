import pytest
from unittest.mock import AsyncMock

from aniwatch_gateway.models.context import CacheDirective
from aniwatch_gateway.models.result import ScrapeResult
from aniwatch_gateway.services.cache_store import ResponseCache


class FakeTimer:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def cache(timer):
    return ResponseCache(max_size=4, timer=timer)


def test_entry_expires_after_its_duration(cache, timer):
    cache.set("/hianime/home", {"a": 1}, duration=60)

    timer.now = 59
    assert cache.get("/hianime/home") == {"a": 1}

    timer.now = 61
    assert cache.get("/hianime/home") is None


def test_entries_keep_their_own_duration(cache, timer):
    cache.set("short", 1, duration=5)
    cache.set("long", 2, duration=500)

    timer.now = 10

    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_zero_duration_is_not_stored(cache):
    cache.set("k", "v", duration=0)

    assert cache.get("k") is None
    assert len(cache) == 0


def test_max_size_evicts(cache):
    for i in range(6):
        cache.set(f"k{i}", i, duration=60)

    assert len(cache) == 4


def test_invalidate_and_clear(cache):
    cache.set("a", 1, duration=60)
    cache.set("b", 2, duration=60)

    cache.invalidate("a")
    assert cache.get("a") is None

    cache.clear()
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_get_or_set_fetches_once(cache):
    getter = AsyncMock(return_value=ScrapeResult.success({"x": 1}))
    directive = CacheDirective(key="/hianime/home", duration=60)

    first = await cache.get_or_set(getter, directive)
    second = await cache.get_or_set(getter, directive)

    assert first.data == second.data == {"x": 1}
    getter.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_or_set_does_not_store_failures(cache):
    getter = AsyncMock(return_value=ScrapeResult.failure(500, "boom"))
    directive = CacheDirective(key="/hianime/home", duration=60)

    await cache.get_or_set(getter, directive)
    await cache.get_or_set(getter, directive)

    assert getter.await_count == 2


@pytest.mark.asyncio
async def test_get_or_set_without_directive_skips_cache(cache):
    getter = AsyncMock(return_value=ScrapeResult.success(1))

    await cache.get_or_set(getter, None)

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_get_or_set_keeps_empty_payloads(cache):
    getter = AsyncMock(return_value=ScrapeResult.success(None))
    directive = CacheDirective(key="/hianime/qtip/none", duration=60)

    first = await cache.get_or_set(getter, directive)
    second = await cache.get_or_set(getter, directive)

    assert first.ok and second.ok
    assert second.data is None
    getter.assert_awaited_once()
