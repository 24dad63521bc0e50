import asyncio
from unittest.mock import AsyncMock

import pytest

from gateway.exceptions.custom import NetworkError
from gateway.schemas.envelope import Envelope
from gateway.services.cache import CacheKey, CacheOrchestrator, CachePolicy

PARAMS = {"city": "Casablanca", "guests": 2}


@pytest.fixture
def cache(clock):
    return CacheOrchestrator(clock=clock)


@pytest.mark.asyncio
async def test_identical_reads_within_staleness_fetch_once(cache, clock):
    fetch = AsyncMock(return_value=Envelope.ok(["hotel"]))

    first = await cache.get_or_fetch("hotels", "search", PARAMS, fetch)
    clock.advance(299)
    second = await cache.get_or_fetch("hotels", "search", dict(reversed(PARAMS.items())), fetch)

    assert first == second
    assert fetch.await_count == 1


@pytest.mark.asyncio
async def test_stale_entry_is_refetched(cache, clock):
    fetch = AsyncMock(side_effect=[Envelope.ok(["old"]), Envelope.ok(["new"])])

    await cache.get_or_fetch("hotels", "search", PARAMS, fetch)
    clock.advance(301)
    result = await cache.get_or_fetch("hotels", "search", PARAMS, fetch)

    assert result.data == ["new"]
    assert fetch.await_count == 2


@pytest.mark.asyncio
async def test_restaurant_availability_goes_stale_after_one_minute(cache, clock):
    fetch = AsyncMock(return_value=Envelope.ok({"available": True}))

    await cache.get_or_fetch("restaurants", "availability", {"id": "1"}, fetch)
    clock.advance(61)
    await cache.get_or_fetch("restaurants", "availability", {"id": "1"}, fetch)

    assert fetch.await_count == 2


@pytest.mark.asyncio
async def test_eviction_counts_from_last_access(cache, clock):
    fetch = AsyncMock(return_value=Envelope.ok(["hotel"]))

    await cache.get_or_fetch("hotels", "search", PARAMS, fetch)
    clock.advance(250)
    await cache.get_or_fetch("hotels", "search", PARAMS, fetch)

    clock.advance(450)
    assert cache.purge() == 0
    assert len(cache) == 1

    clock.advance(200)
    assert cache.purge() == 1
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_failures_are_not_cached(cache):
    failure = Envelope.fail(NetworkError("down", service="booking.com").to_api_error())
    fetch = AsyncMock(side_effect=[failure, Envelope.ok(["hotel"])])

    first = await cache.get_or_fetch("hotels", "details", {"id": "1"}, fetch)
    second = await cache.get_or_fetch("hotels", "details", {"id": "1"}, fetch)

    assert first.success is False
    assert second.success is True
    assert fetch.await_count == 2


@pytest.mark.asyncio
async def test_concurrent_identical_reads_share_one_fetch(cache):
    calls = 0
    gate = asyncio.Event()

    async def fetch():
        nonlocal calls
        calls += 1
        await gate.wait()
        return Envelope.ok(["hotel"])

    first = asyncio.create_task(cache.get_or_fetch("hotels", "search", PARAMS, fetch))
    second = asyncio.create_task(cache.get_or_fetch("hotels", "search", PARAMS, fetch))
    await asyncio.sleep(0)
    gate.set()
    results = await asyncio.gather(first, second)

    assert calls == 1
    assert results[0] == results[1]


@pytest.mark.asyncio
async def test_fetch_started_before_invalidation_is_not_stored(cache):
    gate = asyncio.Event()

    async def slow_fetch():
        await gate.wait()
        return Envelope.ok(["before booking"])

    pending = asyncio.create_task(cache.get_or_fetch("hotels", "search", PARAMS, slow_fetch))
    await asyncio.sleep(0)
    cache.invalidate("hotels")
    gate.set()
    result = await pending

    assert result.data == ["before booking"]
    assert len(cache) == 0

    fresh = AsyncMock(return_value=Envelope.ok(["after booking"]))
    again = await cache.get_or_fetch("hotels", "search", PARAMS, fresh)
    assert again.data == ["after booking"]
    assert fresh.await_count == 1


@pytest.mark.asyncio
async def test_invalidate_only_touches_one_domain(cache):
    fetch = AsyncMock(return_value=Envelope.ok([]))
    await cache.get_or_fetch("hotels", "search", PARAMS, fetch)
    await cache.get_or_fetch("hotels", "details", {"id": "1"}, fetch)
    await cache.get_or_fetch("restaurants", "search", PARAMS, fetch)

    removed = cache.invalidate("hotels")

    assert removed == 2
    assert len(cache) == 1
    assert CacheKey.build("restaurants", "search", PARAMS) in cache


def test_cache_key_digest_is_order_independent():
    a = CacheKey.build("hotels", "search", {"a": 1, "b": [1, 2]})
    b = CacheKey.build("hotels", "search", {"b": [1, 2], "a": 1})

    assert a == b
    assert len(a.digest) == 16
    assert str(a).startswith("hotels:search:")


def test_policy_staleness_cannot_exceed_eviction():
    with pytest.raises(ValueError):
        CachePolicy(staleness=600, eviction=300)


def test_policy_table(cache):
    assert cache.policy_for("hotels", "search") == CachePolicy(300, 600)
    assert cache.policy_for("rentals", "availability") == CachePolicy(120, 300)
    assert cache.policy_for("restaurants", "availability") == CachePolicy(60, 120)
    assert cache.policy_for("hotels", "reference") == CachePolicy(3600, 86400)
