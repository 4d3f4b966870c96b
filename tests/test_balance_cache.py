import asyncio

import pytest

from faucet.domain.balance import BalanceCache
from faucet.domain.claims import UpstreamUnavailableError


class FakeMonotonic:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def monotonic():
    return FakeMonotonic()


@pytest.fixture
def cache(distributor, monotonic):
    return BalanceCache(distributor, window=60, clock=monotonic)


@pytest.mark.asyncio
async def test_first_read_fetches_upstream(cache, distributor):
    reading = await cache.get_balance()
    assert reading.amount == 12.5
    assert reading.cached is False
    assert distributor.balance_calls == 1


@pytest.mark.asyncio
async def test_concurrent_misses_share_one_upstream_query(cache, distributor):
    first, second = await asyncio.gather(cache.get_balance(), cache.get_balance())

    assert distributor.balance_calls == 1
    assert first.amount == second.amount == 12.5
    assert sorted([first.cached, second.cached]) == [False, True]


@pytest.mark.asyncio
async def test_many_concurrent_misses_share_one_upstream_query(cache, distributor):
    readings = await asyncio.gather(*(cache.get_balance() for _ in range(20)))
    assert distributor.balance_calls == 1
    assert {reading.amount for reading in readings} == {12.5}


@pytest.mark.asyncio
async def test_reads_inside_window_are_cached(cache, distributor, monotonic):
    await cache.get_balance()
    distributor.balance = 3.0
    monotonic.now += 59.9

    reading = await cache.get_balance()

    assert reading.cached is True
    assert reading.amount == 12.5
    assert distributor.balance_calls == 1


@pytest.mark.asyncio
async def test_read_after_window_refreshes_once(cache, distributor, monotonic):
    await cache.get_balance()
    distributor.balance = 3.0
    monotonic.now += 60

    fresh = await cache.get_balance()
    again = await cache.get_balance()

    assert fresh.cached is False
    assert fresh.amount == 3.0
    assert again.cached is True
    assert distributor.balance_calls == 2


@pytest.mark.asyncio
async def test_concurrent_reads_after_window_share_one_refresh(cache, distributor, monotonic):
    await cache.get_balance()
    distributor.balance = 3.0
    monotonic.now += 60

    readings = await asyncio.gather(*(cache.get_balance() for _ in range(10)))

    assert distributor.balance_calls == 2
    assert {reading.amount for reading in readings} == {3.0}
    assert sum(not reading.cached for reading in readings) == 1

@pytest.mark.asyncio
async def test_upstream_failure_without_cache_raises(cache, distributor):
    distributor.fail_balance = True
    with pytest.raises(UpstreamUnavailableError):
        await cache.get_balance()


@pytest.mark.asyncio
async def test_failed_refresh_does_not_poison_cache(cache, distributor, monotonic):
    distributor.fail_balance = True
    with pytest.raises(UpstreamUnavailableError):
        await cache.get_balance()

    distributor.fail_balance = False
    reading = await cache.get_balance()
    assert reading.cached is False
    assert distributor.balance_calls == 2
