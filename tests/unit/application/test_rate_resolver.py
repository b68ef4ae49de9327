# nosec B101


import asyncio
from unittest.mock import AsyncMock

import pytest

from application.services.rate_resolver import FRESHNESS_WINDOW_MS, RateResolver
from domain.exceptions.currency import CacheError, NoRateAvailableError, ProviderError
from domain.models.currency import CacheEntry
from infrastructure.cache.memory_cache import InMemoryRateCache

NOW = 1_700_000_000_000


class FakeProvider:
    def __init__(self, name, rate=None, error=None, delay=0.0):
        self.name = name
        self.rate = rate
        self.error = error
        self.delay = delay
        self.calls = []

    async def fetch_rate(self, from_currency, to_currency):
        self.calls.append((from_currency, to_currency))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.rate


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache():
    return InMemoryRateCache()


def make_resolver(cache, providers, clock, **kwargs):
    return RateResolver(cache=cache, providers=providers, clock=clock, **kwargs)


# ============================================================================
# TEST: identity pair
# ============================================================================

@pytest.mark.asyncio
async def test_identity_pair_never_touches_providers_or_cache(clock):
    provider = FakeProvider("exchangerate-api.com", error=AssertionError("must not be called"))
    mock_cache = AsyncMock()
    resolver = make_resolver(mock_cache, [provider], clock)

    result = await resolver.resolve("USD", "USD")

    assert result.rate == 1.0
    assert result.source_name == "direct"
    assert result.timestamp == NOW
    assert result.degraded is False
    assert provider.calls == []
    mock_cache.get.assert_not_called()
    mock_cache.set.assert_not_called()


@pytest.mark.asyncio
async def test_identity_pair_is_case_insensitive(cache, clock):
    resolver = make_resolver(cache, [], clock)

    result = await resolver.resolve("cny", "CNY")

    assert result.rate == 1.0
    assert result.source_name == "direct"


# ============================================================================
# TEST: cache freshness
# ============================================================================

@pytest.mark.asyncio
async def test_fresh_cache_entry_short_circuits_providers(cache, clock):
    await cache.set(CacheEntry("USD-CNY", 7.2, NOW - 10 * 60 * 1000, "open.er-api.com"))
    provider = FakeProvider("exchangerate-api.com", rate=7.3)
    resolver = make_resolver(cache, [provider], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.2
    assert result.source_name == "open.er-api.com"
    assert result.timestamp == NOW - 10 * 60 * 1000
    assert result.degraded is False
    assert provider.calls == []


@pytest.mark.asyncio
async def test_entry_at_freshness_boundary_is_refetched(cache, clock):
    await cache.set(CacheEntry("USD-CNY", 7.2, NOW - FRESHNESS_WINDOW_MS, "open.er-api.com"))
    provider = FakeProvider("exchangerate-api.com", rate=7.3)
    resolver = make_resolver(cache, [provider], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.3
    assert result.source_name == "exchangerate-api.com"
    assert result.timestamp == NOW
    assert provider.calls == [("USD", "CNY")]
    assert (await cache.get("USD-CNY")).rate == 7.3


@pytest.mark.asyncio
async def test_custom_freshness_window(cache, clock):
    await cache.set(CacheEntry("USD-CNY", 7.2, NOW - 2000, "open.er-api.com"))
    provider = FakeProvider("exchangerate-api.com", rate=7.3)
    resolver = make_resolver(cache, [provider], clock, freshness_window_ms=1000)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.3


# ============================================================================
# TEST: provider fallback
# ============================================================================

@pytest.mark.asyncio
async def test_providers_tried_in_order_until_first_success(cache, clock):
    first = FakeProvider("exchangerate-api.com", error=ProviderError("timeout"))
    second = FakeProvider("open.er-api.com", rate=7.25)
    third = FakeProvider("api.frankfurter.app", rate=7.3)
    resolver = make_resolver(cache, [first, second, third], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.25
    assert result.source_name == "open.er-api.com"
    assert first.calls == [("USD", "CNY")]
    assert second.calls == [("USD", "CNY")]
    assert third.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_rate", [0, -2.0, None, "7.2", float("inf"), float("nan"), True])
async def test_unusable_rate_falls_through_to_next_provider(cache, clock, bad_rate):
    first = FakeProvider("exchangerate-api.com", rate=bad_rate)
    second = FakeProvider("open.er-api.com", rate=7.25)
    resolver = make_resolver(cache, [first, second], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.25
    assert result.source_name == "open.er-api.com"


@pytest.mark.asyncio
async def test_unexpected_provider_exception_falls_through(cache, clock):
    first = FakeProvider("exchangerate-api.com", error=RuntimeError("boom"))
    second = FakeProvider("open.er-api.com", rate=7.25)
    resolver = make_resolver(cache, [first, second], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.source_name == "open.er-api.com"


@pytest.mark.asyncio
async def test_accepted_rate_is_rounded_half_up_to_four_places(cache, clock):
    provider = FakeProvider("exchangerate-api.com", rate=7.23456789)
    resolver = make_resolver(cache, [provider], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.2346
    assert (await cache.get("USD-CNY")).rate == 7.2346


@pytest.mark.asyncio
async def test_half_way_rate_rounds_up(cache, clock):
    provider = FakeProvider("exchangerate-api.com", rate=0.00125)
    resolver = make_resolver(cache, [provider], clock)

    result = await resolver.resolve("USD", "GBP")

    assert result.rate == 0.0013


@pytest.mark.asyncio
async def test_lowercase_codes_resolve_under_uppercase_key(cache, clock):
    provider = FakeProvider("exchangerate-api.com", rate=0.92)
    resolver = make_resolver(cache, [provider], clock)

    await resolver.resolve("usd", "eur")

    assert provider.calls == [("USD", "EUR")]
    assert await cache.get("USD-EUR") is not None


# ============================================================================
# TEST: degraded and hard failure
# ============================================================================

@pytest.mark.asyncio
async def test_stale_entry_served_degraded_when_all_providers_fail(cache, clock):
    stale_at = NOW - 5 * FRESHNESS_WINDOW_MS
    await cache.set(CacheEntry("USD-CNY", 7.1, stale_at, "api.frankfurter.app"))
    providers = [
        FakeProvider("exchangerate-api.com", error=ProviderError("down")),
        FakeProvider("open.er-api.com", error=ProviderError("down")),
    ]
    resolver = make_resolver(cache, providers, clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.1
    assert result.timestamp == stale_at
    assert result.source_name == "api.frankfurter.app"
    assert result.degraded is True
    assert all(p.calls == [("USD", "CNY")] for p in providers)


@pytest.mark.asyncio
async def test_no_rate_available_when_everything_fails(cache, clock):
    providers = [
        FakeProvider("exchangerate-api.com", error=ProviderError("down")),
        FakeProvider("open.er-api.com", rate=-1),
        FakeProvider("api.frankfurter.app", error=ProviderError("down")),
    ]
    resolver = make_resolver(cache, providers, clock)

    with pytest.raises(NoRateAvailableError) as exc_info:
        await resolver.resolve("USD", "CNY")

    assert "USD->CNY" in str(exc_info.value)
    assert await cache.get("USD-CNY") is None


@pytest.mark.asyncio
async def test_no_providers_and_empty_cache(cache, clock):
    resolver = make_resolver(cache, [], clock)

    with pytest.raises(NoRateAvailableError):
        await resolver.resolve("EUR", "JPY")


# ============================================================================
# TEST: end to end with recovering providers
# ============================================================================

@pytest.mark.asyncio
async def test_usd_cny_scenario_caches_second_provider_result(cache, clock):
    first = FakeProvider("exchangerate-api.com", error=ProviderError("request failed: ReadTimeout"))
    second = FakeProvider("open.er-api.com", rate=7.1999)
    third = FakeProvider("api.frankfurter.app", rate=7.3)
    resolver = make_resolver(cache, [first, second, third], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.1999
    assert result.source_name == "open.er-api.com"
    assert result.timestamp == NOW
    assert result.degraded is False

    clock.advance(60 * 1000)
    again = await resolver.resolve("USD", "CNY")

    assert again.rate == 7.1999
    assert again.source_name == "open.er-api.com"
    assert again.timestamp == NOW
    assert len(first.calls) == 1
    assert len(second.calls) == 1
    assert third.calls == []


# ============================================================================
# TEST: cache failures
# ============================================================================

@pytest.mark.asyncio
async def test_cache_failures_do_not_block_provider_rate(clock):
    broken_cache = AsyncMock()
    broken_cache.get.side_effect = CacheError("redis unavailable")
    broken_cache.set.side_effect = CacheError("redis unavailable")
    provider = FakeProvider("exchangerate-api.com", rate=7.2)
    resolver = make_resolver(broken_cache, [provider], clock)

    result = await resolver.resolve("USD", "CNY")

    assert result.rate == 7.2
    assert result.source_name == "exchangerate-api.com"
    broken_cache.set.assert_awaited_once()


@pytest.mark.asyncio
async def test_cache_failure_with_no_provider_raises_no_rate(clock):
    broken_cache = AsyncMock()
    broken_cache.get.side_effect = CacheError("redis unavailable")
    provider = FakeProvider("exchangerate-api.com", error=ProviderError("down"))
    resolver = make_resolver(broken_cache, [provider], clock)

    with pytest.raises(NoRateAvailableError):
        await resolver.resolve("USD", "CNY")


# ============================================================================
# TEST: concurrent lookups
# ============================================================================

@pytest.mark.asyncio
async def test_concurrent_lookups_share_one_provider_call(cache, clock):
    provider = FakeProvider("exchangerate-api.com", rate=7.2, delay=0.01)
    resolver = make_resolver(cache, [provider], clock)

    results = await asyncio.gather(*(resolver.resolve("USD", "CNY") for _ in range(5)))

    assert len(provider.calls) == 1
    assert all(r.rate == 7.2 for r in results)
    await asyncio.sleep(0)
    assert resolver._in_flight == {}


@pytest.mark.asyncio
async def test_concurrent_lookups_of_different_pairs_run_separately(cache, clock):
    provider = FakeProvider("exchangerate-api.com", rate=1.5, delay=0.01)
    resolver = make_resolver(cache, [provider], clock)

    await asyncio.gather(resolver.resolve("USD", "CNY"), resolver.resolve("USD", "EUR"))

    assert sorted(provider.calls) == [("USD", "CNY"), ("USD", "EUR")]


@pytest.mark.asyncio
async def test_shared_lookup_failure_reaches_every_caller(cache, clock):
    provider = FakeProvider("exchangerate-api.com", error=ProviderError("down"), delay=0.01)
    resolver = make_resolver(cache, [provider], clock)

    results = await asyncio.gather(
        resolver.resolve("USD", "CNY"),
        resolver.resolve("USD", "CNY"),
        return_exceptions=True,
    )

    assert all(isinstance(r, NoRateAvailableError) for r in results)
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_single_flight_disabled_fetches_per_caller(cache, clock):
    provider = FakeProvider("exchangerate-api.com", rate=7.2, delay=0.01)
    resolver = make_resolver(cache, [provider], clock, single_flight=False)

    await asyncio.gather(resolver.resolve("USD", "CNY"), resolver.resolve("USD", "CNY"))

    assert len(provider.calls) == 2
