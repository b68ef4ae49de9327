# nosec B101


from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_rate_resolver
from api.main import app
from api.routes.exchange_rate import to_iso8601
from application.services import RateResolver
from domain.exceptions.currency import NoRateAvailableError, ProviderError
from domain.models.currency import ResolvedRate
from infrastructure.cache.memory_cache import InMemoryRateCache

FETCHED_AT = 1_700_000_000_000


def test_exchange_rate_success(client, mock_rate_resolver):
    mock_rate_resolver.resolve = AsyncMock(
        return_value=ResolvedRate(rate=7.1999, timestamp=FETCHED_AT, source_name="open.er-api.com")
    )

    response = client.get("/api/exchange-rate", params={"from": "USD", "to": "CNY"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {
            "base": "USD",
            "target": "CNY",
            "rate": 7.1999,
            "timestamp": "2023-11-14T22:13:20.000Z",
            "source": "open.er-api.com",
            "fromCache": False,
        },
    }
    mock_rate_resolver.resolve.assert_awaited_once_with("USD", "CNY")


def test_exchange_rate_defaults_to_usd_cny(client, mock_rate_resolver):
    mock_rate_resolver.resolve = AsyncMock(
        return_value=ResolvedRate(rate=7.2, timestamp=FETCHED_AT, source_name="exchangerate-api.com")
    )

    response = client.get("/api/exchange-rate")

    assert response.status_code == 200
    mock_rate_resolver.resolve.assert_awaited_once_with("USD", "CNY")


@pytest.mark.parametrize("query", ["from=usd&to=CNY", "from=USD&to=eur"])
def test_exchange_rate_codes_are_case_sensitive(client, mock_rate_resolver, query):
    mock_rate_resolver.resolve = AsyncMock()

    response = client.get(f"/api/exchange-rate?{query}")

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "Unsupported currency" in response.json()["error"]
    mock_rate_resolver.resolve.assert_not_called()


def test_exchange_rate_degraded_result_sets_from_cache(client, mock_rate_resolver):
    mock_rate_resolver.resolve = AsyncMock(
        return_value=ResolvedRate(
            rate=7.1, timestamp=FETCHED_AT, source_name="api.frankfurter.app", degraded=True
        )
    )

    response = client.get("/api/exchange-rate?from=USD&to=CNY")

    assert response.status_code == 200
    assert response.json()["data"]["fromCache"] is True


@pytest.mark.parametrize("query", ["from=XXX&to=CNY", "from=USD&to=BTC"])
def test_exchange_rate_unsupported_currency(client, mock_rate_resolver, query):
    mock_rate_resolver.resolve = AsyncMock()

    response = client.get(f"/api/exchange-rate?{query}")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "Unsupported currency" in body["error"]
    mock_rate_resolver.resolve.assert_not_called()


def test_exchange_rate_no_rate_available(client, mock_rate_resolver):
    mock_rate_resolver.resolve = AsyncMock(
        side_effect=NoRateAvailableError("No exchange rate available for USD->CNY")
    )

    response = client.get("/api/exchange-rate?from=USD&to=CNY")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "No exchange rate available for USD->CNY",
    }


def test_exchange_rate_identity_pair_end_to_end():
    resolver = RateResolver(cache=InMemoryRateCache(), providers=[], clock=lambda: FETCHED_AT)
    app.dependency_overrides[get_rate_resolver] = lambda: resolver
    try:
        response = TestClient(app).get("/api/exchange-rate?from=EUR&to=EUR")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["rate"] == 1
    assert data["source"] == "direct"
    assert data["fromCache"] is False


def test_exchange_rate_falls_back_to_next_provider_end_to_end():
    class Provider:
        def __init__(self, name, rate=None):
            self.name = name
            self.rate = rate

        async def fetch_rate(self, from_currency, to_currency):
            if self.rate is None:
                raise ProviderError(f"{self.name} request failed: ReadTimeout")
            return self.rate

    resolver = RateResolver(
        cache=InMemoryRateCache(),
        providers=[Provider("exchangerate-api.com"), Provider("open.er-api.com", 7.1999)],
        clock=lambda: FETCHED_AT,
    )
    app.dependency_overrides[get_rate_resolver] = lambda: resolver
    try:
        response = TestClient(app).get("/api/exchange-rate?from=USD&to=CNY")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["rate"] == 7.1999
    assert data["source"] == "open.er-api.com"
    assert data["timestamp"] == "2023-11-14T22:13:20.000Z"


def test_to_iso8601_keeps_milliseconds():
    assert to_iso8601(FETCHED_AT + 123) == "2023-11-14T22:13:20.123Z"
