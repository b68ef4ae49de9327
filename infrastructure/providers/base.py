from abc import ABC, abstractmethod
from typing import Any

import httpx

from domain.exceptions.currency import ProviderError
from domain.models.currency import is_valid_rate


class ExchangeRateProvider(ABC):
    """A keyless JSON rate source.

    Subclasses only describe the request target and where the rate sits in
    the response body; transport, status and JSON errors are mapped to
    ProviderError here. The client, and its timeout, belong to the caller,
    which also closes it.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def build_url(self, from_currency: str, to_currency: str) -> str:
        ...

    def extract_rate(self, data: Any, to_currency: str) -> Any:
        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict) or to_currency not in rates:
            raise ProviderError(f"Missing rate for {to_currency}")
        return rates[to_currency]

    async def _request(self, url: str) -> Any:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"{self.name} HTTP error {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(f"{self.name} request failed: {e.__class__.__name__}") from e
        except Exception as e:
            raise ProviderError(f"{self.name} response parsing error: {str(e)}") from e

    async def fetch_rate(self, from_currency: str, to_currency: str) -> float:
        data = await self._request(self.build_url(from_currency, to_currency))
        return self._validate_rate(self.extract_rate(data, to_currency), to_currency)

    def _validate_rate(self, value: Any, to_currency: str) -> float:
        if not is_valid_rate(value):
            raise ProviderError(f"Invalid rate for {to_currency}: {value!r}")
        return float(value)

    def __repr__(self):
        return f"<{self.__class__.__name__}(name={self.name})>"
