from typing import Any

from domain.exceptions.currency import ProviderError

from .base import ExchangeRateProvider


class OpenERAPIProvider(ExchangeRateProvider):
    BASE_URL = "https://open.er-api.com/v6"

    @property
    def name(self) -> str:
        return "open.er-api.com"

    def build_url(self, from_currency: str, to_currency: str) -> str:
        return f"{self.BASE_URL}/latest/{from_currency}"

    def extract_rate(self, data: Any, to_currency: str) -> Any:
        # Errors come back as 200 with {"result": "error", "error-type": ...}
        if isinstance(data, dict) and data.get("result") == "error":
            raise ProviderError(f"open.er-api.com error: {data.get('error-type', 'unknown')}")
        return super().extract_rate(data, to_currency)
