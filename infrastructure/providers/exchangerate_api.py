from .base import ExchangeRateProvider


class ExchangeRateAPIProvider(ExchangeRateProvider):
    BASE_URL = "https://api.exchangerate-api.com/v4"

    @property
    def name(self) -> str:
        return "exchangerate-api.com"

    def build_url(self, from_currency: str, to_currency: str) -> str:
        return f"{self.BASE_URL}/latest/{from_currency}"
