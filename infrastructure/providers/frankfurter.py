from .base import ExchangeRateProvider


class FrankfurterProvider(ExchangeRateProvider):
    BASE_URL = "https://api.frankfurter.app"

    @property
    def name(self) -> str:
        return "api.frankfurter.app"

    def build_url(self, from_currency: str, to_currency: str) -> str:
        return f"{self.BASE_URL}/latest?from={from_currency}&to={to_currency}"
