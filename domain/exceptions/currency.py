class CurrencyException(Exception):
    """Base class for exchange-rate failures."""


class InvalidCurrencyError(CurrencyException):
    """Currency code outside the supported set."""


class ProviderError(CurrencyException):
    """A single rate provider could not deliver a usable rate.

    Covers transport errors, timeouts, non-2xx statuses, undecodable bodies
    and missing or non-positive rates. The resolver moves on to the next
    provider; this never reaches a client.
    """


class NoRateAvailableError(CurrencyException):
    """Every provider failed and no cached rate exists for the pair."""


class CacheError(CurrencyException):
    """A stored cache entry could not be decoded."""
