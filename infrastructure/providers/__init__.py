import httpx

from .base import ExchangeRateProvider
from .exchangerate_api import ExchangeRateAPIProvider
from .frankfurter import FrankfurterProvider
from .open_er_api import OpenERAPIProvider

PROVIDER_CLASSES: dict[str, type[ExchangeRateProvider]] = {
    "exchangerate-api.com": ExchangeRateAPIProvider,
    "open.er-api.com": OpenERAPIProvider,
    "api.frankfurter.app": FrankfurterProvider,
}

DEFAULT_PROVIDER_ORDER = tuple(PROVIDER_CLASSES)


def build_providers(
    client: httpx.AsyncClient, names: tuple[str, ...] | list[str] = DEFAULT_PROVIDER_ORDER
) -> list[ExchangeRateProvider]:
    """Instantiate providers in priority order, all sharing one client."""
    providers = []
    for name in names:
        try:
            provider_cls = PROVIDER_CLASSES[name]
        except KeyError as exc:
            raise ValueError(
                f"Unknown rate provider '{name}'. Allowed values: {sorted(PROVIDER_CLASSES)}"
            ) from exc
        providers.append(provider_cls(client=client))
    if len({p.name for p in providers}) != len(providers):
        raise ValueError("Rate provider names must be unique")
    return providers


__all__ = [
    'ExchangeRateProvider',
    'ExchangeRateAPIProvider',
    'FrankfurterProvider',
    'OpenERAPIProvider',
    'PROVIDER_CLASSES',
    'DEFAULT_PROVIDER_ORDER',
    'build_providers',
]
