from . import currency_service, valuation_service
from .rate_resolver import RateResolver

__all__ = ['RateResolver', 'currency_service', 'valuation_service']
