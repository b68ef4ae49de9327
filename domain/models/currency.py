import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

SUPPORTED_CURRENCIES: tuple[str, ...] = ('USD', 'CNY', 'EUR', 'GBP', 'JPY', 'KRW')

DIRECT_SOURCE = 'direct'

RATE_PRECISION = Decimal('0.0001')


def make_pair_key(from_currency: str, to_currency: str) -> str:
    return f'{from_currency.upper()}-{to_currency.upper()}'


def is_valid_rate(value: object) -> bool:
    # bool is an int subclass; JSON true must not pass as a rate of 1
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def round_rate(value: float) -> float:
    """Round a provider rate half-up to 4 decimal places."""
    return float(Decimal(str(value)).quantize(RATE_PRECISION, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class CacheEntry:
    pair_key: str
    rate: float
    fetched_at: int  # epoch milliseconds
    source_name: str

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.fetched_at


@dataclass(frozen=True)
class ResolvedRate:
    rate: float
    timestamp: int  # epoch milliseconds
    source_name: str
    degraded: bool = False
