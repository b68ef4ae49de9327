from dataclasses import dataclass
from enum import Enum


class BillingCycle(Enum):
    MONTHLY = 'monthly'
    YEARLY = 'yearly'
    BIENNIAL = 'biennial'
    TRIENNIAL = 'triennial'

    @property
    def days(self) -> int:
        return CYCLE_DAYS[self]


CYCLE_DAYS = {
    BillingCycle.MONTHLY: 30,
    BillingCycle.YEARLY: 365,
    BillingCycle.BIENNIAL: 730,
    BillingCycle.TRIENNIAL: 1095,
}


@dataclass(frozen=True)
class RemainingValue:
    remaining_value: float
    used_value: float
    remaining_days: float
    usage_rate: float
    daily_rate: float


@dataclass(frozen=True)
class BadgeData:
    start_date: str
    end_date: str
    symbol: str
    remaining_value: float
    usage_rate: float  # percent, already rounded to 1 dp
    source: str | None = None
