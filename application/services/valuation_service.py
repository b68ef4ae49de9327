import math
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from domain.exceptions.valuation import ValuationError
from domain.models.valuation import BadgeData, BillingCycle, RemainingValue
from infrastructure.rendering.sanitize import parse_number

MS_PER_DAY = 1000 * 60 * 60 * 24

CURRENCY_SYMBOLS = {
	'CNY': '¥',
	'USD': '$',
	'EUR': '€',
	'GBP': '£',
	'JPY': '¥',
	'KRW': '₩',
}


def _round(value: float, places: int = 2) -> float:
	exponent = Decimal(1).scaleb(-places)
	return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def _is_number(value: object) -> bool:
	return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def parse_date(value: str) -> datetime:
	"""Parse an ISO-8601 date or datetime; naive values are taken as UTC."""
	try:
		parsed = datetime.fromisoformat(str(value).strip())
	except ValueError as e:
		raise ValuationError(f'Invalid date: {value}') from e
	if parsed.tzinfo is None:
		parsed = parsed.replace(tzinfo=UTC)
	return parsed


def validate_inputs(total_cost: float, total_days: float, used_days: float) -> None:
	if not _is_number(total_cost) or total_cost <= 0:
		raise ValuationError('totalCost must be a number greater than 0')
	if not _is_number(total_days) or total_days <= 0:
		raise ValuationError('totalDays must be a number greater than 0')
	if not _is_number(used_days) or used_days < 0:
		raise ValuationError('usedDays must be a non-negative number')
	if used_days > total_days:
		raise ValuationError('usedDays cannot exceed totalDays')


def calculate_remaining_value(total_cost: float, total_days: float, used_days: float) -> RemainingValue:
	validate_inputs(total_cost, total_days, used_days)

	daily_rate = total_cost / total_days
	remaining_days = total_days - used_days

	return RemainingValue(
		remaining_value=_round(daily_rate * remaining_days),
		used_value=_round(daily_rate * used_days),
		remaining_days=remaining_days,
		usage_rate=_round(used_days / total_days * 100),
		daily_rate=_round(daily_rate),
	)


def days_by_cycle(cycle: str) -> int:
	try:
		return BillingCycle(cycle).days
	except ValueError as e:
		raise ValuationError(f'Unsupported billing cycle: {cycle}') from e


def used_days_since(purchase_date: str, now: datetime | None = None) -> int:
	"""Whole days elapsed between purchase and now, rounded down."""
	purchase = parse_date(purchase_date)
	now = now or datetime.now(tz=UTC)

	elapsed_ms = (now - purchase).total_seconds() * 1000
	if elapsed_ms < 0:
		raise ValuationError('purchaseDate cannot be in the future')
	return int(elapsed_ms // MS_PER_DAY)


def build_badge_data(
	start_date: str | None,
	end_date: str | None,
	total_cost: str | None,
	currency: str = 'CNY',
	remaining_value: str | None = None,
	total_days: str | None = None,
	source: str | None = None,
	now: datetime | None = None,
) -> BadgeData:
	"""Work out what the remaining-value badge shows.

	With total_days the value is computed from the days elapsed since
	start_date (dynamic mode); otherwise remaining_value must be supplied
	and only the usage percentage is derived (static mode).
	"""
	if not start_date or not end_date or total_cost is None:
		raise ValuationError('Missing required parameters: startDate, endDate, totalCost')

	start = parse_date(start_date)
	end = parse_date(end_date)
	if end < start:
		raise ValuationError('endDate cannot be earlier than startDate')

	cost = parse_number(total_cost)
	if cost is None or cost <= 0:
		raise ValuationError('totalCost must be a number greater than 0')

	if total_days is not None:
		days = parse_number(total_days)
		if days is None or not days.is_integer() or days <= 0:
			raise ValuationError('totalDays must be an integer greater than 0')

		now = now or datetime.now(tz=UTC)
		used = math.floor((now - start).total_seconds() * 1000 / MS_PER_DAY)
		if used < 0:
			raise ValuationError('startDate cannot be later than the current date')

		used = min(used, days)
		value = cost / days * max(0, days - used)
		usage = used / days * 100
	else:
		value = parse_number(remaining_value)
		if value is None:
			raise ValuationError('Missing required parameter: remainingValue')
		usage = (cost - value) / cost * 100

	return BadgeData(
		start_date=start_date,
		end_date=end_date,
		symbol=CURRENCY_SYMBOLS.get(currency, currency),
		remaining_value=value,
		usage_rate=_round(usage, 1),
		source=source or None,
	)
