import asyncio
import logging
import time
from collections.abc import Callable, Sequence

from domain.exceptions.currency import NoRateAvailableError, ProviderError
from domain.models.currency import (
	DIRECT_SOURCE,
	CacheEntry,
	ResolvedRate,
	is_valid_rate,
	make_pair_key,
	round_rate,
)
from infrastructure.cache.base import RateCache
from infrastructure.providers.base import ExchangeRateProvider

logger = logging.getLogger(__name__)

FRESHNESS_WINDOW_MS = 60 * 60 * 1000


def epoch_ms() -> int:
	return int(time.time() * 1000)


class RateResolver:
	"""Resolve a currency pair to a rate with provenance.

	Order of attempts: identity shortcut, fresh cache entry, providers in
	declared order (first acceptable rate wins), then any cached entry for
	the pair flagged as degraded. Only total exhaustion with an empty cache
	raises NoRateAvailableError.
	"""

	def __init__(
		self,
		cache: RateCache,
		providers: Sequence[ExchangeRateProvider],
		freshness_window_ms: int = FRESHNESS_WINDOW_MS,
		single_flight: bool = True,
		clock: Callable[[], int] = epoch_ms,
	):
		self.cache = cache
		self.providers = list(providers)
		self.freshness_window_ms = freshness_window_ms
		self.single_flight = single_flight
		self.clock = clock
		self._in_flight: dict[str, asyncio.Future[ResolvedRate]] = {}

	async def resolve(self, from_currency: str, to_currency: str) -> ResolvedRate:
		from_currency = from_currency.upper()
		to_currency = to_currency.upper()

		if from_currency == to_currency:
			return ResolvedRate(rate=1.0, timestamp=self.clock(), source_name=DIRECT_SOURCE)

		pair_key = make_pair_key(from_currency, to_currency)
		if not self.single_flight:
			return await self._resolve_pair(pair_key, from_currency, to_currency)

		pending = self._in_flight.get(pair_key)
		if pending is None:
			pending = asyncio.ensure_future(self._resolve_pair(pair_key, from_currency, to_currency))
			self._in_flight[pair_key] = pending
			pending.add_done_callback(lambda _: self._in_flight.pop(pair_key, None))
		else:
			logger.debug(f'Joining in-flight resolution for {pair_key}')

		# A cancelled caller must not cancel the lookup other callers share
		return await asyncio.shield(pending)

	async def _resolve_pair(self, pair_key: str, from_currency: str, to_currency: str) -> ResolvedRate:
		cached = await self._read_cache(pair_key)
		if cached is not None and cached.age_ms(self.clock()) < self.freshness_window_ms:
			return ResolvedRate(
				rate=cached.rate, timestamp=cached.fetched_at, source_name=cached.source_name
			)

		for provider in self.providers:
			rate = await self._attempt(provider, from_currency, to_currency)
			if rate is None:
				continue

			entry = CacheEntry(
				pair_key=pair_key,
				rate=round_rate(rate),
				fetched_at=self.clock(),
				source_name=provider.name,
			)
			await self._write_cache(entry)
			logger.info(f'Resolved {pair_key} = {entry.rate} from {provider.name}')
			return ResolvedRate(
				rate=entry.rate, timestamp=entry.fetched_at, source_name=entry.source_name
			)

		stale = await self._read_cache(pair_key)
		if stale is not None:
			logger.warning(
				f'All providers failed for {pair_key}, serving cached rate from {stale.source_name} '
				f'(age: {stale.age_ms(self.clock()) // 1000}s)'
			)
			return ResolvedRate(
				rate=stale.rate,
				timestamp=stale.fetched_at,
				source_name=stale.source_name,
				degraded=True,
			)

		logger.error(f'All providers failed for {pair_key} and no cached rate exists')
		raise NoRateAvailableError(
			f'No exchange rate available for {from_currency}->{to_currency}: '
			'all rate providers failed and no cached rate exists'
		)

	async def _attempt(
		self, provider: ExchangeRateProvider, from_currency: str, to_currency: str
	) -> float | None:
		try:
			rate = await provider.fetch_rate(from_currency, to_currency)
		except ProviderError as e:
			logger.warning(f'Provider {provider.name} failed: {e}')
			return None
		except Exception as e:
			logger.error(f'Provider {provider.name} failed unexpectedly: {e}', exc_info=True)
			return None

		if not is_valid_rate(rate):
			logger.warning(f'Provider {provider.name} returned an unusable rate: {rate!r}')
			return None
		return rate

	async def _read_cache(self, pair_key: str) -> CacheEntry | None:
		try:
			return await self.cache.get(pair_key)
		except Exception as e:
			logger.error(f'Rate cache read failed for {pair_key}: {e}')
			return None

	async def _write_cache(self, entry: CacheEntry) -> None:
		try:
			await self.cache.set(entry)
		except Exception as e:
			logger.error(f'Rate cache write failed for {entry.pair_key}: {e}')
