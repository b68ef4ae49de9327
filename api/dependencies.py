import logging

import httpx
from redis.asyncio import Redis

from application.services import RateResolver
from config.settings import Settings, get_settings
from infrastructure.cache.base import RateCache
from infrastructure.cache.memory_cache import InMemoryRateCache
from infrastructure.cache.redis_cache import RedisRateCache
from infrastructure.providers import ExchangeRateProvider, build_providers

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	http_client: httpx.AsyncClient | None = None
	redis_client: Redis | None = None
	rate_cache: RateCache | None = None
	providers: list[ExchangeRateProvider] | None = None
	rate_resolver: RateResolver | None = None


deps = AppDependencies()


def build_rate_cache(settings: Settings) -> RateCache:
	if settings.CACHE_BACKEND == 'redis':
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		logger.info('Using redis rate cache')
		return RedisRateCache(deps.redis_client)
	return InMemoryRateCache()


def init_dependencies(settings: Settings | None = None) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = settings or get_settings()

	deps.http_client = httpx.AsyncClient(
		timeout=httpx.Timeout(settings.PROVIDER_TIMEOUT_SECONDS),
		headers={'accept': 'application/json'},
		follow_redirects=True,
	)
	deps.rate_cache = build_rate_cache(settings)
	deps.providers = build_providers(deps.http_client, settings.provider_names)
	deps.rate_resolver = RateResolver(
		cache=deps.rate_cache,
		providers=deps.providers,
		freshness_window_ms=settings.RATE_CACHE_TTL_SECONDS * 1000,
		single_flight=settings.RATE_SINGLE_FLIGHT,
	)
	logger.info(f'Rate providers in priority order: {[p.name for p in deps.providers]}')
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.http_client:
		await deps.http_client.aclose()
	if deps.redis_client:
		await deps.redis_client.aclose()

	deps.http_client = None
	deps.redis_client = None
	deps.rate_cache = None
	deps.providers = None
	deps.rate_resolver = None

	logger.info('Cleanup complete')


def get_rate_resolver() -> RateResolver:
	if deps.rate_resolver is None:
		raise RuntimeError('Rate resolver not initialized')
	return deps.rate_resolver
