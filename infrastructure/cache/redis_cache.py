import json
import logging

from redis import asyncio as redis

from domain.exceptions.currency import CacheError
from domain.models.currency import CacheEntry

logger = logging.getLogger(__name__)


class RedisRateCache:
    """Rate cache shared between worker processes.

    Keys carry no TTL: a stale entry is still needed for the degraded
    fallback when every provider is down.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "rate"):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_rate_key(self, pair_key: str) -> str:
        return f"{self.key_prefix}:{pair_key}"

    async def get(self, pair_key: str) -> CacheEntry | None:
        data = await self.redis.get(self._make_rate_key(pair_key))

        if not data:
            return None

        try:
            rate_dict = json.loads(data)
            return CacheEntry(
                pair_key=rate_dict["pair_key"],
                rate=float(rate_dict["rate"]),
                fetched_at=int(rate_dict["fetched_at"]),
                source_name=rate_dict["source_name"],
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise CacheError(f"Invalid json data for {pair_key}: {e}") from e

    async def set(self, entry: CacheEntry) -> None:
        # Read-then-write is not atomic; two workers racing on a miss both
        # hold a fresh rate, so either write is acceptable.
        try:
            current = await self.get(entry.pair_key)
        except CacheError:
            logger.warning(f"Overwriting undecodable cache entry for {entry.pair_key}")
            current = None
        if current is not None and current.fetched_at > entry.fetched_at:
            return

        rate_dict = {
            "pair_key": entry.pair_key,
            "rate": entry.rate,
            "fetched_at": entry.fetched_at,
            "source_name": entry.source_name,
        }
        await self.redis.set(self._make_rate_key(entry.pair_key), json.dumps(rate_dict))

    async def close(self) -> None:
        await self.redis.aclose()
