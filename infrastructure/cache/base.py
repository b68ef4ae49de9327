from typing import Protocol

from domain.models.currency import CacheEntry


class RateCache(Protocol):
    """Latest-rate store keyed by pair key. Entries are replaced, never expired."""

    async def get(self, pair_key: str) -> CacheEntry | None:
        ...

    async def set(self, entry: CacheEntry) -> None:
        ...
