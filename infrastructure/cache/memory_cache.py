from domain.models.currency import CacheEntry


class InMemoryRateCache:
    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, pair_key: str) -> CacheEntry | None:
        return self._entries.get(pair_key)

    async def set(self, entry: CacheEntry) -> None:
        current = self._entries.get(entry.pair_key)
        if current is not None and current.fetched_at > entry.fetched_at:
            return
        self._entries[entry.pair_key] = entry

    def __len__(self) -> int:
        return len(self._entries)
