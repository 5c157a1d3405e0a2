from typing import Any, Optional

from aiocache import Cache
from aiocache.serializers import PickleSerializer

from dextract.utils.logging import get_logger
from .base import SENTINEL, DataStore

logger = get_logger(__name__)


class MemoryStore(DataStore):
    """In-process store for development and tests.

    Entries live in an aiocache memory cache keyed by "{namespace}:{key}".
    Entries are pickled on write so callers never share a live object with
    the cache. aiocache's own TTL is not used: expiry is carried by the
    CacheEntry.
    """

    def __init__(self, default_ttl: Optional[float] = DataStore.DEFAULT_TTL):
        super().__init__(default_ttl)
        self.cache = Cache(Cache.MEMORY, serializer=PickleSerializer())
        logger.info("Initializing Memory store")

    async def get(self, key: str, namespace: Optional[str] = None) -> Optional[Any]:
        full_key = self.full_key(key, namespace)
        entry = await self.cache.get(full_key)

        if entry is None:
            return None

        if entry.is_expired():
            await self.cache.delete(full_key)
            return None

        return entry.value

    async def set(self, key: str, value: Any, namespace: Optional[str] = None, ttl=SENTINEL) -> bool:
        full_key = self.full_key(key, namespace)
        return bool(await self.cache.set(full_key, self._make_entry(value, ttl)))

    async def delete(self, key: str, namespace: Optional[str] = None) -> bool:
        return bool(await self.cache.delete(self.full_key(key, namespace)))

    async def clear(self, namespace: Optional[str] = None) -> bool:
        # aiocache's memory backend drops every key starting with the prefix
        prefix = f"{namespace or self.DEFAULT_NAMESPACE}:"
        return bool(await self.cache.clear(namespace=prefix))

    async def close(self) -> None:
        await self.cache.close()
