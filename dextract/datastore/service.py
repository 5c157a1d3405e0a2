import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from dextract.utils.logging import get_logger
from .base import SENTINEL, DataStore

T = TypeVar("T")

logger = get_logger(__name__)


class DataStoreService:
    """Facade over a DataStore backend with the cache-aside helper.

    With `single_flight` enabled, concurrent misses on the same key share one
    factory call instead of each hitting the upstream.
    """

    def __init__(self, store: DataStore, single_flight: bool = False):
        self.store = store
        self.single_flight = single_flight
        self._in_flight: Dict[str, "asyncio.Future[Any]"] = {}

    async def get(self, key: str, namespace: Optional[str] = None) -> Optional[Any]:
        return await self.store.get(key, namespace=namespace)

    async def set(self, key: str, value: Any, namespace: Optional[str] = None, ttl=SENTINEL) -> bool:
        return await self.store.set(key, value, namespace=namespace, ttl=ttl)

    async def delete(self, key: str, namespace: Optional[str] = None) -> bool:
        return await self.store.delete(key, namespace=namespace)

    async def has(self, key: str, namespace: Optional[str] = None) -> bool:
        return await self.store.has(key, namespace=namespace)

    async def clear(self, namespace: Optional[str] = None) -> bool:
        return await self.store.clear(namespace=namespace)

    async def close(self) -> None:
        await self.store.close()

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[T]],
        namespace: Optional[str] = None,
        ttl=SENTINEL,
    ) -> T:
        """Return the cached value, or run `factory`, cache its result and return it.

        The factory is never called on a hit. Errors raised by the factory
        propagate unchanged and nothing is cached.
        """
        cached = await self.store.get(key, namespace=namespace)
        if cached is not None:
            return cached

        if not self.single_flight:
            return await self._populate(key, factory, namespace, ttl)

        flight_key = self.store.full_key(key, namespace)
        pending = self._in_flight.get(flight_key)
        if pending is None:
            pending = asyncio.ensure_future(self._populate(key, factory, namespace, ttl))
            self._in_flight[flight_key] = pending
            pending.add_done_callback(lambda _: self._in_flight.pop(flight_key, None))
        else:
            logger.debug(f"Joining in-flight fetch for {flight_key}")

        return await asyncio.shield(pending)

    async def _populate(self, key, factory, namespace, ttl):
        value = await factory()
        await self.store.set(key, value, namespace=namespace, ttl=ttl)
        return value
