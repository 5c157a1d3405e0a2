from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel

from dextract.utils.common import now_ms

# Marks an omitted ttl, since ttl=None already means "never expires"
SENTINEL = object()


class CacheEntry(BaseModel):
    value: Any
    expires_at: Optional[int] = None  # epoch milliseconds

    def is_expired(self, now: Optional[int] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < (now if now is not None else now_ms())


class DataStore(ABC):
    """Namespaced, TTL-aware key-value store.

    Keys are stored as "{namespace}:{key}". Expired entries are removed lazily
    by the read that finds them; there is no background sweep.

    TTL handling on `set`:
        omitted -> `default_ttl` seconds
        None    -> never expires
        number  -> seconds (0 expires immediately)
    """

    DEFAULT_NAMESPACE = "default"
    DEFAULT_TTL = 24 * 60 * 60

    def __init__(self, default_ttl: Optional[float] = DEFAULT_TTL):
        self.default_ttl = default_ttl

    def full_key(self, key: str, namespace: Optional[str] = None) -> str:
        return f"{namespace or self.DEFAULT_NAMESPACE}:{key}"

    def _make_entry(self, value: Any, ttl=SENTINEL) -> CacheEntry:
        if ttl is SENTINEL:
            ttl = self.default_ttl
        expires_at = now_ms() + int(ttl * 1000) if ttl is not None else None
        return CacheEntry(value=value, expires_at=expires_at)

    @abstractmethod
    async def get(self, key: str, namespace: Optional[str] = None) -> Optional[Any]:
        """Value, or None on a miss or an expired entry."""

    @abstractmethod
    async def set(self, key: str, value: Any, namespace: Optional[str] = None, ttl=SENTINEL) -> bool:
        pass

    @abstractmethod
    async def delete(self, key: str, namespace: Optional[str] = None) -> bool:
        pass

    async def has(self, key: str, namespace: Optional[str] = None) -> bool:
        return await self.get(key, namespace=namespace) is not None

    @abstractmethod
    async def clear(self, namespace: Optional[str] = None) -> bool:
        """Remove every key of one namespace. Without a namespace only the
        default namespace is cleared, never the whole store."""

    async def close(self) -> None:
        pass
