from enum import Enum
from typing import Dict, Generic, List, TypeVar, Union

from dextract.exceptions import AdapterNotFoundError
from dextract.utils.logging import get_logger
from .base import PriceApiAdapter, TokenApiAdapter

T = TypeVar("T")

logger = get_logger(__name__)


def _provider_name(name: Union[str, Enum]) -> str:
    return name.value if isinstance(name, Enum) else name


class ApiAdapterFactory(Generic[T]):
    """Provider adapters for one capability, keyed by provider name, with a default."""

    def __init__(self, default_provider: str):
        self.default_provider = _provider_name(default_provider)
        self._adapters: Dict[str, T] = {}

    def register(self, name: str, adapter: T) -> None:
        name = _provider_name(name)
        if name in self._adapters:
            logger.warning(f"Replacing adapter registered for provider {name}")
        self._adapters[name] = adapter

    def get(self, name: str) -> T:
        adapter = self._adapters.get(_provider_name(name))
        if adapter is None:
            raise AdapterNotFoundError(f"No adapter registered for provider {name}")
        return adapter

    def get_default(self) -> T:
        return self.get(self.default_provider)

    def list_providers(self) -> List[str]:
        return list(self._adapters.keys())

    def all_adapters(self) -> List[T]:
        return list(self._adapters.values())

    async def close(self) -> None:
        for adapter in self._adapters.values():
            await adapter.close()


class PriceApiAdapterFactory(ApiAdapterFactory[PriceApiAdapter]):
    pass


class TokenApiAdapterFactory(ApiAdapterFactory[TokenApiAdapter]):
    pass
