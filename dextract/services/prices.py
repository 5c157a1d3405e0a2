from typing import Dict, Optional

from dextract.datastore.service import DataStoreService
from dextract.models.schemas.chain import ChainIdentifier
from dextract.models.schemas.price import PriceList, TokenPrice
from dextract.utils.blockchain.base import ChainAdapter
from dextract.utils.blockchain.registry import ChainAdapterRegistry
from dextract.utils.logging import get_logger
from .base import PriceApiAdapter
from .factory import PriceApiAdapterFactory
from .fallback import generic_price

logger = get_logger(__name__)


class PricesService:
    """Short-lived price cache per chain.

    Aggregate lists go through the cache-aside path and are cached even when
    degraded, since the TTL is short. Degraded point prices are returned but
    never cached, and `refresh` never overwrites good data with fallback data.
    """

    NAMESPACE = "prices"
    PRICE_TTL = 5 * 60

    def __init__(
        self,
        store: DataStoreService,
        chain_registry: ChainAdapterRegistry,
        price_adapters: PriceApiAdapterFactory,
        price_ttl: float = PRICE_TTL,
        provider: Optional[str] = None,
    ):
        self.store = store
        self.chain_registry = chain_registry
        self.price_adapters = price_adapters
        self.price_ttl = price_ttl
        self.provider = provider

    def _provider(self) -> PriceApiAdapter:
        if self.provider:
            return self.price_adapters.get(self.provider)
        return self.price_adapters.get_default()

    def _chain_adapter(self, chain_id: ChainIdentifier) -> ChainAdapter:
        return self.chain_registry.resolve(chain_id.chain, chain_id.network)

    @staticmethod
    def _prices_key(chain_id: ChainIdentifier) -> str:
        return f"{chain_id.key}:prices"

    @staticmethod
    def _price_key(chain_id: ChainIdentifier, token_id: str) -> str:
        return f"{chain_id.key}:price:{token_id}"

    async def _fetch_prices(self, chain_id: ChainIdentifier) -> PriceList:
        adapter = self._chain_adapter(chain_id)
        price_list = await self._provider().get_list(chain_id)

        prices: Dict[str, TokenPrice] = {}
        for price in price_list.prices.values():
            address = adapter.normalize_address(price.address)
            prices[address] = price.model_copy(update={"address": address})

        return price_list.model_copy(update={"prices": prices})

    async def get_all(self, chain, network) -> PriceList:
        chain_id = ChainIdentifier.of(chain, network)
        self._chain_adapter(chain_id)

        cached = await self.store.get_or_set(
            self._prices_key(chain_id),
            lambda: self._fetch_prices(chain_id),
            namespace=self.NAMESPACE,
            ttl=self.price_ttl,
        )
        return PriceList.model_validate(cached)

    async def get_one(self, chain, network, token_id: str) -> TokenPrice:
        """Price of one token. Falls back to a generic, degraded price."""
        chain_id = ChainIdentifier.of(chain, network)
        normalized = self._chain_adapter(chain_id).normalize_address(token_id)
        key = self._price_key(chain_id, normalized)

        cached = await self.store.get(key, namespace=self.NAMESPACE)
        if cached is not None:
            return TokenPrice.model_validate(cached)

        price = (await self.get_all(chain_id.chain, chain_id.network)).prices.get(normalized)
        if price is None:
            price = await self._provider().get_one(chain_id, normalized)

        if price is None:
            logger.warning(f"No price for {token_id} on {chain_id}, serving generic price")
            return generic_price(normalized)

        if not price.degraded:
            await self.store.set(key, price, namespace=self.NAMESPACE, ttl=self.price_ttl)
        return price

    async def refresh(self, chain, network) -> PriceList:
        """Re-fetch and overwrite the aggregate and per-token entries."""
        chain_id = ChainIdentifier.of(chain, network)
        price_list = await self._fetch_prices(chain_id)

        if price_list.degraded:
            logger.warning(f"Price refresh for {chain_id} returned fallback data, keeping cache")
            return price_list

        for address, price in price_list.prices.items():
            await self.store.set(
                self._price_key(chain_id, address), price, namespace=self.NAMESPACE, ttl=self.price_ttl
            )
        await self.store.set(
            self._prices_key(chain_id), price_list, namespace=self.NAMESPACE, ttl=self.price_ttl
        )

        logger.info(f"Refreshed {len(price_list.prices)} prices for {chain_id}")
        return price_list
