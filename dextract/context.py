from dataclasses import dataclass
from typing import Optional

from dextract.config import AppConfig
from dextract.datastore.base import DataStore
from dextract.datastore.cloudflare_kv import CloudflareKVStore
from dextract.datastore.memory import MemoryStore
from dextract.datastore.service import DataStoreService
from dextract.services.base import RouteProvider
from dextract.services.coingecko import CoinGeckoPriceAdapter, CoinGeckoTokenAdapter
from dextract.services.factory import PriceApiAdapterFactory, TokenApiAdapterFactory
from dextract.services.jupiter import JupiterRouteProvider, JupiterTokenAdapter
from dextract.services.prices import PricesService
from dextract.services.swaps import SwapsService
from dextract.services.tokens import TokensService
from dextract.utils.blockchain.registry import ChainAdapterRegistry, create_chain_adapter_registry
from dextract.utils.logging import get_logger, setup_logging
from dextract.utils.types import ApiProviderType

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Everything the services need, built once and passed down."""

    config: AppConfig
    store: DataStoreService
    chains: ChainAdapterRegistry
    price_adapters: PriceApiAdapterFactory
    token_adapters: TokenApiAdapterFactory
    route_provider: RouteProvider
    tokens: TokensService
    prices: PricesService
    swaps: SwapsService

    async def close(self) -> None:
        await self.price_adapters.close()
        await self.token_adapters.close()
        await self.route_provider.close()
        await self.store.close()


def create_store(config: AppConfig) -> DataStore:
    cache = config.cache
    if cache.backend == "cloudflare":
        return CloudflareKVStore(cache.cloudflare, default_ttl=cache.default_ttl)
    return MemoryStore(default_ttl=cache.default_ttl)


def create_app_context(
    config: Optional[AppConfig] = None, configure_logging: bool = True
) -> AppContext:
    config = config or AppConfig()
    if configure_logging:
        setup_logging(config.logging)

    store = DataStoreService(create_store(config), single_flight=config.cache.single_flight)
    chains = create_chain_adapter_registry()

    price_adapters = PriceApiAdapterFactory(config.default_price_provider)
    price_adapters.register(ApiProviderType.COINGECKO, CoinGeckoPriceAdapter(config.coingecko))

    token_adapters = TokenApiAdapterFactory(config.default_token_provider)
    token_adapters.register(ApiProviderType.COINGECKO, CoinGeckoTokenAdapter(config.coingecko))
    token_adapters.register(ApiProviderType.JUPITER, JupiterTokenAdapter(config.jupiter_tokens))

    route_provider = JupiterRouteProvider(config.jupiter_quotes)

    tokens = TokensService(store, chains, token_adapters)
    prices = PricesService(store, chains, price_adapters, price_ttl=config.cache.price_ttl)
    swaps = SwapsService(store, tokens, route_provider, quote_ttl=config.cache.quote_ttl)

    logger.info(
        f"Context ready: {config.cache.backend} store, "
        f"price providers {price_adapters.list_providers()}, "
        f"token providers {token_adapters.list_providers()}"
    )
    return AppContext(
        config=config,
        store=store,
        chains=chains,
        price_adapters=price_adapters,
        token_adapters=token_adapters,
        route_provider=route_provider,
        tokens=tokens,
        prices=prices,
        swaps=swaps,
    )
