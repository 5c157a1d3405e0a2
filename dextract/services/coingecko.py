from datetime import datetime, timezone
from typing import List, Optional

from aiocache import Cache, cached
from pydantic import ValidationError

from dextract.exceptions import UpstreamRequestFailedError
from dextract.models.schemas.chain import ChainIdentifier
from dextract.models.schemas.price import PriceList, TokenPrice
from dextract.models.schemas.token import Token, TokenList
from dextract.utils.blockchain.evm import is_evm_address
from dextract.utils.blockchain.sol import is_solana_address
from dextract.utils.chains.data import CHAIN_CONFIG_MAP
from dextract.utils.chains.queries import get_chain_alias
from dextract.utils.coingecko.types import (
    CoinDetail,
    CoinDetailParams,
    MarketCoin,
    MarketData,
    MarketsParams,
    SearchResult,
)
from dextract.utils.common import now_ms
from dextract.utils.logging import get_logger
from dextract.utils.types import ApiProviderType, ChainFamily, ServiceType
from .base import BaseApiAdapter, PriceApiAdapter, TokenApiAdapter
from .fallback import GENERIC_PRICE_USD, generic_price, generic_prices

logger = get_logger(__name__)

DEFAULT_DECIMALS = 18

UPSTREAM_ERRORS = (UpstreamRequestFailedError, ValidationError)


class CoinGeckoAdapter(BaseApiAdapter):
    """Shared CoinGecko plumbing: chain aliases, markets, coin lookups and search."""

    PROVIDER = ApiProviderType.COINGECKO.value
    API_KEY_HEADER = "x-cg-pro-api-key"

    def _api_key_value(self, api_key: str) -> str:
        return api_key

    def _platform_id(self, chain_id: ChainIdentifier) -> str:
        return get_chain_alias(chain_id, ServiceType.COINGECKO)

    def _category(self, chain_id: ChainIdentifier) -> str:
        return get_chain_alias(chain_id, ServiceType.COINGECKO_CATEGORY)

    def _is_contract_address(self, chain_id: ChainIdentifier, token_id: str) -> bool:
        config = CHAIN_CONFIG_MAP.get(chain_id)
        if config is None:
            return False
        if config.family == ChainFamily.EVM:
            return is_evm_address(token_id)
        return is_solana_address(token_id)

    async def _fetch_markets(
        self, category: str, price_change: Optional[List[str]] = None
    ) -> List[MarketCoin]:
        params = MarketsParams(category=category, price_change_percentage=price_change)
        data = await self.request("/coins/markets", params.to_query_params())
        return [MarketCoin.model_validate(coin) for coin in data or []]

    async def _fetch_coin(self, chain_id: ChainIdentifier, token_id: str) -> CoinDetail:
        """Coin detail by contract address when the id is one, by CoinGecko id otherwise."""
        if self._is_contract_address(chain_id, token_id):
            path = f"/coins/{self._platform_id(chain_id)}/contract/{token_id}"
        else:
            path = f"/coins/{token_id}"

        data = await self.request(path, CoinDetailParams().to_query_params())
        return CoinDetail.model_validate(data)

    @cached(
        ttl=15 * 60,
        cache=Cache.MEMORY,
        key_builder=lambda f, self, query: f"coingecko_search:{self.config.base_url}:{query.lower()}",
    )
    async def _search(self, query: str) -> Optional[str]:
        """Resolve a free-form query to a CoinGecko id, preferring an exact symbol match."""
        data = await self.request("/search", {"query": query})
        result = SearchResult.model_validate(data or {})
        if not result.coins:
            return None

        exact = next((c for c in result.coins if c.symbol.lower() == query.lower()), None)
        return (exact or result.coins[0]).id


class CoinGeckoPriceAdapter(CoinGeckoAdapter, PriceApiAdapter):
    """CoinGecko prices. Falls back to generic prices on upstream failure."""

    @staticmethod
    def _to_price(coin: MarketCoin, timestamp: int) -> TokenPrice:
        return TokenPrice(
            address=coin.id,
            price_usd=coin.current_price if coin.current_price is not None else GENERIC_PRICE_USD,
            timestamp=timestamp,
            change_24h=coin.price_change_percentage_24h,
            change_7d=coin.price_change_percentage_7d_in_currency,
            volume_24h=coin.total_volume,
            market_cap=coin.market_cap,
            degraded=coin.current_price is None,
        )

    async def get_list(self, chain_id: ChainIdentifier) -> PriceList:
        category = self._category(chain_id)

        try:
            coins = await self._fetch_markets(category, price_change=["24h", "7d"])
        except UPSTREAM_ERRORS as e:
            logger.error(f"Error fetching prices for {chain_id}, serving generic prices: {e}")
            return generic_prices()

        now = now_ms()
        return PriceList(
            prices={coin.id: self._to_price(coin, now) for coin in coins},
            updated_at=now,
        )

    async def get_one(self, chain_id: ChainIdentifier, token_id: str) -> Optional[TokenPrice]:
        self._platform_id(chain_id)

        try:
            coin = await self._fetch_coin(chain_id, token_id)
        except UPSTREAM_ERRORS as e:
            logger.warning(f"Error fetching price for {token_id} on {chain_id}: {e}")
            return generic_price(token_id)

        price_usd = coin.usd("current_price")
        if price_usd is None:
            return generic_price(token_id)

        market_data = coin.market_data or MarketData()
        return TokenPrice(
            address=token_id if self._is_contract_address(chain_id, token_id) else coin.id,
            price_usd=price_usd,
            timestamp=now_ms(),
            change_24h=market_data.price_change_percentage_24h,
            change_7d=market_data.price_change_percentage_7d,
            volume_24h=coin.usd("total_volume"),
            market_cap=coin.usd("market_cap"),
        )


class CoinGeckoTokenAdapter(CoinGeckoAdapter, TokenApiAdapter):
    """CoinGecko token metadata.

    Market listings carry no contract data, so listed tokens use the
    CoinGecko id as their address and a default of 18 decimals.
    """

    async def get_list(self, chain_id: ChainIdentifier) -> TokenList:
        platform_id = self._platform_id(chain_id)
        category = self._category(chain_id)
        list_name = f"{platform_id.replace('-', ' ').title()} Tokens"

        try:
            coins = await self._fetch_markets(category)
        except UPSTREAM_ERRORS as e:
            logger.error(f"Error fetching token list for {chain_id}: {e}")
            return TokenList(name=list_name, timestamp=_iso_now(), degraded=True)

        tokens = [
            Token(
                address=coin.id,
                symbol=coin.symbol.upper(),
                name=coin.name,
                decimals=DEFAULT_DECIMALS,
                logo_uri=coin.image,
                chain_type=chain_id.chain,
                network_type=chain_id.network,
            )
            for coin in coins
        ]
        return TokenList(name=list_name, tokens=tokens, timestamp=_iso_now())

    def _to_token(self, chain_id: ChainIdentifier, coin: CoinDetail) -> Token:
        platform_id = self._platform_id(chain_id)

        decimals = None
        detail_platform = coin.detail_platforms.get(platform_id)
        if detail_platform:
            decimals = detail_platform.decimal_place
        if decimals is None and coin.asset_platform_id is None:
            native = CHAIN_CONFIG_MAP[chain_id].native_currency
            if native and native.symbol.lower() == coin.symbol.lower():
                decimals = native.decimals

        address = (coin.platforms or {}).get(platform_id) or coin.id
        return Token(
            address=address,
            symbol=coin.symbol.upper(),
            name=coin.name,
            decimals=decimals if decimals is not None else DEFAULT_DECIMALS,
            logo_uri=coin.image.large if coin.image else None,
            chain_type=chain_id.chain,
            network_type=chain_id.network,
        )

    async def get_one(self, chain_id: ChainIdentifier, token_id: str) -> Optional[Token]:
        self._platform_id(chain_id)

        try:
            return self._to_token(chain_id, await self._fetch_coin(chain_id, token_id))
        except UPSTREAM_ERRORS as e:
            logger.debug(f"Direct lookup of {token_id} failed, searching: {e}")

        try:
            coin_id = await self._search(token_id)
            if coin_id is None:
                return None
            data = await self.request(f"/coins/{coin_id}", CoinDetailParams().to_query_params())
            return self._to_token(chain_id, CoinDetail.model_validate(data))
        except UPSTREAM_ERRORS as e:
            logger.warning(f"Error searching token {token_id} on {chain_id}: {e}")
            return None


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()
