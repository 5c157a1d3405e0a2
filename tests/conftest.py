from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from dextract.datastore.memory import MemoryStore
from dextract.datastore.service import DataStoreService
from dextract.models.schemas.chain import ChainIdentifier
from dextract.models.schemas.price import PriceList, TokenPrice
from dextract.models.schemas.swap import SwapRoute
from dextract.models.schemas.token import Token, TokenList
from dextract.services.base import PriceApiAdapter, RouteProvider, TokenApiAdapter
from dextract.services.factory import PriceApiAdapterFactory, TokenApiAdapterFactory
from dextract.utils.blockchain.registry import create_chain_adapter_registry
from dextract.utils.common import now_ms

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
SOL_MINT = "So11111111111111111111111111111111111111112"


def make_token(address: str, symbol: str, chain: str = "ethereum", network: str = "mainnet", **kwargs) -> Token:
    return Token(
        address=address,
        symbol=symbol,
        name=kwargs.pop("name", symbol.title()),
        decimals=kwargs.pop("decimals", 18),
        chain_type=chain,
        network_type=network,
        **kwargs,
    )


def make_price(address: str, price_usd: float = 1.0, degraded: bool = False) -> TokenPrice:
    return TokenPrice(address=address, price_usd=price_usd, timestamp=now_ms(), degraded=degraded)


class FakeTokenAdapter(TokenApiAdapter):
    def __init__(self, tokens: Optional[List[Token]] = None, extra: Optional[Dict[str, Token]] = None):
        self.tokens = list(tokens or [])
        self.extra = dict(extra or {})
        self.list_calls = 0
        self.one_calls: List[str] = []

    async def get_list(self, chain_id: ChainIdentifier) -> TokenList:
        self.list_calls += 1
        return TokenList(name="Fake Tokens", tokens=list(self.tokens), timestamp="2024-01-01T00:00:00Z")

    async def get_one(self, chain_id: ChainIdentifier, token_id: str) -> Optional[Token]:
        self.one_calls.append(token_id)
        return self.extra.get(token_id)


class FakePriceAdapter(PriceApiAdapter):
    def __init__(self, prices: Optional[List[TokenPrice]] = None, degraded: bool = False):
        self.prices = list(prices or [])
        self.degraded = degraded
        self.extra: Dict[str, TokenPrice] = {}
        self.list_calls = 0
        self.one_calls: List[str] = []

    async def get_list(self, chain_id: ChainIdentifier) -> PriceList:
        self.list_calls += 1
        return PriceList(
            prices={p.address: p for p in self.prices},
            updated_at=now_ms(),
            degraded=self.degraded,
        )

    async def get_one(self, chain_id: ChainIdentifier, token_id: str) -> Optional[TokenPrice]:
        self.one_calls.append(token_id)
        return self.extra.get(token_id)


class FakeRouteProvider(RouteProvider):
    def __init__(self, amounts: Optional[List[str]] = None):
        self.amounts = list(amounts or [])
        self.calls = []

    async def get_routes(self, chain_id, from_token, to_token, amount) -> List[SwapRoute]:
        self.calls.append((chain_id, from_token, to_token, amount))
        return [
            SwapRoute(
                from_token=from_token,
                to_token=to_token,
                from_amount=amount,
                to_amount=to_amount,
                path=[from_token, to_token],
                providers=[f"dex-{i}"],
            )
            for i, to_amount in enumerate(self.amounts)
        ]


@pytest.fixture
def store():
    return DataStoreService(MemoryStore())


@pytest.fixture
def registry():
    return create_chain_adapter_registry()


@pytest.fixture
def token_adapter():
    return FakeTokenAdapter([make_token(USDC, "USDC", decimals=6), make_token(WETH, "WETH")])


@pytest.fixture
def token_factory(token_adapter):
    factory = TokenApiAdapterFactory("fake")
    factory.register("fake", token_adapter)
    return factory


@pytest.fixture
def price_adapter():
    return FakePriceAdapter([make_price(USDC, 1.0), make_price(WETH, 3000.0)])


@pytest.fixture
def price_factory(price_adapter):
    factory = PriceApiAdapterFactory("fake")
    factory.register("fake", price_adapter)
    return factory


@asynccontextmanager
async def serve(app: web.Application):
    """Run an aiohttp app on a local port and yield its base URL."""
    server = TestServer(app)
    await server.start_server()
    try:
        yield str(server.make_url("")).rstrip("/")
    finally:
        await server.close()
