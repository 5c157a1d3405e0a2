import pytest

from dextract.exceptions import NoRoutesFoundError, TokensNotFoundError
from dextract.services.swaps import SwapsService
from dextract.services.tokens import TokensService

from conftest import USDC, WETH, FakeRouteProvider


@pytest.fixture
def tokens(store, registry, token_factory):
    return TokensService(store, registry, token_factory)


@pytest.mark.asyncio
async def test_best_route_has_largest_amount(store, tokens):
    routes = FakeRouteProvider(["1000000", "1500000"])
    swaps = SwapsService(store, tokens, routes)

    quote = await swaps.get_quote("ethereum", "mainnet", USDC, WETH, "1000")

    assert quote.best_route.to_amount == "1500000"
    assert [r.to_amount for r in quote.routes] == ["1000000", "1500000"]
    assert quote.from_token == USDC.lower()
    assert quote.to_token == WETH.lower()
    assert quote.from_amount == "1000"
    assert routes.calls[0][1:] == (USDC.lower(), WETH.lower(), "1000")


@pytest.mark.asyncio
async def test_best_route_compares_integers_exactly(store, tokens):
    # differ only past float precision
    low, high = "123456789012345678901234567890", "123456789012345678901234567891"
    swaps = SwapsService(store, tokens, FakeRouteProvider([high, low, "99"]))

    quote = await swaps.get_quote("ethereum", "mainnet", "usdc", "weth", 10**18)
    assert quote.best_route.to_amount == high


@pytest.mark.asyncio
async def test_tie_keeps_first_route(store, tokens):
    swaps = SwapsService(store, tokens, FakeRouteProvider(["5", "5"]))
    quote = await swaps.get_quote("ethereum", "mainnet", USDC, WETH, "1")
    assert quote.best_route.providers == ["dex-0"]


@pytest.mark.asyncio
async def test_quote_is_cached_per_parameters(store, tokens):
    routes = FakeRouteProvider(["1"])
    swaps = SwapsService(store, tokens, routes)

    first = await swaps.get_quote("ethereum", "mainnet", USDC, WETH, "1")
    again = await swaps.get_quote("ethereum", "mainnet", USDC.lower(), WETH.lower(), "1")
    await swaps.get_quote("ethereum", "mainnet", USDC, WETH, "2")

    assert again == first
    assert len(routes.calls) == 2
    assert await store.has(f"ethereum:mainnet:quote:{USDC.lower()}:{WETH.lower()}:1", namespace="swaps")
    entry = await store.store.cache.get(f"swaps:ethereum:mainnet:quote:{USDC.lower()}:{WETH.lower()}:1")
    assert entry.expires_at - first.updated_at <= 30 * 1000 + 2000


@pytest.mark.asyncio
async def test_missing_token(store, tokens):
    routes = FakeRouteProvider(["1"])
    swaps = SwapsService(store, tokens, routes)

    with pytest.raises(TokensNotFoundError, match="nope"):
        await swaps.get_quote("ethereum", "mainnet", USDC, "nope", "1")
    assert routes.calls == []
    assert not await store.has(f"ethereum:mainnet:quote:{USDC.lower()}:nope:1", namespace="swaps")


@pytest.mark.asyncio
async def test_no_routes(store, tokens):
    swaps = SwapsService(store, tokens, FakeRouteProvider([]))
    with pytest.raises(NoRoutesFoundError):
        await swaps.get_quote("ethereum", "mainnet", USDC, WETH, "1")
