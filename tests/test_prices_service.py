import pytest

from dextract.models.schemas.price import PriceList
from dextract.services.fallback import GENERIC_PRICE_USD
from dextract.services.prices import PricesService

from conftest import USDC, WETH, make_price

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


@pytest.fixture
def prices(store, registry, price_factory):
    return PricesService(store, registry, price_factory)


@pytest.mark.asyncio
async def test_get_all_normalizes_and_caches_with_ttl(prices, store, price_adapter):
    price_list = await prices.get_all("ethereum", "mainnet")

    assert set(price_list.prices) == {USDC.lower(), WETH.lower()}
    assert price_list.prices[WETH.lower()].address == WETH.lower()

    await prices.get_all("ethereum", "mainnet")
    assert price_adapter.list_calls == 1

    entry = await store.store.cache.get("prices:ethereum:mainnet:prices")
    assert entry.expires_at is not None
    assert entry.expires_at - price_list.updated_at <= 5 * 60 * 1000 + 2000


@pytest.mark.asyncio
async def test_get_one_from_list_then_cached(prices, store, price_adapter):
    price = await prices.get_one("ethereum", "mainnet", WETH)

    assert price.price_usd == 3000.0
    assert await store.has(f"ethereum:mainnet:price:{WETH.lower()}", namespace="prices")
    assert price_adapter.one_calls == []


@pytest.mark.asyncio
async def test_get_one_point_query(prices, store, price_adapter):
    price_adapter.extra[DAI.lower()] = make_price(DAI.lower(), 0.999)

    price = await prices.get_one("ethereum", "mainnet", DAI)

    assert price.price_usd == 0.999
    assert price_adapter.one_calls == [DAI.lower()]
    assert await store.has(f"ethereum:mainnet:price:{DAI.lower()}", namespace="prices")


@pytest.mark.asyncio
async def test_get_one_generic_fallback_is_not_cached(prices, store):
    price = await prices.get_one("ethereum", "mainnet", DAI)

    assert price.degraded
    assert price.price_usd == GENERIC_PRICE_USD
    assert price.address == DAI.lower()
    assert not await store.has(f"ethereum:mainnet:price:{DAI.lower()}", namespace="prices")


@pytest.mark.asyncio
async def test_degraded_point_price_is_not_cached(prices, store, price_adapter):
    price_adapter.extra[DAI.lower()] = make_price(DAI.lower(), GENERIC_PRICE_USD, degraded=True)

    assert (await prices.get_one("ethereum", "mainnet", DAI)).degraded
    assert not await store.has(f"ethereum:mainnet:price:{DAI.lower()}", namespace="prices")


@pytest.mark.asyncio
async def test_refresh_overwrites_aggregate_and_entries(prices, store, price_adapter):
    await prices.get_all("ethereum", "mainnet")
    price_adapter.prices = [make_price(USDC, 1.01), make_price(DAI, 1.0)]

    refreshed = await prices.refresh("ethereum", "mainnet")

    assert price_adapter.list_calls == 2
    assert set(refreshed.prices) == {USDC.lower(), DAI.lower()}
    cached = PriceList.model_validate(await store.get("ethereum:mainnet:prices", namespace="prices"))
    assert cached.prices[USDC.lower()].price_usd == 1.01
    single = await store.get(f"ethereum:mainnet:price:{DAI.lower()}", namespace="prices")
    assert single.price_usd == 1.0
    assert (await prices.get_all("ethereum", "mainnet")).prices.keys() == refreshed.prices.keys()


@pytest.mark.asyncio
async def test_degraded_refresh_keeps_cache(prices, store, price_adapter):
    before = await prices.get_all("ethereum", "mainnet")
    price_adapter.degraded = True
    price_adapter.prices = [make_price("bitcoin", GENERIC_PRICE_USD, degraded=True)]

    result = await prices.refresh("ethereum", "mainnet")

    assert result.degraded
    cached = PriceList.model_validate(await store.get("ethereum:mainnet:prices", namespace="prices"))
    assert cached.prices.keys() == before.prices.keys()
