"""Generic fallback prices served when an upstream is unavailable.

Every value built here is flagged `degraded` so callers can tell it apart
from real market data.
"""
from dextract.models.schemas.price import PriceList, TokenPrice
from dextract.utils.common import now_ms

GENERIC_PRICE_USD = 9.99
GENERIC_PRICE_IDS = ("bitcoin", "ethereum", "solana")


def generic_price(token_id: str) -> TokenPrice:
    return TokenPrice(
        address=token_id,
        price_usd=GENERIC_PRICE_USD,
        timestamp=now_ms(),
        change_24h=1.5,
        change_7d=5.2,
        volume_24h=1000000,
        market_cap=10000000,
        degraded=True,
    )


def generic_prices() -> PriceList:
    return PriceList(
        prices={token_id: generic_price(token_id) for token_id in GENERIC_PRICE_IDS},
        updated_at=now_ms(),
        degraded=True,
    )
