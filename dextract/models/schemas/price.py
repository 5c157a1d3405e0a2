from typing import Dict, Optional

from pydantic import BaseModel, Field


class TokenPrice(BaseModel):
    address: str
    price_usd: float
    timestamp: int = Field(description="Capture time, epoch milliseconds")
    change_24h: Optional[float] = None
    change_7d: Optional[float] = None
    volume_24h: Optional[float] = None
    market_cap: Optional[float] = None
    degraded: bool = Field(default=False, description="True when this is a generic fallback price")


class PriceList(BaseModel):
    prices: Dict[str, TokenPrice] = Field(default_factory=dict)
    updated_at: int = Field(description="Epoch milliseconds")
    degraded: bool = False
