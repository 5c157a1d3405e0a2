from typing import Dict, Optional, List, Union
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class VSCurrency(str, Enum):
    """Supported vs currencies"""
    USD = "usd"
    EUR = "eur"
    BTC = "btc"
    ETH = "eth"


class MarketsParams(BaseModel):
    """Parameters for /coins/markets requests"""
    vs_currency: VSCurrency = VSCurrency.USD
    category: Optional[str] = None
    order: str = "market_cap_desc"
    per_page: int = Field(default=250, ge=1, le=250)
    page: int = Field(default=1, ge=1)
    sparkline: bool = False
    price_change_percentage: Optional[List[str]] = None

    def to_query_params(self) -> Dict[str, str]:
        params = {
            "vs_currency": self.vs_currency.value,
            "order": self.order,
            "per_page": str(self.per_page),
            "page": str(self.page),
            "sparkline": str(self.sparkline).lower(),
        }
        if self.category:
            params["category"] = self.category
        if self.price_change_percentage:
            params["price_change_percentage"] = ",".join(self.price_change_percentage)
        return params


class CoinDetailParams(BaseModel):
    """Parameters for /coins/{id} requests"""
    localization: bool = False
    tickers: bool = False
    market_data: bool = True
    community_data: bool = False
    developer_data: bool = False

    def to_query_params(self) -> Dict[str, str]:
        return {k: str(v).lower() for k, v in self.model_dump().items()}


class Image(BaseModel):
    thumb: Optional[str] = None
    small: Optional[str] = None
    large: Optional[str] = None


class Platform(BaseModel):
    decimal_place: Optional[int] = None
    contract_address: Optional[str] = None


class MarketData(BaseModel):
    current_price: Dict[str, Optional[float]] = Field(default_factory=dict)
    market_cap: Dict[str, Optional[float]] = Field(default_factory=dict)
    total_volume: Dict[str, Optional[float]] = Field(default_factory=dict)
    price_change_percentage_24h: Optional[float] = None
    price_change_percentage_7d: Optional[float] = None
    last_updated: Optional[str] = None

    @field_validator("current_price", "market_cap", "total_volume", mode="before")
    def ensure_dict(cls, v):
        """CoinGecko sends an empty list instead of an empty object for unlisted coins"""
        if not v:
            return {}
        return v


class MarketCoin(BaseModel):
    """Entry of /coins/markets"""
    id: str
    symbol: str
    name: str
    image: Optional[str] = None
    current_price: Optional[float] = None
    market_cap: Optional[float] = None
    total_volume: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    price_change_percentage_7d_in_currency: Optional[float] = None


class CoinDetail(BaseModel):
    """Response of /coins/{id} and /coins/{platform}/contract/{address}"""
    id: str
    symbol: str
    name: str
    asset_platform_id: Optional[str] = None
    platforms: Optional[Dict[str, Optional[str]]] = Field(default_factory=dict)
    detail_platforms: Dict[str, Platform] = Field(default_factory=dict)
    image: Optional[Image] = None
    market_data: Optional[MarketData] = None
    categories: Optional[List[Optional[str]]] = None

    @field_validator('detail_platforms', mode='before')
    def ensure_detail_platforms(cls, v):
        """Ensure detail_platforms is properly formatted"""
        if not v:
            return {}
        return v

    def usd(self, field: str) -> Optional[float]:
        if not self.market_data:
            return None
        values: Dict[str, Optional[float]] = getattr(self.market_data, field)
        return values.get(VSCurrency.USD.value)


class SearchCoin(BaseModel):
    id: str
    name: str
    symbol: str
    api_symbol: Optional[str] = None
    market_cap_rank: Optional[Union[int, float]] = None


class SearchResult(BaseModel):
    coins: List[SearchCoin] = Field(default_factory=list)
