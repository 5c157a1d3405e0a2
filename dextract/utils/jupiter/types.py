from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(name: str) -> str:
    return "".join(word.capitalize() if i else word for i, word in enumerate(name.split("_")))


class JupiterModel(BaseModel):
    """Base model for Jupiter payloads, which use camelCase on the wire"""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        alias_generator=_to_camel,
    )


class QuoteRequest(JupiterModel):
    input_mint: str
    output_mint: str
    amount: str
    slippage_bps: int = 50
    only_direct_routes: bool = False

    def to_api_params(self) -> dict:
        """Convert to API parameters"""
        params = self.model_dump(by_alias=True, exclude_none=True)
        params["onlyDirectRoutes"] = str(self.only_direct_routes).lower()
        return params


class SwapInfo(JupiterModel):
    amm_key: Optional[str] = None
    label: Optional[str] = None
    input_mint: str
    output_mint: str
    in_amount: Optional[str] = None
    out_amount: Optional[str] = None
    fee_amount: Optional[str] = None
    fee_mint: Optional[str] = None


class RoutePlanStep(JupiterModel):
    swap_info: SwapInfo
    percent: Optional[int] = None


class QuoteResponse(JupiterModel):
    input_mint: str
    in_amount: str
    output_mint: str
    out_amount: str
    other_amount_threshold: Optional[str] = None
    swap_mode: Optional[str] = None
    slippage_bps: Optional[int] = None
    price_impact_pct: float = 0.0
    route_plan: List[RoutePlanStep] = Field(default_factory=list)
    context_slot: Optional[int] = None
    time_taken: Optional[float] = None


class JupiterToken(JupiterModel):
    address: str
    name: str
    symbol: str
    decimals: int
    # the token API spells this one logoURI
    logo_uri: Optional[str] = Field(default=None, alias="logoURI")
    tags: List[str] = Field(default_factory=list)
