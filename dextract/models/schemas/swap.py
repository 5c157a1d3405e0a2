from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SwapRoute(BaseModel):
    from_token: str
    to_token: str
    from_amount: str
    to_amount: str
    price_impact: float = 0.0
    path: List[str] = Field(default_factory=list)
    providers: List[str] = Field(default_factory=list)
    estimated_gas: Optional[str] = None

    @field_validator("from_amount", "to_amount", mode="before")
    @classmethod
    def validate_amount(cls, v) -> str:
        """Amounts are raw on-chain integers carried as strings."""
        v = str(v).strip()
        if not (v.isascii() and v.isdigit()):
            raise ValueError(f"Amount must be a non-negative integer string, got {v!r}")
        return v


class SwapQuote(BaseModel):
    routes: List[SwapRoute]
    best_route: SwapRoute
    from_token: str
    to_token: str
    from_amount: str
    updated_at: int = Field(description="Epoch milliseconds")
