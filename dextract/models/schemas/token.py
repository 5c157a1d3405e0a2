from typing import List, Optional

from pydantic import BaseModel, Field

from dextract.models.schemas.chain import ChainType, NetworkType


class Token(BaseModel):
    address: str = Field(description="Chain-specific address, normalized by the chain adapter")
    symbol: str
    name: str
    decimals: int = Field(ge=0)
    logo_uri: Optional[str] = None
    tags: Optional[List[str]] = None
    chain_type: ChainType
    network_type: NetworkType


class TokenListVersion(BaseModel):
    major: int = 1
    minor: int = 0
    patch: int = 0


class TokenList(BaseModel):
    """Token list as returned by a token provider."""

    name: str
    logo_uri: Optional[str] = None
    tokens: List[Token] = Field(default_factory=list)
    timestamp: str
    version: TokenListVersion = Field(default_factory=TokenListVersion)
    degraded: bool = Field(default=False, description="True when built from fallback data")
