from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from dextract.exceptions import UnsupportedChainError
from dextract.utils.types import ChainFamily, ServiceType


class ChainType(str, Enum):
    ETHEREUM = "ethereum"
    SOLANA = "solana"
    BSC = "bsc"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    AVALANCHE = "avalanche"


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"
    LOCALNET = "localnet"


class ChainIdentifier(BaseModel):
    """Chain + network pair. Immutable and hashable, compared field by field."""

    model_config = ConfigDict(frozen=True)

    chain: ChainType
    network: NetworkType

    @classmethod
    def of(cls, chain, network) -> "ChainIdentifier":
        """Build from enums or raw strings.

        Raises:
            UnsupportedChainError: If either value is not a known chain/network
        """
        if isinstance(chain, ChainIdentifier):
            return chain
        try:
            return cls(chain=chain, network=network)
        except ValidationError as e:
            raise UnsupportedChainError(
                f"Unsupported chain: {chain}:{network}", chain=str(chain)
            ) from e

    @classmethod
    def parse(cls, key: str) -> "ChainIdentifier":
        """Parse a "chain:network" string."""
        chain, _, network = key.partition(":")
        return cls.of(chain, network)

    @property
    def key(self) -> str:
        return f"{self.chain.value}:{self.network.value}"

    def __str__(self) -> str:
        return self.key


class NativeCurrency(BaseModel):
    name: str
    symbol: str
    decimals: int


class ChainConfig(BaseModel):
    """Static per-(chain, network) metadata. RPC endpoints are ordered, first is preferred."""

    model_config = ConfigDict(frozen=True)

    name: str
    chain_type: ChainType
    network_type: NetworkType
    family: ChainFamily
    rpc_urls: List[str]
    explorer_url: Optional[str] = None
    native_currency: Optional[NativeCurrency] = None
    aliases: Optional[Dict[ServiceType, str]] = None

    @property
    def identifier(self) -> ChainIdentifier:
        return ChainIdentifier(chain=self.chain_type, network=self.network_type)

    def get_alias(self, service: ServiceType) -> Optional[str]:
        if self.aliases:
            return self.aliases.get(service)
        return None
