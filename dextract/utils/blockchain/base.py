from abc import ABC, abstractmethod
from typing import Optional

from dextract.models.schemas.chain import (
    ChainConfig,
    ChainIdentifier,
    ChainType,
    NetworkType,
)
from dextract.utils.chains.queries import get_chain_config


class ChainAdapter(ABC):
    """Per-chain address normalization, validation and token identifiers.

    Every operation is pure: no I/O, no state beyond the static ChainConfig.
    """

    DEFAULT_CHAIN: ChainType

    def __init__(self, config: ChainConfig):
        self.config = config

    @classmethod
    def for_network(cls, network: NetworkType, chain: Optional[ChainType] = None):
        """Build an adapter from the static chain table.

        Raises:
            UnsupportedChainError: If there is no chain data for the pair
        """
        chain_id = ChainIdentifier(chain=chain or cls.DEFAULT_CHAIN, network=network)
        return cls(get_chain_config(chain_id))

    @classmethod
    def mainnet(cls, chain: Optional[ChainType] = None):
        return cls.for_network(NetworkType.MAINNET, chain)

    @classmethod
    def testnet(cls, chain: Optional[ChainType] = None):
        return cls.for_network(NetworkType.TESTNET, chain)

    @classmethod
    def devnet(cls, chain: Optional[ChainType] = None):
        return cls.for_network(NetworkType.DEVNET, chain)

    @classmethod
    def localnet(cls, chain: Optional[ChainType] = None):
        return cls.for_network(NetworkType.LOCALNET, chain)

    @property
    def chain_identifier(self) -> ChainIdentifier:
        return self.config.identifier

    @abstractmethod
    def normalize_address(self, address: str) -> str:
        """Canonical form of an address. Never raises, idempotent."""

    @abstractmethod
    def is_valid_address(self, address: str) -> bool:
        """Whether the string is a well-formed address for this chain."""

    def get_token_identifier(self, symbol: str, address: Optional[str] = None) -> str:
        """Prefer a valid (normalized) address, fall back to the uppercased symbol."""
        if address and self.is_valid_address(address):
            return self.normalize_address(address)
        return symbol.upper()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.chain_identifier})"
