import re

from dextract.models.schemas.chain import ChainType
from .base import ChainAdapter

# base58 alphabet, no 0 O I l
SOLANA_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def is_solana_address(address: str) -> bool:
    return bool(SOLANA_ADDRESS_RE.match(address))


class SolanaAdapter(ChainAdapter):
    """Solana adapter. Base58 addresses are case-sensitive and pass through unchanged."""

    DEFAULT_CHAIN = ChainType.SOLANA

    def normalize_address(self, address: str) -> str:
        return address

    def is_valid_address(self, address: str) -> bool:
        return is_solana_address(address)
