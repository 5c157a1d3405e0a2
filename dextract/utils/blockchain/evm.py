import re

from dextract.models.schemas.chain import ChainType
from .base import ChainAdapter

EVM_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_evm_address(address: str) -> bool:
    return bool(EVM_ADDRESS_RE.match(address))


class EvmAdapter(ChainAdapter):
    """Ethereum-family adapter. Addresses are compared lowercased."""

    DEFAULT_CHAIN = ChainType.ETHEREUM

    def normalize_address(self, address: str) -> str:
        return address.lower()

    def is_valid_address(self, address: str) -> bool:
        return is_evm_address(address)
