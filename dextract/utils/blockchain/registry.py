from typing import Dict, List, Set

from dextract.exceptions import AdapterNotFoundError
from dextract.models.schemas.chain import ChainType, NetworkType
from dextract.utils.chains.data import CHAIN_CONFIG_MAP
from dextract.utils.logging import get_logger
from dextract.utils.types import ChainFamily
from .base import ChainAdapter
from .evm import EvmAdapter
from .sol import SolanaAdapter

logger = get_logger(__name__)

ADAPTER_CLASSES = {
    ChainFamily.EVM: EvmAdapter,
    ChainFamily.SOL: SolanaAdapter,
}


class ChainAdapterRegistry:
    """One chain adapter per (chain, network) pair."""

    def __init__(self):
        self._adapters: Dict[str, ChainAdapter] = {}

    @staticmethod
    def _key(chain: ChainType, network: NetworkType) -> str:
        return f"{ChainType(chain).value}:{NetworkType(network).value}"

    def register(self, chain: ChainType, network: NetworkType, adapter: ChainAdapter) -> None:
        key = self._key(chain, network)
        if key in self._adapters:
            logger.warning(f"Replacing chain adapter registered for {key}")
        self._adapters[key] = adapter

    def resolve(self, chain: ChainType, network: NetworkType) -> ChainAdapter:
        """Exact-pair lookup, no fallback to other networks of the same chain."""
        try:
            key = self._key(chain, network)
        except ValueError as e:
            raise AdapterNotFoundError(f"No adapter registered for {chain}:{network}") from e
        adapter = self._adapters.get(key)
        if adapter is None:
            raise AdapterNotFoundError(f"No adapter registered for {key}")
        return adapter

    def all_adapters(self) -> List[ChainAdapter]:
        return list(self._adapters.values())

    def list_supported_chains(self) -> Set[ChainType]:
        # Read from the adapters themselves, not from the registration keys
        return {adapter.chain_identifier.chain for adapter in self._adapters.values()}

    def list_supported_networks(self, chain: ChainType) -> Set[NetworkType]:
        return {
            adapter.chain_identifier.network
            for adapter in self._adapters.values()
            if adapter.chain_identifier.chain == chain
        }


def create_chain_adapter_registry() -> ChainAdapterRegistry:
    """Registry with an adapter for every entry of the static chain table."""
    registry = ChainAdapterRegistry()
    for chain_id, config in CHAIN_CONFIG_MAP.items():
        adapter_class = ADAPTER_CLASSES[config.family]
        registry.register(chain_id.chain, chain_id.network, adapter_class(config))
    logger.debug(f"Registered {len(registry.all_adapters())} chain adapters")
    return registry
