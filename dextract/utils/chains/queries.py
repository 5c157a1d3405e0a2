from typing import List, Optional

from dextract.exceptions import UnsupportedChainError
from dextract.models.schemas.chain import ChainConfig, ChainIdentifier, ChainType
from dextract.utils.types import ServiceType
from .data import CHAIN_CONFIG_MAP


def get_chain_config(chain_id: ChainIdentifier) -> ChainConfig:
    """Get static chain data by chain identifier."""
    config = CHAIN_CONFIG_MAP.get(chain_id)
    if config is None:
        raise UnsupportedChainError(f"Chain {chain_id} not found", chain=chain_id.key)
    return config


def get_chain_configs(chain: Optional[ChainType] = None) -> List[ChainConfig]:
    """Get all chain configs, optionally for a single chain."""
    return [
        config
        for config in CHAIN_CONFIG_MAP.values()
        if chain is None or config.chain_type == chain
    ]


def get_chain_alias(chain_id: ChainIdentifier, service: ServiceType) -> str:
    """Get a provider's own name for a chain.

    Raises:
        UnsupportedChainError: If the chain is unknown or the service has no alias for it
    """
    config = CHAIN_CONFIG_MAP.get(chain_id)
    alias = config.get_alias(service) if config else None
    if alias is None:
        raise UnsupportedChainError(f"Unsupported chain: {chain_id}", chain=chain_id.key)
    return alias
