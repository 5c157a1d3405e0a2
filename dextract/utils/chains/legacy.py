"""Translation between legacy numeric chain IDs and chain/network pairs.

Only used at the boundary; everything inside works on ChainIdentifier.
"""
from dextract.exceptions import UnsupportedChainError
from dextract.models.schemas.chain import ChainIdentifier, ChainType, NetworkType
from dextract.utils.types import ChainId

LEGACY_CHAIN_IDS = {
    ChainId.ETHEREUM: ChainIdentifier(chain=ChainType.ETHEREUM, network=NetworkType.MAINNET),
    ChainId.OPTIMISM: ChainIdentifier(chain=ChainType.OPTIMISM, network=NetworkType.MAINNET),
    ChainId.BSC: ChainIdentifier(chain=ChainType.BSC, network=NetworkType.MAINNET),
    ChainId.SOLANA: ChainIdentifier(chain=ChainType.SOLANA, network=NetworkType.MAINNET),
    ChainId.POLYGON: ChainIdentifier(chain=ChainType.POLYGON, network=NetworkType.MAINNET),
    ChainId.ARBITRUM: ChainIdentifier(chain=ChainType.ARBITRUM, network=NetworkType.MAINNET),
    ChainId.AVALANCHE: ChainIdentifier(chain=ChainType.AVALANCHE, network=NetworkType.MAINNET),
    ChainId.SEPOLIA: ChainIdentifier(chain=ChainType.ETHEREUM, network=NetworkType.TESTNET),
}

_REVERSE = {identifier: chain_id for chain_id, identifier in LEGACY_CHAIN_IDS.items()}


def to_chain_identifier(chain_id: int) -> ChainIdentifier:
    try:
        return LEGACY_CHAIN_IDS[ChainId(int(chain_id))]
    except (ValueError, KeyError) as e:
        raise UnsupportedChainError(f"Unknown chain id: {chain_id}", chain=str(chain_id)) from e


def to_legacy_chain_id(chain_id: ChainIdentifier) -> ChainId:
    legacy = _REVERSE.get(chain_id)
    if legacy is None:
        raise UnsupportedChainError(f"No legacy chain id for {chain_id}", chain=chain_id.key)
    return legacy
