import pytest

from dextract.exceptions import AdapterNotFoundError
from dextract.models.schemas.chain import ChainType, NetworkType
from dextract.utils.blockchain.evm import EvmAdapter
from dextract.utils.blockchain.registry import ChainAdapterRegistry
from dextract.utils.blockchain.sol import SolanaAdapter
from dextract.utils.chains.data import CHAIN_CONFIG_MAP


def test_registry_covers_chain_table(registry):
    assert len(registry.all_adapters()) == len(CHAIN_CONFIG_MAP)
    assert registry.list_supported_chains() == {
        ChainType.ETHEREUM,
        ChainType.SOLANA,
        ChainType.BSC,
        ChainType.POLYGON,
        ChainType.ARBITRUM,
        ChainType.OPTIMISM,
        ChainType.AVALANCHE,
    }
    assert registry.list_supported_networks(ChainType.SOLANA) == {
        NetworkType.MAINNET,
        NetworkType.TESTNET,
        NetworkType.DEVNET,
        NetworkType.LOCALNET,
    }
    assert registry.list_supported_networks(ChainType.BSC) == {NetworkType.MAINNET}


def test_resolve_picks_family_adapter(registry):
    assert isinstance(registry.resolve(ChainType.ARBITRUM, NetworkType.MAINNET), EvmAdapter)
    assert isinstance(registry.resolve("solana", "devnet"), SolanaAdapter)


def test_resolve_is_exact(registry):
    with pytest.raises(AdapterNotFoundError):
        registry.resolve(ChainType.BSC, NetworkType.TESTNET)
    with pytest.raises(AdapterNotFoundError):
        registry.resolve("dogechain", "mainnet")
    # also usable as a plain lookup error
    with pytest.raises(LookupError):
        ChainAdapterRegistry().resolve(ChainType.ETHEREUM, NetworkType.MAINNET)


def test_last_registration_wins():
    registry = ChainAdapterRegistry()
    first = EvmAdapter.mainnet()
    second = EvmAdapter.mainnet()
    registry.register(ChainType.ETHEREUM, NetworkType.MAINNET, first)
    registry.register("ethereum", "mainnet", second)

    assert registry.resolve(ChainType.ETHEREUM, NetworkType.MAINNET) is second
    assert registry.all_adapters() == [second]
