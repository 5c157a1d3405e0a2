# utils/chains/data.py
from dextract.models.schemas.chain import (
    ChainConfig,
    ChainIdentifier,
    ChainType,
    NativeCurrency,
    NetworkType,
)
from dextract.utils.types import ChainFamily, ServiceType

ETHER = NativeCurrency(name="Ether", symbol="ETH", decimals=18)
SOL = NativeCurrency(name="Solana", symbol="SOL", decimals=9)

_CONFIGS = [
    # Ethereum
    ChainConfig(
        name="Ethereum Mainnet",
        chain_type=ChainType.ETHEREUM,
        network_type=NetworkType.MAINNET,
        family=ChainFamily.EVM,
        rpc_urls=["https://eth.llamarpc.com", "https://rpc.ankr.com/eth"],
        explorer_url="https://etherscan.io",
        native_currency=ETHER,
        aliases={
            ServiceType.COINGECKO: "ethereum",
            ServiceType.COINGECKO_CATEGORY: "ethereum-ecosystem",
        },
    ),
    ChainConfig(
        name="Ethereum Sepolia",
        chain_type=ChainType.ETHEREUM,
        network_type=NetworkType.TESTNET,
        family=ChainFamily.EVM,
        rpc_urls=["https://rpc.sepolia.org", "https://rpc.ankr.com/eth_sepolia"],
        explorer_url="https://sepolia.etherscan.io",
        native_currency=NativeCurrency(name="Sepolia Ether", symbol="ETH", decimals=18),
    ),
    ChainConfig(
        name="Ethereum Local",
        chain_type=ChainType.ETHEREUM,
        network_type=NetworkType.LOCALNET,
        family=ChainFamily.EVM,
        rpc_urls=["http://localhost:8545"],
        native_currency=ETHER,
    ),
    # Solana
    ChainConfig(
        name="Solana Mainnet",
        chain_type=ChainType.SOLANA,
        network_type=NetworkType.MAINNET,
        family=ChainFamily.SOL,
        rpc_urls=[
            "https://api.mainnet-beta.solana.com",
            "https://solana-mainnet.rpc.extrnode.com",
        ],
        explorer_url="https://explorer.solana.com",
        native_currency=SOL,
        aliases={
            ServiceType.COINGECKO: "solana",
            ServiceType.COINGECKO_CATEGORY: "solana-ecosystem",
            ServiceType.JUPITER: "solana",
        },
    ),
    ChainConfig(
        name="Solana Testnet",
        chain_type=ChainType.SOLANA,
        network_type=NetworkType.TESTNET,
        family=ChainFamily.SOL,
        rpc_urls=["https://api.testnet.solana.com"],
        explorer_url="https://explorer.solana.com/?cluster=testnet",
        native_currency=SOL,
    ),
    ChainConfig(
        name="Solana Devnet",
        chain_type=ChainType.SOLANA,
        network_type=NetworkType.DEVNET,
        family=ChainFamily.SOL,
        rpc_urls=["https://api.devnet.solana.com"],
        explorer_url="https://explorer.solana.com/?cluster=devnet",
        native_currency=SOL,
    ),
    ChainConfig(
        name="Solana Local",
        chain_type=ChainType.SOLANA,
        network_type=NetworkType.LOCALNET,
        family=ChainFamily.SOL,
        rpc_urls=["http://localhost:8899"],
        native_currency=SOL,
    ),
    # Other EVM mainnets
    ChainConfig(
        name="BNB Smart Chain",
        chain_type=ChainType.BSC,
        network_type=NetworkType.MAINNET,
        family=ChainFamily.EVM,
        rpc_urls=["https://bsc-dataseed.binance.org", "https://rpc.ankr.com/bsc"],
        explorer_url="https://bscscan.com",
        native_currency=NativeCurrency(name="BNB", symbol="BNB", decimals=18),
        aliases={
            ServiceType.COINGECKO: "binance-smart-chain",
            ServiceType.COINGECKO_CATEGORY: "binance-smart-chain",
        },
    ),
    ChainConfig(
        name="Polygon",
        chain_type=ChainType.POLYGON,
        network_type=NetworkType.MAINNET,
        family=ChainFamily.EVM,
        rpc_urls=["https://polygon-rpc.com", "https://rpc.ankr.com/polygon"],
        explorer_url="https://polygonscan.com",
        native_currency=NativeCurrency(name="POL", symbol="POL", decimals=18),
        aliases={
            ServiceType.COINGECKO: "polygon-pos",
            ServiceType.COINGECKO_CATEGORY: "polygon-ecosystem",
        },
    ),
    ChainConfig(
        name="Arbitrum One",
        chain_type=ChainType.ARBITRUM,
        network_type=NetworkType.MAINNET,
        family=ChainFamily.EVM,
        rpc_urls=["https://arb1.arbitrum.io/rpc", "https://rpc.ankr.com/arbitrum"],
        explorer_url="https://arbiscan.io",
        native_currency=ETHER,
        aliases={
            ServiceType.COINGECKO: "arbitrum-one",
            ServiceType.COINGECKO_CATEGORY: "arbitrum-ecosystem",
        },
    ),
    ChainConfig(
        name="OP Mainnet",
        chain_type=ChainType.OPTIMISM,
        network_type=NetworkType.MAINNET,
        family=ChainFamily.EVM,
        rpc_urls=["https://mainnet.optimism.io", "https://rpc.ankr.com/optimism"],
        explorer_url="https://optimistic.etherscan.io",
        native_currency=ETHER,
        aliases={
            ServiceType.COINGECKO: "optimistic-ethereum",
            ServiceType.COINGECKO_CATEGORY: "optimism-ecosystem",
        },
    ),
    ChainConfig(
        name="Avalanche C-Chain",
        chain_type=ChainType.AVALANCHE,
        network_type=NetworkType.MAINNET,
        family=ChainFamily.EVM,
        rpc_urls=["https://api.avax.network/ext/bc/C/rpc", "https://rpc.ankr.com/avalanche"],
        explorer_url="https://snowtrace.io",
        native_currency=NativeCurrency(name="Avalanche", symbol="AVAX", decimals=18),
        aliases={
            ServiceType.COINGECKO: "avalanche",
            ServiceType.COINGECKO_CATEGORY: "avalanche-ecosystem",
        },
    ),
]

CHAIN_CONFIG_MAP = {config.identifier: config for config in _CONFIGS}
