from enum import Enum


class ChainId(int, Enum):
    """Legacy numeric chain identifiers."""

    ETHEREUM = 1
    OPTIMISM = 10
    BSC = 56
    SOLANA = 101
    POLYGON = 137
    ARBITRUM = 42161
    AVALANCHE = 43114

    SEPOLIA = 11155111


class ChainFamily(str, Enum):
    EVM = "EVM"
    SOL = "SOL"


class ServiceType(str, Enum):
    COINGECKO = "COINGECKO"
    COINGECKO_CATEGORY = "COINGECKO_CATEGORY"
    JUPITER = "JUPITER"


class ApiProviderType(str, Enum):
    COINGECKO = "coingecko"
    COINMARKETCAP = "coinmarketcap"
    JUPITER = "jupiter"
    CUSTOM = "custom"
