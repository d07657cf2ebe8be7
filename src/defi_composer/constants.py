"""Chain identifiers, well-known addresses and explorer endpoints."""

from enum import Enum, IntEnum


class Chain(IntEnum):
    """EVM chains with static deployments."""

    ETHEREUM = 1
    OPTIMISM = 10
    BSC = 56
    GNOSIS = 100
    UNICHAIN = 130
    POLYGON = 137
    BASE = 8453
    ARBITRUM = 42161
    AVALANCHE = 43114
    LINEA = 59144
    SCROLL = 534352


class NonEvmChain(IntEnum):
    """Non-EVM chain identifiers as used by the composition service."""

    SOLANA = 1151111081099710
    BITCOIN = 20000000000001
    SUI = 9270000000000000


class ChainType(str, Enum):
    """Account model of a chain."""

    EVM = "EVM"
    SVM = "SVM"  # Solana
    UTXO = "UTXO"  # Bitcoin
    MVM = "MVM"  # Sui


NON_EVM_CHAIN_TYPES = {
    NonEvmChain.SOLANA: ChainType.SVM,
    NonEvmChain.BITCOIN: ChainType.UTXO,
    NonEvmChain.SUI: ChainType.MVM,
}

# Both placeholders are used by the composition service for a chain's gas token.
NATIVE_TOKEN_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_TOKEN_PLACEHOLDER = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
NATIVE_TOKEN_ADDRESSES = frozenset(
    {NATIVE_TOKEN_ADDRESS.lower(), NATIVE_TOKEN_PLACEHOLDER.lower()}
)

MAX_UINT256 = 2**256 - 1

EXPLORER_URLS = {
    Chain.ETHEREUM: "https://etherscan.io/tx/",
    Chain.OPTIMISM: "https://optimistic.etherscan.io/tx/",
    Chain.BSC: "https://bscscan.com/tx/",
    Chain.GNOSIS: "https://gnosisscan.io/tx/",
    Chain.UNICHAIN: "https://uniscan.xyz/tx/",
    Chain.POLYGON: "https://polygonscan.com/tx/",
    Chain.BASE: "https://basescan.org/tx/",
    Chain.ARBITRUM: "https://arbiscan.io/tx/",
    Chain.AVALANCHE: "https://snowtrace.io/tx/",
    Chain.LINEA: "https://lineascan.build/tx/",
    Chain.SCROLL: "https://scrollscan.com/tx/",
    NonEvmChain.SOLANA: "https://solscan.io/tx/",
}
DEFAULT_EXPLORER_URL = "https://blockscan.com/tx/"
LIFI_EXPLORER_URL = "https://scan.li.fi/tx/"

WRAPPED_NATIVE_ADDRESSES = {
    Chain.ETHEREUM: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    Chain.OPTIMISM: "0x4200000000000000000000000000000000000006",
    Chain.BSC: "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c",  # WBNB
    Chain.GNOSIS: "0x6A023CCd1ff6F2045C3309768eAd9E68F978f6e1",
    Chain.UNICHAIN: "0x4200000000000000000000000000000000000006",
    Chain.POLYGON: "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
    Chain.BASE: "0x4200000000000000000000000000000000000006",
    Chain.ARBITRUM: "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    Chain.AVALANCHE: "0x49D5c2BdFfac6CE2BFdB6640F4F80f226bc10bAB",  # WETH.e
    Chain.LINEA: "0xe5D7C2a44FfDDf6b295A15c148167daaAf5Cf34f",
    Chain.SCROLL: "0x5300000000000000000000000000000000000004",
}

TOKEN_ADDRESSES = {
    Chain.ETHEREUM: {
        "ETH": NATIVE_TOKEN_PLACEHOLDER,
        "WETH": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        "USDC": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
        "USDT": "0xdAC17F958D2ee523a2206206994597C13D831ec7",
        "STETH": "0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84",
        "WSTETH": "0x7f39C581F595B53c5cb19bD0b3f8dA6c935E2Ca0",
        "USDE": "0x4c9EDD5852cd905f086C759E8383e09bff1E68B3",
    },
    Chain.ARBITRUM: {
        "ETH": NATIVE_TOKEN_PLACEHOLDER,
        "WETH": "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        "USDC": "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
        "USDC.E": "0xFF970A61A04b1cA14834A43f5dE4533eBDDB5CC8",
        "USDT": "0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9",
        "WSTETH": "0x5979D7b546E38E9Ab8b54bdeFC1E7d8E7cEe4fd5",
    },
    Chain.BASE: {
        "ETH": NATIVE_TOKEN_PLACEHOLDER,
        "WETH": "0x4200000000000000000000000000000000000006",
        "USDC": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
        "USDBC": "0xd9aAEc86B65D86f6A7B5B1b0c42FFA531710b6CA",
        "WSTETH": "0xc1CBa3fCea344f92D9239c08C0568f6F2F0ee452",
        "CBETH": "0x2Ae3F1Ec7F1F5012CFEab0185bfc7aa3cf0DEc22",
    },
    Chain.OPTIMISM: {
        "ETH": NATIVE_TOKEN_PLACEHOLDER,
        "WETH": "0x4200000000000000000000000000000000000006",
        "USDC": "0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85",
        "USDT": "0x94b008aA00579c1307B0EF2c499aD98a8ce58e58",
        "WSTETH": "0x1F32b1c2345538c0c6f582fCB022739c4A194Ebb",
    },
    Chain.POLYGON: {
        "MATIC": NATIVE_TOKEN_PLACEHOLDER,
        "WMATIC": "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270",
        "WETH": "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
        "USDC": "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359",
        "USDT": "0xc2132D05D31c914a87C6611C10748AEb04B58e8F",
    },
    Chain.UNICHAIN: {
        "ETH": NATIVE_TOKEN_PLACEHOLDER,
        "WETH": "0x4200000000000000000000000000000000000006",
        "USDC": "0x078D782b760474a361dDA0AF3839290b0EF57AD6",
        "USDT": "0x9151434b16b9763660705744891fA906F660EcC5",
        "UNI": "0x8f187aA05619a017077f5308904739877ce9eA21",
        "WSTETH": "0xc02fE7317D4eb8753a02c35fe019786854A92001",
    },
}


def get_chain_name(chain_id: int) -> str:
    """Return a display name for a chain id."""
    for enum_cls in (Chain, NonEvmChain):
        try:
            return enum_cls(chain_id).name.title()
        except ValueError:
            continue
    return f"Unknown ({chain_id})"


def get_chain_type(chain_id: int) -> ChainType:
    """Return the account model for a chain id; unknown ids are treated as EVM."""
    try:
        return NON_EVM_CHAIN_TYPES[NonEvmChain(chain_id)]
    except ValueError:
        return ChainType.EVM


def get_token_address(chain_id: int, symbol: str) -> str | None:
    """Look up a token address by symbol, case-insensitively."""
    return TOKEN_ADDRESSES.get(chain_id, {}).get(symbol.upper())


def is_native_token(address: str | None) -> bool:
    return address is not None and address.lower() in NATIVE_TOKEN_ADDRESSES
