"""Static chain definitions used to build network clients."""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import Chain, get_chain_name


@dataclass(frozen=True)
class ChainDefinition:
    chain_id: int
    name: str
    rpc_url: str
    native_symbol: str = "ETH"
    synthesized: bool = False


_STATIC_CHAINS = (
    ChainDefinition(Chain.ETHEREUM, "Ethereum", "https://ethereum-rpc.publicnode.com"),
    ChainDefinition(Chain.OPTIMISM, "Optimism", "https://mainnet.optimism.io"),
    ChainDefinition(Chain.BSC, "BNB Chain", "https://bsc-dataseed.bnbchain.org", "BNB"),
    ChainDefinition(Chain.GNOSIS, "Gnosis", "https://rpc.gnosischain.com", "XDAI"),
    ChainDefinition(Chain.UNICHAIN, "Unichain", "https://mainnet.unichain.org"),
    ChainDefinition(Chain.POLYGON, "Polygon", "https://polygon-rpc.com", "POL"),
    ChainDefinition(Chain.BASE, "Base", "https://mainnet.base.org"),
    ChainDefinition(Chain.ARBITRUM, "Arbitrum", "https://arb1.arbitrum.io/rpc"),
    ChainDefinition(
        Chain.AVALANCHE, "Avalanche", "https://api.avax.network/ext/bc/C/rpc", "AVAX"
    ),
    ChainDefinition(Chain.LINEA, "Linea", "https://rpc.linea.build"),
    ChainDefinition(Chain.SCROLL, "Scroll", "https://rpc.scroll.io"),
)

STATIC_CHAIN_DEFINITIONS: dict[int, ChainDefinition] = {
    int(definition.chain_id): definition for definition in _STATIC_CHAINS
}


def synthesize_definition(chain_id: int, rpc_template: str) -> ChainDefinition:
    """Minimal definition for a chain that is not statically configured."""
    return ChainDefinition(
        chain_id=chain_id,
        name=get_chain_name(chain_id),
        rpc_url=rpc_template.format(chain_id=chain_id),
        synthesized=True,
    )
