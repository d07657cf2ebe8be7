"""Cross-chain completion tracking and non-EVM source legs."""

from .non_evm import BridgeQuoteParams, NonEvmBridgeAdapter, load_solana_keypair
from .poller import BridgeStatusPoller

__all__ = [
    "BridgeQuoteParams",
    "BridgeStatusPoller",
    "NonEvmBridgeAdapter",
    "load_solana_keypair",
]
