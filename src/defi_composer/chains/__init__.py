"""Chain definitions, client lifecycle and nonce coordination."""

from .definitions import STATIC_CHAIN_DEFINITIONS, ChainDefinition, synthesize_definition
from .manager import ChainClientManager, ChainClientPair
from .nonces import NonceManager

__all__ = [
    "ChainClientManager",
    "ChainClientPair",
    "ChainDefinition",
    "NonceManager",
    "STATIC_CHAIN_DEFINITIONS",
    "synthesize_definition",
]
