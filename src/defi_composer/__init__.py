"""DeFi Composer - compose, quote and execute cross-chain protocol deposits.

The library encodes protocol deposit calls, requests executable routes from the
LI.FI composition service, executes the returned transaction (including token
approval) and tracks cross-chain settlement through the status service.
"""

from .bridge import BridgeQuoteParams, BridgeStatusPoller, NonEvmBridgeAdapter
from .chains import ChainClientManager, NonceManager
from .composer import DeFiComposer
from .config import (
    ClientConfig,
    ComposerConfig,
    ExecutionConfig,
    QuoteConfig,
    SolanaConfig,
    StatusConfig,
)
from .exceptions import (
    ApprovalFailedError,
    BridgeFailedError,
    ChainUnavailableError,
    ComposerError,
    ConfirmationTimeoutError,
    EncodingError,
    ExecutionError,
    ExecutionRevertedError,
    NetworkError,
    QuoteError,
    RegistryMissError,
    StatusTimeoutError,
    SubmissionFailedError,
    UnsupportedRouteError,
    ValidationError,
)
from .execution import EventRecorder, ExecutionEngine, ProgressEvent, QueueObserver
from .protocols import ActionEncoder, ProtocolFamily, ProtocolRegistry, default_registry
from .quote import ContractCallsQuoteRequest, QuoteRequester, TransferQuoteRequest
from .types import (
    BridgeResult,
    ComposedAction,
    ContractCallConfig,
    ExecutionResult,
    ExecutionStatus,
    Quote,
    StatusKey,
)

__version__ = "0.1.0"

__all__ = [
    # Facade
    "DeFiComposer",
    # Components
    "ActionEncoder",
    "BridgeStatusPoller",
    "ChainClientManager",
    "ExecutionEngine",
    "NonEvmBridgeAdapter",
    "NonceManager",
    "ProtocolRegistry",
    "QuoteRequester",
    "default_registry",
    # Configuration
    "ClientConfig",
    "ComposerConfig",
    "ExecutionConfig",
    "QuoteConfig",
    "SolanaConfig",
    "StatusConfig",
    # Types
    "BridgeQuoteParams",
    "BridgeResult",
    "ComposedAction",
    "ContractCallConfig",
    "ContractCallsQuoteRequest",
    "EventRecorder",
    "ExecutionResult",
    "ExecutionStatus",
    "ProgressEvent",
    "ProtocolFamily",
    "Quote",
    "QueueObserver",
    "StatusKey",
    "TransferQuoteRequest",
    # Exceptions
    "ComposerError",
    "NetworkError",
    "ChainUnavailableError",
    "ValidationError",
    "RegistryMissError",
    "EncodingError",
    "QuoteError",
    "UnsupportedRouteError",
    "ExecutionError",
    "ApprovalFailedError",
    "SubmissionFailedError",
    "ExecutionRevertedError",
    "ConfirmationTimeoutError",
    "BridgeFailedError",
    "StatusTimeoutError",
]
