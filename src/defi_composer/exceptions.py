"""Exception hierarchy for the DeFi composer."""

from typing import Any


class ComposerError(Exception):
    """Base exception for all composer errors."""

    code = "COMPOSER_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Return a structured, JSON-friendly representation of the error."""

        return {"code": self.code, "message": self.message, "details": dict(self.details)}


class NetworkError(ComposerError):
    """Raised when network/connection issues occur."""

    code = "NETWORK_ERROR"

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class ChainUnavailableError(NetworkError):
    """Raised when no client can be built for a chain."""

    code = "CHAIN_UNAVAILABLE"

    def __init__(self, chain_id: int, message: str | None = None, details: dict | None = None):
        super().__init__(
            message or f"No chain definition available for chain {chain_id}", details=details
        )
        self.chain_id = chain_id


class ValidationError(ComposerError):
    """Raised when input validation fails."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class RegistryMissError(ComposerError):
    """Raised when a required protocol deployment is not registered."""

    code = "REGISTRY_MISS"

    def __init__(self, protocol_id: str, chain_id: int | None = None):
        where = f" on chain {chain_id}" if chain_id is not None else ""
        super().__init__(f"Protocol '{protocol_id}' is not registered{where}")
        self.protocol_id = protocol_id
        self.chain_id = chain_id


class EncodingError(ComposerError):
    """Raised when a deployment cannot be encoded; the registry and encoders disagree."""

    code = "ENCODING_ERROR"

    def __init__(
        self,
        message: str,
        protocol_id: str | None = None,
        family: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.protocol_id = protocol_id
        self.family = family


class QuoteError(ComposerError):
    """Raised when the composition service rejects a quote request."""

    code = "QUOTE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        if code is not None:
            self.code = code
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class UnsupportedRouteError(QuoteError):
    """Raised when no route exists between the requested chains and tokens."""

    code = "NO_ROUTE"

    def __init__(self, message: str, status_code: int | None = None, details: dict | None = None):
        super().__init__(message, status_code=status_code, details=details)


class ExecutionError(ComposerError):
    """Raised when an execution attempt fails on-chain or before broadcast."""

    code = "EXECUTION_ERROR"

    def __init__(
        self,
        message: str,
        step: str | None = None,
        tx_hash: str | None = None,
        chain_id: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.step = step
        self.tx_hash = tx_hash
        self.chain_id = chain_id

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(step=self.step, tx_hash=self.tx_hash, chain_id=self.chain_id)
        return data


class ApprovalFailedError(ExecutionError):
    code = "APPROVAL_FAILED"


class SubmissionFailedError(ExecutionError):
    """The transaction was rejected before it was broadcast."""

    code = "SUBMISSION_FAILED"


class ExecutionRevertedError(ExecutionError):
    code = "EXECUTION_REVERTED"


class ConfirmationTimeoutError(ExecutionError):
    """The transaction was broadcast but no receipt arrived before the deadline."""

    code = "CONFIRMATION_TIMEOUT"


class BridgeFailedError(ExecutionError):
    code = "BRIDGE_FAILED"


class StatusTimeoutError(ComposerError):
    """Polling stopped before the bridge settled; resume with the same key."""

    code = "STATUS_TIMEOUT"

    def __init__(self, message: str, tx_hash: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.tx_hash = tx_hash

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["tx_hash"] = self.tx_hash
        return data
