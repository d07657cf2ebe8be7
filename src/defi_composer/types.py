"""Type definitions and data models for the DeFi composer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from eth_typing import HexStr

from .exceptions import (
    BridgeFailedError,
    ExecutionError,
    StatusTimeoutError,
    ValidationError,
)
from .utils import build_explorer_url, build_lifi_explorer_url, parse_quantity

ChainId = int
Address = str  # EVM checksum address or non-EVM account string
HexData = HexStr


class ExecutionStatus(str, Enum):
    """Outcome of one execution attempt."""

    DONE = "DONE"
    PENDING = "PENDING"
    FAILED = "FAILED"


class StatusValue(str, Enum):
    """Bridge status values reported by the status service."""

    NOT_FOUND = "NOT_FOUND"
    INVALID = "INVALID"
    PENDING = "PENDING"
    DONE = "DONE"
    FAILED = "FAILED"

    @classmethod
    def parse(cls, value: Any) -> StatusValue:
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.PENDING


# Substatuses under DONE where the destination call did not run as requested.
FALLBACK_SUBSTATUSES = frozenset({"PARTIAL", "REFUNDED"})


@dataclass(frozen=True)
class ContractCallConfig:
    """Exact call produced for a deployment."""

    target_contract: Address
    call_data: HexData
    gas_limit: int
    output_token: Address | None = None
    value: int = 0  # native value when the call is sent directly


@dataclass(frozen=True)
class ComposedAction:
    """One destination call handed to the quote requester."""

    from_amount: int
    from_token: Address
    target: Address
    call_data: HexData
    gas_limit: int
    approval_address: Address | None = None
    output_token: Address | None = None

    def to_contract_call(self) -> dict[str, Any]:
        """Return the wire representation used in contract-call quote requests."""

        call: dict[str, Any] = {
            "fromAmount": str(self.from_amount),
            "fromTokenAddress": self.from_token,
            "toContractAddress": self.target,
            "toContractCallData": self.call_data,
            "toContractGasLimit": str(self.gas_limit),
        }
        if self.approval_address:
            call["toApprovalAddress"] = self.approval_address
        if self.output_token:
            call["contractOutputsToken"] = self.output_token
        return call


@dataclass(frozen=True)
class TransactionRequest:
    """Transaction the composition service asks the caller to sign and send."""

    to: Address | None
    data: HexData
    value: int = 0
    gas_limit: int | None = None
    chain_id: ChainId | None = None
    gas_price: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransactionRequest:
        payload = data.get("data")
        if not isinstance(payload, str) or not payload:
            raise ValidationError(
                "Transaction request is missing call data", field="transactionRequest.data"
            )

        gas_limit = data.get("gasLimit")
        gas_price = data.get("gasPrice")
        chain_id = data.get("chainId")
        return cls(
            to=data.get("to"),
            data=payload,
            value=parse_quantity(data.get("value"), "transactionRequest.value"),
            gas_limit=parse_quantity(gas_limit, "gasLimit") if gas_limit else None,
            chain_id=int(chain_id) if chain_id is not None else None,
            gas_price=parse_quantity(gas_price, "gasPrice") if gas_price else None,
        )


@dataclass(frozen=True)
class GasCost:
    amount: int
    amount_usd: Decimal
    token_symbol: str | None = None
    type: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GasCost:
        token = data.get("token") or {}
        return cls(
            amount=parse_quantity(data.get("amount"), "gasCosts.amount"),
            amount_usd=_decimal(data.get("amountUSD")),
            token_symbol=token.get("symbol") if isinstance(token, Mapping) else None,
            type=data.get("type"),
        )


@dataclass(frozen=True)
class FeeCost:
    name: str
    amount: int
    amount_usd: Decimal
    included: bool = True
    token_symbol: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FeeCost:
        token = data.get("token") or {}
        return cls(
            name=str(data.get("name", "")),
            amount=parse_quantity(data.get("amount"), "feeCosts.amount"),
            amount_usd=_decimal(data.get("amountUSD")),
            included=bool(data.get("included", True)),
            token_symbol=token.get("symbol") if isinstance(token, Mapping) else None,
        )


@dataclass(frozen=True)
class QuoteEstimate:
    from_amount: int
    to_amount: int
    to_amount_min: int
    approval_address: Address | None = None
    execution_duration_seconds: int = 0
    gas_costs: tuple[GasCost, ...] = ()
    fee_costs: tuple[FeeCost, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QuoteEstimate:
        return cls(
            from_amount=parse_quantity(data.get("fromAmount"), "estimate.fromAmount"),
            to_amount=parse_quantity(data.get("toAmount"), "estimate.toAmount"),
            to_amount_min=parse_quantity(data.get("toAmountMin"), "estimate.toAmountMin"),
            approval_address=data.get("approvalAddress") or None,
            execution_duration_seconds=int(float(data.get("executionDuration") or 0)),
            gas_costs=tuple(
                GasCost.from_dict(item)
                for item in data.get("gasCosts") or []
                if isinstance(item, Mapping)
            ),
            fee_costs=tuple(
                FeeCost.from_dict(item)
                for item in data.get("feeCosts") or []
                if isinstance(item, Mapping)
            ),
        )


@dataclass(frozen=True)
class RouteStep:
    id: str
    type: str
    tool: str
    from_chain: ChainId | None = None
    to_chain: ChainId | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RouteStep:
        action = data.get("action") or {}
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            tool=str(data.get("tool", "")),
            from_chain=action.get("fromChainId"),
            to_chain=action.get("toChainId"),
        )


@dataclass(frozen=True)
class Quote:
    """A route and price snapshot; request a fresh one for every execution attempt."""

    id: str
    source_chain: ChainId
    dest_chain: ChainId
    from_token: Address
    to_token: Address | None
    from_amount: int
    transaction_request: TransactionRequest
    estimate: QuoteEstimate
    tool: str
    included_steps: tuple[RouteStep, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_cross_chain(self) -> bool:
        return self.source_chain != self.dest_chain

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Quote:
        """Validate and normalise a composition service quote response."""

        if not isinstance(data, Mapping):
            raise ValidationError("Quote response must be an object", field="quote", value=data)

        action = data.get("action")
        tx_request = data.get("transactionRequest")
        estimate = data.get("estimate")
        if not isinstance(action, Mapping):
            raise ValidationError("Quote response is missing 'action'", field="action")
        if not isinstance(tx_request, Mapping):
            raise ValidationError(
                "Quote response is missing 'transactionRequest'", field="transactionRequest"
            )
        if not isinstance(estimate, Mapping):
            raise ValidationError("Quote response is missing 'estimate'", field="estimate")

        try:
            source_chain = int(action["fromChainId"])
            dest_chain = int(action["toChainId"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(
                "Quote action is missing chain ids", field="action", details={"error": str(exc)}
            ) from exc

        from_token = action.get("fromToken") or {}
        to_token = action.get("toToken") or {}
        from_token_address = (
            from_token.get("address") if isinstance(from_token, Mapping) else from_token
        )
        if not from_token_address:
            raise ValidationError("Quote action is missing the source token", field="fromToken")

        parsed_estimate = QuoteEstimate.from_dict(estimate)
        return cls(
            id=str(data.get("id", "")),
            source_chain=source_chain,
            dest_chain=dest_chain,
            from_token=str(from_token_address),
            to_token=to_token.get("address") if isinstance(to_token, Mapping) else to_token,
            from_amount=parse_quantity(
                action.get("fromAmount"), "action.fromAmount", default=parsed_estimate.from_amount
            ),
            transaction_request=TransactionRequest.from_dict(tx_request),
            estimate=parsed_estimate,
            tool=str(data.get("tool", "")),
            included_steps=tuple(
                RouteStep.from_dict(step)
                for step in data.get("includedSteps") or []
                if isinstance(step, Mapping)
            ),
            raw=dict(data),
        )


@dataclass(frozen=True)
class ExplorerLinks:
    source: str
    destination: str | None = None
    lifi: str | None = None


@dataclass(frozen=True)
class StatusKey:
    """Stateless, idempotent key identifying a bridge transfer."""

    tx_hash: str
    bridge: str
    from_chain: ChainId
    to_chain: ChainId

    def to_params(self) -> dict[str, Any]:
        return {
            "txHash": self.tx_hash,
            "bridge": self.bridge,
            "fromChain": self.from_chain,
            "toChain": self.to_chain,
        }


@dataclass(frozen=True)
class StatusResponse:
    status: StatusValue
    substatus: str | None = None
    substatus_message: str | None = None
    sending_tx_hash: str | None = None
    receiving_tx_hash: str | None = None
    receiving_amount: int | None = None
    receiving_token: Address | None = None
    lifi_explorer_link: str | None = None
    bridge_explorer_link: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StatusResponse:
        sending = data.get("sending")
        receiving = data.get("receiving")
        if not isinstance(sending, Mapping):
            sending = {}
        if not isinstance(receiving, Mapping):
            receiving = {}
        receiving_token = receiving.get("token") or {}
        amount = receiving.get("amount")
        return cls(
            status=StatusValue.parse(data.get("status")),
            substatus=data.get("substatus"),
            substatus_message=data.get("substatusMessage"),
            sending_tx_hash=sending.get("txHash"),
            receiving_tx_hash=receiving.get("txHash"),
            receiving_amount=parse_quantity(amount, "receiving.amount") if amount else None,
            receiving_token=(
                receiving_token.get("address") if isinstance(receiving_token, Mapping) else None
            ),
            lifi_explorer_link=data.get("lifiExplorerLink"),
            bridge_explorer_link=data.get("bridgeExplorerLink"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class BridgeResult:
    """Outcome of polling a bridge transfer."""

    status: ExecutionStatus
    key: StatusKey
    message: str
    destination_tx_hash: str | None = None
    substatus: str | None = None
    received_amount: int | None = None
    timed_out: bool = False
    cancelled: bool = False
    elapsed_seconds: float = 0.0
    last_status: StatusResponse | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not ExecutionStatus.PENDING

    @property
    def fallback_triggered(self) -> bool:
        if self.status is not ExecutionStatus.DONE:
            return False
        return (self.substatus or "").upper() in FALLBACK_SUBSTATUSES

    def raise_for_status(self) -> None:
        """Raise when the transfer failed or is still unresolved."""

        if self.status is ExecutionStatus.FAILED:
            raise BridgeFailedError(
                self.message,
                step="bridge",
                tx_hash=self.key.tx_hash,
                chain_id=self.key.from_chain,
                details={"substatus": self.substatus},
            )
        if self.status is ExecutionStatus.PENDING:
            raise StatusTimeoutError(
                self.message,
                tx_hash=self.key.tx_hash,
                details={"bridge": self.key.bridge, "cancelled": self.cancelled},
            )


@dataclass(frozen=True)
class ExecutionResult:
    """Record of one execution attempt."""

    status: ExecutionStatus
    source_tx_hash: str
    source_chain: ChainId
    dest_chain: ChainId
    bridge: str
    contract_call_succeeded: bool
    explorer_links: ExplorerLinks
    duration_seconds: int
    destination_tx_hash: str | None = None
    approval_tx_hash: str | None = None
    received_amount: int | None = None
    fallback_triggered: bool = False
    error: ExecutionError | None = None
    receipt: Mapping[str, Any] | None = field(default=None, repr=False, compare=False)

    @property
    def status_key(self) -> StatusKey:
        return StatusKey(
            tx_hash=self.source_tx_hash,
            bridge=self.bridge,
            from_chain=self.source_chain,
            to_chain=self.dest_chain,
        )

    def with_bridge_result(self, result: BridgeResult) -> ExecutionResult:
        """Return a copy updated with a bridge poll outcome."""

        if result.status is ExecutionStatus.PENDING:
            return self

        destination = result.destination_tx_hash
        links = ExplorerLinks(
            source=self.explorer_links.source,
            destination=build_explorer_url(self.dest_chain, destination) if destination else None,
            lifi=build_lifi_explorer_url(self.source_tx_hash),
        )
        succeeded = result.status is ExecutionStatus.DONE and not result.fallback_triggered
        return replace(
            self,
            status=result.status,
            destination_tx_hash=destination,
            received_amount=result.received_amount,
            contract_call_succeeded=succeeded,
            fallback_triggered=result.fallback_triggered,
            explorer_links=links,
            duration_seconds=self.duration_seconds + int(result.elapsed_seconds),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "sourceTxHash": self.source_tx_hash,
            "destinationTxHash": self.destination_tx_hash,
            "approvalTxHash": self.approval_tx_hash,
            "receivedAmount": self.received_amount,
            "sourceChain": self.source_chain,
            "destChain": self.dest_chain,
            "bridge": self.bridge,
            "contractCallSucceeded": self.contract_call_succeeded,
            "fallbackTriggered": self.fallback_triggered,
            "explorerLinks": {
                "source": self.explorer_links.source,
                "destination": self.explorer_links.destination,
                "lifi": self.explorer_links.lifi,
            },
            "durationSeconds": self.duration_seconds,
            "error": self.error.to_dict() if self.error else None,
        }


def _decimal(value: Any) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    try:
        return Decimal(str(value))
    except (ValueError, InvalidOperation):
        return Decimal("0")
