"""Drive a quote through approval, submission and confirmation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from eth_abi import decode as abi_decode
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import TimeExhausted

from ..chains import ChainClientManager
from ..config import ExecutionConfig
from ..constants import MAX_UINT256, is_native_token
from ..exceptions import (
    ApprovalFailedError,
    ComposerError,
    ConfirmationTimeoutError,
    ExecutionError,
    ExecutionRevertedError,
    NetworkError,
    SubmissionFailedError,
    ValidationError,
)
from ..protocols.encoder import encode_call
from ..types import (
    ContractCallConfig,
    ExecutionResult,
    ExecutionStatus,
    ExplorerLinks,
    Quote,
    TransactionRequest,
)
from ..utils import (
    build_explorer_url,
    build_lifi_explorer_url,
    serialise_receipt,
    to_checksum,
    to_hex_hash,
)
from .events import EventKind, ProgressBroadcaster, ProgressEvent, ProgressObserver, Stage

logger = logging.getLogger(__name__)

DIRECT_CALL_TOOL = "direct"


class ExecutionEngine:
    """Run one execution attempt per call.

    ``START -> APPROVING (conditional) -> SUBMITTING -> CONFIRMING -> DONE | FAILED``,
    or ``PENDING`` when the source leg succeeded on a cross-chain route. Resolving a
    pending result is the bridge poller's job.
    """

    def __init__(
        self,
        clients: ChainClientManager,
        config: ExecutionConfig | None = None,
        *,
        observers: Iterable[ProgressObserver] = (),
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clients = clients
        self._config = config or ExecutionConfig()
        self._events = ProgressBroadcaster(observers)
        self._clock = clock

    @property
    def events(self) -> ProgressBroadcaster:
        return self._events

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    def execute(self, quote: Quote) -> ExecutionResult:
        """Send ``quote.transactionRequest`` verbatim, approving the source token first if needed."""

        tx_request = quote.transaction_request
        if tx_request.chain_id is not None and tx_request.chain_id != quote.source_chain:
            raise ValidationError(
                "Transaction request targets a different chain than the quote source",
                field="transactionRequest.chainId",
                value=tx_request.chain_id,
                details={"source_chain": quote.source_chain},
            )

        return self._run(
            chain_id=quote.source_chain,
            dest_chain=quote.dest_chain,
            tx_request=tx_request,
            token=quote.from_token,
            amount=quote.from_amount,
            approval_address=quote.estimate.approval_address,
            tool=quote.tool,
        )

    def execute_call(
        self,
        chain_id: int,
        call: ContractCallConfig,
        *,
        input_token: str | None = None,
        amount: int = 0,
        approval_address: str | None = None,
    ) -> ExecutionResult:
        """Send an encoded call straight to its contract on ``chain_id`` (no routing)."""

        tx_request = TransactionRequest(
            to=call.target_contract,
            data=call.call_data,
            value=call.value,
            gas_limit=call.gas_limit,
            chain_id=chain_id,
        )
        return self._run(
            chain_id=chain_id,
            dest_chain=chain_id,
            tx_request=tx_request,
            token=input_token,
            amount=amount,
            approval_address=approval_address,
            tool=DIRECT_CALL_TOOL,
        )

    def allowance(self, web3: Web3, token: str, owner: str, spender: str) -> int:
        data = encode_call("allowance(address,address)", [owner, spender])
        try:
            raw = web3.eth.call({"to": Web3.to_checksum_address(token), "data": data})  # type: ignore[typeddict-item]
            (value,) = abi_decode(["uint256"], bytes(HexBytes(raw)))
        except Exception as exc:
            raise NetworkError(
                "Failed to read token allowance",
                endpoint=str(token),
                details={"owner": owner, "spender": spender, "error": str(exc)},
            ) from exc
        return int(value)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def _run(
        self,
        *,
        chain_id: int,
        dest_chain: int,
        tx_request: TransactionRequest,
        token: str | None,
        amount: int,
        approval_address: str | None,
        tool: str,
    ) -> ExecutionResult:
        if not tx_request.to:
            raise ValidationError(
                "Transaction request has no destination address", field="transactionRequest.to"
            )

        started = self._clock()
        cross_chain = chain_id != dest_chain
        self._stage(Stage.START, chain_id, dest_chain=dest_chain, tool=tool)
        logger.debug(
            "Stage EXECUTE [%s]: start (to=%s, value=%s, dest_chain=%s)",
            chain_id,
            tx_request.to,
            tx_request.value,
            dest_chain,
        )

        try:
            web3 = self._clients.get_write_client(chain_id)
            owner = self._clients.address

            approval_tx_hash = None
            if approval_address and token and not is_native_token(token):
                approval_tx_hash = self._approve(
                    web3, chain_id, token, owner, approval_address, amount
                )

            self._stage(Stage.SUBMITTING, chain_id)
            tx = _to_transaction(tx_request)
            tx_hash = self._submit(web3, chain_id, owner, tx, SubmissionFailedError, "submit")
            logger.info("Transaction submitted on chain %s hash=%s", chain_id, tx_hash)
            self._emit(EventKind.SUBMITTED, Stage.SUBMITTING, chain_id, tx_hash, action="main")

            self._stage(Stage.CONFIRMING, chain_id, tx_hash)
            receipt = self._wait_for_receipt(web3, chain_id, tx_hash, "confirm")
        except ComposerError as exc:
            failed_hash = exc.tx_hash if isinstance(exc, ExecutionError) else None
            logger.error("Execution aborted on chain %s: %s", chain_id, exc.message)
            self._emit(EventKind.ERROR, Stage.FAILED, chain_id, failed_hash, code=exc.code)
            self._stage(Stage.FAILED, chain_id, failed_hash)
            raise

        succeeded = _receipt_status(receipt) == 1
        block_number = _receipt_field(receipt, "blockNumber")
        self._emit(
            EventKind.CONFIRMED,
            Stage.CONFIRMING,
            chain_id,
            tx_hash,
            block_number=block_number,
            success=succeeded,
        )
        logger.info(
            "Transaction confirmed on chain %s hash=%s block=%s success=%s",
            chain_id,
            tx_hash,
            block_number,
            succeeded,
        )

        links = ExplorerLinks(
            source=build_explorer_url(chain_id, tx_hash),
            lifi=build_lifi_explorer_url(tx_hash) if cross_chain else None,
        )
        duration = int(self._clock() - started)
        serialised = serialise_receipt(receipt)

        if not succeeded:
            error = ExecutionRevertedError(
                "Transaction reverted on the source chain",
                step="confirm",
                tx_hash=tx_hash,
                chain_id=chain_id,
                details={"block_number": block_number},
            )
            logger.error("Transaction %s reverted on chain %s", tx_hash, chain_id)
            self._emit(EventKind.ERROR, Stage.FAILED, chain_id, tx_hash, code=error.code)
            self._stage(Stage.FAILED, chain_id, tx_hash)
            return ExecutionResult(
                status=ExecutionStatus.FAILED,
                source_tx_hash=tx_hash,
                source_chain=chain_id,
                dest_chain=dest_chain,
                bridge=tool,
                contract_call_succeeded=False,
                explorer_links=links,
                duration_seconds=duration,
                approval_tx_hash=approval_tx_hash,
                error=error,
                receipt=serialised,
            )

        status = ExecutionStatus.PENDING if cross_chain else ExecutionStatus.DONE
        self._stage(Stage(status.value), chain_id, tx_hash)
        logger.debug("Stage EXECUTE [%s]: %s (tx=%s)", chain_id, status.value, tx_hash)
        return ExecutionResult(
            status=status,
            source_tx_hash=tx_hash,
            source_chain=chain_id,
            dest_chain=dest_chain,
            bridge=tool,
            # Cross-chain calls only count once the destination leg is known.
            contract_call_succeeded=not cross_chain,
            explorer_links=links,
            duration_seconds=duration,
            approval_tx_hash=approval_tx_hash,
            receipt=serialised,
        )

    def _approve(
        self,
        web3: Web3,
        chain_id: int,
        token: str,
        owner: str,
        approval_address: str,
        amount: int,
    ) -> str | None:
        if amount <= 0:
            raise ValidationError(
                "Approval needs a positive source amount", field="from_amount", value=amount
            )

        spender = to_checksum(approval_address, field="approvalAddress")
        self._stage(Stage.APPROVING, chain_id, spender=spender)
        try:
            current = self.allowance(web3, token, owner, spender)
        except NetworkError as exc:
            raise ApprovalFailedError(
                "Could not read the current token allowance",
                step="approve",
                chain_id=chain_id,
                details={"token": token, "spender": spender, **exc.details},
            ) from exc
        if current >= amount:
            logger.debug(
                "Stage EXECUTE [%s]: allowance sufficient (token=%s, spender=%s, allowance=%s)",
                chain_id,
                token,
                spender,
                current,
            )
            return None

        approve_amount = MAX_UINT256 if self._config.infinite_approval else amount
        logger.info(
            "Approving %s for spender %s on chain %s (current allowance %s)",
            token,
            spender,
            chain_id,
            current,
        )
        tx = {
            "to": Web3.to_checksum_address(token),
            "data": encode_call("approve(address,uint256)", [spender, approve_amount]),
            "value": 0,
        }
        tx_hash = self._submit(web3, chain_id, owner, tx, ApprovalFailedError, "approve")
        self._emit(EventKind.SUBMITTED, Stage.APPROVING, chain_id, tx_hash, action="approve")

        try:
            receipt = self._wait_for_receipt(web3, chain_id, tx_hash, "approve")
        except ConfirmationTimeoutError as exc:
            # The approval may still land; the hash is kept for manual recovery.
            raise ApprovalFailedError(
                f"Approval not confirmed: {exc.message}",
                step="approve",
                tx_hash=tx_hash,
                chain_id=chain_id,
                details={"token": token, "spender": spender, **exc.details},
            ) from exc
        if _receipt_status(receipt) != 1:
            raise ApprovalFailedError(
                "Token approval reverted",
                step="approve",
                tx_hash=tx_hash,
                chain_id=chain_id,
                details={"token": token, "spender": spender},
            )

        self._emit(EventKind.CONFIRMED, Stage.APPROVING, chain_id, tx_hash, action="approve")
        logger.info("Approval confirmed on chain %s hash=%s", chain_id, tx_hash)
        return tx_hash

    # ------------------------------------------------------------------
    # Transaction helpers
    # ------------------------------------------------------------------
    def _submit(
        self,
        web3: Web3,
        chain_id: int,
        owner: str,
        tx: dict[str, Any],
        error_cls: type[ExecutionError],
        step: str,
    ) -> str:
        payload = {**tx, "from": owner, "chainId": chain_id}
        nonces = self._clients.nonces
        try:
            with nonces.reserve(web3, chain_id, owner) as nonce:
                payload["nonce"] = nonce
                raw_hash = web3.eth.send_transaction(payload)  # type: ignore[arg-type]
        except ComposerError:
            nonces.reset(chain_id, owner)
            raise
        except Exception as exc:
            nonces.reset(chain_id, owner)
            raise error_cls(
                f"Failed to submit {step} transaction",
                step=step,
                chain_id=chain_id,
                details={"to": tx.get("to"), "error": str(exc)},
            ) from exc
        return to_hex_hash(raw_hash)

    def _wait_for_receipt(self, web3: Web3, chain_id: int, tx_hash: str, step: str) -> Any:
        try:
            return web3.eth.wait_for_transaction_receipt(
                HexBytes(tx_hash), timeout=self._config.receipt_timeout
            )
        except TimeExhausted as exc:
            raise ConfirmationTimeoutError(
                f"No receipt within {self._config.receipt_timeout:.0f}s",
                step=step,
                tx_hash=tx_hash,
                chain_id=chain_id,
            ) from exc
        except Exception as exc:
            raise ConfirmationTimeoutError(
                "Failed to fetch transaction receipt",
                step=step,
                tx_hash=tx_hash,
                chain_id=chain_id,
                details={"error": str(exc)},
            ) from exc

    # ------------------------------------------------------------------
    # Progress events
    # ------------------------------------------------------------------
    def _stage(self, stage: Stage, chain_id: int, tx_hash: str | None = None, **details: Any) -> None:
        self._emit(EventKind.STAGE, stage, chain_id, tx_hash, **details)

    def _emit(
        self,
        kind: EventKind,
        stage: Stage,
        chain_id: int,
        tx_hash: str | None = None,
        **details: Any,
    ) -> None:
        self._events.emit(
            ProgressEvent(kind=kind, stage=stage, chain_id=chain_id, tx_hash=tx_hash, details=details)
        )


def _to_transaction(request: TransactionRequest) -> dict[str, Any]:
    tx: dict[str, Any] = {
        "to": Web3.to_checksum_address(request.to),  # type: ignore[arg-type]
        "data": request.data,
        "value": request.value,
    }
    if request.gas_limit:
        tx["gas"] = request.gas_limit
    if request.gas_price:
        tx["gasPrice"] = request.gas_price
    return tx


def _receipt_field(receipt: Any, name: str) -> Any:
    if isinstance(receipt, Mapping):
        return receipt.get(name)
    return getattr(receipt, name, None)


def _receipt_status(receipt: Any) -> int | None:
    status = _receipt_field(receipt, "status")
    return int(status) if status is not None else None
