"""Bridge legs that start outside the EVM account model."""

from __future__ import annotations

import base64
import json
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from solana.rpc.api import Client as SolanaClient
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from ..config import SolanaConfig
from ..constants import ChainType, get_chain_type
from ..exceptions import (
    ConfirmationTimeoutError,
    ExecutionRevertedError,
    QuoteError,
    SubmissionFailedError,
    UnsupportedRouteError,
    ValidationError,
)
from ..quote import QuoteRequester, TransferQuoteRequest
from ..types import ExecutionResult, ExecutionStatus, ExplorerLinks, Quote
from ..utils import build_explorer_url, build_lifi_explorer_url, parse_amount
from .poller import BridgeStatusPoller

logger = logging.getLogger(__name__)

# Upstream rejections that mean the chain pair or token pair cannot be routed.
ROUTE_REJECTION_CODES = frozenset({"1002", "1011"})

SOLANA_STATUS_POLL_INTERVAL = 2.0


@dataclass(frozen=True)
class BridgeQuoteParams:
    from_chain: int
    to_chain: int
    from_token: str
    to_token: str
    from_amount: int
    from_address: str | None = None
    to_address: str | None = None
    slippage: float | None = None


def load_solana_keypair(secret: str) -> Keypair:
    """Accept a base58 secret key or a JSON byte array as written by ``solana-keygen``."""

    text = secret.strip()
    try:
        if text.startswith("["):
            return Keypair.from_bytes(bytes(json.loads(text)))
        return Keypair.from_base58_string(text)
    except Exception as exc:
        raise ValidationError(
            "Failed to derive Solana keypair from secret",
            field="SOLANA_PRIVATE_KEY",
            details={"error": type(exc).__name__},
        ) from exc


class NonEvmBridgeAdapter:
    """Quote and execute bridge legs from non-EVM chains into EVM destinations.

    The source leg is a plain asset transfer through the bridge; any destination
    contract call is run afterwards by the execution engine.
    """

    def __init__(
        self,
        quotes: QuoteRequester,
        poller: BridgeStatusPoller,
        config: SolanaConfig | None = None,
        *,
        solana_client: SolanaClient | None = None,
        keypair: Keypair | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._quotes = quotes
        self._poller = poller
        self._config = config or SolanaConfig()
        self._solana_client = solana_client
        self._keypair = keypair
        if self._keypair is None and self._config.secret_key:
            self._keypair = load_solana_keypair(self._config.secret_key)
        self._clock = clock
        self._sleep = sleep

    @property
    def solana_address(self) -> str | None:
        return str(self._keypair.pubkey()) if self._keypair is not None else None

    @property
    def solana_client(self) -> SolanaClient:
        if self._solana_client is None:
            self._solana_client = SolanaClient(
                self._config.rpc_url, timeout=self._config.request_timeout
            )
        return self._solana_client

    # ------------------------------------------------------------------
    # Quoting
    # ------------------------------------------------------------------
    def quote(self, params: BridgeQuoteParams) -> Quote:
        source_type = get_chain_type(params.from_chain)
        dest_type = get_chain_type(params.to_chain)
        if source_type is ChainType.EVM or dest_type is not ChainType.EVM:
            raise UnsupportedRouteError(
                f"No route: expected a non-EVM source and an EVM destination "
                f"(got {source_type.value} -> {dest_type.value})",
                details={"from_chain": params.from_chain, "to_chain": params.to_chain},
            )

        from_address = params.from_address
        if from_address is None and source_type is ChainType.SVM:
            from_address = self.solana_address
        if not from_address:
            raise ValidationError("A source address is required", field="from_address")
        if not params.to_address:
            raise ValidationError("A destination EVM address is required", field="to_address")

        request = TransferQuoteRequest(
            from_chain=params.from_chain,
            to_chain=params.to_chain,
            from_token=params.from_token,
            to_token=params.to_token,
            from_amount=parse_amount(params.from_amount, "from_amount"),
            from_address=from_address,
            to_address=params.to_address,
            slippage=params.slippage,
        )

        try:
            return self._quotes.request_quote(request)
        except UnsupportedRouteError:
            raise
        except QuoteError as exc:
            if exc.code in ROUTE_REJECTION_CODES:
                raise UnsupportedRouteError(
                    f"No route: {exc.message}", status_code=exc.status_code, details=exc.details
                ) from exc
            raise

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def execute(self, quote: Quote) -> ExecutionResult:
        chain_type = get_chain_type(quote.source_chain)
        if chain_type is not ChainType.SVM:
            raise UnsupportedRouteError(
                f"Execution from {chain_type.value} source chains is not supported",
                details={"source_chain": quote.source_chain},
            )
        if self._keypair is None:
            raise ValidationError("No Solana keypair configured", field="SOLANA_PRIVATE_KEY")

        started = self._clock()
        signature = self._submit_solana(quote, self._keypair)
        logger.info("Solana transaction submitted signature=%s", signature)

        error = self._confirm_solana(signature, quote.source_chain)
        links = ExplorerLinks(
            source=build_explorer_url(quote.source_chain, signature),
            lifi=build_lifi_explorer_url(signature),
        )
        duration = int(self._clock() - started)

        if error is not None:
            failure = ExecutionRevertedError(
                "Solana transaction failed",
                step="confirm",
                tx_hash=signature,
                chain_id=quote.source_chain,
                details={"error": str(error)},
            )
            logger.error("Solana transaction %s failed: %s", signature, error)
            return ExecutionResult(
                status=ExecutionStatus.FAILED,
                source_tx_hash=signature,
                source_chain=quote.source_chain,
                dest_chain=quote.dest_chain,
                bridge=quote.tool,
                contract_call_succeeded=False,
                explorer_links=links,
                duration_seconds=duration,
                error=failure,
            )

        return ExecutionResult(
            status=ExecutionStatus.PENDING,
            source_tx_hash=signature,
            source_chain=quote.source_chain,
            dest_chain=quote.dest_chain,
            bridge=quote.tool,
            contract_call_succeeded=False,
            explorer_links=links,
            duration_seconds=duration,
        )

    def wait_for_completion(
        self,
        result: ExecutionResult,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExecutionResult:
        if result.status is not ExecutionStatus.PENDING:
            return result
        outcome = self._poller.wait(result.status_key, timeout=timeout, cancel_event=cancel_event)
        return result.with_bridge_result(outcome)

    def _submit_solana(self, quote: Quote, keypair: Keypair) -> str:
        try:
            raw = base64.b64decode(quote.transaction_request.data)
            unsigned = VersionedTransaction.from_bytes(raw)
            signed = VersionedTransaction(unsigned.message, [keypair])
        except Exception as exc:
            raise SubmissionFailedError(
                "Quote does not carry a valid Solana transaction",
                step="submit",
                chain_id=quote.source_chain,
                details={"error": str(exc)},
            ) from exc

        try:
            response = self.solana_client.send_raw_transaction(
                bytes(signed),
                opts=TxOpts(skip_preflight=False, preflight_commitment=Confirmed),
            )
        except Exception as exc:
            raise SubmissionFailedError(
                "Failed to submit Solana transaction",
                step="submit",
                chain_id=quote.source_chain,
                details={"error": str(exc)},
            ) from exc
        return str(response.value)

    def _confirm_solana(self, signature: str, chain_id: int) -> Any | None:
        """Wait for confirmation; return the on-chain error, or None on success."""

        deadline = self._clock() + self._config.confirm_timeout
        parsed = Signature.from_string(signature)
        last_exc: Exception | None = None
        while True:
            try:
                response = self.solana_client.get_signature_statuses([parsed])
            except Exception as exc:
                # Already broadcast: keep polling until the deadline.
                last_exc = exc
                logger.warning("Solana status lookup for %s failed: %s", signature, exc)
            else:
                status = response.value[0] if response.value else None
                if status is not None and status.confirmation_status is not None:
                    if status.err is not None:
                        return status.err
                    level = str(status.confirmation_status).lower()
                    if "confirmed" in level or "finalized" in level:
                        return None

            if self._clock() >= deadline:
                details = {"error": str(last_exc)} if last_exc is not None else None
                raise ConfirmationTimeoutError(
                    f"Solana transaction not confirmed within {self._config.confirm_timeout:.0f}s",
                    step="confirm",
                    tx_hash=signature,
                    chain_id=chain_id,
                    details=details,
                ) from last_exc
            self._sleep(SOLANA_STATUS_POLL_INTERVAL)
