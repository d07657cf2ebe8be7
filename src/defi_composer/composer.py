"""High-level facade wiring registry, encoder, quotes, execution and status polling."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import replace

import requests

from .bridge import BridgeQuoteParams, BridgeStatusPoller, NonEvmBridgeAdapter
from .chains import ChainClientManager
from .chains.manager import ClientFactory
from .config import ComposerConfig
from .constants import get_token_address
from .exceptions import ValidationError
from .execution import ExecutionEngine, ProgressObserver
from .protocols import ActionEncoder, ProtocolDeployment, ProtocolRegistry, default_registry
from .quote import ContractCallsQuoteRequest, QuoteRequester
from .types import (
    ComposedAction,
    ExecutionResult,
    ExecutionStatus,
    Quote,
    StatusKey,
    StatusResponse,
)
from .utils import parse_amount

logger = logging.getLogger(__name__)


class DeFiComposer:
    """Compose, quote and execute protocol deposits, optionally across chains.

    One instance owns one :class:`ChainClientManager`; construct it once per
    process and share it rather than creating composers per request.
    """

    def __init__(
        self,
        config: ComposerConfig,
        *,
        registry: ProtocolRegistry | None = None,
        session: requests.Session | None = None,
        client_factory: ClientFactory | None = None,
        observers: Iterable[ProgressObserver] = (),
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self.registry = registry or default_registry()
        self.encoder = ActionEncoder()
        self.clients = ChainClientManager(config.clients, client_factory=client_factory)
        self.quotes = QuoteRequester(config.quote, self._session)
        self.engine = ExecutionEngine(self.clients, config.execution, observers=observers)
        self.poller = BridgeStatusPoller(config.status, self._session)
        self._non_evm: NonEvmBridgeAdapter | None = None

    def __enter__(self) -> DeFiComposer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def address(self) -> str:
        return self.clients.address

    @property
    def non_evm(self) -> NonEvmBridgeAdapter:
        if self._non_evm is None:
            self._non_evm = NonEvmBridgeAdapter(self.quotes, self.poller, self._config.solana)
        return self._non_evm

    def close(self) -> None:
        self.clients.close()
        self._session.close()

    # ------------------------------------------------------------------
    # Composition and quoting
    # ------------------------------------------------------------------
    def compose(self, protocol_id: str, chain_id: int, amount: int | str) -> ComposedAction:
        deployment = self.registry.require(protocol_id, chain_id)
        return self.encoder.compose(deployment, amount, self.address)

    def quote_deposit(
        self,
        protocol_id: str,
        dest_chain: int,
        amount: int | str,
        *,
        source_chain: int | None = None,
        source_token: str | None = None,
        slippage: float | None = None,
        allow_bridges: Sequence[str] | None = None,
        deny_bridges: Sequence[str] | None = None,
    ) -> Quote:
        """Request a fresh quote that ends in a deposit into ``protocol_id`` on ``dest_chain``."""

        deployment = self.registry.require(protocol_id, dest_chain)
        units = parse_amount(amount)
        action = self.encoder.compose(deployment, units, self.address)
        from_chain = dest_chain if source_chain is None else source_chain
        from_token = source_token or self._default_source_token(deployment, from_chain)

        request = ContractCallsQuoteRequest(
            from_chain=from_chain,
            from_token=from_token,
            from_address=self.address,
            to_chain=dest_chain,
            to_token=deployment.input_token,
            to_amount=units,
            contract_calls=(action,),
            slippage=slippage,
            allow_bridges=tuple(allow_bridges) if allow_bridges is not None else None,
            deny_bridges=tuple(deny_bridges) if deny_bridges is not None else None,
        )
        return self.quotes.request_contract_calls_quote(request)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def execute(self, quote: Quote) -> ExecutionResult:
        return self.engine.execute(quote)

    def execute_direct(self, protocol_id: str, chain_id: int, amount: int | str) -> ExecutionResult:
        """Call the deposit contract directly on ``chain_id`` without the composition service."""

        deployment = self.registry.require(protocol_id, chain_id)
        units = parse_amount(amount)
        call = self.encoder.encode(deployment, units, self.address)
        return self.engine.execute_call(
            chain_id,
            call,
            input_token=deployment.input_token,
            amount=units,
            approval_address=deployment.deposit_contract if deployment.requires_approval else None,
        )

    def get_status(self, key: StatusKey) -> StatusResponse:
        return self.poller.get_status(key)

    def wait_for_completion(
        self,
        result: ExecutionResult,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExecutionResult:
        """Resolve a PENDING result through the status poller; other results pass through."""

        if result.status is not ExecutionStatus.PENDING:
            return result
        outcome = self.poller.wait(result.status_key, timeout=timeout, cancel_event=cancel_event)
        return result.with_bridge_result(outcome)

    def deposit(
        self,
        protocol_id: str,
        dest_chain: int,
        amount: int | str,
        *,
        source_chain: int | None = None,
        source_token: str | None = None,
        slippage: float | None = None,
        allow_bridges: Sequence[str] | None = None,
        deny_bridges: Sequence[str] | None = None,
        wait: bool = False,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ExecutionResult:
        """Quote and execute a deposit in one go; ``wait`` resolves cross-chain results."""

        quote = self.quote_deposit(
            protocol_id,
            dest_chain,
            amount,
            source_chain=source_chain,
            source_token=source_token,
            slippage=slippage,
            allow_bridges=allow_bridges,
            deny_bridges=deny_bridges,
        )
        result = self.engine.execute(quote)
        if wait:
            result = self.wait_for_completion(result, timeout=timeout, cancel_event=cancel_event)
        return result

    def bridge_and_deposit(
        self,
        params: BridgeQuoteParams,
        protocol_id: str,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> tuple[ExecutionResult, ExecutionResult | None]:
        """Bridge from a non-EVM chain, then deposit the received funds on the destination.

        Returns the bridge result and the deposit result; the latter is ``None``
        when the bridge did not settle or its funds were refunded or only
        partially delivered. The deposit is funded from ``params.to_token``.
        """

        if params.to_address is None:
            params = replace(params, to_address=self.address)

        adapter = self.non_evm
        quote = adapter.quote(params)
        bridged = adapter.execute(quote)
        bridged = adapter.wait_for_completion(bridged, timeout=timeout, cancel_event=cancel_event)
        if bridged.status is not ExecutionStatus.DONE:
            logger.warning(
                "Bridge %s ended as %s; skipping deposit", bridged.source_tx_hash, bridged.status.value
            )
            return bridged, None
        if bridged.fallback_triggered:
            logger.warning(
                "Bridge %s settled without delivering %s; skipping deposit",
                bridged.source_tx_hash,
                params.to_token,
            )
            return bridged, None

        deposit_amount = bridged.received_amount or quote.estimate.to_amount_min
        logger.info(
            "Bridge settled; depositing %s into %s on chain %s",
            deposit_amount,
            protocol_id,
            params.to_chain,
        )
        deposited = self.deposit(
            protocol_id, params.to_chain, deposit_amount, source_token=params.to_token
        )
        return bridged, deposited

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _default_source_token(self, deployment: ProtocolDeployment, source_chain: int) -> str:
        if source_chain == deployment.chain_id:
            return deployment.input_token

        symbol = deployment.input_token_symbol
        token = get_token_address(source_chain, symbol)
        if token is None and symbol.upper() == "WETH":
            token = get_token_address(source_chain, "ETH")
        if token is None:
            raise ValidationError(
                f"No known {symbol} address on chain {source_chain}; pass source_token",
                field="source_token",
                value=symbol,
            )
        return token
