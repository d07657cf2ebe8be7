"""Tests for non-EVM source legs (Solana into EVM destinations)."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from defi_composer.bridge import (
    BridgeQuoteParams,
    BridgeStatusPoller,
    NonEvmBridgeAdapter,
    load_solana_keypair,
)
from defi_composer.config import QuoteConfig, SolanaConfig, StatusConfig
from defi_composer.constants import NonEvmChain
from defi_composer.exceptions import (
    ConfirmationTimeoutError,
    QuoteError,
    UnsupportedRouteError,
    ValidationError,
)
from defi_composer.quote import QuoteRequester
from defi_composer.types import ExecutionStatus, Quote

from conftest import (
    USDC_BASE,
    DummyResponse,
    DummySession,
    FakeSolanaClient,
    confirmed_status,
    unsigned_solana_transaction,
)

SOLANA = int(NonEvmChain.SOLANA)
SOL_USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
EVM_USER = "0x000000000000000000000000000000000000dEaD"

PayloadFactory = Callable[..., dict[str, Any]]


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def _solana_quote(payload_factory: PayloadFactory, keypair: Keypair) -> Quote:
    payload = payload_factory(from_chain=SOLANA, to_chain=8453, from_token=SOL_USDC, tool="mayan")
    payload["transactionRequest"] = {"data": unsigned_solana_transaction(keypair)}
    return Quote.from_dict(payload)


def _adapter(
    responses: list[Any],
    *,
    solana_client: FakeSolanaClient | None = None,
    keypair: Keypair | None = None,
    confirm_timeout: float = 10,
) -> tuple[NonEvmBridgeAdapter, DummySession, FakeClock]:
    session = DummySession(responses)
    clock = FakeClock()
    adapter = NonEvmBridgeAdapter(
        QuoteRequester(QuoteConfig(), session=session),
        BridgeStatusPoller(StatusConfig(), session=session, clock=clock, sleep=clock.sleep),
        SolanaConfig(confirm_timeout=confirm_timeout),
        solana_client=solana_client,  # type: ignore[arg-type]
        keypair=keypair,
        clock=clock,
        sleep=clock.sleep,
    )
    return adapter, session, clock


def _params(**overrides: Any) -> BridgeQuoteParams:
    values: dict[str, Any] = {
        "from_chain": SOLANA,
        "to_chain": 8453,
        "from_token": SOL_USDC,
        "to_token": USDC_BASE,
        "from_amount": 5_000_000,
        "to_address": EVM_USER,
    }
    values.update(overrides)
    return BridgeQuoteParams(**values)


def test_load_keypair_accepts_base58_and_json() -> None:
    keypair = Keypair()

    from_base58 = load_solana_keypair(str(keypair))
    from_json = load_solana_keypair(json.dumps(list(bytes(keypair))))

    assert from_base58.pubkey() == keypair.pubkey()
    assert from_json.pubkey() == keypair.pubkey()
    with pytest.raises(ValidationError):
        load_solana_keypair("not-a-key")


@pytest.mark.parametrize(
    ("from_chain", "to_chain"),
    [(42161, 8453), (SOLANA, int(NonEvmChain.BITCOIN)), (8453, SOLANA)],
)
def test_unsupported_chain_pairs_are_rejected_without_a_request(
    from_chain: int, to_chain: int
) -> None:
    adapter, session, _ = _adapter([DummyResponse({})], keypair=Keypair())

    with pytest.raises(UnsupportedRouteError):
        adapter.quote(_params(from_chain=from_chain, to_chain=to_chain))
    assert session.calls == []


def test_quote_defaults_source_address_to_keypair(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    payload = quote_payload(from_chain=SOLANA, to_chain=8453, from_token=SOL_USDC)
    adapter, session, _ = _adapter([DummyResponse(payload)], keypair=keypair)

    quote = adapter.quote(_params())

    params = session.calls[0]["params"]
    assert params["fromAddress"] == str(keypair.pubkey())
    assert params["toAddress"] == EVM_USER
    assert quote.source_chain == SOLANA


def test_quote_requires_destination_address() -> None:
    adapter, _, _ = _adapter([DummyResponse({})], keypair=Keypair())
    with pytest.raises(ValidationError):
        adapter.quote(_params(to_address=None))


@pytest.mark.parametrize("code", [1002, 1011])
def test_route_rejection_codes_map_to_unsupported_route(code: int) -> None:
    body = {"message": "No available quotes", "code": code}
    adapter, _, _ = _adapter([DummyResponse(body, status_code=400)], keypair=Keypair())

    with pytest.raises(UnsupportedRouteError):
        adapter.quote(_params())


def test_other_quote_errors_propagate() -> None:
    body = {"message": "Rate limited", "code": 1005}
    adapter, _, _ = _adapter([DummyResponse(body, status_code=429)], keypair=Keypair())

    with pytest.raises(QuoteError) as excinfo:
        adapter.quote(_params())
    assert not isinstance(excinfo.value, UnsupportedRouteError)


def test_execute_rejects_non_svm_sources(quote_payload: PayloadFactory) -> None:
    adapter, _, _ = _adapter([DummyResponse({})], keypair=Keypair())
    payload = quote_payload(from_chain=int(NonEvmChain.BITCOIN), to_chain=8453)

    with pytest.raises(UnsupportedRouteError):
        adapter.execute(Quote.from_dict(payload))


def test_execute_requires_keypair(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    adapter, _, _ = _adapter([DummyResponse({})], solana_client=FakeSolanaClient([None]))

    with pytest.raises(ValidationError):
        adapter.execute(_solana_quote(quote_payload, keypair))


def test_execute_signs_submits_and_returns_pending(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    client = FakeSolanaClient([None, confirmed_status()])
    adapter, _, _ = _adapter([DummyResponse({})], solana_client=client, keypair=keypair)

    result = adapter.execute(_solana_quote(quote_payload, keypair))

    assert result.status is ExecutionStatus.PENDING
    assert result.bridge == "mayan"
    assert result.contract_call_succeeded is False
    signed = VersionedTransaction.from_bytes(client.sent[0])
    assert str(signed.signatures[0]) == result.source_tx_hash
    assert result.explorer_links.lifi is not None


def test_on_chain_error_returns_failed_result(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    client = FakeSolanaClient([confirmed_status(err="InstructionError")])
    adapter, _, _ = _adapter([DummyResponse({})], solana_client=client, keypair=keypair)

    result = adapter.execute(_solana_quote(quote_payload, keypair))

    assert result.status is ExecutionStatus.FAILED
    assert result.error is not None
    assert result.error.details["error"] == "InstructionError"


def test_unconfirmed_transaction_times_out(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    client = FakeSolanaClient([None])
    adapter, _, clock = _adapter(
        [DummyResponse({})], solana_client=client, keypair=keypair, confirm_timeout=4
    )

    with pytest.raises(ConfirmationTimeoutError) as excinfo:
        adapter.execute(_solana_quote(quote_payload, keypair))

    assert excinfo.value.chain_id == SOLANA
    assert clock.now == 4.0


def test_status_lookup_errors_are_retried(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    client = FakeSolanaClient(
        [confirmed_status()], status_errors=[ConnectionError("rpc reset"), TimeoutError("slow")]
    )
    adapter, _, clock = _adapter([DummyResponse({})], solana_client=client, keypair=keypair)

    result = adapter.execute(_solana_quote(quote_payload, keypair))

    assert result.status is ExecutionStatus.PENDING
    assert client.status_calls == 3
    assert len(client.sent) == 1
    assert clock.now == 4.0


def test_status_lookup_failures_keep_signature(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    errors = [ConnectionError("rpc down") for _ in range(10)]
    client = FakeSolanaClient([None], status_errors=errors)
    adapter, _, _ = _adapter(
        [DummyResponse({})], solana_client=client, keypair=keypair, confirm_timeout=4
    )

    with pytest.raises(ConfirmationTimeoutError) as excinfo:
        adapter.execute(_solana_quote(quote_payload, keypair))

    signed = VersionedTransaction.from_bytes(client.sent[0])
    assert excinfo.value.tx_hash == str(signed.signatures[0])
    assert excinfo.value.step == "confirm"
    assert excinfo.value.details["error"] == "rpc down"
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert len(client.sent) == 1


def test_wait_for_completion_merges_bridge_outcome(quote_payload: PayloadFactory) -> None:
    keypair = Keypair()
    client = FakeSolanaClient([confirmed_status()])
    done = {"status": "DONE", "receiving": {"txHash": "0x" + "cd" * 32}}
    adapter, _, _ = _adapter([DummyResponse(done)], solana_client=client, keypair=keypair)

    pending = adapter.execute(_solana_quote(quote_payload, keypair))
    final = adapter.wait_for_completion(pending)

    assert final.status is ExecutionStatus.DONE
    assert final.contract_call_succeeded is True
    assert final.destination_tx_hash == "0x" + "cd" * 32
    assert final.explorer_links.destination is not None
