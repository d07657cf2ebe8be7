from __future__ import annotations

import base64
import time
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any, cast

import pytest
from eth_abi import encode as abi_encode
from hexbytes import HexBytes
from requests import Session
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.transaction import VersionedTransaction
from web3 import Web3

from defi_composer.chains import ChainClientManager, ChainClientPair, ChainDefinition
from defi_composer.config import ClientConfig

TEST_PRIVATE_KEY = "0x" + "4c" * 32
LIFI_DIAMOND = "0x1231deb6f5749ef6ce6943a275a1d3e7486f4eae"
USDC_BASE = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"
NATIVE = "0x0000000000000000000000000000000000000000"


class DummyResponse:
    def __init__(self, payload: Any, *, status_code: int = 200, reason: str = "") -> None:
        self._payload = payload
        self.status_code = status_code
        self.reason = reason

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class DummySession(Session):
    """Replay canned responses and record every request."""

    def __init__(self, responses: list[Any]) -> None:
        super().__init__()
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def _next(self, **call: Any) -> DummyResponse:
        self.calls.append(call)
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def request(self, method: str, url: str, **kwargs: Any) -> DummyResponse:  # type: ignore[override]
        return self._next(method=method, url=url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> DummyResponse:  # type: ignore[override]
        return self._next(method="GET", url=url, **kwargs)


class FakeEth:
    """Minimal stand-in for ``web3.eth`` that records submitted transactions."""

    def __init__(
        self,
        *,
        allowance: int = 0,
        receipt_statuses: list[int] | None = None,
        send_error: Exception | None = None,
        receipt_error: Exception | None = None,
        call_error: Exception | None = None,
        pending_nonce: int = 5,
        send_delay: float = 0.0,
    ) -> None:
        self.allowance = allowance
        self.receipt_statuses = list(receipt_statuses or [1])
        self.send_error = send_error
        self.receipt_error = receipt_error
        self.call_error = call_error
        self.pending_nonce = pending_nonce
        self.send_delay = send_delay
        self.sent: list[dict[str, Any]] = []
        self.calls: list[dict[str, Any]] = []
        self.default_account = None

    def get_transaction_count(self, address: str, block_identifier: str) -> int:
        return self.pending_nonce

    def call(self, tx: dict[str, Any]) -> bytes:
        self.calls.append(tx)
        if self.call_error is not None:
            raise self.call_error
        return abi_encode(["uint256"], [self.allowance])

    def send_transaction(self, tx: dict[str, Any]) -> HexBytes:
        if self.send_error is not None:
            raise self.send_error
        if self.send_delay:
            time.sleep(self.send_delay)
        self.sent.append(tx)
        return HexBytes(bytes([len(self.sent)]) * 32)

    def wait_for_transaction_receipt(self, tx_hash: Any, timeout: float) -> dict[str, Any]:
        if self.receipt_error is not None:
            raise self.receipt_error
        status = self.receipt_statuses.pop(0) if self.receipt_statuses else 1
        return {"status": status, "blockNumber": 1234, "transactionHash": HexBytes(tx_hash)}


class FakeWeb3:
    def __init__(self, eth: FakeEth) -> None:
        self.eth = eth


def pair_factory(web3: FakeWeb3) -> Callable[[ChainDefinition], ChainClientPair]:
    def factory(definition: ChainDefinition) -> ChainClientPair:
        client = cast(Web3, web3)
        return ChainClientPair(chain=definition, read_client=client, write_client=client)

    return factory


@pytest.fixture
def fake_eth() -> FakeEth:
    return FakeEth()


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(private_key=TEST_PRIVATE_KEY, verify_connection=False)


@pytest.fixture
def make_clients(client_config: ClientConfig) -> Callable[[FakeEth], ChainClientManager]:
    def build(eth: FakeEth) -> ChainClientManager:
        return ChainClientManager(client_config, client_factory=pair_factory(FakeWeb3(eth)))

    return build


@pytest.fixture
def quote_payload() -> Callable[..., dict[str, Any]]:
    def build(
        *,
        from_chain: int = 8453,
        to_chain: int = 8453,
        from_token: str = USDC_BASE,
        from_amount: str = "100000000",
        approval_address: str | None = None,
        value: str = "0x0",
        tool: str = "composer",
    ) -> dict[str, Any]:
        return {
            "id": "quote-1",
            "type": "lifi",
            "tool": tool,
            "action": {
                "fromChainId": from_chain,
                "toChainId": to_chain,
                "fromToken": {"address": from_token, "symbol": "USDC", "decimals": 6},
                "toToken": {"address": USDC_BASE, "symbol": "USDC", "decimals": 6},
                "fromAmount": from_amount,
            },
            "estimate": {
                "fromAmount": from_amount,
                "toAmount": "99500000",
                "toAmountMin": "96515000",
                "approvalAddress": approval_address,
                "executionDuration": 42.5,
                "gasCosts": [
                    {"type": "SEND", "amount": "21000", "amountUSD": "0.124", "token": {"symbol": "ETH"}},
                    {"type": "SEND", "amount": "30000", "amountUSD": "0.30", "token": {"symbol": "ETH"}},
                ],
                "feeCosts": [
                    {"name": "LIFI Fee", "amount": "250000", "amountUSD": "0.25", "included": True},
                    {"name": "Relayer", "amount": "100000", "amountUSD": "0.10", "included": False},
                ],
            },
            "transactionRequest": {
                "to": LIFI_DIAMOND,
                "data": "0xdeadbeef",
                "value": value,
                "gasLimit": "0x61a80",
                "chainId": from_chain,
            },
            "includedSteps": [
                {
                    "id": "step-1",
                    "type": "cross" if from_chain != to_chain else "protocol",
                    "tool": tool,
                    "action": {"fromChainId": from_chain, "toChainId": to_chain},
                }
            ],
        }

    return build


class FakeSolanaClient:
    """Stand-in for ``solana.rpc.api.Client`` covering send and status lookups."""

    def __init__(
        self,
        statuses: list[Any],
        *,
        send_error: Exception | None = None,
        status_errors: list[Exception] | None = None,
    ) -> None:
        self._statuses = list(statuses)
        self.send_error = send_error
        self.status_errors = list(status_errors or [])
        self.sent: list[bytes] = []
        self.status_calls = 0

    def send_raw_transaction(self, txn: bytes, opts: Any = None) -> SimpleNamespace:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(txn)
        signed = VersionedTransaction.from_bytes(txn)
        return SimpleNamespace(value=signed.signatures[0])

    def get_signature_statuses(self, signatures: list[Any]) -> SimpleNamespace:
        self.status_calls += 1
        if self.status_errors:
            raise self.status_errors.pop(0)
        status = self._statuses.pop(0) if len(self._statuses) > 1 else self._statuses[0]
        return SimpleNamespace(value=[status])


def confirmed_status(err: Any = None) -> SimpleNamespace:
    return SimpleNamespace(confirmation_status="TransactionConfirmationStatus.Confirmed", err=err)


def unsigned_solana_transaction(keypair: Keypair) -> str:
    """Base64 transaction as the composition service returns it for Solana sources."""
    message = MessageV0.try_compile(keypair.pubkey(), [], [], Hash.default())
    return base64.b64encode(bytes(VersionedTransaction(message, [keypair]))).decode()
