"""Tests for chain client caching, definition resolution and nonce handling."""

from __future__ import annotations

import threading
from dataclasses import replace

import pytest

from defi_composer.chains import ChainClientManager, ChainClientPair, ChainDefinition, NonceManager
from defi_composer.config import ClientConfig
from defi_composer.constants import NonEvmChain
from defi_composer.exceptions import ChainUnavailableError, ValidationError

from conftest import FakeEth, FakeWeb3, pair_factory


def _counting_factory(created: list[ChainDefinition]):
    build = pair_factory(FakeWeb3(FakeEth()))

    def factory(definition: ChainDefinition) -> ChainClientPair:
        created.append(definition)
        return build(definition)

    return factory


def test_invalid_private_key_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ChainClientManager(ClientConfig(private_key="not-a-key"))
    assert excinfo.value.field == "private_key"


def test_pairs_are_cached_per_chain(client_config: ClientConfig) -> None:
    created: list[ChainDefinition] = []
    manager = ChainClientManager(client_config, client_factory=_counting_factory(created))

    first = manager.get_client_pair(8453)
    second = manager.get_client_pair(8453)
    manager.get_read_client(42161)

    assert first is second
    assert [definition.chain_id for definition in created] == [8453, 42161]
    assert manager.cached_chain_ids() == (8453, 42161)


def test_concurrent_first_use_builds_one_pair(client_config: ClientConfig) -> None:
    created: list[ChainDefinition] = []
    manager = ChainClientManager(client_config, client_factory=_counting_factory(created))
    barrier = threading.Barrier(8)
    results: list[ChainClientPair] = []

    def worker() -> None:
        barrier.wait()
        results.append(manager.get_client_pair(10))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(created) == 1
    assert len({id(pair) for pair in results}) == 1


def test_close_drops_cached_pairs(client_config: ClientConfig) -> None:
    created: list[ChainDefinition] = []
    manager = ChainClientManager(client_config, client_factory=_counting_factory(created))

    manager.get_client_pair(1)
    manager.close()
    manager.get_client_pair(1)

    assert len(created) == 2


def test_static_definition_with_rpc_override(client_config: ClientConfig) -> None:
    config = replace(client_config, rpc_urls={8453: "https://base.example"})
    manager = ChainClientManager(config)

    definition = manager.resolve_definition(8453)
    assert definition.name == "Base"
    assert definition.rpc_url == "https://base.example"
    assert definition.synthesized is False


def test_unlisted_chain_uses_synthesized_definition(
    client_config: ClientConfig, caplog: pytest.LogCaptureFixture
) -> None:
    manager = ChainClientManager(client_config)

    with caplog.at_level("WARNING"):
        definition = manager.resolve_definition(1868)

    assert definition.synthesized is True
    assert definition.rpc_url == "https://1868.rpc.thirdweb.com"
    assert "synthesized" in caplog.text


def test_unlisted_chain_with_override_is_not_synthesized(client_config: ClientConfig) -> None:
    config = replace(client_config, rpc_urls={1868: "https://soneium.example"})
    definition = ChainClientManager(config).resolve_definition(1868)

    assert definition.synthesized is False
    assert definition.rpc_url == "https://soneium.example"


def test_unlisted_chain_without_template_is_fatal(client_config: ClientConfig) -> None:
    config = replace(client_config, fallback_rpc_template=None)
    manager = ChainClientManager(config)

    with pytest.raises(ChainUnavailableError) as excinfo:
        manager.get_client_pair(1868)
    assert excinfo.value.chain_id == 1868
    assert manager.cached_chain_ids() == ()


def test_non_evm_chain_has_no_client(client_config: ClientConfig) -> None:
    with pytest.raises(ChainUnavailableError):
        ChainClientManager(client_config).get_client_pair(NonEvmChain.SOLANA)


def test_default_pair_signs_with_configured_account(client_config: ClientConfig) -> None:
    manager = ChainClientManager(client_config)
    pair = manager.get_client_pair(8453)

    assert pair.read_client is not pair.write_client
    assert pair.write_client.eth.default_account == manager.address
    assert manager.address == manager.account.address


def test_close_releases_provider_sessions(
    client_config: ClientConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = ChainClientManager(client_config)
    pair = manager.get_client_pair(8453)
    closed: list[int] = []

    assert pair.session is not None
    monkeypatch.setattr(pair.session, "close", lambda: closed.append(pair.chain.chain_id))

    manager.close()

    assert closed == [8453]
    assert manager.cached_chain_ids() == ()


def test_nonce_manager_sequences_and_resets() -> None:
    eth = FakeEth(pending_nonce=5)
    web3 = FakeWeb3(eth)
    nonces = NonceManager()
    address = "0x000000000000000000000000000000000000dEaD"

    with nonces.reserve(web3, 8453, address) as first:  # type: ignore[arg-type]
        pass
    with nonces.reserve(web3, 8453, address.lower()) as second:  # type: ignore[arg-type]
        pass
    with nonces.reserve(web3, 10, address) as other_chain:  # type: ignore[arg-type]
        pass

    assert (first, second, other_chain) == (5, 6, 5)

    nonces.reset(8453, address)
    with nonces.reserve(web3, 8453, address) as resynced:  # type: ignore[arg-type]
        pass
    assert resynced == 5


def test_nonce_not_consumed_when_block_fails() -> None:
    web3 = FakeWeb3(FakeEth(pending_nonce=3))
    nonces = NonceManager()
    address = "0x" + "ab" * 20

    with pytest.raises(RuntimeError):
        with nonces.reserve(web3, 1, address):  # type: ignore[arg-type]
            raise RuntimeError("broadcast failed")

    with nonces.reserve(web3, 1, address) as nonce:  # type: ignore[arg-type]
        assert nonce == 3
