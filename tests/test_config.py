"""Tests for configuration loading."""

import pytest

from defi_composer.config import (
    DEFAULT_API_URL,
    ComposerConfig,
    QuoteConfig,
    StatusConfig,
)
from defi_composer.exceptions import ValidationError

from conftest import TEST_PRIVATE_KEY


def test_from_env_reads_overrides() -> None:
    config = ComposerConfig.from_env(
        {
            "PRIVATE_KEY": TEST_PRIVATE_KEY,
            "LIFI_API_URL": "https://li.example/v1/",
            "LIFI_API_KEY": "secret",
            "RPC_URL_8453": "https://base.example",
            "RPC_URL_BASE": "ignored",
            "STATUS_POLL_INTERVAL": "5",
            "RECEIPT_TIMEOUT": "120",
            "SOLANA_PRIVATE_KEY": "",
        }
    )

    assert config.clients.rpc_urls == {8453: "https://base.example"}
    assert config.quote.api_url == "https://li.example/v1"
    assert config.quote.api_key == "secret"
    assert config.status.api_key == "secret"
    assert config.status.poll_interval == 5.0
    assert config.status.timeout == 600.0
    assert config.execution.receipt_timeout == 120.0
    assert config.solana.secret_key is None


def test_from_env_defaults() -> None:
    config = ComposerConfig.from_env({"PRIVATE_KEY": TEST_PRIVATE_KEY})

    assert config.quote.api_url == DEFAULT_API_URL
    assert config.quote.api_key is None
    assert config.quote.default_slippage == 0.03
    assert config.execution.infinite_approval is True


@pytest.mark.parametrize("value", [None, "", "0x"])
def test_from_env_requires_private_key(value) -> None:
    env = {} if value is None else {"PRIVATE_KEY": value}
    with pytest.raises(ValidationError):
        ComposerConfig.from_env(env)


def test_from_env_rejects_non_numeric_timeouts() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ComposerConfig.from_env({"PRIVATE_KEY": TEST_PRIVATE_KEY, "STATUS_TIMEOUT": "soon"})
    assert excinfo.value.field == "STATUS_TIMEOUT"


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValidationError):
        QuoteConfig(default_slippage=1.0)
    with pytest.raises(ValidationError):
        StatusConfig(poll_interval=0)
