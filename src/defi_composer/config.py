"""Configuration containers for the DeFi composer."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .exceptions import ValidationError

DEFAULT_API_URL = "https://li.quest/v1"
DEFAULT_INTEGRATOR = "defi-composer"
DEFAULT_SLIPPAGE = 0.03
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_RECEIPT_TIMEOUT = 300.0
DEFAULT_STATUS_POLL_INTERVAL = 10.0
DEFAULT_STATUS_TIMEOUT = 600.0
DEFAULT_FALLBACK_RPC_TEMPLATE = "https://{chain_id}.rpc.thirdweb.com"
DEFAULT_SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_SOLANA_CONFIRM_TIMEOUT = 90.0


@dataclass(frozen=True)
class QuoteConfig:
    """Settings for the composition service client."""

    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    integrator: str = DEFAULT_INTEGRATOR
    default_slippage: float = DEFAULT_SLIPPAGE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if not 0 <= self.default_slippage < 1:
            raise ValidationError(
                "Slippage must be a fraction in [0, 1)",
                field="default_slippage",
                value=self.default_slippage,
            )


@dataclass(frozen=True)
class ClientConfig:
    """Settings for per-chain web3 clients.

    ``rpc_urls`` overrides the static chain definitions. Chains that are neither
    statically defined nor overridden use ``fallback_rpc_template`` (formatted with
    ``chain_id``); set it to ``None`` to make unknown chains fatal.
    """

    private_key: str
    rpc_urls: Mapping[int, str] = field(default_factory=dict)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    fallback_rpc_template: str | None = DEFAULT_FALLBACK_RPC_TEMPLATE
    verify_connection: bool = True


@dataclass(frozen=True)
class ExecutionConfig:
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    infinite_approval: bool = True


@dataclass(frozen=True)
class StatusConfig:
    """Settings for bridge status polling."""

    api_url: str = DEFAULT_API_URL
    api_key: str | None = None
    poll_interval: float = DEFAULT_STATUS_POLL_INTERVAL
    timeout: float = DEFAULT_STATUS_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValidationError(
                "Poll interval must be positive", field="poll_interval", value=self.poll_interval
            )
        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive", field="timeout", value=self.timeout)


@dataclass(frozen=True)
class SolanaConfig:
    rpc_url: str = DEFAULT_SOLANA_RPC_URL
    secret_key: str | None = None
    confirm_timeout: float = DEFAULT_SOLANA_CONFIRM_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class ComposerConfig:
    """Aggregated configuration used to construct the composer facade."""

    clients: ClientConfig
    quote: QuoteConfig = QuoteConfig()
    execution: ExecutionConfig = ExecutionConfig()
    status: StatusConfig = StatusConfig()
    solana: SolanaConfig = SolanaConfig()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ComposerConfig:
        """Build a configuration from environment variables."""

        env = os.environ if environ is None else environ

        private_key = env.get("PRIVATE_KEY")
        if not private_key or private_key == "0x":
            raise ValidationError("PRIVATE_KEY is not set", field="PRIVATE_KEY")

        api_url = env.get("LIFI_API_URL", DEFAULT_API_URL).rstrip("/")
        api_key = env.get("LIFI_API_KEY") or None
        request_timeout = _env_float(env, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)

        rpc_urls: dict[int, str] = {}
        for name, value in env.items():
            if name.startswith("RPC_URL_") and value:
                suffix = name.removeprefix("RPC_URL_")
                if suffix.isdigit():
                    rpc_urls[int(suffix)] = value

        return cls(
            clients=ClientConfig(
                private_key=private_key,
                rpc_urls=rpc_urls,
                request_timeout=request_timeout,
            ),
            quote=QuoteConfig(
                api_url=api_url,
                api_key=api_key,
                integrator=env.get("LIFI_INTEGRATOR", DEFAULT_INTEGRATOR),
                request_timeout=request_timeout,
            ),
            execution=ExecutionConfig(
                receipt_timeout=_env_float(env, "RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
            ),
            status=StatusConfig(
                api_url=api_url,
                api_key=api_key,
                poll_interval=_env_float(
                    env, "STATUS_POLL_INTERVAL", DEFAULT_STATUS_POLL_INTERVAL
                ),
                timeout=_env_float(env, "STATUS_TIMEOUT", DEFAULT_STATUS_TIMEOUT),
                request_timeout=request_timeout,
            ),
            solana=SolanaConfig(
                rpc_url=env.get("SOLANA_RPC_URL", DEFAULT_SOLANA_RPC_URL),
                secret_key=env.get("SOLANA_PRIVATE_KEY") or None,
                request_timeout=request_timeout,
            ),
        )


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a number", field=name, value=raw) from exc
