"""Per-chain web3 client lifecycle."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import cast

import requests
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import HTTPProvider, Web3
from web3.middleware import SignAndSendRawMiddlewareBuilder
from web3.types import ChecksumAddress

from ..config import ClientConfig
from ..constants import ChainType, get_chain_name, get_chain_type
from ..exceptions import ChainUnavailableError, NetworkError, ValidationError
from .definitions import STATIC_CHAIN_DEFINITIONS, ChainDefinition, synthesize_definition
from .nonces import NonceManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainClientPair:
    chain: ChainDefinition
    read_client: Web3
    write_client: Web3
    session: requests.Session | None = None


ClientFactory = Callable[[ChainDefinition], ChainClientPair]


class ChainClientManager:
    """Own exactly one read/write client pair per chain id.

    Pairs are created on first use and cached until :meth:`close`. Creation is
    serialised by a lock so concurrent callers never build a second pair for the
    same chain.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        client_factory: ClientFactory | None = None,
        nonces: NonceManager | None = None,
    ) -> None:
        self.config = config
        try:
            signer = cast(LocalAccount, Account.from_key(config.private_key))
        except Exception as exc:
            raise ValidationError(
                "Failed to derive signer account from provided private key",
                field="private_key",
                details={"error": type(exc).__name__},
            ) from exc

        self._account = signer
        self._client_factory = client_factory or self._build_pair
        self._pairs: dict[int, ChainClientPair] = {}
        self._lock = threading.Lock()
        self.nonces = nonces or NonceManager()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def account(self) -> LocalAccount:
        return self._account

    @property
    def address(self) -> ChecksumAddress:
        return cast(ChecksumAddress, self._account.address)

    def get_client_pair(self, chain_id: int) -> ChainClientPair:
        chain_id = int(chain_id)
        pair = self._pairs.get(chain_id)
        if pair is not None:
            return pair

        with self._lock:
            pair = self._pairs.get(chain_id)
            if pair is None:
                definition = self.resolve_definition(chain_id)
                pair = self._client_factory(definition)
                self._pairs[chain_id] = pair
                logger.info(
                    "Created clients for %s (chain %s) at %s",
                    definition.name,
                    chain_id,
                    definition.rpc_url,
                )
        return pair

    def get_read_client(self, chain_id: int) -> Web3:
        return self.get_client_pair(chain_id).read_client

    def get_write_client(self, chain_id: int) -> Web3:
        return self.get_client_pair(chain_id).write_client

    def cached_chain_ids(self) -> tuple[int, ...]:
        return tuple(self._pairs)

    def resolve_definition(self, chain_id: int) -> ChainDefinition:
        """Return the configured definition, synthesising one for unlisted EVM chains."""

        if get_chain_type(chain_id) is not ChainType.EVM:
            raise ChainUnavailableError(
                chain_id, f"Chain {chain_id} does not use the EVM account model"
            )

        override = self.config.rpc_urls.get(chain_id)
        static = STATIC_CHAIN_DEFINITIONS.get(chain_id)
        if static is not None:
            if override:
                return ChainDefinition(
                    chain_id=static.chain_id,
                    name=static.name,
                    rpc_url=override,
                    native_symbol=static.native_symbol,
                )
            return static

        if override:
            return ChainDefinition(chain_id=chain_id, name=get_chain_name(chain_id), rpc_url=override)

        template = self.config.fallback_rpc_template
        if template is None:
            raise ChainUnavailableError(chain_id)

        definition = synthesize_definition(chain_id, template)
        logger.warning(
            "Chain %s is not statically configured; using synthesized definition at %s",
            chain_id,
            definition.rpc_url,
        )
        return definition

    def close(self) -> None:
        """Drop cached pairs and release the HTTP sessions they own."""
        with self._lock:
            pairs = list(self._pairs.values())
            self._pairs.clear()
        for pair in pairs:
            if pair.session is not None:
                pair.session.close()

    # ------------------------------------------------------------------
    # Internal wiring
    # ------------------------------------------------------------------
    def _build_pair(self, definition: ChainDefinition) -> ChainClientPair:
        session = requests.Session()
        provider = HTTPProvider(
            definition.rpc_url,
            request_kwargs={"timeout": self.config.request_timeout},
            session=session,
        )
        read_client = Web3(provider)
        if self.config.verify_connection and not read_client.is_connected():
            raise ChainUnavailableError(
                definition.chain_id,
                f"Unable to connect to {definition.name} RPC",
                details={"endpoint": definition.rpc_url},
            )

        write_client = Web3(provider)
        write_client.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(self._account))  # type: ignore[arg-type]
        write_client.eth.default_account = self._account.address

        try:
            remote_chain_id = read_client.eth.chain_id if self.config.verify_connection else None
        except Exception as exc:
            raise NetworkError(
                "Failed to read chain id from RPC",
                endpoint=definition.rpc_url,
                details={"error": str(exc)},
            ) from exc

        if remote_chain_id is not None and remote_chain_id != definition.chain_id:
            raise ChainUnavailableError(
                definition.chain_id,
                f"RPC at {definition.rpc_url} serves chain {remote_chain_id}",
                details={"endpoint": definition.rpc_url},
            )

        return ChainClientPair(
            chain=definition,
            read_client=read_client,
            write_client=write_client,
            session=session,
        )
