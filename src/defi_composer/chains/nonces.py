"""Nonce coordination for signing identities shared across pipelines."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from web3 import Web3

logger = logging.getLogger(__name__)


class NonceManager:
    """Hand out nonces per (chain id, address), one broadcast at a time.

    The per-key lock is held for the duration of a :meth:`reserve` block, so two
    pipelines signing with the same key on the same chain never broadcast at the
    same nonce. A nonce is only consumed when the block exits cleanly.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[tuple[int, str], threading.Lock] = {}
        self._next: dict[tuple[int, str], int] = {}

    def _lock_for(self, key: tuple[int, str]) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def reserve(self, web3: Web3, chain_id: int, address: str) -> Iterator[int]:
        key = (int(chain_id), address.lower())
        with self._lock_for(key):
            pending = web3.eth.get_transaction_count(address, "pending")  # type: ignore[arg-type]
            nonce = max(int(pending), self._next.get(key, 0))
            logger.debug("Reserved nonce %s for %s on chain %s", nonce, address, chain_id)
            yield nonce
            self._next[key] = nonce + 1

    def reset(self, chain_id: int, address: str) -> None:
        """Forget the local view so the next reservation resyncs from the chain."""
        key = (int(chain_id), address.lower())
        with self._lock_for(key):
            self._next.pop(key, None)
