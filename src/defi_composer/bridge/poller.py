"""Poll the external status service until a bridge transfer settles."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

import requests

from ..config import StatusConfig
from ..exceptions import NetworkError, ValidationError
from ..types import BridgeResult, ExecutionStatus, StatusKey, StatusResponse, StatusValue
from ..utils import parse_quantity

logger = logging.getLogger(__name__)


class BridgeStatusPoller:
    """Resolve pending cross-chain transfers by polling ``GET /status``.

    The status key is stateless, so a timed-out or cancelled wait can be resumed
    later by calling :meth:`wait` again with the same key.
    """

    def __init__(
        self,
        config: StatusConfig | None = None,
        session: requests.Session | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._config = config or StatusConfig()
        self._base_url = self._config.api_url.rstrip("/")
        self._session = session or requests.Session()
        self._clock = clock
        self._sleep = sleep

    def get_status(self, key: StatusKey) -> StatusResponse:
        """Query the status service once; an unindexed transfer reports ``NOT_FOUND``."""

        url = f"{self._base_url}/status"
        headers = {"Accept": "application/json"}
        if self._config.api_key:
            headers["x-lifi-api-key"] = self._config.api_key

        try:
            response = self._session.get(
                url,
                params=key.to_params(),
                headers=headers,
                timeout=self._config.request_timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(
                "Status request failed", endpoint=url, details={"error": str(exc)}
            ) from exc

        if response.status_code == 404:
            return StatusResponse(status=StatusValue.NOT_FOUND, sending_tx_hash=key.tx_hash)

        if response.status_code >= 400:
            raise NetworkError(
                "Status service rejected the request",
                endpoint=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise NetworkError(
                "Status service returned a non-JSON response",
                endpoint=url,
                status_code=response.status_code,
            ) from exc

        if not isinstance(payload, dict):
            raise ValidationError("Status response must be an object", field="status", value=payload)
        return StatusResponse.from_dict(payload)

    def wait(
        self,
        key: StatusKey,
        *,
        timeout: float | None = None,
        poll_interval: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> BridgeResult:
        """Poll until DONE, FAILED, timeout or cancellation; never raises for those outcomes."""

        timeout = self._config.timeout if timeout is None else timeout
        interval = self._config.poll_interval if poll_interval is None else poll_interval
        if timeout <= 0 or interval <= 0:
            raise ValidationError(
                "Timeout and poll interval must be positive",
                field="timeout",
                value=(timeout, interval),
            )

        cancel = cancel_event or threading.Event()
        started = self._clock()
        deadline = started + timeout
        last: StatusResponse | None = None
        cycle = 0

        logger.debug(
            "Stage STATUS [%s]: poll (bridge=%s, %s -> %s, interval=%s, timeout=%s)",
            key.tx_hash,
            key.bridge,
            key.from_chain,
            key.to_chain,
            interval,
            timeout,
        )

        while not cancel.is_set():
            cycle += 1
            try:
                last = self.get_status(key)
            except (NetworkError, ValidationError) as exc:
                logger.warning(
                    "Status check error for %s (cycle %s), retrying: %s", key.tx_hash, cycle, exc
                )
            else:
                logger.debug(
                    "Stage STATUS [%s]: cycle %s status=%s substatus=%s",
                    key.tx_hash,
                    cycle,
                    last.status.value,
                    last.substatus,
                )
                if last.status is StatusValue.DONE:
                    logger.info(
                        "Bridge %s completed (destination tx=%s)",
                        key.tx_hash,
                        last.receiving_tx_hash,
                    )
                    return self._result(
                        key,
                        ExecutionStatus.DONE,
                        "Bridge completed successfully",
                        started,
                        last,
                    )
                if last.status is StatusValue.FAILED:
                    reason = last.substatus_message or last.substatus or "Unknown error"
                    logger.error("Bridge %s failed: %s", key.tx_hash, reason)
                    return self._result(
                        key, ExecutionStatus.FAILED, f"Bridge failed: {reason}", started, last
                    )

            remaining = deadline - self._clock()
            if remaining <= 0:
                logger.warning(
                    "Bridge %s still pending after %.0fs; resume polling with the same key",
                    key.tx_hash,
                    timeout,
                )
                return self._result(
                    key,
                    ExecutionStatus.PENDING,
                    "Bridge timeout - still pending",
                    started,
                    last,
                    timed_out=True,
                )

            if self._pause(min(interval, remaining), cancel):
                break

        logger.info("Status polling for %s cancelled", key.tx_hash)
        return self._result(
            key, ExecutionStatus.PENDING, "Polling cancelled", started, last, cancelled=True
        )

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _pause(self, delay: float, cancel: threading.Event) -> bool:
        """Sleep between cycles; return True when cancelled."""
        if self._sleep is None:
            return cancel.wait(delay)
        self._sleep(delay)
        return cancel.is_set()

    def _result(
        self,
        key: StatusKey,
        status: ExecutionStatus,
        message: str,
        started: float,
        last: StatusResponse | None,
        *,
        timed_out: bool = False,
        cancelled: bool = False,
    ) -> BridgeResult:
        received = None
        if last is not None and last.receiving_amount is not None:
            received = parse_quantity(last.receiving_amount, "receiving.amount")
        return BridgeResult(
            status=status,
            key=key,
            message=message,
            destination_tx_hash=last.receiving_tx_hash if last is not None else None,
            substatus=last.substatus if last is not None else None,
            received_amount=received,
            timed_out=timed_out,
            cancelled=cancelled,
            elapsed_seconds=self._clock() - started,
            last_status=last,
        )
