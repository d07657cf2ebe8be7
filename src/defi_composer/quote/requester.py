"""Client for the external route-composition service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import requests

from ..config import QuoteConfig
from ..exceptions import NetworkError, QuoteError, UnsupportedRouteError, ValidationError
from ..types import Address, ChainId, ComposedAction, Quote
from ..utils import parse_amount

logger = logging.getLogger(__name__)

# Upstream error codes that mean the service found nothing to route.
NO_ROUTE_CODES = frozenset({"1002"})


@dataclass(frozen=True)
class ContractCallsQuoteRequest:
    """Quote request that ends in one or more destination contract calls."""

    from_chain: ChainId
    from_token: Address
    from_address: Address
    to_chain: ChainId
    to_token: Address
    to_amount: int
    contract_calls: tuple[ComposedAction, ...]
    to_fallback_address: Address | None = None
    slippage: float | None = None
    allow_bridges: tuple[str, ...] | None = None
    deny_bridges: tuple[str, ...] | None = None

    def to_payload(self, *, integrator: str, default_slippage: float) -> dict[str, Any]:
        if not self.contract_calls:
            raise ValidationError("At least one contract call is required", field="contract_calls")

        slippage = default_slippage if self.slippage is None else self.slippage
        _check_slippage(slippage)

        payload: dict[str, Any] = {
            "fromChain": self.from_chain,
            "fromToken": self.from_token,
            "fromAddress": self.from_address,
            "toChain": self.to_chain,
            "toToken": self.to_token,
            "toAmount": str(parse_amount(self.to_amount, "to_amount")),
            "contractCalls": [call.to_contract_call() for call in self.contract_calls],
            "toFallbackAddress": self.to_fallback_address or self.from_address,
            "slippage": slippage,
            "integrator": integrator,
        }
        if self.allow_bridges is not None:
            payload["allowBridges"] = list(self.allow_bridges)
        if self.deny_bridges is not None:
            payload["denyBridges"] = list(self.deny_bridges)
        return payload


@dataclass(frozen=True)
class TransferQuoteRequest:
    """Plain transfer quote (no destination call), used for non-EVM source legs."""

    from_chain: ChainId
    to_chain: ChainId
    from_token: str
    to_token: str
    from_amount: int
    from_address: str
    to_address: str | None = None
    slippage: float | None = None
    allow_bridges: tuple[str, ...] | None = None
    deny_bridges: tuple[str, ...] | None = None

    def to_params(self, *, integrator: str, default_slippage: float) -> dict[str, Any]:
        slippage = default_slippage if self.slippage is None else self.slippage
        _check_slippage(slippage)

        params: dict[str, Any] = {
            "fromChain": self.from_chain,
            "toChain": self.to_chain,
            "fromToken": self.from_token,
            "toToken": self.to_token,
            "fromAmount": str(parse_amount(self.from_amount, "from_amount")),
            "fromAddress": self.from_address,
            "slippage": slippage,
            "integrator": integrator,
        }
        if self.to_address:
            params["toAddress"] = self.to_address
        if self.allow_bridges is not None:
            params["allowBridges"] = ",".join(self.allow_bridges)
        if self.deny_bridges is not None:
            params["denyBridges"] = ",".join(self.deny_bridges)
        return params


class QuoteRequester:
    """Request fresh quotes; never caches and never retries."""

    def __init__(self, config: QuoteConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._base_url = config.api_url.rstrip("/")
        self._session = session or requests.Session()

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    def request_contract_calls_quote(self, request: ContractCallsQuoteRequest) -> Quote:
        payload = request.to_payload(
            integrator=self._config.integrator, default_slippage=self._config.default_slippage
        )
        logger.info(
            "Requesting contract-calls quote %s:%s -> %s:%s (%s calls)",
            request.from_chain,
            request.from_token,
            request.to_chain,
            request.to_token,
            len(request.contract_calls),
        )

        data = self._send("POST", "/quote/contractCalls", json=payload)
        quote = self._parse(data, expected_chains=(request.from_chain, request.to_chain))
        self._log_quote(quote)
        return quote

    def request_quote(self, request: TransferQuoteRequest) -> Quote:
        params = request.to_params(
            integrator=self._config.integrator, default_slippage=self._config.default_slippage
        )
        logger.info(
            "Requesting transfer quote %s:%s -> %s:%s",
            request.from_chain,
            request.from_token,
            request.to_chain,
            request.to_token,
        )

        data = self._send("GET", "/quote", params=params)
        quote = self._parse(data, expected_chains=(request.from_chain, request.to_chain))
        self._log_quote(quote)
        return quote

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._config.api_key:
            headers["x-lifi-api-key"] = self._config.api_key
        return headers

    def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self._config.request_timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise NetworkError(
                "Quote request failed", endpoint=url, details={"error": str(exc)}
            ) from exc

        if response.status_code >= 400:
            raise self._rejection(response)

        try:
            return response.json()
        except ValueError as exc:
            raise QuoteError(
                "Composition service returned a non-JSON response",
                code="INVALID_RESPONSE",
                status_code=response.status_code,
            ) from exc

    def _rejection(self, response: requests.Response) -> QuoteError:
        try:
            body = response.json()
        except ValueError:
            body = None

        message = response.reason or "Quote request rejected"
        upstream_code: str | None = None
        if isinstance(body, Mapping):
            message = str(body.get("message") or message)
            if body.get("code") is not None:
                upstream_code = str(body["code"])

        details = {"upstream_code": upstream_code, "body": body}
        logger.warning(
            "Quote rejected (status=%s, code=%s): %s", response.status_code, upstream_code, message
        )

        if upstream_code in NO_ROUTE_CODES or response.status_code == 404:
            return UnsupportedRouteError(
                f"No route available: {message}",
                status_code=response.status_code,
                details=details,
            )
        return QuoteError(
            f"Failed to get quote: {message}",
            code=upstream_code or "QUOTE_ERROR",
            status_code=response.status_code,
            details=details,
        )

    def _parse(self, data: Any, *, expected_chains: tuple[int, int]) -> Quote:
        quote = Quote.from_dict(data)
        if (quote.source_chain, quote.dest_chain) != tuple(int(c) for c in expected_chains):
            raise ValidationError(
                "Quote chains do not match the request",
                field="action",
                value=(quote.source_chain, quote.dest_chain),
                details={"expected": list(expected_chains)},
            )
        return quote

    def _log_quote(self, quote: Quote) -> None:
        logger.info(
            "Quote %s received: tool=%s steps=%s estimate=%s min=%s gas=$%s",
            quote.id,
            quote.tool,
            len(quote.included_steps),
            quote.estimate.to_amount,
            quote.estimate.to_amount_min,
            total_gas_cost_usd(quote),
        )


# ----------------------------------------------------------------------
# Quote helpers
# ----------------------------------------------------------------------
def estimated_output(quote: Quote) -> int:
    return quote.estimate.to_amount


def minimum_output(quote: Quote) -> int:
    return quote.estimate.to_amount_min


def estimated_duration(quote: Quote) -> int:
    return quote.estimate.execution_duration_seconds


def total_gas_cost_usd(quote: Quote) -> str:
    """Sum the gas cost line items to one USD figure with two decimals."""
    total = sum((cost.amount_usd for cost in quote.estimate.gas_costs), Decimal("0"))
    return f"{total:.2f}"


def total_fee_cost_usd(quote: Quote, *, included_only: bool = False) -> str:
    fees: Sequence = quote.estimate.fee_costs
    if included_only:
        fees = [fee for fee in fees if fee.included]
    total = sum((fee.amount_usd for fee in fees), Decimal("0"))
    return f"{total:.2f}"


def requires_approval(quote: Quote) -> bool:
    return bool(quote.estimate.approval_address)


def _check_slippage(slippage: float) -> None:
    if not 0 <= slippage < 1:
        raise ValidationError("Slippage must be a fraction in [0, 1)", field="slippage", value=slippage)
