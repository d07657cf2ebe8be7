"""Quote requests against the route-composition service."""

from .requester import (
    ContractCallsQuoteRequest,
    QuoteRequester,
    TransferQuoteRequest,
    estimated_duration,
    estimated_output,
    minimum_output,
    requires_approval,
    total_fee_cost_usd,
    total_gas_cost_usd,
)

__all__ = [
    "ContractCallsQuoteRequest",
    "QuoteRequester",
    "TransferQuoteRequest",
    "estimated_duration",
    "estimated_output",
    "minimum_output",
    "requires_approval",
    "total_fee_cost_usd",
    "total_gas_cost_usd",
]
