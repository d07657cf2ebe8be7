"""Utility functions for the DeFi composer."""

from collections.abc import Mapping, Sequence
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

from hexbytes import HexBytes
from web3 import Web3
from web3.types import ChecksumAddress

from .constants import DEFAULT_EXPLORER_URL, EXPLORER_URLS, LIFI_EXPLORER_URL
from .exceptions import ValidationError


def parse_quantity(value: int | str | None, field: str = "value", *, default: int = 0) -> int:
    """Parse an integer quantity given as int, decimal string or 0x-prefixed hex string."""
    if value is None or value == "":
        return default

    if isinstance(value, bool):
        raise ValidationError("Quantity must be an integer", field=field, value=value)

    if isinstance(value, int):
        return value

    text = str(value).strip()
    try:
        if text.lower().startswith("0x"):
            return int(text, 16)
        return int(text)
    except ValueError:
        raise ValidationError("Quantity must be an integer string", field=field, value=value)


def parse_amount(value: int | str, field: str = "amount") -> int:
    """Parse a strictly positive base-unit amount."""
    amount = parse_quantity(value, field)
    if amount <= 0:
        raise ValidationError("Amount must be positive", field=field, value=value)
    return amount


def to_base_units(amount: Decimal | float | str, decimals: int) -> int:
    """Convert a human-readable amount to integer base units, truncating extra precision."""
    try:
        quantity = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (ValueError, InvalidOperation) as exc:
        raise ValidationError(
            "Invalid token amount", field="amount", value=amount, details={"error": str(exc)}
        ) from exc

    if quantity <= 0:
        raise ValidationError("Amount must be positive", field="amount", value=amount)

    scaled = (quantity * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN)
    return int(scaled)


def from_base_units(units: int | str, decimals: int) -> Decimal:
    """Convert integer base units to a Decimal amount."""
    return Decimal(parse_quantity(units, "units")) / (Decimal(10) ** decimals)


def to_checksum(address: str, field: str = "address") -> ChecksumAddress:
    """Return the checksum form of an EVM address or raise ValidationError."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValidationError("Invalid EVM address", field=field, value=address)
    return Web3.to_checksum_address(address)


def to_hex_hash(value: Any) -> str:
    """Normalise a transaction hash to a 0x-prefixed hex string."""
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return HexBytes(value).to_0x_hex()


def serialise_receipt(receipt: Any) -> Any:
    """Serialise web3 receipt objects into JSON-friendly structures."""
    if receipt is None:
        return None
    if isinstance(receipt, Mapping):
        return {key: serialise_receipt(value) for key, value in receipt.items()}
    if isinstance(receipt, Sequence) and not isinstance(
        receipt, str | bytes | bytearray | HexBytes
    ):
        return [serialise_receipt(item) for item in receipt]
    if isinstance(receipt, bytes | bytearray | HexBytes):
        return HexBytes(receipt).to_0x_hex()
    return receipt


def build_explorer_url(chain_id: int, tx_hash: str) -> str:
    """Return a human-facing explorer link for a transaction."""
    return f"{EXPLORER_URLS.get(chain_id, DEFAULT_EXPLORER_URL)}{tx_hash}"


def build_lifi_explorer_url(tx_hash: str) -> str:
    return f"{LIFI_EXPLORER_URL}{tx_hash}"


def format_token_amount(amount: int | str, decimals: int) -> str:
    """Format base units for display."""
    value = from_base_units(amount, decimals)
    if value == 0:
        return "0"
    if value < Decimal("0.0001"):
        return "<0.0001"
    if value < 1:
        return f"{value:.4f}"
    if value < 1000:
        return f"{value:.2f}"
    return f"{value:,.2f}"


def format_duration(seconds: int | float) -> str:
    """Format a duration in seconds as e.g. ``2m 5s``."""
    total = int(seconds)
    if total < 60:
        return f"{total}s"
    minutes, remainder = divmod(total, 60)
    if remainder == 0:
        return f"{minutes}m"
    return f"{minutes}m {remainder}s"
