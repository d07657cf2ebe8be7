"""Tests for utility functions."""

from decimal import Decimal

import pytest
from hexbytes import HexBytes
from web3.datastructures import AttributeDict

from defi_composer.constants import EXPLORER_URLS, LIFI_EXPLORER_URL
from defi_composer.exceptions import ValidationError
from defi_composer.utils import (
    build_explorer_url,
    build_lifi_explorer_url,
    format_duration,
    format_token_amount,
    from_base_units,
    parse_amount,
    parse_quantity,
    serialise_receipt,
    to_base_units,
    to_checksum,
    to_hex_hash,
)


class TestQuantityParsing:
    """Test integer quantity parsing."""

    def test_decimal_and_hex_strings(self):
        assert parse_quantity("42") == 42
        assert parse_quantity("0x10") == 16
        assert parse_quantity(7) == 7

    def test_missing_value_uses_default(self):
        assert parse_quantity(None) == 0
        assert parse_quantity("", default=5) == 5

    def test_booleans_are_rejected(self):
        with pytest.raises(ValidationError):
            parse_quantity(True)

    def test_garbage_is_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            parse_quantity("twelve", "toAmount")
        assert excinfo.value.field == "toAmount"

    def test_amount_must_be_positive(self):
        assert parse_amount("1000") == 1000
        with pytest.raises(ValidationError):
            parse_amount(0)


class TestBaseUnits:
    """Test conversion between display amounts and base units."""

    def test_to_base_units_truncates(self):
        assert to_base_units("1.2345678", 6) == 1234567

    def test_to_base_units_decimal(self):
        assert to_base_units(Decimal("0.0001"), 18) == 10**14

    def test_to_base_units_negative_raises_error(self):
        with pytest.raises(ValidationError):
            to_base_units(-1, 6)

    def test_from_base_units(self):
        assert from_base_units(1_500_000, 6) == Decimal("1.5")
        assert from_base_units("0x0f4240", 6) == Decimal("1")


class TestFormatting:
    """Test human-facing formatting helpers."""

    @pytest.mark.parametrize(
        ("units", "expected"),
        [
            (0, "0"),
            (50, "<0.0001"),
            (500_000, "0.5000"),
            (12_340_000, "12.34"),
            (1_234_567_890, "1,234.57"),
        ],
    )
    def test_format_token_amount(self, units, expected):
        assert format_token_amount(units, 6) == expected

    def test_format_duration(self):
        assert format_duration(42) == "42s"
        assert format_duration(120) == "2m"
        assert format_duration(125.9) == "2m 5s"


class TestAddressesAndHashes:
    def test_to_checksum(self):
        checksummed = to_checksum("0x833589fcd6edb6e08f4c7c32d4f71b54bda02913")
        assert checksummed == "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"

    def test_to_checksum_rejects_garbage(self):
        with pytest.raises(ValidationError) as excinfo:
            to_checksum("0x1234", field="target")
        assert excinfo.value.field == "target"

    def test_to_hex_hash(self):
        assert to_hex_hash("ab" * 32) == "0x" + "ab" * 32
        assert to_hex_hash(HexBytes(b"\x01" * 32)) == "0x" + "01" * 32

    def test_explorer_urls(self):
        tx_hash = "0x" + "12" * 32
        assert build_explorer_url(8453, tx_hash) == f"{EXPLORER_URLS[8453]}{tx_hash}"
        assert build_lifi_explorer_url(tx_hash) == f"{LIFI_EXPLORER_URL}{tx_hash}"


def test_serialise_receipt_handles_nested_web3_types():
    receipt = AttributeDict(
        {
            "status": 1,
            "transactionHash": HexBytes(b"\xaa" * 32),
            "logs": [AttributeDict({"data": HexBytes(b"\x01\x02"), "topics": [HexBytes(b"\x03")]})],
        }
    )

    serialised = serialise_receipt(receipt)

    assert serialised == {
        "status": 1,
        "transactionHash": "0x" + "aa" * 32,
        "logs": [{"data": "0x0102", "topics": ["0x03"]}],
    }
    assert serialise_receipt(None) is None
