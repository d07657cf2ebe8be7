"""Generic contract-call builders that do not need a registry entry."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..constants import MAX_UINT256, WRAPPED_NATIVE_ADDRESSES, is_native_token
from ..exceptions import ValidationError
from ..types import Address, ComposedAction, ContractCallConfig
from ..utils import parse_amount, to_checksum
from .encoder import encode_call

WRAP_GAS_LIMIT = 50000
UNWRAP_GAS_LIMIT = 50000
APPROVE_GAS_LIMIT = 60000
DEFAULT_CUSTOM_GAS_LIMIT = 200000


def get_wrapped_native_address(chain_id: int) -> Address | None:
    return WRAPPED_NATIVE_ADDRESSES.get(chain_id)


def _require_wrapped_native(chain_id: int) -> Address:
    address = get_wrapped_native_address(chain_id)
    if address is None:
        raise ValidationError(
            "No wrapped native token known for chain", field="chain_id", value=chain_id
        )
    return address


def build_wrap_action(chain_id: int, amount: int | str) -> ContractCallConfig:
    """Wrap the chain's native asset; the amount travels as call value."""
    wrapped = _require_wrapped_native(chain_id)
    return ContractCallConfig(
        target_contract=wrapped,
        call_data=encode_call("deposit()", []),
        gas_limit=WRAP_GAS_LIMIT,
        output_token=wrapped,
        value=parse_amount(amount),
    )


def build_unwrap_action(chain_id: int, amount: int | str) -> ContractCallConfig:
    wrapped = _require_wrapped_native(chain_id)
    return ContractCallConfig(
        target_contract=wrapped,
        call_data=encode_call("withdraw(uint256)", [parse_amount(amount)]),
        gas_limit=UNWRAP_GAS_LIMIT,
    )


def build_approve_action(
    token: Address, spender: Address, amount: int | str | None = None
) -> ContractCallConfig:
    """ERC-20 approval; unlimited when ``amount`` is omitted."""
    if is_native_token(token):
        raise ValidationError("Native tokens cannot be approved", field="token", value=token)

    allowance = MAX_UINT256 if amount is None else parse_amount(amount)
    return ContractCallConfig(
        target_contract=to_checksum(token, field="token"),
        call_data=encode_call(
            "approve(address,uint256)", [to_checksum(spender, field="spender"), allowance]
        ),
        gas_limit=APPROVE_GAS_LIMIT,
    )


def build_custom_action(
    contract: Address,
    signature: str,
    args: Sequence[Any],
    gas_limit: int = DEFAULT_CUSTOM_GAS_LIMIT,
    output_token: Address | None = None,
) -> ContractCallConfig:
    if gas_limit <= 0:
        raise ValidationError("Gas limit must be positive", field="gas_limit", value=gas_limit)
    return ContractCallConfig(
        target_contract=to_checksum(contract, field="contract"),
        call_data=encode_call(signature, args),
        gas_limit=gas_limit,
        output_token=to_checksum(output_token, field="output_token") if output_token else None,
    )


def to_contract_call(
    config: ContractCallConfig,
    from_amount: int | str,
    from_token: Address,
    *,
    approval_address: Address | None = None,
) -> ComposedAction:
    return ComposedAction(
        from_amount=parse_amount(from_amount, "from_amount"),
        from_token=from_token,
        target=config.target_contract,
        call_data=config.call_data,
        gas_limit=config.gas_limit,
        approval_address=approval_address,
        output_token=config.output_token,
    )
