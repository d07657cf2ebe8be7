"""Turn registry deployments into exact contract calls."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from eth_abi import encode as abi_encode
from web3 import Web3

from ..exceptions import EncodingError, ValidationError
from ..types import ComposedAction, ContractCallConfig
from ..utils import parse_amount, to_checksum
from .families import ProtocolFamily
from .registry import ProtocolDeployment

logger = logging.getLogger(__name__)


def parse_signature(signature: str) -> tuple[str, list[str]]:
    """Split ``name(type1,type2)`` into its name and argument types."""

    compact = signature.replace(" ", "")
    if not compact.endswith(")") or "(" not in compact:
        raise ValidationError("Malformed function signature", field="signature", value=signature)

    name, _, params = compact[:-1].partition("(")
    if not name:
        raise ValidationError("Malformed function signature", field="signature", value=signature)
    return name, [param for param in params.split(",") if param]


def function_selector(signature: str) -> bytes:
    name, types = parse_signature(signature)
    canonical = f"{name}({','.join(types)})"
    return bytes(Web3.keccak(text=canonical)[:4])


def encode_call(signature: str, args: Sequence[Any]) -> str:
    """ABI-encode a call as 0x-prefixed hex; the same inputs always give the same bytes."""

    _, types = parse_signature(signature)
    if len(types) != len(args):
        raise ValidationError(
            "Argument count does not match function signature",
            field="args",
            value=list(args),
            details={"signature": signature, "expected": len(types)},
        )

    try:
        encoded_args = abi_encode(types, list(args)) if types else b""
    except Exception as exc:
        raise ValidationError(
            "Arguments cannot be ABI-encoded for signature",
            field="args",
            value=list(args),
            details={"signature": signature, "error": str(exc)},
        ) from exc

    return "0x" + (function_selector(signature) + encoded_args).hex()


class ActionEncoder:
    """Encode deposit calls, dispatching on the deployment's protocol family."""

    def encode(self, deployment: ProtocolDeployment, amount: int | str, user: str) -> ContractCallConfig:
        family = deployment.family
        if not isinstance(family, ProtocolFamily):
            raise EncodingError(
                f"No encoder for protocol family {family!r}",
                protocol_id=deployment.protocol_id,
                family=str(family),
            )

        if deployment.deposit_function != family.signature:
            raise EncodingError(
                "Deposit function does not match the protocol family",
                protocol_id=deployment.protocol_id,
                family=family.value,
                details={
                    "deposit_function": deployment.deposit_function,
                    "expected": family.signature,
                },
            )

        units = parse_amount(amount)
        owner = to_checksum(user, field="user")
        call_data = encode_call(family.signature, family.build_args(deployment, units, owner))

        logger.debug(
            "Encoded %s on chain %s via %s (amount=%s)",
            deployment.protocol_id,
            deployment.chain_id,
            family.signature,
            units,
        )
        return ContractCallConfig(
            target_contract=deployment.deposit_contract,
            call_data=call_data,
            gas_limit=deployment.gas_limit,
            output_token=deployment.output_token,
            value=units if family.payable else 0,
        )

    def compose(self, deployment: ProtocolDeployment, amount: int | str, user: str) -> ComposedAction:
        """Encode the deposit and wrap it as the unit handed to the quote requester."""

        config = self.encode(deployment, amount, user)
        return ComposedAction(
            from_amount=parse_amount(amount),
            from_token=deployment.input_token,
            target=config.target_contract,
            call_data=config.call_data,
            gas_limit=config.gas_limit,
            approval_address=deployment.deposit_contract if deployment.requires_approval else None,
            output_token=config.output_token,
        )
