"""Protocol catalog and call encoding."""

from .actions import (
    build_approve_action,
    build_custom_action,
    build_unwrap_action,
    build_wrap_action,
    get_wrapped_native_address,
    to_contract_call,
)
from .encoder import ActionEncoder, encode_call, function_selector
from .families import ProtocolFamily
from .registry import (
    DEFAULT_REGISTRY,
    ProtocolDeployment,
    ProtocolInfo,
    ProtocolRegistry,
    default_registry,
)

__all__ = [
    "ActionEncoder",
    "DEFAULT_REGISTRY",
    "ProtocolDeployment",
    "ProtocolFamily",
    "ProtocolInfo",
    "ProtocolRegistry",
    "build_approve_action",
    "build_custom_action",
    "build_unwrap_action",
    "build_wrap_action",
    "default_registry",
    "encode_call",
    "function_selector",
    "get_wrapped_native_address",
    "to_contract_call",
]
