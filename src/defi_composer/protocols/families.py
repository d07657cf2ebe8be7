"""Protocol families: groups of deployments that share one call shape."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .registry import ProtocolDeployment


class ProtocolFamily(str, Enum):
    """Call shape shared by one or more named protocols."""

    NATIVE_WRAP = "native-wrap"  # WETH-style deposit() payable
    LENDING_POOL = "lending-pool"  # Aave V3 and forks
    ERC4626_VAULT = "erc4626-vault"
    COMET = "comet"  # Compound V3
    CTOKEN = "ctoken"  # Compound V2 forks
    STAKED_WRAP = "staked-wrap"  # wstETH-style wrap

    @property
    def signature(self) -> str:
        """Canonical function signature called on the deposit contract."""
        return FAMILY_SIGNATURES[self]

    @property
    def payable(self) -> bool:
        """Whether the deposit amount travels as native value instead of an argument."""
        return self is ProtocolFamily.NATIVE_WRAP

    def build_args(self, deployment: ProtocolDeployment, amount: int, user: str) -> list[Any]:
        return FAMILY_ARGUMENTS[self](deployment, amount, user)


FAMILY_SIGNATURES = {
    ProtocolFamily.NATIVE_WRAP: "deposit()",
    ProtocolFamily.LENDING_POOL: "supply(address,uint256,address,uint16)",
    ProtocolFamily.ERC4626_VAULT: "deposit(uint256,address)",
    ProtocolFamily.COMET: "supply(address,uint256)",
    ProtocolFamily.CTOKEN: "mint(uint256)",
    ProtocolFamily.STAKED_WRAP: "wrap(uint256)",
}

AAVE_REFERRAL_CODE = 0

ArgumentBuilder = Callable[["ProtocolDeployment", int, str], list[Any]]

FAMILY_ARGUMENTS: dict[ProtocolFamily, ArgumentBuilder] = {
    ProtocolFamily.NATIVE_WRAP: lambda deployment, amount, user: [],
    ProtocolFamily.LENDING_POOL: lambda deployment, amount, user: [
        deployment.input_token,
        amount,
        user,
        AAVE_REFERRAL_CODE,
    ],
    ProtocolFamily.ERC4626_VAULT: lambda deployment, amount, user: [amount, user],
    ProtocolFamily.COMET: lambda deployment, amount, user: [deployment.input_token, amount],
    ProtocolFamily.CTOKEN: lambda deployment, amount, user: [amount],
    ProtocolFamily.STAKED_WRAP: lambda deployment, amount, user: [amount],
}

_uncovered = set(ProtocolFamily) - set(FAMILY_SIGNATURES) | set(ProtocolFamily) - set(
    FAMILY_ARGUMENTS
)
if _uncovered:  # pragma: no cover - guards edits to the tables above
    raise RuntimeError(f"Protocol families without an encoder: {sorted(_uncovered)}")
