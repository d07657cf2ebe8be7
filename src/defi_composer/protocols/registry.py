"""Static, validated catalog of protocol deployments."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from typing import overload

from web3 import Web3

from ..constants import Chain, is_native_token
from ..exceptions import RegistryMissError, ValidationError
from .families import ProtocolFamily

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProtocolInfo:
    id: str
    name: str
    kind: str  # lending | staking | vault | liquid-staking | wrap
    family: ProtocolFamily
    chains: tuple[int, ...]
    description: str


@dataclass(frozen=True)
class ProtocolDeployment:
    """One protocol instance at a fixed contract address on one chain."""

    protocol_id: str
    chain_id: int
    deposit_contract: str
    deposit_function: str
    input_token: str
    input_token_symbol: str
    output_token: str
    output_token_symbol: str
    gas_limit: int
    requires_approval: bool
    family: ProtocolFamily

    @property
    def key(self) -> tuple[str, int]:
        return (self.protocol_id, self.chain_id)


class ProtocolRegistry:
    """Read-only lookups over protocol deployments keyed by (protocol id, chain id).

    Lookups return ``None`` (or an empty tuple) when nothing matches; use
    :meth:`require` when a miss should be fatal.
    """

    def __init__(
        self,
        protocols: Iterable[ProtocolInfo],
        deployments: Iterable[ProtocolDeployment],
    ) -> None:
        self._protocols: dict[str, ProtocolInfo] = {}
        for info in protocols:
            if info.id in self._protocols:
                raise ValidationError("Duplicate protocol id", field="protocol_id", value=info.id)
            self._protocols[info.id] = info

        self._deployments: dict[tuple[str, int], ProtocolDeployment] = {}
        for deployment in deployments:
            normalised = self._validate(deployment)
            if normalised.key in self._deployments:
                raise ValidationError(
                    "Duplicate deployment for (protocol, chain)",
                    field="deployment",
                    value=normalised.key,
                )
            self._deployments[normalised.key] = normalised

        logger.debug(
            "Protocol registry loaded: %s protocols, %s deployments",
            len(self._protocols),
            len(self._deployments),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @overload
    def lookup(self, protocol_id: str) -> ProtocolInfo | None: ...

    @overload
    def lookup(self, protocol_id: str, chain_id: int) -> ProtocolDeployment | None: ...

    def lookup(
        self, protocol_id: str, chain_id: int | None = None
    ) -> ProtocolInfo | ProtocolDeployment | None:
        """Return protocol metadata, or the deployment on ``chain_id`` when given."""

        if chain_id is None:
            return self._protocols.get(protocol_id)
        return self._deployments.get((protocol_id, int(chain_id)))

    def require(self, protocol_id: str, chain_id: int) -> ProtocolDeployment:
        deployment = self.lookup(protocol_id, chain_id)
        if deployment is None:
            raise RegistryMissError(protocol_id, chain_id)
        return deployment

    def deployments_for(self, protocol_id: str) -> tuple[ProtocolDeployment, ...]:
        return tuple(d for d in self._deployments.values() if d.protocol_id == protocol_id)

    def list_for_chain(self, chain_id: int) -> tuple[ProtocolDeployment, ...]:
        return tuple(d for d in self._deployments.values() if d.chain_id == chain_id)

    def list_protocols(self) -> tuple[ProtocolInfo, ...]:
        return tuple(self._protocols.values())

    def protocol_ids(self) -> tuple[str, ...]:
        """Protocol ids that have at least one deployment."""
        return tuple(dict.fromkeys(d.protocol_id for d in self._deployments.values()))

    def find_by_name(self, name: str, token: str, chain_id: int) -> ProtocolDeployment | None:
        """Resolve a loose protocol name and token symbol, e.g. ("Aave", "ETH", 8453)."""

        normalised_name = name.lower()
        symbol = token.upper()

        for alias, prefix in PROTOCOL_NAME_ALIASES.items():
            if alias not in normalised_name:
                continue
            deployment = self.lookup(f"{prefix}-{symbol.lower()}", chain_id)
            if deployment is not None:
                return deployment
            if symbol == "ETH":
                deployment = self.lookup(f"{prefix}-weth", chain_id)
                if deployment is not None:
                    return deployment

        for deployment in self.list_for_chain(chain_id):
            if normalised_name not in deployment.protocol_id:
                continue
            input_symbol = deployment.input_token_symbol.upper()
            if input_symbol == symbol or (symbol == "ETH" and input_symbol == "WETH"):
                return deployment
        return None

    def __len__(self) -> int:
        return len(self._deployments)

    def __iter__(self) -> Iterator[ProtocolDeployment]:
        return iter(self._deployments.values())

    def __contains__(self, key: object) -> bool:
        return key in self._deployments

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _validate(self, deployment: ProtocolDeployment) -> ProtocolDeployment:
        info = self._protocols.get(deployment.protocol_id)
        if info is None:
            raise ValidationError(
                "Deployment references an unknown protocol",
                field="protocol_id",
                value=deployment.protocol_id,
            )

        if deployment.family is not info.family:
            raise ValidationError(
                "Deployment family does not match its protocol",
                field="family",
                value=deployment.key,
            )

        if deployment.deposit_function != deployment.family.signature:
            raise ValidationError(
                "Deposit function does not match the protocol family",
                field="deposit_function",
                value=deployment.deposit_function,
                details={"expected": deployment.family.signature},
            )

        if deployment.chain_id not in info.chains:
            raise ValidationError(
                "Deployment chain is not listed for its protocol",
                field="chain_id",
                value=deployment.key,
            )

        if deployment.gas_limit <= 0:
            raise ValidationError("Gas limit must be positive", field="gas_limit", value=deployment.key)

        if deployment.requires_approval and is_native_token(deployment.input_token):
            raise ValidationError(
                "Native-token deployments cannot require approval",
                field="requires_approval",
                value=deployment.key,
            )

        # Table entries are stored in checksum form regardless of how they were typed.
        addresses = {}
        for name in ("deposit_contract", "input_token", "output_token"):
            value = getattr(deployment, name)
            if not isinstance(value, str) or not Web3.is_address(value.lower()):
                raise ValidationError("Invalid address in deployment", field=name, value=value)
            addresses[name] = Web3.to_checksum_address(value.lower())

        return replace(deployment, **addresses)


PROTOCOL_NAME_ALIASES = {
    "aave": "aave-v3",
    "morpho": "morpho",
    "compound": "compound-v3",
    "moonwell": "moonwell",
    "seamless": "seamless",
    "lido": "lido",
}

_ALL_AAVE = (
    Chain.ETHEREUM,
    Chain.ARBITRUM,
    Chain.BASE,
    Chain.OPTIMISM,
    Chain.POLYGON,
    Chain.BSC,
    Chain.AVALANCHE,
    Chain.SCROLL,
    Chain.GNOSIS,
)

PROTOCOLS: tuple[ProtocolInfo, ...] = (
    ProtocolInfo(
        "weth-wrap",
        "WETH Wrap",
        "wrap",
        ProtocolFamily.NATIVE_WRAP,
        (1, 42161, 8453, 10, 137, 59144, 534352, 100, 130),
        "Wrap ETH to WETH",
    ),
    ProtocolInfo(
        "lido-wsteth",
        "Lido wstETH",
        "liquid-staking",
        ProtocolFamily.STAKED_WRAP,
        (1,),
        "Wrap stETH to wstETH",
    ),
    ProtocolInfo(
        "etherfi-weeth",
        "EtherFi weETH",
        "liquid-staking",
        ProtocolFamily.ERC4626_VAULT,
        (1,),
        "Wrap eETH to weETH",
    ),
    ProtocolInfo(
        "aave-v3-weth",
        "Aave V3 WETH",
        "lending",
        ProtocolFamily.LENDING_POOL,
        _ALL_AAVE,
        "Supply WETH to Aave V3",
    ),
    ProtocolInfo(
        "aave-v3-usdc",
        "Aave V3 USDC",
        "lending",
        ProtocolFamily.LENDING_POOL,
        _ALL_AAVE,
        "Supply USDC to Aave V3",
    ),
    ProtocolInfo(
        "aave-v3-usdt",
        "Aave V3 USDT",
        "lending",
        ProtocolFamily.LENDING_POOL,
        (1, 42161, 10, 137, 56, 43114),
        "Supply USDT to Aave V3",
    ),
    ProtocolInfo(
        "aave-v3-dai",
        "Aave V3 DAI",
        "lending",
        ProtocolFamily.LENDING_POOL,
        (1, 42161, 10, 137, 43114),
        "Supply DAI to Aave V3",
    ),
    ProtocolInfo(
        "ethena-susde",
        "Ethena sUSDe",
        "staking",
        ProtocolFamily.ERC4626_VAULT,
        (1, 42161, 8453),
        "Stake USDe to sUSDe",
    ),
    ProtocolInfo(
        "morpho-usdc",
        "Morpho USDC Vault",
        "vault",
        ProtocolFamily.ERC4626_VAULT,
        (1, 8453),
        "Deposit USDC into Morpho vault",
    ),
    ProtocolInfo(
        "morpho-weth",
        "Morpho WETH Vault",
        "vault",
        ProtocolFamily.ERC4626_VAULT,
        (1, 8453),
        "Deposit WETH into Morpho vault",
    ),
    ProtocolInfo(
        "compound-v3-usdc",
        "Compound V3 USDC",
        "lending",
        ProtocolFamily.COMET,
        (1, 42161, 8453, 10, 137, 534352),
        "Supply USDC to Compound V3",
    ),
    ProtocolInfo(
        "compound-v3-weth",
        "Compound V3 WETH",
        "lending",
        ProtocolFamily.COMET,
        (1, 42161, 8453, 10),
        "Supply WETH to Compound V3",
    ),
    ProtocolInfo(
        "seamless-weth",
        "Seamless WETH",
        "lending",
        ProtocolFamily.LENDING_POOL,
        (8453,),
        "Supply WETH to Seamless on Base",
    ),
    ProtocolInfo(
        "seamless-usdc",
        "Seamless USDC",
        "lending",
        ProtocolFamily.LENDING_POOL,
        (8453,),
        "Supply USDC to Seamless on Base",
    ),
    ProtocolInfo(
        "moonwell-weth",
        "Moonwell WETH",
        "lending",
        ProtocolFamily.CTOKEN,
        (8453, 10),
        "Supply WETH to Moonwell",
    ),
    ProtocolInfo(
        "moonwell-usdc",
        "Moonwell USDC",
        "lending",
        ProtocolFamily.CTOKEN,
        (8453, 10),
        "Supply USDC to Moonwell",
    ),
)

_FAMILY_BY_PROTOCOL = {info.id: info.family for info in PROTOCOLS}

# (chain, deposit contract, input token, output token, output symbol)
_Row = tuple[int, str, str, str, str]


def _deployments(
    protocol_id: str,
    input_symbol: str,
    gas_limit: int,
    rows: Iterable[_Row],
    *,
    requires_approval: bool = True,
) -> list[ProtocolDeployment]:
    family = _FAMILY_BY_PROTOCOL[protocol_id]
    return [
        ProtocolDeployment(
            protocol_id=protocol_id,
            chain_id=int(chain_id),
            deposit_contract=contract,
            deposit_function=family.signature,
            input_token=input_token,
            input_token_symbol=input_symbol,
            output_token=output_token,
            output_token_symbol=output_symbol,
            gas_limit=gas_limit,
            requires_approval=requires_approval,
            family=family,
        )
        for chain_id, contract, input_token, output_token, output_symbol in rows
    ]


_ETH = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
_WETH_OP_STACK = "0x4200000000000000000000000000000000000006"
_USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
_USDC_ETH = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
_USDC_ARB = "0xaf88d065e77c8cC2239327C5EDb3A432268e5831"
_USDC_OP = "0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85"
_USDC_POL = "0x3c499c542cEF5E3811e1192ce70d8cC03d5c3359"
_USDC_SCR = "0x06eFdBFf2a14a7c8E15944D1F4A48F9F95F663A4"
_WETH_ETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
_WETH_ARB = "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1"
_WETH_SCR = "0x5300000000000000000000000000000000000004"
_AAVE_POOL_L2 = "0x794a61358D6845594F94dc1DB02A252b5b4814aD"
_SEAMLESS_POOL = "0x8F44Fd754285aa6A2b8B9B97739B79746e0475a7"

DEPLOYMENTS: tuple[ProtocolDeployment, ...] = tuple(
    _deployments(
        "weth-wrap",
        "ETH",
        50000,
        [
            (1, _WETH_ETH, _ETH, _WETH_ETH, "WETH"),
            (42161, _WETH_ARB, _ETH, _WETH_ARB, "WETH"),
            (8453, _WETH_OP_STACK, _ETH, _WETH_OP_STACK, "WETH"),
            (10, _WETH_OP_STACK, _ETH, _WETH_OP_STACK, "WETH"),
            (
                59144,
                "0xe5D7C2a44FfDDf6b295A15c148167daaAf5Cf34f",
                _ETH,
                "0xe5D7C2a44FfDDf6b295A15c148167daaAf5Cf34f",
                "WETH",
            ),
            (534352, _WETH_SCR, _ETH, _WETH_SCR, "WETH"),
            (130, _WETH_OP_STACK, _ETH, _WETH_OP_STACK, "WETH"),
        ],
        requires_approval=False,
    )
    + _deployments(
        "aave-v3-weth",
        "WETH",
        300000,
        [
            (
                1,
                "0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2",
                _WETH_ETH,
                "0x4d5F47FA6A74757f35C14fD3a6Ef8E3C9BC514E8",
                "aEthWETH",
            ),
            (
                42161,
                _AAVE_POOL_L2,
                _WETH_ARB,
                "0xe50fA9b3c56FfB159cB0FCA61F5c9D750e8128c8",
                "aArbWETH",
            ),
            (
                8453,
                "0xA238Dd80C259a72e81d7e4664a9801593F98d1c5",
                _WETH_OP_STACK,
                "0xD4a0e0b9149BCee3C920d2E00b5dE09138fd8bb7",
                "aBasWETH",
            ),
            (
                10,
                _AAVE_POOL_L2,
                _WETH_OP_STACK,
                "0xe50fA9b3c56FfB159cB0FCA61F5c9D750e8128c8",
                "aOptWETH",
            ),
            (
                137,
                _AAVE_POOL_L2,
                "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
                "0xe50fA9b3c56FfB159cB0FCA61F5c9D750e8128c8",
                "aPolWETH",
            ),
            (
                534352,
                "0x11fCfe756c05AD438e312a7fd934381537D3cFfe",
                _WETH_SCR,
                "0xf301805bE1Df81102C957f6d4Ce29d2B8c056B2a",
                "aScrWETH",
            ),
            (
                100,
                "0xb50201558B00496A145fE76f7424749556E326D8",
                "0x6A023CCd1ff6F2045C3309768eAd9E68F978f6e1",
                "0xa818F1B57c201E092C4A2017A91815034326Efd1",
                "aGnoWETH",
            ),
        ],
    )
    + _deployments(
        "aave-v3-usdc",
        "USDC",
        300000,
        [
            (
                1,
                "0x87870Bca3F3fD6335C3F4ce8392D69350B4fA4E2",
                _USDC_ETH,
                "0x98C23E9d8f34FEFb1B7BD6a91B7FF122F4e16F5c",
                "aEthUSDC",
            ),
            (
                42161,
                _AAVE_POOL_L2,
                _USDC_ARB,
                "0x724dc807b04555b71ed48a6896b6F41593b8C637",
                "aArbUSDC",
            ),
            (
                8453,
                "0xA238Dd80C259a72e81d7e4664a9801593F98d1c5",
                _USDC_BASE,
                "0x4e65fE4DbA92790696d040ac24Aa414708F5c0AB",
                "aBasUSDC",
            ),
            (
                10,
                _AAVE_POOL_L2,
                _USDC_OP,
                "0x724dc807b04555b71ed48a6896b6F41593b8C637",
                "aOptUSDC",
            ),
            (
                137,
                _AAVE_POOL_L2,
                _USDC_POL,
                "0x724dc807b04555b71ed48a6896b6F41593b8C637",
                "aPolUSDC",
            ),
            (
                56,
                "0x6807dc923806fE8Fd134338EABCA509979a7e0cB",
                "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
                "0x00901a076785e0906d1028c7d6372d247bec7d61",
                "aBnbUSDC",
            ),
            (
                43114,
                _AAVE_POOL_L2,
                "0xB97EF9Ef8734C71904D8002F8b6Bc66Dd9c48a6E",
                "0x724dc807b04555b71ed48a6896b6F41593b8C637",
                "aAvaUSDC",
            ),
            (
                534352,
                "0x11fCfe756c05AD438e312a7fd934381537D3cFfe",
                _USDC_SCR,
                "0x1D738a3436A8C49CefFbaB7fbF04B660fb528CbD",
                "aScrUSDC",
            ),
            (
                100,
                "0xb50201558B00496A145fE76f7424749556E326D8",
                "0xDDAfbb505ad214D7b80b1f830fcCc89B60fb7A83",
                "0xc6B7AcA6DE8a6044E0e32d0c841a89244A10D284",
                "aGnoUSDC",
            ),
        ],
    )
    + _deployments(
        "lido-wsteth",
        "stETH",
        100000,
        [
            (
                1,
                "0x7f39C581F595B53c5cb19bD0b3f8dA6c935E2Ca0",
                "0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84",
                "0x7f39C581F595B53c5cb19bD0b3f8dA6c935E2Ca0",
                "wstETH",
            ),
        ],
    )
    + _deployments(
        "etherfi-weeth",
        "eETH",
        150000,
        [
            (
                1,
                "0xCd5fE23C85820F7B72D0926FC9b05b43E359b7ee",
                "0x35fA164735182de50811E8e2E824cFb9B6118ac2",
                "0xCd5fE23C85820F7B72D0926FC9b05b43E359b7ee",
                "weETH",
            ),
        ],
    )
    + _deployments(
        "ethena-susde",
        "USDe",
        200000,
        [
            (
                1,
                "0x9D39A5DE30e57443BfF2A8307A4256c8797A3497",
                "0x4c9EDD5852cd905f086C759E8383e09bff1E68B3",
                "0x9D39A5DE30e57443BfF2A8307A4256c8797A3497",
                "sUSDe",
            ),
            (
                42161,
                "0x211Cc4DD073734dA055fbF44a2b4667d5E5fE5d2",
                "0x5d3a1Ff2b6BAb83b63cd9AD0787074081a52ef34",
                "0x211Cc4DD073734dA055fbF44a2b4667d5E5fE5d2",
                "sUSDe",
            ),
            (
                8453,
                "0x211Cc4DD073734dA055fbF44a2b4667d5E5fE5d2",
                "0x5d3a1Ff2b6BAb83b63cd9AD0787074081a52ef34",
                "0x211Cc4DD073734dA055fbF44a2b4667d5E5fE5d2",
                "sUSDe",
            ),
        ],
    )
    + _deployments(
        "morpho-usdc",
        "USDC",
        300000,
        [
            (
                1,
                "0xBEEF01735c132Ada46AA9aA4c54623cAA92A64CB",
                _USDC_ETH,
                "0xBEEF01735c132Ada46AA9aA4c54623cAA92A64CB",
                "steakUSDC",
            ),
            (
                8453,
                "0x7BfA7C4f149E7415b73bdeDfe609237e29CBF34A",
                _USDC_BASE,
                "0x7BfA7C4f149E7415b73bdeDfe609237e29CBF34A",
                "spUSDC",
            ),
        ],
    )
    + _deployments(
        "morpho-weth",
        "WETH",
        300000,
        [
            (
                1,
                "0x78Fc2c2eD1A4cDb5402365934aE5648aDAd094d0",
                _WETH_ETH,
                "0x78Fc2c2eD1A4cDb5402365934aE5648aDAd094d0",
                "re7WETH",
            ),
            (
                8453,
                "0x9eA49b9a8f82d8E38C4E5ED7339c0c79b4639a92",
                _WETH_OP_STACK,
                "0x9eA49b9a8f82d8E38C4E5ED7339c0c79b4639a92",
                "spWETH",
            ),
        ],
    )
    + _deployments(
        "compound-v3-usdc",
        "USDC",
        300000,
        [
            (
                1,
                "0xc3d688B66703497DAA19211EEdff47f25384cdc3",
                _USDC_ETH,
                "0xc3d688B66703497DAA19211EEdff47f25384cdc3",
                "cUSDCv3",
            ),
            (
                42161,
                "0x9c4ec768c28520B50860ea7a15bd7213a9fF58bf",
                _USDC_ARB,
                "0x9c4ec768c28520B50860ea7a15bd7213a9fF58bf",
                "cUSDCv3",
            ),
            (
                8453,
                "0xb125E6687d4313864e53df431d5425969c15Eb2F",
                _USDC_BASE,
                "0xb125E6687d4313864e53df431d5425969c15Eb2F",
                "cUSDCv3",
            ),
            (
                10,
                "0x2e44e174f7D53F0212823acC11C01A11d58c5bCB",
                _USDC_OP,
                "0x2e44e174f7D53F0212823acC11C01A11d58c5bCB",
                "cUSDCv3",
            ),
            (
                137,
                "0xF25212E676D1F7F89Cd72fFEe66158f541246445",
                _USDC_POL,
                "0xF25212E676D1F7F89Cd72fFEe66158f541246445",
                "cUSDCv3",
            ),
            (
                534352,
                "0xB2f97C1bD3bF02f5E74D13F9C178Bc6E8Ee17dd6",
                _USDC_SCR,
                "0xB2f97C1bD3bF02f5E74D13F9C178Bc6E8Ee17dd6",
                "cUSDCv3",
            ),
        ],
    )
    + _deployments(
        "compound-v3-weth",
        "WETH",
        300000,
        [
            (
                1,
                "0xA17581A9E3356d9A858b789D68B4d866e593aE94",
                _WETH_ETH,
                "0xA17581A9E3356d9A858b789D68B4d866e593aE94",
                "cWETHv3",
            ),
            (
                42161,
                "0x6f7D514bbD4aFf3BcD1140B7344b32f063dEe486",
                _WETH_ARB,
                "0x6f7D514bbD4aFf3BcD1140B7344b32f063dEe486",
                "cWETHv3",
            ),
            (
                8453,
                "0x46e6b214b524310239732D51387075E0e70970bf",
                _WETH_OP_STACK,
                "0x46e6b214b524310239732D51387075E0e70970bf",
                "cWETHv3",
            ),
            (
                10,
                "0xE36A30D249f7761327fd973001A32010b521b6Fd",
                _WETH_OP_STACK,
                "0xE36A30D249f7761327fd973001A32010b521b6Fd",
                "cWETHv3",
            ),
        ],
    )
    + _deployments(
        "seamless-weth",
        "WETH",
        300000,
        [
            (
                8453,
                _SEAMLESS_POOL,
                _WETH_OP_STACK,
                "0x48bf8fCd44e2977c8a9A744658431A8e6C0d866c",
                "sWETH",
            ),
        ],
    )
    + _deployments(
        "seamless-usdc",
        "USDC",
        300000,
        [
            (
                8453,
                _SEAMLESS_POOL,
                _USDC_BASE,
                "0x53E240C0F985175dA046A62F26D490d1E259036e",
                "sUSDC",
            ),
        ],
    )
    + _deployments(
        "moonwell-weth",
        "WETH",
        300000,
        [
            (
                8453,
                "0x628ff693426583D9a7FB391E54366292F509D457",
                _WETH_OP_STACK,
                "0x628ff693426583D9a7FB391E54366292F509D457",
                "mWETH",
            ),
            (
                10,
                "0xB4104c02bBF4e9BE85AAa41f4a2D7e16b9F7Cd60",
                _WETH_OP_STACK,
                "0xB4104c02bBF4e9BE85AAa41f4a2D7e16b9F7Cd60",
                "mWETH",
            ),
        ],
    )
    + _deployments(
        "moonwell-usdc",
        "USDC",
        300000,
        [
            (
                8453,
                "0xEdc817A28E8B93B03976FBd4a3dDBc9f7D176c22",
                _USDC_BASE,
                "0xEdc817A28E8B93B03976FBd4a3dDBc9f7D176c22",
                "mUSDC",
            ),
            (
                10,
                "0x8e08617B0D66359d73aA55e9d5B5d0D3c4700E5e",
                _USDC_OP,
                "0x8e08617B0D66359d73aA55e9d5B5d0D3c4700E5e",
                "mUSDC",
            ),
        ],
    )
)

# Validated once at import; the table is never mutated afterwards.
DEFAULT_REGISTRY = ProtocolRegistry(PROTOCOLS, DEPLOYMENTS)


def default_registry() -> ProtocolRegistry:
    return DEFAULT_REGISTRY
