"""Example: bridge USDC from Solana to Base, then supply the proceeds to Aave V3."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from defi_composer import BridgeQuoteParams, ComposerConfig, DeFiComposer
from defi_composer.constants import NonEvmChain, get_token_address
from defi_composer.utils import to_base_units

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger("solana_bridge_deposit")

SOLANA_USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
DEFAULT_AMOUNT = os.getenv("BRIDGE_AMOUNT_USDC", "5")


def main() -> None:
    config = ComposerConfig.from_env()
    if config.solana.secret_key is None:
        raise ValueError("SOLANA_PRIVATE_KEY not found in environment variables")

    dest_chain = int(os.getenv("DEST_CHAIN", "8453"))
    dest_token = get_token_address(dest_chain, "USDC")
    if dest_token is None:
        raise ValueError(f"No USDC address known for chain {dest_chain}")

    params = BridgeQuoteParams(
        from_chain=int(NonEvmChain.SOLANA),
        to_chain=dest_chain,
        from_token=SOLANA_USDC,
        to_token=dest_token,
        from_amount=to_base_units(DEFAULT_AMOUNT, 6),
    )

    with DeFiComposer(config) as composer:
        logger.info("Bridging %s USDC from Solana to chain %s", DEFAULT_AMOUNT, dest_chain)
        bridged, deposited = composer.bridge_and_deposit(params, "aave-v3-usdc")

        logger.info("Bridge %s: %s", bridged.status.value, bridged.explorer_links.lifi)
        if deposited is None:
            logger.error("Bridge did not settle; resume later with key %s", bridged.status_key)
            return
        logger.info("Deposit %s: %s", deposited.status.value, deposited.explorer_links.source)


if __name__ == "__main__":
    main()
