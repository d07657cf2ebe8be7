"""Example: bridge USDC from Arbitrum and supply it to Aave V3 on Base in one route."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from defi_composer import (
    ComposerConfig,
    DeFiComposer,
    EventRecorder,
    UnsupportedRouteError,
)
from defi_composer.quote import estimated_duration, minimum_output, total_gas_cost_usd
from defi_composer.utils import format_duration, format_token_amount, to_base_units

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger("cross_chain_deposit")

DEFAULT_AMOUNT = os.getenv("DEPOSIT_AMOUNT_USDC", "5")


def main() -> None:
    config = ComposerConfig.from_env()
    protocol_id = os.getenv("PROTOCOL_ID", "aave-v3-usdc")
    source_chain = int(os.getenv("SOURCE_CHAIN", "42161"))
    dest_chain = int(os.getenv("DEST_CHAIN", "8453"))
    amount = to_base_units(DEFAULT_AMOUNT, 6)

    recorder = EventRecorder()
    with DeFiComposer(config, observers=[recorder]) as composer:
        try:
            quote = composer.quote_deposit(protocol_id, dest_chain, amount, source_chain=source_chain)
        except UnsupportedRouteError as exc:
            logger.error("No route from chain %s to %s: %s", source_chain, dest_chain, exc.message)
            return

        logger.info(
            "Quote via %s: min received %s USDC, gas $%s, ~%s",
            quote.tool,
            format_token_amount(minimum_output(quote), 6),
            total_gas_cost_usd(quote),
            format_duration(estimated_duration(quote)),
        )

        result = composer.execute(quote)
        logger.info("Source transaction: %s", result.explorer_links.source)
        result = composer.wait_for_completion(result)

        logger.info("Final status: %s", result.status.value)
        logger.info("  contract call succeeded: %s", result.contract_call_succeeded)
        if result.explorer_links.destination:
            logger.info("  destination tx: %s", result.explorer_links.destination)
        if result.fallback_triggered:
            logger.warning("  destination call did not run; funds were sent to the fallback address")
        logger.debug("Stages: %s", [stage.value for stage in recorder.stages()])


if __name__ == "__main__":
    main()
