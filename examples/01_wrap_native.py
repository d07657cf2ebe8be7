"""Example: wrap a little ETH into WETH on Base by calling the wrapper directly."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from defi_composer import ComposerConfig, DeFiComposer, ExecutionResult

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger("wrap_native")

DEFAULT_AMOUNT_WEI = int(os.getenv("WRAP_AMOUNT_WEI", str(10**14)))


def _log_result(label: str, result: ExecutionResult) -> None:
    logger.info("%s finished with status %s", label, result.status.value)
    logger.info("  tx: %s", result.explorer_links.source)
    if result.error is not None:
        logger.error("  error: %s", result.error.message)


def main() -> None:
    config = ComposerConfig.from_env()
    chain_id = int(os.getenv("CHAIN_ID", "8453"))

    with DeFiComposer(config) as composer:
        logger.info("Wrapping %s wei for %s on chain %s", DEFAULT_AMOUNT_WEI, composer.address, chain_id)
        result = composer.execute_direct("weth-wrap", chain_id, DEFAULT_AMOUNT_WEI)
        _log_result("Wrap", result)


if __name__ == "__main__":
    main()
