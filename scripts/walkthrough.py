#!/usr/bin/env python3
"""Buy fractions, deposit dividends and claim them end to end.

Reads FULL_NODE_DEVELOPMENT, OWNER_PRIVATE_KEY, TEST_PRIVATE_KEY and
CONTRACT_ADDRESS (plus USDT_ADDRESS for token-priced properties) from
the environment or a .env file. Deploy first with scripts/deploy.py.

Usage:
    python scripts/walkthrough.py
    python scripts/walkthrough.py --fractions 5 --dividends 250
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from frac_estate.config import ClientConfig
from frac_estate.exceptions import ConfigurationError
from frac_estate.logging import setup_logging
from frac_estate.pipeline import WalkthroughSettings, run_walkthrough

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run the fractional property walkthrough")
    parser.add_argument(
        "--fractions",
        type=int,
        default=2,
        help="Fractions to buy (default: 2)",
    )
    parser.add_argument(
        "--dividends",
        type=int,
        default=100,
        help="Whole TRX/USDT the owner deposits as dividends (default: 100)",
    )
    parser.add_argument("--log-level", type=str, default="INFO", help="Log level (default: INFO)")
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default="standard",
        help="Log output format (default: standard)",
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_format)

    settings = WalkthroughSettings(fractions_to_buy=args.fractions, dividend_amount=args.dividends)
    try:
        report = run_walkthrough(ClientConfig.from_env(), settings=settings)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    for result in report.results:
        status = "ok" if result.ok else "FAILED"
        logger.info("%-18s %-6s %6.3fs %s", result.name, status, result.elapsed, result.tx_id or "")

    if not report.ok:
        failed = report.failed_step
        logger.error("Walkthrough failed at %s: %s", failed.name, failed.error)
        return 1

    logger.info("Walkthrough finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
