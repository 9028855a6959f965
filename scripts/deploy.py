#!/usr/bin/env python3
"""Deploy a fractional property contract to the development chain.

Runs the migrations for one of the named presets: ``citycenter`` is
priced in TRX, ``lakeview`` in USDT (set USDT_ADDRESS, or pass
--deploy-usdt to create a mock USDT first). Without --node or
FULL_NODE_DEVELOPMENT the endpoint and deployer key come from the
TRON_NETWORK profile.

Usage:
    python scripts/deploy.py --preset citycenter
    python scripts/deploy.py --preset lakeview --deploy-usdt --fund 10000
    python scripts/deploy.py --preset lakeview --fund-usdt 500 >> .env
    python scripts/deploy.py --node sim://local/chain.json
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from frac_estate.chain.address import address_from_private_key
from frac_estate.chain.simulator import connect
from frac_estate.config import FracEstateConfig, get_network
from frac_estate.exceptions import ConfigurationError, TransactionRevertedError
from frac_estate.logging import setup_logging
from frac_estate.models import PaymentKind
from frac_estate.pipeline.deploy import PRESETS, deploy_mock_usdt, deploy_preset, fund_usdt, get_preset
from frac_estate.units import sun, to_base_units

logger = logging.getLogger(__name__)

# Whole USDT sent to the test account when a mock USDT is deployed
DEFAULT_TEST_USDT = 10_000


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Deploy a fractional property contract")
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="citycenter",
        help="Property preset to deploy (default: citycenter)",
    )
    parser.add_argument(
        "--node",
        type=str,
        default=None,
        help="Node endpoint, overrides FULL_NODE_DEVELOPMENT (memory:// or sim://<file>)",
    )
    parser.add_argument(
        "--deploy-usdt",
        action="store_true",
        help="Deploy a mock USDT owned by the deployer and price the property in it",
    )
    parser.add_argument(
        "--fund",
        type=int,
        default=0,
        help="Whole TRX to credit to the owner and test accounts before deploying",
    )
    parser.add_argument(
        "--fund-usdt",
        type=int,
        default=None,
        help=(
            "Whole USDT the deployer sends to the test account "
            f"(default: {DEFAULT_TEST_USDT} with --deploy-usdt, else 0)"
        ),
    )
    parser.add_argument("--log-level", type=str, default=None, help="Log level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args(argv)

    try:
        config = FracEstateConfig.from_env()
    except ConfigurationError as exc:
        setup_logging(args.log_level or "INFO")
        logger.error("Configuration error: %s", exc)
        return 1
    setup_logging(args.log_level or config.log_level)

    client_config = config.client
    profile = get_network(config.network)
    client_config.full_node = args.node or client_config.full_node or profile.full_host
    client_config.owner_private_key = client_config.owner_private_key or profile.private_key()
    logger.info("Network %s, fee limit %d sun", profile.name.value, profile.fee_limit)

    try:
        client_config.validate(require_contract=False)
        preset = get_preset(args.preset)
        node = connect(client_config.full_node)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    owner = address_from_private_key(client_config.owner_private_key)
    if args.fund:
        node.fund(owner, sun(args.fund))
        node.fund(address_from_private_key(client_config.test_private_key), sun(args.fund))
        logger.info("Funded owner and test accounts with %d TRX each", args.fund)

    usdt_address = client_config.payment_asset_address
    if preset.payment_kind is PaymentKind.TOKEN and args.deploy_usdt:
        usdt_address = deploy_mock_usdt(node, client_config.owner_private_key)

    usdt_grant = args.fund_usdt
    if usdt_grant is None:
        usdt_grant = DEFAULT_TEST_USDT if args.deploy_usdt else 0
    if usdt_grant and preset.payment_kind is PaymentKind.TOKEN and usdt_address:
        test_address = address_from_private_key(client_config.test_private_key)
        try:
            fund_usdt(
                node,
                client_config.owner_private_key,
                usdt_address,
                test_address,
                to_base_units(usdt_grant, 6),
            )
        except TransactionRevertedError as exc:
            logger.error("USDT funding failed: %s", exc)
            return 1
        logger.info("Funded test account with %d USDT", usdt_grant)

    try:
        contract_address = deploy_preset(node, client_config.owner_private_key, preset, usdt_address)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    logger.info("=" * 60)
    logger.info("Preset       : %s (%s)", args.preset, preset.symbol)
    logger.info("Owner        : %s", owner)
    logger.info("Contract     : %s", contract_address)
    if preset.payment_kind is PaymentKind.TOKEN:
        logger.info("USDT         : %s", usdt_address)
    logger.info("=" * 60)

    # Values for .env on stdout; logs go to stderr
    print(f"CONTRACT_ADDRESS={contract_address}")
    if preset.payment_kind is PaymentKind.TOKEN:
        print(f"USDT_ADDRESS={usdt_address}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
