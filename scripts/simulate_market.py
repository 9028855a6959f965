#!/usr/bin/env python3
"""Simulate a fractional property market and export its events.

Deploys a generated property on an in-process chain, runs purchases,
dividend deposits and claims, checks the ledger invariants and writes
every contract event to the chosen sinks.

Usage:
    python scripts/simulate_market.py --buyers 50 --seed 7
    python scripts/simulate_market.py --token --sink json --output-dir output
    python scripts/simulate_market.py --sink kafka --kafka-bootstrap localhost:9092
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from frac_estate.config import FracEstateConfig, MarketConfig
from frac_estate.exceptions import ConfigurationError, SinkError
from frac_estate.logging import setup_logging
from frac_estate.scenarios import MarketScenario
from frac_estate.sinks import ConsoleSink, JsonFileSink, KafkaSink
from frac_estate.sinks.kafka import ProducerConfig

logger = logging.getLogger(__name__)


def build_sinks(args: argparse.Namespace, config: FracEstateConfig) -> list:
    """Instantiate the sinks requested on the command line."""
    sinks = []
    for name in args.sink:
        if name == "console":
            sinks.append(ConsoleSink(pretty=True, max_records=args.max_console))
        elif name == "json":
            output_dir = Path(args.output_dir) if args.output_dir else config.output.json_output_dir
            sinks.append(JsonFileSink(output_dir, pretty=config.output.pretty_json))
        elif name == "kafka":
            producer_config = ProducerConfig(
                bootstrap_servers=args.kafka_bootstrap or config.kafka.bootstrap_servers,
                schema_registry_url=args.schema_registry,
                acks=config.kafka.acks,
                batch_size=config.kafka.batch_size,
                linger_ms=config.kafka.linger_ms,
                compression=config.kafka.compression,
                retries=config.kafka.retries,
            )
            sinks.append(KafkaSink(producer_config, topic_prefix=config.output.topic_prefix))
    return sinks


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Simulate a fractional property market")
    parser.add_argument("--buyers", type=int, default=None, help="Number of buyers (default: 25)")
    parser.add_argument("--deposits", type=int, default=None, help="Dividend deposits (default: 4)")
    parser.add_argument(
        "--sell-through",
        type=float,
        default=None,
        help="Share of the supply to sell, 0-1 (default: 0.6)",
    )
    parser.add_argument(
        "--claim-rate",
        type=float,
        default=None,
        help="Probability a holder claims after each deposit (default: 0.5)",
    )
    parser.add_argument("--token", action="store_true", help="Price the property in a mock USDT")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: SEED or none)")
    parser.add_argument(
        "--sink",
        action="append",
        choices=["console", "json", "kafka"],
        default=None,
        help="Output sink, repeatable (default: console)",
    )
    parser.add_argument("--max-console", type=int, default=10, help="Events printed by the console sink")
    parser.add_argument("--output-dir", type=str, default=None, help="Directory for the json sink")
    parser.add_argument("--kafka-bootstrap", type=str, default=None, help="Kafka bootstrap servers")
    parser.add_argument("--schema-registry", type=str, default=None, help="Schema Registry URL (enables Avro)")
    parser.add_argument("--log-level", type=str, default=None, help="Log level (default: LOG_LEVEL or INFO)")
    args = parser.parse_args(argv)
    args.sink = args.sink or ["console"]

    try:
        config = FracEstateConfig.from_env()
    except ConfigurationError as exc:
        setup_logging(args.log_level or "INFO")
        logger.error("Configuration error: %s", exc)
        return 1
    setup_logging(args.log_level or config.log_level)

    defaults = config.market
    market = MarketConfig(
        num_buyers=args.buyers if args.buyers is not None else defaults.num_buyers,
        num_deposits=args.deposits if args.deposits is not None else defaults.num_deposits,
        sell_through=args.sell_through if args.sell_through is not None else defaults.sell_through,
        claim_rate=args.claim_rate if args.claim_rate is not None else defaults.claim_rate,
        use_token_payment=args.token or defaults.use_token_payment,
    )
    if not 0 < market.sell_through <= 1:
        parser.error("--sell-through must be in (0, 1]")
    seed = args.seed if args.seed is not None else config.seed

    start = time.perf_counter()
    scenario = MarketScenario(seed=seed, config=market)
    scenario.generate()
    elapsed = time.perf_counter() - start

    violations = scenario.check_invariants()
    for violation in violations:
        logger.error("Invariant violated: %s", violation)

    events = scenario.events()
    sinks = build_sinks(args, config)
    try:
        for sink in sinks:
            sink.write_batch("contract_events", events)
    except SinkError as exc:
        logger.error("Export failed: %s", exc)
        return 1
    finally:
        for sink in sinks:
            sink.close()

    logger.info("=" * 60)
    for key, value in scenario.get_summary().items():
        logger.info("%-20s %s", key, value)
    logger.info("%-20s %.2fs", "elapsed", elapsed)
    logger.info("=" * 60)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
