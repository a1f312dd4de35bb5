"""
Command line entry point: runs every scenario in a feature directory.

Usage:
    kraken-probe
    kraken-probe --features features --log-level DEBUG

Exits with 0 when every scenario passed and 1 otherwise.
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from kraken_probe.api.auth import Authenticator
from kraken_probe.api.client import KrakenRestClient
from kraken_probe.api.exceptions import ConfigurationError
from kraken_probe.config.manager import load_credentials, load_settings
from kraken_probe.scenarios.loader import load_features
from kraken_probe.scenarios.runner import RunSummary, ScenarioRunner
from kraken_probe.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kraken-probe",
        description="Run REST API scenarios against the Kraken exchange",
    )
    parser.add_argument(
        "--features",
        type=Path,
        default=Path("features"),
        help="Directory with YAML feature files (default: features)",
    )
    parser.add_argument("--domain", default=None, help="API domain, overrides API_DOMAIN")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level, overrides LOG_LEVEL",
    )
    parser.add_argument("--json-logs", action="store_true", help="Log as JSON")
    parser.add_argument("--log-dir", type=Path, default=None, help="Also log to files here")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> RunSummary:
    """
    Load everything up front, then run the scenarios.

    Raises:
        ConfigurationError: If settings, features or required credentials are invalid
    """
    settings = load_settings(
        api_domain=args.domain,
        log_level=args.log_level,
        json_logs=args.json_logs or None,
    )
    setup_logging(
        log_level=settings.log_level,
        log_dir=args.log_dir,
        json_logs=settings.json_logs,
    )

    features = load_features(args.features)

    authenticator = None
    if any(feature.needs_credentials for feature in features):
        authenticator = Authenticator(
            load_credentials(),
            domain=settings.api_domain,
            user_agent=settings.user_agent,
        )

    async with KrakenRestClient() as client:
        runner = ScenarioRunner(client, settings, authenticator)
        return await runner.run(features)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        summary = asyncio.run(run(args))
    except ConfigurationError as e:
        logger.error("setup_failed", error=str(e))
        print(f"Setup failed: {e}", file=sys.stderr)
        return 1

    if not summary.all_passed:
        print(f"\nTest failed! {summary.failed} of {len(summary.results)} scenarios failed.")
        return 1

    print(f"\nRan {summary.passed} scenarios successfully!")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
