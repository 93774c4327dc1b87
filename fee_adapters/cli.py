"""
Fee Adapters - CLI.

============================================================
RESPONSIBILITY
============================================================
Command-line runner for the registered protocol adapters.

- Fetches one day of normalized fees for a protocol and chain
- Prints registry metadata (start markers, methodology)
- Loads endpoints from environment, .env or a YAML file

============================================================
USAGE
============================================================
python -m fee_adapters.cli --protocol voodoo-trade --date 2023-11-14
python -m fee_adapters.cli --protocol goplus --chain bsc --timestamp 1700000000
python -m fee_adapters.cli --protocol goplus --metadata

============================================================
"""

import argparse
import asyncio
import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, List, Optional

from fee_adapters.clock import format_day
from fee_adapters.config import FeeAdapterSettings, configure_logging
from fee_adapters.exceptions import FeeAdapterError
from fee_adapters.models import SECONDS_PER_DAY
from fee_adapters.protocols import PROTOCOLS
from fee_adapters.transport import open_session


logger = logging.getLogger(__name__)


# ============================================================
# CLI ARGUMENT PARSER
# ============================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fee-adapters",
        description="Daily fee and revenue figures for on-chain protocols",
    )

    parser.add_argument(
        "--protocol", "-p",
        type=str,
        choices=sorted(PROTOCOLS),
        required=True,
        help="Protocol adapter to run",
    )
    parser.add_argument(
        "--chain", "-c",
        type=str,
        help="Chain to fetch (default: every registered chain)",
    )

    # --------------------------------------------------------
    # Day Selection
    # --------------------------------------------------------
    day_group = parser.add_mutually_exclusive_group()
    day_group.add_argument(
        "--date",
        type=str,
        metavar="YYYY-MM-DD",
        help="UTC day to fetch (default: yesterday)",
    )
    day_group.add_argument(
        "--timestamp",
        type=int,
        metavar="EPOCH",
        help="Any unix timestamp inside the day to fetch",
    )

    parser.add_argument(
        "--metadata",
        action="store_true",
        help="Print registry metadata and exit",
    )
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="YAML settings file (default: environment variables)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: FEE_ADAPTERS_LOG_LEVEL or INFO)",
    )

    return parser


def resolve_timestamp(args: argparse.Namespace, now: Optional[float] = None) -> int:
    """Reference timestamp for the requested day."""
    if args.timestamp is not None:
        return args.timestamp
    if args.date:
        day = datetime.strptime(args.date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        return int(day.timestamp())
    return int(now if now is not None else time.time()) - SECONDS_PER_DAY


def load_settings(args: argparse.Namespace) -> FeeAdapterSettings:
    if args.config:
        return FeeAdapterSettings.from_yaml(args.config)
    return FeeAdapterSettings.from_env()


# ============================================================
# MAIN ENTRY POINT
# ============================================================

async def async_main(args: argparse.Namespace, settings: FeeAdapterSettings) -> dict[str, Any]:
    """Build the protocol registry and run the requested command."""
    protocol = PROTOCOLS[args.protocol]

    async with open_session(settings.request_timeout_seconds, settings.user_agent) as session:
        registry = protocol.build_default_registry(settings, session=session)

        if args.metadata:
            return registry.get_metadata()

        timestamp = resolve_timestamp(args)
        chains = [args.chain] if args.chain else None
        logger.info(f"[{registry.name}] Fetching fees for {format_day(timestamp)}")

        results = await registry.fetch_many(chains, timestamp)
        return {
            "protocol": registry.name,
            "day": format_day(timestamp),
            "results": {chain.value: result.to_dict() for chain, result in results.items()},
        }


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
        configure_logging(args.log_level or settings.log_level)
        output = asyncio.run(async_main(args, settings))
    except FeeAdapterError as e:
        logger.error(f"Fee fetch failed: {e}")
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(json.dumps(output, indent=2))
    return 0


# ============================================================
# MODULE EXECUTION
# ============================================================

if __name__ == "__main__":
    sys.exit(main())
