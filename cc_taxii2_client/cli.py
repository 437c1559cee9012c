"""CLI entrypoint for the CloudCover TAXII client."""

import argparse
import asyncio
import json
import sys
from typing import Optional

from cc_taxii2_client.cloudcover import PUBLIC_ROOT, CCTaxiiClient
from cc_taxii2_client.config import load_config
from cc_taxii2_client.errors import ConfigurationError, TaxiiError
from cc_taxii2_client.logging_setup import setup_logging

logger = setup_logging()


async def discovery_command(args: argparse.Namespace, client: CCTaxiiClient) -> int:
    """Print the server discovery document as JSON."""
    discovery = await client.discover()
    print(json.dumps(discovery.to_dict(), indent=2))
    return 0


async def collections_command(args: argparse.Namespace, client: CCTaxiiClient) -> int:
    """Print the collections available under an API root."""
    collections = await client.get_collections(args.root)
    if not collections:
        logger.warning(f"No collections under '{args.root}'")
    print(json.dumps([c.to_dict() for c in collections], indent=2))
    return 0


async def indicators_command(args: argparse.Namespace, client: CCTaxiiClient) -> int:
    """Fetch indicators and print their count, or the indicators with --json."""
    matches = {"type": args.type} if args.type else None
    indicators = await client.get_cc_indicators(
        collection_id=args.collection,
        limit=args.limit,
        private=args.private,
        added_after=args.added_after,
        matches=matches,
        follow_pages=args.follow_pages,
    )
    if args.json:
        print(json.dumps([i.to_dict() for i in indicators], indent=2))
    else:
        print(len(indicators))
    return 0


COMMANDS = {
    "discovery": discovery_command,
    "collections": collections_command,
    "indicators": indicators_command,
}


async def run(args: argparse.Namespace) -> int:
    """
    Load configuration from the environment and execute one command.

    Returns:
        Exit code (0 = success, 1 = TAXII error, 2 = configuration error).
    """
    try:
        config = load_config()
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    try:
        async with CCTaxiiClient(config) as client:
            return await COMMANDS[args.command](args, client)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2
    except TaxiiError as e:
        logger.error(f"{args.command} failed [{e.kind.value}]: {e}")
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CloudCover TAXII 2.1 client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("discovery", help="Show server discovery information")

    collections = sub.add_parser("collections", help="List collections of an API root")
    collections.add_argument("--root", default=PUBLIC_ROOT, help="API root name")

    indicators = sub.add_parser("indicators", help="Fetch CloudCover indicators")
    indicators.add_argument("--collection", default=None, help="Collection id")
    indicators.add_argument("--limit", type=int, default=1000, help="Objects per page")
    indicators.add_argument(
        "--private", action="store_true", help="Use the account's private root"
    )
    indicators.add_argument(
        "--added-after", default=None, help="Only objects added after this timestamp"
    )
    indicators.add_argument("--type", default=None, help="STIX type to match")
    indicators.add_argument(
        "--follow-pages", action="store_true", help="Follow pagination cursors"
    )
    indicators.add_argument(
        "--json", action="store_true", help="Print indicators instead of a count"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)
    if args.debug:
        setup_logging(debug=True)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
