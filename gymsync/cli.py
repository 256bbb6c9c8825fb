"""
Command-line interface for Gym Sync.

Console helpers for testing the API connection, syncing the catalog,
exporting it, and querying the remote collection. Results are printed
as JSON on stdout; logs go to stderr.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, Optional

from .catalog import DEFAULT_EXPORT_NAME, export_catalog, resolve_catalog
from .client import DEFAULT_BASE_URL, DEFAULT_RESOURCE_PATH, ClientConfig, client_session
from .errors import GymSyncError, SnapshotFailure, TransportError, ValidationError
from .queries import check_connection, find_by_id, search_by_text
from .reconciler import Reconciler
from .validator import validate_record

logger = logging.getLogger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ABORTED = 2


def print_json(data: Any) -> None:
    """Print a structured result."""
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_config(args: argparse.Namespace) -> ClientConfig:
    """Client configuration from command-line flags."""
    return ClientConfig(
        base_url=args.base_url,
        resource_path=args.resource_path,
        timeout=args.timeout,
        api_token=args.token,
    )


# =============================================================================
# Commands
# =============================================================================

async def cmd_test(args: argparse.Namespace) -> int:
    """Test the API connection."""
    async with client_session(build_config(args)) as client:
        check = await check_connection(client)
    print_json(check.to_dict())
    return EXIT_OK if check.success else EXIT_FAILED


async def cmd_sync(args: argparse.Namespace) -> int:
    """Sync all gyms in the catalog to the API."""
    records = resolve_catalog(args.catalog)

    async with client_session(build_config(args)) as client:
        reconciler = Reconciler(
            client,
            validate=args.validate,
            max_concurrency=args.concurrency,
        )
        try:
            report = await reconciler.sync_all(records)
        except (SnapshotFailure, ValidationError) as e:
            print_json(e.to_dict())
            return EXIT_ABORTED

    print_json(report.to_dict())
    return EXIT_OK if report.success else EXIT_FAILED


async def cmd_export(args: argparse.Namespace) -> int:
    """Export the catalog to a JSON file."""
    path = export_catalog(resolve_catalog(args.catalog), args.output)
    print_json({"exported": str(path)})
    return EXIT_OK


async def cmd_validate(args: argparse.Namespace) -> int:
    """Validate every record of the catalog locally."""
    records = resolve_catalog(args.catalog)
    results = []
    for record in records:
        result = validate_record(record)
        results.append({"identifier": record.get("id"), **result.to_dict()})

    print_json(results)
    return EXIT_OK if all(r["valid"] for r in results) else EXIT_FAILED


async def cmd_find(args: argparse.Namespace) -> int:
    """Look up one gym by id."""
    async with client_session(build_config(args)) as client:
        result = await find_by_id(client, args.id)
    print_json(result.to_dict())
    return EXIT_OK if result.found else EXIT_FAILED


async def cmd_search(args: argparse.Namespace) -> int:
    """Search gyms by name, city or street."""
    async with client_session(build_config(args)) as client:
        matches = await search_by_text(client, args.query)
    print_json(matches)
    return EXIT_OK


async def cmd_delete(args: argparse.Namespace) -> int:
    """Delete one gym remotely."""
    async with client_session(build_config(args)) as client:
        deleted = await client.delete(args.id)
    print_json({"identifier": args.id, "deleted": deleted})
    return EXIT_OK


COMMANDS = {
    "test": cmd_test,
    "sync": cmd_sync,
    "export": cmd_export,
    "validate": cmd_validate,
    "find": cmd_find,
    "search": cmd_search,
    "delete": cmd_delete,
}


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gymsync",
        description="Sync the Boulders gym catalog with the BRP business units API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Test the API connection:
    python -m gymsync test

  Sync all gyms, validating first:
    python -m gymsync sync --validate

  Export the catalog:
    python -m gymsync export -o gyms.json
        """
    )

    parser.add_argument(
        "--base-url",
        default=os.environ.get("BRP_API_BASE_URL", DEFAULT_BASE_URL),
        help="API base URL (env: BRP_API_BASE_URL)"
    )
    parser.add_argument(
        "--resource-path",
        default=os.environ.get("BRP_RESOURCE_PATH", DEFAULT_RESOURCE_PATH),
        help="Collection path below the base URL"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.environ.get("BRP_API_TIMEOUT", 30.0)),
        help="Per-request timeout in seconds"
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("BRP_API_TOKEN"),
        help="Bearer token (env: BRP_API_TOKEN)"
    )
    parser.add_argument(
        "--catalog",
        default=os.environ.get("CATALOG_PATH"),
        help="JSON catalog file (default: built-in gym catalog)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("test", help="Test the API connection")

    sync_parser = subparsers.add_parser("sync", help="Sync all gyms to the API")
    sync_parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate every record before any network call"
    )
    sync_parser.add_argument(
        "--concurrency",
        type=positive_int,
        default=1,
        help="Per-record requests in flight at once (default: 1)"
    )

    export_parser = subparsers.add_parser("export", help="Export the catalog to JSON")
    export_parser.add_argument(
        "-o", "--output",
        default=DEFAULT_EXPORT_NAME,
        help=f"Output file path (default: {DEFAULT_EXPORT_NAME})"
    )

    subparsers.add_parser("validate", help="Validate the catalog locally")

    find_parser = subparsers.add_parser("find", help="Find a gym by id")
    find_parser.add_argument("id", type=int, help="Business unit id")

    search_parser = subparsers.add_parser("search", help="Search gyms by name, city or street")
    search_parser.add_argument("query", help="Search text")

    delete_parser = subparsers.add_parser("delete", help="Delete a gym remotely")
    delete_parser.add_argument("id", type=int, help="Business unit id")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return EXIT_OK

    try:
        return asyncio.run(command(args))
    except TransportError as e:
        print_json(e.to_dict())
        return EXIT_FAILED
    except GymSyncError as e:
        logger.error(str(e))
        print_json(e.to_dict())
        return EXIT_ABORTED


if __name__ == "__main__":
    sys.exit(main())
