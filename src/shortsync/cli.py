"""Command-line entry point: ``shortsync``.

Reconciles a YAML link file with Short.io::

    SHORTIO_API_KEY=sk_xxx shortsync --config shortlinks.yaml --dry-run

Exit status is ``0`` when every operation succeeded, ``1`` when at least
one link operation failed, and ``2`` when the run was aborted (invalid
link file, missing API key, or a failure while fetching remote links).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from shortsync.async_client import AsyncShortsyncClient
from shortsync.config import API_KEY_ENV_VAR
from shortsync.errors import ConfigError, ShortsyncError
from shortsync.loader import load_link_config
from shortsync.models import LinkConfig, LinkDiff, SyncResult
from shortsync.observability import get_logger
from shortsync.sync.summary import format_diff, format_summary

__all__ = ["main", "parse_args"]

EXIT_OK = 0
EXIT_SYNC_ERRORS = 1
EXIT_ABORTED = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="shortsync",
        description="Reconcile a YAML link file with the links held by Short.io.",
    )
    parser.add_argument(
        "-c", "--config",
        default="shortlinks.yaml",
        help="Path to the YAML link file (default: %(default)s)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and print the changes without applying them",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help=f"Short.io secret API key (default: ${API_KEY_ENV_VAR})",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=4,
        help="Maximum concurrent write requests per phase (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Level of the JSON logs written to stderr (default: %(default)s)",
    )
    return parser.parse_args(argv)


async def _run(
    api_key: str, config: LinkConfig, args: argparse.Namespace,
) -> tuple[LinkDiff, SyncResult]:
    async with AsyncShortsyncClient(
        api_key=api_key, max_concurrency=args.max_concurrency,
    ) as client:
        diff = await client.diff(config)
        result = await client.apply(diff, dry_run=args.dry_run)
    return diff, result


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = parse_args(argv)
    get_logger().setLevel(getattr(logging, args.log_level))

    try:
        config = load_link_config(args.config)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return EXIT_ABORTED

    api_key = args.api_key or os.environ.get(API_KEY_ENV_VAR, "")
    if not api_key:
        print(
            f"Missing Short.io API key: pass --api-key or set {API_KEY_ENV_VAR}",
            file=sys.stderr,
        )
        return EXIT_ABORTED

    try:
        diff, result = asyncio.run(_run(api_key, config, args))
    except (ShortsyncError, ValueError) as exc:
        print(f"Sync aborted: {exc}", file=sys.stderr)
        return EXIT_ABORTED

    print(format_diff(diff))
    print(format_summary(result, dry_run=args.dry_run))
    for error in result.errors:
        print(f"  - {error}")
    return EXIT_OK if result.ok else EXIT_SYNC_ERRORS


if __name__ == "__main__":
    sys.exit(main())
