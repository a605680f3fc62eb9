#!/usr/bin/env python3
"""
File-Cache Command Line Entry Point

Inspect and modify a cache directory from the shell. Values written
from the command line are stored as strings.

Usage:
    python -m filecache.cli --dir /tmp/cache set greeting hello
    python -m filecache.cli --dir /tmp/cache get greeting
    python -m filecache.cli --dir /tmp/cache has greeting
    python -m filecache.cli --dir /tmp/cache stats
    python -m filecache.cli --dir /tmp/cache cleanup

Environment Variables:
    FILE_CACHE_DIR          - Cache directory
    FILE_CACHE_DEFAULT_TTL  - Default time-to-live in seconds
    FILE_CACHE_CODEC        - Value codec (pickle or json)
    FILE_CACHE_DIGEST       - Digest algorithm for file names
    FILE_CACHE_DEBUG        - Enable debug mode (true/false)

Exit status is 0 on success, 1 when the answer is negative (a miss
without --default, has() false, a failed delete) and 2 when the cache
cannot be opened.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .cache.exceptions import CacheError, ConfigurationError
from .cache.store import FileCache
from .config.settings import settings

EXIT_OK = 0
EXIT_FALSE = 1
EXIT_CONFIG = 2

_MISS = object()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="file-cache",
        description="File-Cache: File-Persisted Key-Value Cache",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--dir",
        type=str,
        default=settings.CACHE_DIR,
        help="Cache directory",
    )

    parser.add_argument(
        "--ttl",
        type=int,
        default=settings.DEFAULT_TTL,
        help="Default time-to-live in seconds",
    )

    parser.add_argument(
        "--codec",
        type=str,
        default=settings.CODEC,
        help="Value codec",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get = commands.add_parser("get", help="Print the value of a key")
    get.add_argument("key")
    get.add_argument("--default", default=None, help="Printed when the key misses")

    put = commands.add_parser("set", help="Store a value")
    put.add_argument("key")
    put.add_argument("value")
    put.add_argument("--ttl", dest="entry_ttl", type=int, default=None,
                     help="Time-to-live for this entry (0 deletes the key)")

    delete = commands.add_parser("delete", help="Delete a key")
    delete.add_argument("key")

    has = commands.add_parser("has", help="Check if a cache file exists for a key")
    has.add_argument("key")

    commands.add_parser("clear", help="Delete every cache file")
    commands.add_parser("cleanup", help="Delete expired cache files")
    commands.add_parser("stats", help="Print directory statistics as JSON")

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def run(args: argparse.Namespace, cache: FileCache) -> int:
    """Execute one subcommand against an open cache."""
    if args.command == "get":
        value = cache.get(args.key, _MISS)
        if value is _MISS:
            if args.default is None:
                return EXIT_FALSE
            value = args.default
        print(value)
        return EXIT_OK

    if args.command == "set":
        ok = cache.set(args.key, args.value, args.entry_ttl)
        return EXIT_OK if ok else EXIT_FALSE

    if args.command == "delete":
        return EXIT_OK if cache.delete(args.key) else EXIT_FALSE

    if args.command == "has":
        found = cache.has(args.key)
        print("true" if found else "false")
        return EXIT_OK if found else EXIT_FALSE

    if args.command == "clear":
        return EXIT_OK if cache.clear() else EXIT_FALSE

    if args.command == "cleanup":
        print(cache.cleanup_expired())
        return EXIT_OK

    if args.command == "stats":
        print(json.dumps(cache.get_stats(), indent=2, sort_keys=True))
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command line tool."""
    args = parse_args(argv)

    setup_logging(debug=args.debug)
    logger = logging.getLogger(__name__)

    try:
        cache = FileCache(args.dir, default_ttl=args.ttl, codec=args.codec)
    except ConfigurationError as e:
        logger.error(f"Cannot open cache: {e}")
        return EXIT_CONFIG

    logger.debug(f"Opened {cache!r}")

    try:
        return run(args, cache)
    except CacheError as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_FALSE


if __name__ == "__main__":
    sys.exit(main())
