# src/main.py (v1)
"""CLI entry point: summarize and key commands.

Usage:
    smartcache summarize "<text>"
    smartcache key "<text>"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from smartcache.version import __version__

if TYPE_CHECKING:
    from smartcache.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="smartcache",
        description=f"smartcache v{__version__}: similarity-aware summary cache",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- summarize ---
    p_summarize = subparsers.add_parser(
        "summarize", help="Summarize text through the cache tiers",
    )
    p_summarize.add_argument("text", help="Text to summarize")
    p_summarize.set_defaults(func=_cmd_summarize)

    # --- key ---
    p_key = subparsers.add_parser(
        "key", help="Show the cache key derived from a text",
    )
    p_key.add_argument("text", help="Text to inspect")
    p_key.add_argument(
        "--ratio", type=float, default=None,
        help="Similarity band ratio (default: SIMILARITY_RATIO setting)",
    )
    p_key.set_defaults(func=_cmd_key)

    return parser


async def _cmd_summarize(args: argparse.Namespace) -> int:
    """Validate and resolve one text."""
    from smartcache.api.facade import summarize
    from smartcache.config.settings import Settings
    from smartcache.validation.validator import InputValidationError

    settings = Settings()
    _setup_logging(settings, args.verbose)

    try:
        response = await summarize(args.text, settings=settings)
    except InputValidationError as exc:
        logger.error("Invalid input: %s", exc)
        return 2

    print(response.summary)
    print(f"\n  Source:  {response.hit_level}", file=sys.stderr)
    print(f"  Key:     {response.cache_key}", file=sys.stderr)
    return 0


async def _cmd_key(args: argparse.Namespace) -> int:
    """Print everything derived from a text for cache lookups."""
    from smartcache.cache.key_builder import describe
    from smartcache.config.settings import Settings

    ratio = args.ratio
    if ratio is None:
        ratio = Settings().similarity_ratio
    descriptor = describe(args.text, ratio)

    print(f"Normalized:  {descriptor.normalized_text}")
    print(f"Category:    {descriptor.category}")
    print(f"Word count:  {descriptor.word_count}")
    print(f"Band:        {descriptor.min_words}-{descriptor.max_words}")
    print(f"Key:         {descriptor.key}")
    print(f"Pattern:     {descriptor.pattern}")
    return 0


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from smartcache.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
