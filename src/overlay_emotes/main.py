#!/usr/bin/env python3
"""Main entry point for overlay emotes."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .__version__ import __version__
from .core.settings import Settings
from .emotes.catalog import EmoteCatalog, EmoteDirError
from .emotes.fetcher import EmoteFetcher, EmoteFetchError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Suppress noisy third-party loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("keyring").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="overlay-emotes", description="Download and index chat overlay emotes."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="settings file to use")
    parser.add_argument("--emote-dir", help="emote directory (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="download emotes for channels")
    fetch.add_argument("channels", nargs="*", help="channel logins (default: from settings)")
    fetch.add_argument(
        "--isolate-failures",
        action="store_true",
        default=None,
        help="keep going when a channel fails",
    )

    sub.add_parser("load", help="load the emote directory and show a summary")
    return parser


def run_fetch(settings: Settings, channels: list[str], isolate_failures: bool | None) -> int:
    fetcher = EmoteFetcher(settings, isolate_failures=isolate_failures)
    try:
        asyncio.run(fetcher.fetch_all(channels or settings.channels))
    except EmoteFetchError as e:
        logger.error(f"Emote fetch failed: {e}")
        return 1
    return 0


def run_load(settings: Settings) -> int:
    catalog = EmoteCatalog(settings.emote_dir)
    try:
        catalog.load()
    except EmoteDirError as e:
        logger.error(f"Emote load failed: {e}")
        return 1

    for provider in catalog.providers():
        for channel in catalog.channels(provider):
            count = len(catalog.channel_emotes(provider, channel))
            logger.info(f"{provider}/{channel}: {count} emotes")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    settings = Settings.load(args.config)
    if args.emote_dir:
        settings.emote_dir = args.emote_dir

    if args.command == "fetch":
        return run_fetch(settings, args.channels, args.isolate_failures)
    return run_load(settings)


if __name__ == "__main__":
    sys.exit(main())
