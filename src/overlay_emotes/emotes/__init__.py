"""Emote catalog and downloader."""

from .catalog import (
    EmoteCatalog,
    EmoteDirError,
    find_emotes,
    parse_emote_name,
    process_emote_dir,
)
from .fetcher import EmoteFetcher, EmoteFetchError, cheer_filename, is_safe_code

__all__ = [
    "EmoteCatalog",
    "EmoteDirError",
    "EmoteFetcher",
    "EmoteFetchError",
    "cheer_filename",
    "find_emotes",
    "is_safe_code",
    "parse_emote_name",
    "process_emote_dir",
]
