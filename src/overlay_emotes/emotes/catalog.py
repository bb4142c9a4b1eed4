"""Emote catalog built from the on-disk emote directory.

Layout: ``<emote_dir>/<provider>/<channel>/<code>.<png|gif>``.
"""

import fnmatch
import logging
import os
import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ..core.models import EmotesMap, new_emotes_map
from ..core.settings import DEFAULT_EMOTE_DIR

logger = logging.getLogger(__name__)

# Processed in order, so a GIF replaces a PNG with the same code
EMOTE_EXTENSIONS = (".png", ".gif")

# Leading "static" directory, i.e. the web root the emotes are served from
_STRIP_STATIC = re.compile(r"^[\\/]?static(?=[\\/])")


class EmoteDirError(Exception):
    """An emote directory could not be read."""


def parse_emote_name(file: str | os.PathLike) -> tuple[str, str]:
    """Split an emote file path into its code and servable path.

    The code is the base name without extension, which is the name the
    fetcher saved it under. The servable path has the leading ``static``
    segment removed and always uses forward slashes.

    Only the first ``static`` segment is removed, so parsing a servable
    path again returns it unchanged unless it still starts with
    ``static/`` (``static/static/emotes/x.png`` gives
    ``/static/emotes/x.png``, which then gives ``/emotes/x.png``).
    """
    fullpath = os.path.normpath(os.fspath(file))
    fullpath = _STRIP_STATIC.sub("", fullpath, count=1)
    fullpath = fullpath.replace(os.sep, "/")

    code, _ext = os.path.splitext(os.path.basename(fullpath))
    return code, fullpath


def _read_dir(path: str) -> list[os.DirEntry]:
    """List a directory, sorted by name."""
    with os.scandir(path) as it:
        return sorted(it, key=lambda entry: entry.name)


def _glob_emotes(directory: str, ext: str) -> list[str]:
    """Non-recursive ``*<ext>`` match, skipping dotfiles like glob does."""
    names = fnmatch.filter(os.listdir(directory), "*" + ext)
    return sorted(
        os.path.join(directory, name)
        for name in names
        if not name.startswith(".") and os.path.isfile(os.path.join(directory, name))
    )


def find_emotes(directory: str | os.PathLike) -> dict[str, str]:
    """Collect the emotes of one channel directory as code -> servable path.

    Raises:
        EmoteDirError: If the directory could not be listed.
    """
    directory = os.fspath(directory)
    logger.debug(f"Finding emotes in {directory!r}")

    em: dict[str, str] = {}
    for ext in EMOTE_EXTENSIONS:
        try:
            files = _glob_emotes(directory, ext)
        except OSError as e:
            raise EmoteDirError(
                f"unable to glob emote directory {directory!r} for *{ext}: {e}"
            ) from e
        logger.debug(f"{len(files)} {ext} emotes in {directory!r}")

        for file in files:
            code, path = parse_emote_name(file)
            em[code] = path

    return em


def process_emote_dir(path: str | os.PathLike) -> EmotesMap:
    """Build an emotes map from a provider/channel directory tree.

    Only a failure to read ``path`` itself is fatal. Unreadable provider or
    channel directories are logged and end up as empty mappings.

    Raises:
        EmoteDirError: If ``path`` could not be listed.
    """
    path = os.fspath(path)
    try:
        entries = _read_dir(path)
    except OSError as e:
        raise EmoteDirError(f"could not open emote directory {path!r}: {e}") from e

    em = new_emotes_map()

    # First level: providers (eg, "twitch", "discord")
    for entry in entries:
        if entry.is_dir():
            logger.debug(f"Found provider dir {entry.name}")
            em[entry.name] = {}

    # Second level: channels (eg, "twitch", "zorchenhimer")
    for provider, channels in em.items():
        provider_path = os.path.join(path, provider)
        try:
            subdirs = _read_dir(provider_path)
        except OSError as e:
            logger.warning(f"Error reading dir {provider_path!r}: {e}")
            continue

        for entry in subdirs:
            if not entry.is_dir():
                continue
            channel_path = os.path.join(provider_path, entry.name)
            try:
                channels[entry.name] = find_emotes(channel_path)
            except EmoteDirError as e:
                logger.warning(f"Error finding emotes in {channel_path!r}: {e}")
                channels[entry.name] = {}

    logger.debug(f"Processed emote dir {path!r}: {len(em)} providers")
    return em


class EmoteCatalog:
    """Process-wide emote lookup table.

    The table is rebuilt wholesale by :meth:`load` and swapped in with a
    single assignment once the rebuild succeeded, so readers only ever see
    a complete table. Everything handed out is read-only.
    """

    def __init__(self, emote_dir: str | os.PathLike = DEFAULT_EMOTE_DIR) -> None:
        self.emote_dir = emote_dir
        self._emotes: EmotesMap = new_emotes_map()

    def load(self, path: str | os.PathLike | None = None) -> None:
        """Rebuild the table from disk.

        On failure the previous table is kept and the error re-raised.
        """
        path = self.emote_dir if path is None else path
        logger.info(f"Loading emotes from {path}")
        new_emotes = process_emote_dir(path)

        self._emotes = new_emotes
        logger.info(
            f"Loaded {len(self)} emotes from {sum(len(c) for c in new_emotes.values())} "
            f"channels across {len(new_emotes)} providers"
        )

    @property
    def emotes(self) -> Mapping[str, Mapping[str, Mapping[str, str]]]:
        """Read-only view of the whole table."""
        return MappingProxyType(
            {
                provider: MappingProxyType(
                    {channel: MappingProxyType(codes) for channel, codes in channels.items()}
                )
                for provider, channels in self._emotes.items()
            }
        )

    def providers(self) -> list[str]:
        return sorted(self._emotes)

    def channels(self, provider: str) -> list[str]:
        return sorted(self._emotes.get(provider, {}))

    def channel_emotes(self, provider: str, channel: str) -> Mapping[str, str]:
        """Get code -> path for one channel (empty if unknown)."""
        return MappingProxyType(self._emotes.get(provider, {}).get(channel, {}))

    def lookup(self, provider: str, channel: str, code: str) -> str | None:
        """Get the servable path of an emote, or None."""
        return self._emotes.get(provider, {}).get(channel, {}).get(code)

    def _iter_codes(self) -> Iterator[str]:
        emotes = self._emotes
        for channels in emotes.values():
            for codes in channels.values():
                yield from codes

    def __len__(self) -> int:
        return sum(1 for _ in self._iter_codes())

    def __contains__(self, code: object) -> bool:
        return any(
            code in codes for channels in self._emotes.values() for codes in channels.values()
        )
