"""Download channel emotes and cheers into the emote directory."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from ..api.base import ApiError
from ..api.twitch import TwitchApiClient
from ..api.twitchemotes import TwitchEmotesApiClient
from ..core.models import GLOBAL_USER, FetchResult, TwitchUser
from ..core.settings import Settings

logger = logging.getLogger(__name__)

PROVIDER = "twitch"

# Characters that would break the servable path or URL
UNSAFE_CODE_CHARS = frozenset(":;\\[]|?&")

# Size label of the cheer image to download
CHEER_SIZE = "4"


class EmoteFetchError(Exception):
    """Fetching emotes failed.

    ``result`` holds what was written before the failure, if known.
    """

    def __init__(self, message: str, result: FetchResult | None = None) -> None:
        super().__init__(message)
        self.result = result


def is_safe_code(code: str) -> bool:
    """Check that an emote code can be used as a file name and URL segment."""
    # Must name a file inside the channel directory
    if code in ("", ".", "..") or os.path.basename(code) != code:
        return False
    return not any(ch in UNSAFE_CODE_CHARS for ch in code)


def cheer_filename(login: str, tier: str) -> str:
    return f"{login}Cheer{tier}.gif"


class EmoteFetcher:
    """Fetch emotes for a set of channels and write them to disk.

    Every run also fetches the platform-wide emotes (stored under the
    ``twitch`` channel). Requests are made one at a time and never retried.

    By default the first failing channel aborts the run. With
    ``isolate_failures`` the failure is recorded, the remaining channels are
    still fetched and one :class:`EmoteFetchError` is raised at the end.
    """

    def __init__(
        self,
        settings: Settings,
        emote_dir: str | os.PathLike | None = None,
        twitch_client: TwitchApiClient | None = None,
        emotes_client: TwitchEmotesApiClient | None = None,
        isolate_failures: bool | None = None,
    ) -> None:
        timeout = settings.fetch.request_timeout
        self.emote_dir = Path(emote_dir if emote_dir is not None else settings.emote_dir)
        self.twitch = twitch_client or TwitchApiClient(settings.twitch, timeout=timeout)
        self.emotes = emotes_client or TwitchEmotesApiClient(timeout=timeout)
        if isolate_failures is None:
            isolate_failures = settings.fetch.isolate_channel_failures
        self.isolate_failures = isolate_failures

    async def fetch_all(self, names: Iterable[str]) -> FetchResult:
        """Fetch emotes and cheers for ``names`` plus the global emotes.

        Raises:
            EmoteFetchError: If the channel lookup fails, or a channel fails
                (immediately, or at the end when failures are isolated).
        """
        try:
            return await self._fetch_all(list(names))
        finally:
            await self.twitch.close()
            await self.emotes.close()

    async def _fetch_all(self, names: list[str]) -> FetchResult:
        result = FetchResult()

        try:
            users = await self.twitch.get_users(names)
        except ApiError as e:
            raise EmoteFetchError(f"could not look up channels {names}: {e}", result) from e
        users.append(GLOBAL_USER)
        result.users = users
        logger.info(f"Fetching emotes for {', '.join(u.login for u in users)}")

        for user in users:
            try:
                await self._fetch_user(user, result)
            except EmoteFetchError as e:
                if not self.isolate_failures:
                    e.result = result
                    raise
                logger.error(f"Skipping channel {user.login}: {e}")
                result.failed[user.login] = str(e)

        if result.failed:
            raise EmoteFetchError(
                f"could not fetch emotes for {', '.join(sorted(result.failed))}", result
            )

        logger.info(
            f"Fetched {len(result.written)} emote files ({len(result.skipped)} skipped)"
        )
        return result

    async def _fetch_user(self, user: TwitchUser, result: FetchResult) -> None:
        try:
            channel = await self.emotes.get_channel_emotes(user.id)
        except ApiError as e:
            raise EmoteFetchError(f'could not get emote data for "{user.id}": {e}') from e

        user_dir = self.emote_dir / PROVIDER / user.login
        try:
            user_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EmoteFetchError(f'could not create emote directory "{user_dir}": {e}') from e

        for emote in channel.emotes:
            if not is_safe_code(emote.code):
                logger.debug(f"Skipping emote with unsafe code {emote.code!r}")
                result.skipped.append(emote.code)
                continue
            await self._save(
                self.emotes.emote_url(emote.id), user_dir / f"{emote.code}.png", emote.code, result
            )

        for tier, sizes in channel.cheermotes.items():
            name = cheer_filename(user.login, tier)
            url = sizes.get(CHEER_SIZE)
            if not url:
                logger.debug(f"No size {CHEER_SIZE} image for cheer {name}")
                continue
            await self._save(url, user_dir / name, name, result)

    async def _save(self, url: str, path: Path, name: str, result: FetchResult) -> None:
        """Download one image and write it over ``path``."""
        try:
            data = await self.emotes.download(url)
        except ApiError as e:
            raise EmoteFetchError(f"could not download emote {name}: {e}") from e

        try:
            path.write_bytes(data)
        except OSError as e:
            raise EmoteFetchError(f'could not create emote file in path "{path}": {e}') from e

        logger.debug(f"Saved {name} to {path}")
        result.written.append(str(path))
