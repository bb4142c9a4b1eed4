"""twitchemotes.com channel emote API client."""

import logging
from typing import Any

from ..core.models import ChannelEmotes, Cheermotes, EmoteInfo
from .base import DEFAULT_TIMEOUT, ApiError, BaseApiClient

logger = logging.getLogger(__name__)

# Twitch CDN, v1 emote IDs at 3x resolution
EMOTE_URL_TEMPLATE = "https://static-cdn.jtvnw.net/emoticons/v1/{id}/3.0"


def _get_ci(data: dict, key: str, default: Any = None) -> Any:
    """Case-insensitive dict lookup."""
    if key in data:
        return data[key]
    for k, v in data.items():
        if isinstance(k, str) and k.lower() == key.lower():
            return v
    return default


class TwitchEmotesApiClient(BaseApiClient):
    """Client for the channel emote metadata API and the emote CDN."""

    BASE_URL = "https://api.twitchemotes.com/api/v4"

    def __init__(
        self,
        base_url: str | None = None,
        emote_url_template: str = EMOTE_URL_TEMPLATE,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(timeout=timeout)
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.emote_url_template = emote_url_template

    @property
    def name(self) -> str:
        return "TwitchEmotes"

    def emote_url(self, emote_id: int) -> str:
        return self.emote_url_template.format(id=emote_id)

    async def get_channel_emotes(self, user_id: str) -> ChannelEmotes:
        """Fetch the emote list and cheer tiers of a channel.

        Raises:
            ApiError: If the request fails or the response is malformed.
        """
        data = await self._get_json(f"{self.base_url}/channels/{user_id}")
        if not isinstance(data, dict):
            raise ApiError(f"{self.name}: unexpected response for channel {user_id}")

        emotes: list[EmoteInfo] = []
        for emote_data in _get_ci(data, "emotes") or []:
            emote = self._parse_emote(emote_data)
            if emote:
                emotes.append(emote)

        cheermotes = self._parse_cheermotes(_get_ci(data, "cheermotes") or {})
        logger.debug(
            f"Channel {user_id}: {len(emotes)} emotes, {len(cheermotes)} cheer tiers"
        )
        return ChannelEmotes(emotes=emotes, cheermotes=cheermotes)

    def _parse_emote(self, data: Any) -> EmoteInfo | None:
        """Parse one emote record, None if it is incomplete."""
        if not isinstance(data, dict):
            raise ApiError(f"{self.name}: malformed emote record {data!r}")

        emote_id = _get_ci(data, "id")
        code = _get_ci(data, "code")
        if emote_id is None or not code:
            return None
        try:
            return EmoteInfo(id=int(emote_id), code=str(code))
        except (TypeError, ValueError) as e:
            raise ApiError(f"{self.name}: malformed emote id {emote_id!r}") from e

    def _parse_cheermotes(self, data: Any) -> Cheermotes:
        if not isinstance(data, dict):
            raise ApiError(f"{self.name}: malformed cheermotes {data!r}")

        cheermotes: Cheermotes = {}
        for tier, sizes in data.items():
            if not isinstance(sizes, dict):
                raise ApiError(f"{self.name}: malformed cheer tier {tier!r}")
            cheermotes[str(tier)] = {str(size): str(url) for size, url in sizes.items()}
        return cheermotes
