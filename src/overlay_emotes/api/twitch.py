"""Twitch Helix API client (user lookup only)."""

import logging

from ..core.models import TwitchUser
from ..core.settings import TwitchSettings
from .base import DEFAULT_TIMEOUT, ApiError, BaseApiClient

logger = logging.getLogger(__name__)


class TwitchApiClient(BaseApiClient):
    """Client for the Twitch Helix identity API."""

    BASE_URL = "https://api.twitch.tv/helix"

    def __init__(
        self,
        settings: TwitchSettings,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(timeout=timeout)
        self.settings = settings
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

    @property
    def name(self) -> str:
        return "Twitch"

    def _get_headers(self) -> dict[str, str]:
        """Get headers for API requests."""
        return {
            "Client-ID": self.settings.client_id,
            "Authorization": f"Bearer {self.settings.client_secret}",
        }

    async def get_users(self, logins: list[str]) -> list[TwitchUser]:
        """Resolve login names to users with one batch request.

        The response order is not guaranteed to match ``logins``; each user is
        identified by the login the API returns. Logins the API does not know
        are left out.

        Raises:
            ApiError: If the request fails or the response is malformed.
        """
        if not logins:
            return []

        data = await self._get_json(
            f"{self.base_url}/users",
            headers=self._get_headers(),
            params=[("login", login) for login in logins],
        )
        if not isinstance(data, dict) or not isinstance(data.get("data"), list):
            raise ApiError(f"{self.name}: unexpected user lookup response")

        users: dict[str, TwitchUser] = {}
        for user_data in data["data"]:
            try:
                user = TwitchUser(id=str(user_data["id"]), login=str(user_data["login"]))
            except (KeyError, TypeError) as e:
                raise ApiError(f"{self.name}: malformed user record {user_data!r}") from e
            users[user.login.lower()] = user

        missing = [login for login in logins if login.lower() not in users]
        if missing:
            logger.warning(f"{self.name}: unknown channels: {', '.join(missing)}")

        return list(users.values())
