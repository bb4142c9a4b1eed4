"""API clients for emote sources."""

from .base import ApiError, BaseApiClient
from .twitch import TwitchApiClient
from .twitchemotes import TwitchEmotesApiClient

__all__ = [
    "ApiError",
    "BaseApiClient",
    "TwitchApiClient",
    "TwitchEmotesApiClient",
]
