"""Core models and settings for overlay emotes."""

from .models import (
    GLOBAL_USER,
    ChannelEmotes,
    Cheermotes,
    EmoteInfo,
    EmotesMap,
    FetchResult,
    TwitchUser,
    new_emotes_map,
)
from .settings import FetchSettings, Settings, TwitchSettings

__all__ = [
    "GLOBAL_USER",
    "ChannelEmotes",
    "Cheermotes",
    "EmoteInfo",
    "EmotesMap",
    "FetchResult",
    "TwitchUser",
    "new_emotes_map",
    "Settings",
    "TwitchSettings",
    "FetchSettings",
]
