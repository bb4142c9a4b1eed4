"""Core data models for overlay emotes."""

from dataclasses import dataclass, field

# provider -> channel -> code -> servable path
EmotesMap = dict[str, dict[str, dict[str, str]]]

# Cheer tier -> size label -> image URL
Cheermotes = dict[str, dict[str, str]]


def new_emotes_map() -> EmotesMap:
    """Create an empty emotes map."""
    return {}


@dataclass(frozen=True)
class TwitchUser:
    """A Twitch user as returned by the identity lookup."""

    id: str
    login: str


# Platform-wide emotes are stored under this pseudo-channel
GLOBAL_USER = TwitchUser(id="0", login="twitch")


@dataclass(frozen=True)
class EmoteInfo:
    """Remote emote metadata, only used to build a download URL."""

    id: int
    code: str


@dataclass
class ChannelEmotes:
    """Emote and cheer metadata for a single channel."""

    emotes: list[EmoteInfo] = field(default_factory=list)
    cheermotes: Cheermotes = field(default_factory=dict)


@dataclass
class FetchResult:
    """Summary of a fetch run."""

    users: list[TwitchUser] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # Codes with unsafe characters
    failed: dict[str, str] = field(default_factory=dict)  # login -> error message

    @property
    def ok(self) -> bool:
        return not self.failed
