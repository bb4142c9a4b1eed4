"""Settings management for overlay emotes."""

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from appdirs import user_config_dir

APP_NAME = "overlay-emotes"
APP_AUTHOR = "overlay-emotes"

DEFAULT_EMOTE_DIR = "./static/emotes/"


def get_config_dir() -> Path:
    """Get the configuration directory."""
    path = Path(user_config_dir(APP_NAME, APP_AUTHOR))
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass
class TwitchSettings:
    """Twitch API credentials."""

    client_id: str = ""
    client_secret: str = ""


@dataclass
class FetchSettings:
    """Emote download settings."""

    # Record a failing channel and carry on with the rest instead of aborting
    isolate_channel_failures: bool = False
    request_timeout: int = 30  # seconds


@dataclass
class Settings:
    """Application settings."""

    emote_dir: str = DEFAULT_EMOTE_DIR
    channels: list[str] = field(default_factory=list)  # Logins fetched by default

    twitch: TwitchSettings = field(default_factory=TwitchSettings)
    fetch: FetchSettings = field(default_factory=FetchSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from file."""
        from .credential_store import keyring_available, load_client_secret, save_client_secret

        if path is None:
            path = get_config_dir() / "settings.json"

        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            settings = cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError):
            return cls()

        # Keyring value overrides the JSON one
        if keyring_available():
            kr_secret = load_client_secret()
            if settings.twitch.client_secret and not kr_secret:
                # Migrate the plaintext secret into the keyring
                if save_client_secret(settings.twitch.client_secret):
                    settings.save(path)
            elif kr_secret:
                settings.twitch.client_secret = kr_secret

        return settings

    def save(self, path: Path | None = None) -> None:
        """Save settings to file."""
        from .credential_store import (
            keyring_available,
            save_client_secret,
            secure_file_permissions,
        )

        if path is None:
            path = get_config_dir() / "settings.json"

        path.parent.mkdir(parents=True, exist_ok=True)

        # Falls back to the file when the keyring rejects the secret
        use_keyring = keyring_available() and save_client_secret(self.twitch.client_secret)

        # Atomic write: write to temp file then rename to prevent corruption on crash
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix="settings_")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._to_dict(exclude_secrets=use_keyring), f, indent=2)
            os.replace(tmp_path, path)  # Atomic on POSIX
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

        if not use_keyring:
            secure_file_permissions(str(path))

    @staticmethod
    def _validate_int(value, default: int, min_val: int = 0, max_val: int | None = None) -> int:
        """Validate and constrain an integer value."""
        if not isinstance(value, int) or isinstance(value, bool):
            return default
        if value < min_val:
            return min_val
        if max_val is not None and value > max_val:
            return max_val
        return value

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        """Create Settings from a dictionary with validation."""
        settings = cls()

        settings.emote_dir = data.get("emote_dir") or DEFAULT_EMOTE_DIR
        channels = data.get("channels", [])
        if isinstance(channels, list):
            settings.channels = [str(c) for c in channels if c]

        if "twitch" in data:
            t = data["twitch"]
            settings.twitch = TwitchSettings(
                client_id=t.get("client_id", ""),
                client_secret=t.get("client_secret", ""),
            )

        if "fetch" in data:
            fe = data["fetch"]
            settings.fetch = FetchSettings(
                isolate_channel_failures=bool(fe.get("isolate_channel_failures", False)),
                request_timeout=cls._validate_int(
                    fe.get("request_timeout"), 30, min_val=1, max_val=600
                ),
            )

        return settings

    def _to_dict(self, exclude_secrets: bool = False) -> dict:
        """Convert settings to a dictionary.

        Args:
            exclude_secrets: If True, blank out the client secret (stored in keyring).
        """
        return {
            "emote_dir": self.emote_dir,
            "channels": self.channels,
            "twitch": {
                "client_id": self.twitch.client_id,
                "client_secret": "" if exclude_secrets else self.twitch.client_secret,
            },
            "fetch": {
                "isolate_channel_failures": self.fetch.isolate_channel_failures,
                "request_timeout": self.fetch.request_timeout,
            },
        }
