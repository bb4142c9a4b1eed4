"""Keeps the Twitch client secret in the system keyring.

settings.json holds the secret only when no usable keyring backend exists;
the file is then restricted to its owner.
"""

import logging
import os
import stat

import keyring
from keyring.backends.fail import Keyring as FailKeyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)

SERVICE_NAME = "overlay-emotes"
SECRET_USERNAME = "twitch_client_secret"

_keyring_available: bool | None = None


def keyring_available() -> bool:
    """Whether a real keyring backend is configured (checked once)."""
    global _keyring_available
    if _keyring_available is None:
        backend = keyring.get_keyring()
        _keyring_available = not isinstance(backend, FailKeyring)
        if _keyring_available:
            logger.info(f"Keyring available: {type(backend).__name__}")
        else:
            logger.info("No keyring backend, client secret stays in settings.json")
    return _keyring_available


def load_client_secret() -> str:
    """Get the stored client secret, or "" if there is none."""
    try:
        return keyring.get_password(SERVICE_NAME, SECRET_USERNAME) or ""
    except KeyringError as e:
        logger.warning(f"Failed to read client secret from keyring: {e}")
        return ""


def save_client_secret(secret: str) -> bool:
    """Store the client secret; an empty secret removes the entry.

    Returns False if the keyring refused it and the caller must keep the
    secret in settings.json instead.
    """
    try:
        if secret:
            keyring.set_password(SERVICE_NAME, SECRET_USERNAME, secret)
        else:
            try:
                keyring.delete_password(SERVICE_NAME, SECRET_USERNAME)
            except PasswordDeleteError:
                pass  # nothing stored
        return True
    except KeyringError as e:
        logger.warning(f"Failed to store client secret in keyring: {e}")
        return False


def secure_file_permissions(filepath: str) -> None:
    """Set file permissions to owner-only (chmod 600)."""
    try:
        os.chmod(filepath, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        logger.debug(f"Could not set permissions on {filepath}: {e}")
