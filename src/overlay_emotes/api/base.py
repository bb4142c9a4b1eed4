"""Base API client interface."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import aiohttp

from ..__version__ import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds
USER_AGENT = f"overlay-emotes/{__version__}"


class ApiError(Exception):
    """A request failed or returned something we could not use."""


class BaseApiClient(ABC):
    """Abstract base class for HTTP API clients.

    Requests are not retried; every failure is raised as :class:`ApiError`.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the display name for this API."""
        ...

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout, headers={"User-Agent": USER_AGENT}
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            try:
                await self._session.close()
                # Let the connector finish closing to avoid "Unclosed connector" warnings
                await asyncio.sleep(0)
            finally:
                self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_json(self, url: str, **kwargs: Any) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            ApiError: On transport errors, non-2xx statuses or undecodable bodies.
        """
        try:
            async with self.session.get(url, **kwargs) as resp:
                resp.raise_for_status()
                # Some APIs send JSON as text/plain
                return await resp.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            raise ApiError(f"{self.name}: {url} returned {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ApiError(f"{self.name}: request to {url} failed: {e}") from e
        except ValueError as e:
            # JSONDecodeError, or UnicodeDecodeError for a body that is not UTF-8
            raise ApiError(f"{self.name}: could not decode response from {url}") from e

    async def download(self, url: str) -> bytes:
        """Download a URL and return its body.

        Raises:
            ApiError: On transport errors or non-2xx statuses.
        """
        try:
            async with self.session.get(url) as resp:
                resp.raise_for_status()
                return await resp.read()
        except aiohttp.ClientResponseError as e:
            raise ApiError(f"{self.name}: {url} returned {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ApiError(f"{self.name}: download of {url} failed: {e}") from e
