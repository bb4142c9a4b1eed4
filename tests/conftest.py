"""Shared test fixtures for overlay_emotes tests."""

import asyncio
import contextlib
import copy

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from overlay_emotes.api.twitch import TwitchApiClient
from overlay_emotes.api.twitchemotes import TwitchEmotesApiClient
from overlay_emotes.core import credential_store
from overlay_emotes.core.settings import Settings, TwitchSettings
from overlay_emotes.emotes.fetcher import EmoteFetcher


@pytest.fixture(autouse=True)
def no_keyring(monkeypatch):
    """Never touch the real system keyring."""
    monkeypatch.setattr(credential_store, "_keyring_available", False)


@pytest.fixture
def settings():
    return Settings(twitch=TwitchSettings(client_id="cid", client_secret="secret"))


@pytest.fixture
def make_tree(tmp_path):
    """Create files below tmp_path from a list of relative paths."""

    def _make(paths, root="emotes"):
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for rel in paths:
            path = base / rel
            if rel.endswith("/"):
                path.mkdir(parents=True, exist_ok=True)
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(b"img")
        return base

    return _make


class FakeTwitchApi:
    """In-process stand-in for the Helix, twitchemotes and CDN endpoints."""

    def __init__(self):
        self.users = {"alice": "1001", "bob": "1002"}
        self.channels = {
            "1001": {
                "emotes": [{"id": 11, "code": "alicePog"}, {"id": 12, "code": "aliceHi"}],
                "cheermotes": {
                    "1": {"1": "/cheer/a1-small.gif", "4": "/cheer/a1.gif"},
                    "100": {"4": "/cheer/a100.gif"},
                },
            },
            "1002": {"emotes": [{"id": 21, "code": "bobWave"}], "cheermotes": {}},
            "0": {
                "emotes": [
                    {"id": 25, "code": "Kappa"},
                    {"id": 1, "code": ":)"},
                    {"id": 2, "code": "[oops]"},
                    {"id": 9, "code": "<3"},
                ],
                "cheermotes": {},
            },
        }
        self.fail_users = False
        self.fail_channels: set[str] = set()
        self.missing_emotes: set[str] = set()
        # Raw bodies served with status 200 instead of JSON: (body, content type)
        self.raw_users: tuple[bytes, str] | None = None
        self.raw_channels: dict[str, tuple[bytes, str]] = {}

        self.user_requests: list[list[str]] = []
        self.user_headers = []
        self.channel_requests: list[str] = []
        self.downloads: list[str] = []

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/helix/users", self.handle_users)
        app.router.add_get("/v4/channels/{id}", self.handle_channel)
        app.router.add_get("/emoticons/v1/{id}/3.0", self.handle_emote)
        app.router.add_get("/cheer/{name}", self.handle_cheer)
        return app

    async def handle_users(self, request):
        logins = request.query.getall("login", [])
        self.user_requests.append(logins)
        self.user_headers.append(request.headers.copy())
        if self.fail_users:
            return web.Response(status=500, text="boom")
        if self.raw_users:
            body, content_type = self.raw_users
            return web.Response(body=body, content_type=content_type)

        data = [
            {"id": self.users[login], "login": login, "display_name": login.title()}
            for login in logins
            if login in self.users
        ]
        # Order is not guaranteed to match the request
        data.reverse()
        return web.json_response({"data": data})

    async def handle_channel(self, request):
        user_id = request.match_info["id"]
        self.channel_requests.append(user_id)
        if user_id in self.fail_channels:
            return web.Response(status=500, text="boom")
        if user_id in self.raw_channels:
            body, content_type = self.raw_channels[user_id]
            return web.Response(body=body, content_type=content_type)

        channel = copy.deepcopy(self.channels.get(user_id, {"emotes": [], "cheermotes": {}}))
        if not isinstance(channel, dict):
            return web.json_response(channel)

        origin = f"{request.scheme}://{request.host}"
        for sizes in channel.get("cheermotes", {}).values():
            for size, url in sizes.items():
                if url.startswith("/"):
                    sizes[size] = origin + url
        return web.json_response(channel)

    async def handle_emote(self, request):
        emote_id = request.match_info["id"]
        self.downloads.append(request.path)
        if emote_id in self.missing_emotes:
            return web.Response(status=404)
        return web.Response(body=f"png:{emote_id}".encode(), content_type="image/png")

    async def handle_cheer(self, request):
        self.downloads.append(request.path)
        name = request.match_info["name"]
        return web.Response(body=f"gif:{name}".encode(), content_type="image/gif")


@contextlib.asynccontextmanager
async def serve(app):
    server = TestServer(app)
    await server.start_server()
    try:
        yield f"http://{server.host}:{server.port}"
    finally:
        await server.close()


@pytest.fixture
def fake_api():
    return FakeTwitchApi()


@pytest.fixture
def with_fake_api(fake_api):
    """Run ``coro_fn(base_url)`` while the fake API is being served."""

    def _run(coro_fn):
        async def go():
            async with serve(fake_api.make_app()) as base:
                return await coro_fn(base)

        return asyncio.run(go())

    return _run


@pytest.fixture
def run_fetch(fake_api, settings, tmp_path):
    """Run EmoteFetcher.fetch_all against the fake API, writing below tmp_path/emotes."""

    def _run(names, **kwargs):
        async def go():
            async with serve(fake_api.make_app()) as base:
                fetcher = EmoteFetcher(
                    settings,
                    emote_dir=tmp_path / "emotes",
                    twitch_client=TwitchApiClient(settings.twitch, base_url=f"{base}/helix"),
                    emotes_client=TwitchEmotesApiClient(
                        base_url=f"{base}/v4",
                        emote_url_template=f"{base}/emoticons/v1/{{id}}/3.0",
                    ),
                    **kwargs,
                )
                return await fetcher.fetch_all(names)

        return asyncio.run(go())

    return _run
