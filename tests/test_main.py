"""Tests for the command line entry point."""

import pytest

from overlay_emotes import main as cli
from overlay_emotes.emotes.fetcher import EmoteFetchError


def test_parser_fetch_channels():
    args = cli.build_parser().parse_args(["fetch", "alice", "bob", "--isolate-failures"])
    assert args.command == "fetch"
    assert args.channels == ["alice", "bob"]
    assert args.isolate_failures is True


def test_parser_fetch_defaults():
    args = cli.build_parser().parse_args(["fetch"])
    assert args.channels == []
    assert args.isolate_failures is None


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_load_command(make_tree, tmp_path):
    root = make_tree(["twitch/alice/Kappa.png"])
    config = tmp_path / "settings.json"
    assert cli.main(["--config", str(config), "--emote-dir", str(root), "load"]) == 0


def test_load_command_missing_dir(tmp_path):
    config = tmp_path / "settings.json"
    missing = tmp_path / "missing"
    assert cli.main(["--config", str(config), "--emote-dir", str(missing), "load"]) == 1


def test_fetch_command_uses_settings_channels(tmp_path, monkeypatch):
    seen = {}

    async def fake_fetch_all(self, names):
        seen["names"] = list(names)
        seen["isolate"] = self.isolate_failures

    monkeypatch.setattr(cli.EmoteFetcher, "fetch_all", fake_fetch_all)
    config = tmp_path / "settings.json"
    config.write_text('{"channels": ["alice"], "fetch": {"isolate_channel_failures": true}}')

    assert cli.main(["--config", str(config), "fetch"]) == 0
    assert seen == {"names": ["alice"], "isolate": True}


def test_fetch_command_reports_failure(tmp_path, monkeypatch):
    async def failing_fetch_all(self, names):
        raise EmoteFetchError("could not get emote data")

    monkeypatch.setattr(cli.EmoteFetcher, "fetch_all", failing_fetch_all)
    config = tmp_path / "settings.json"

    assert cli.main(["--config", str(config), "fetch", "alice"]) == 1
