"""Shared fixtures for Last.fm MCP tests."""

import json

import pytest

from lastfm_mcp import config


class FakeTransport:
    """Transport returning queued bodies and recording every query sent."""

    def __init__(self, *bodies):
        self.bodies = list(bodies)
        self.calls = []

    def send(self, query):
        self.calls.append(dict(query))
        body = self.bodies.pop(0)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return body
        return json.dumps(body)


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def api_key():
    return "test_api_key_0123456789abcdef"


@pytest.fixture
def mock_config_dir(tmp_path, monkeypatch):
    """Point the config directory at a temp dir and clear the API key env var."""
    config_dir = tmp_path / "lastfm-mcp"
    monkeypatch.setattr(config, "DEFAULT_CONFIG_DIR", config_dir)
    monkeypatch.delenv(config.API_KEY_ENV, raising=False)
    return config_dir


@pytest.fixture
def configured(mock_config_dir, api_key):
    """Write a config.json with an API key and default user."""
    config.save_config(api_key, username="rj")
    return mock_config_dir


@pytest.fixture
def top_tracks_envelope():
    """user.getTopTracks response with 50 tracks."""
    return {
        "toptracks": {
            "track": [
                {
                    "name": f"Track {i}",
                    "playcount": str(100 - i),
                    "artist": {"name": f"Artist {i}", "mbid": ""},
                    "@attr": {"rank": str(i + 1)},
                }
                for i in range(50)
            ],
            "@attr": {"user": "rj", "page": "1", "perPage": "50", "totalPages": "3", "total": "150"},
        }
    }
