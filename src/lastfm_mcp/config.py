"""Configuration and API key management for the Last.fm API."""

import json
import os
from pathlib import Path
from typing import Optional

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "lastfm-mcp"
API_KEY_ENV = "LASTFM_API_KEY"


def get_config_dir() -> Path:
    """Get or create the config directory."""
    config_dir = DEFAULT_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_config() -> dict:
    """Load configuration from config.json."""
    config_file = get_config_dir() / "config.json"
    if not config_file.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_file}\n"
            "Run: lastfm-mcp init --api-key YOUR_KEY"
        )
    with open(config_file) as f:
        return json.load(f)


def save_config(api_key: str, username: Optional[str] = None) -> Path:
    """Write api_key (and optionally a default username) to config.json."""
    config_file = get_config_dir() / "config.json"
    data = {"api_key": api_key}
    if username:
        data["username"] = username
    with open(config_file, "w") as f:
        json.dump(data, f, indent=2)
    return config_file


def get_api_key() -> str:
    """Get the API key from the environment, falling back to config.json."""
    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        return api_key

    api_key = load_config().get("api_key", "")
    if not api_key:
        raise ValueError(
            f"No API key configured. Set {API_KEY_ENV} or run: lastfm-mcp init --api-key YOUR_KEY"
        )
    return api_key


def get_default_username() -> Optional[str]:
    """Get the configured default username, if any."""
    try:
        return load_config().get("username") or None
    except FileNotFoundError:
        return None
