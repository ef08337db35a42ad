"""MCP server for the Last.fm API.

Exposes read-only listening statistics (profile, top charts, weekly charts,
recent tracks, now playing) as MCP tools.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import Lastfm
from .config import API_KEY_ENV, get_api_key, get_config_dir, get_default_username
from .exceptions import InvalidPeriodError, LastfmError

logger = logging.getLogger(__name__)

mcp = FastMCP("LastfmAPI")

# kind -> (top endpoint, weekly endpoint)
CHART_KINDS = {
    "tracks": ("user_top_tracks", "user_weekly_top_tracks"),
    "albums": ("user_top_albums", "user_weekly_top_albums"),
    "artists": ("user_top_artists", "user_weekly_top_artists"),
}


# ============ HELPER FUNCTIONS ============


def get_client() -> Lastfm:
    """Build a client with the configured API key."""
    return Lastfm(get_api_key())


def resolve_username(username: str) -> str:
    """Return username, or the configured default when it is empty."""
    if username:
        return username
    default = get_default_username()
    if not default:
        raise ValueError(
            "No username given and no default configured. Run: lastfm-mcp init --username NAME"
        )
    return default


def parse_start_date(start_date: str) -> datetime:
    """Parse YYYY-MM-DD as midnight UTC. Empty means one week ago."""
    if not start_date:
        today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        return today - timedelta(days=7)
    try:
        return datetime.strptime(start_date, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        raise ValueError(f"Invalid start_date '{start_date}'. Use YYYY-MM-DD.")


def get_artist_name(item: dict) -> str:
    """Artist name from a track/album item (``name`` or ``#text`` depending on the method)."""
    artist = item.get("artist")
    if isinstance(artist, dict):
        return artist.get("name") or artist.get("#text") or "Unknown"
    if isinstance(artist, str):
        return artist
    return "Unknown"


def format_chart(items: Any, kind: str) -> str:
    """Format a list of tracks/albums/artists with play counts."""
    if not items:
        return "No results found"

    output = []
    for rank, item in enumerate(items, start=1):
        name = item.get("name", "Unknown")
        plays = item.get("playcount", "?")
        if kind == "artists":
            output.append(f"{rank}. {name} ({plays} plays)")
        else:
            output.append(f"{rank}. {name} - {get_artist_name(item)} ({plays} plays)")
    return "\n".join(output)


def get_kind(kind: str) -> tuple[str, str]:
    if kind not in CHART_KINDS:
        raise ValueError(f"Invalid kind '{kind}'. Use one of: {', '.join(CHART_KINDS)}")
    return CHART_KINDS[kind]


def _top_chart(kind: str, username: str, period: str, limit: int, page: int) -> str:
    try:
        top_method, _ = get_kind(kind)
        client = get_client()
        builder = getattr(client, top_method)(resolve_username(username))
        items = builder.period(period).limit(limit).page(page).get()
        return format_chart(items, kind)

    except InvalidPeriodError as e:
        return str(e)
    except LastfmError as e:
        return f"API Error: {str(e)}"
    except (FileNotFoundError, ValueError) as e:
        return str(e)


# ============ USER PROFILE ============


@mcp.tool()
def lastfm_user_info(username: str = "") -> str:
    """
    Get a Last.fm user's profile: real name, country, total scrobbles, join date.

    Args:
        username: Last.fm username (empty for the configured default)
    """
    try:
        user = get_client().user_info(resolve_username(username)).get()
        if not user:
            return "User not found"

        registered = user.get("registered") or {}
        joined = registered.get("unixtime") or registered.get("#text")
        output = [
            f"User: {user.get('name', 'Unknown')}",
            f"Real name: {user.get('realname') or '-'}",
            f"Country: {user.get('country') or '-'}",
            f"Scrobbles: {user.get('playcount', 0)}",
        ]
        if joined:
            output.append(f"Registered: {datetime.fromtimestamp(int(joined), timezone.utc):%Y-%m-%d}")
        if user.get("url"):
            output.append(f"URL: {user['url']}")
        return "\n".join(output)

    except LastfmError as e:
        return f"API Error: {str(e)}"
    except (FileNotFoundError, ValueError) as e:
        return str(e)


# ============ TOP CHARTS ============


@mcp.tool()
def lastfm_top_tracks(username: str = "", period: str = "overall", limit: int = 10, page: int = 1) -> str:
    """
    Get a user's most played tracks.

    Args:
        username: Last.fm username (empty for the configured default)
        period: overall, 7day, 1month, 3month, 6month or 12month
        limit: Number of tracks per page
        page: Page number (starts at 1)
    """
    return _top_chart("tracks", username, period, limit, page)


@mcp.tool()
def lastfm_top_albums(username: str = "", period: str = "overall", limit: int = 10, page: int = 1) -> str:
    """
    Get a user's most played albums.

    Args:
        username: Last.fm username (empty for the configured default)
        period: overall, 7day, 1month, 3month, 6month or 12month
        limit: Number of albums per page
        page: Page number (starts at 1)
    """
    return _top_chart("albums", username, period, limit, page)


@mcp.tool()
def lastfm_top_artists(username: str = "", period: str = "overall", limit: int = 10, page: int = 1) -> str:
    """
    Get a user's most played artists.

    Args:
        username: Last.fm username (empty for the configured default)
        period: overall, 7day, 1month, 3month, 6month or 12month
        limit: Number of artists per page
        page: Page number (starts at 1)
    """
    return _top_chart("artists", username, period, limit, page)


# ============ WEEKLY CHARTS ============


@mcp.tool()
def lastfm_weekly_chart(kind: str = "tracks", username: str = "", start_date: str = "") -> str:
    """
    Get a user's chart for one week.

    Args:
        kind: tracks, albums or artists
        username: Last.fm username (empty for the configured default)
        start_date: First day of the week as YYYY-MM-DD (UTC). Empty for last week.
    """
    try:
        _, weekly_method = get_kind(kind)
        start = parse_start_date(start_date)
        client = get_client()
        items = getattr(client, weekly_method)(resolve_username(username), start).get()

        header = f"Week of {start:%Y-%m-%d}"
        return f"{header}\n{format_chart(items, kind)}"

    except LastfmError as e:
        return f"API Error: {str(e)}"
    except (FileNotFoundError, ValueError) as e:
        return str(e)


@mcp.tool()
def lastfm_weekly_chart_list(username: str = "") -> str:
    """
    List the weeks for which a user has weekly charts (most recent 20).

    Args:
        username: Last.fm username (empty for the configured default)
    """
    try:
        charts = get_client().user_weekly_chart_list(resolve_username(username)).get()
        if not charts:
            return "No weekly charts found"

        output = [f"{len(charts)} weekly charts available:"]
        for chart in charts[-20:][::-1]:
            start = datetime.fromtimestamp(int(chart["from"]), timezone.utc)
            end = datetime.fromtimestamp(int(chart["to"]), timezone.utc)
            output.append(f"  {start:%Y-%m-%d} to {end:%Y-%m-%d}")
        return "\n".join(output)

    except LastfmError as e:
        return f"API Error: {str(e)}"
    except (FileNotFoundError, ValueError) as e:
        return str(e)


# ============ RECENT ACTIVITY ============


@mcp.tool()
def lastfm_recent_tracks(username: str = "", limit: int = 10) -> str:
    """
    Get a user's most recently scrobbled tracks.

    Args:
        username: Last.fm username (empty for the configured default)
        limit: Number of tracks
    """
    try:
        tracks = get_client().user_recent_tracks(resolve_username(username)).limit(limit).get()
        if not tracks:
            return "No recent tracks"

        output = []
        for track in tracks:
            name = track.get("name", "Unknown")
            artist = get_artist_name(track)
            if track.get("@attr", {}).get("nowplaying"):
                when = "now playing"
            else:
                when = track.get("date", {}).get("#text", "")
            output.append(f"{name} - {artist} ({when})")
        return "\n".join(output)

    except LastfmError as e:
        return f"API Error: {str(e)}"
    except (FileNotFoundError, ValueError) as e:
        return str(e)


@mcp.tool()
def lastfm_now_playing(username: str = "") -> str:
    """
    Get the track a user is listening to right now.

    Args:
        username: Last.fm username (empty for the configured default)
    """
    try:
        user = resolve_username(username)
        track = get_client().now_listening(user)
        if track is False:
            return f"{user} is not listening to anything right now"

        album = track.get("album", {}).get("#text", "")
        line = f"Now playing: {track.get('name', 'Unknown')} by {get_artist_name(track)}"
        if album:
            line += f" from {album}"
        return line

    except LastfmError as e:
        return f"API Error: {str(e)}"
    except (FileNotFoundError, ValueError) as e:
        return str(e)


@mcp.tool()
def lastfm_play_count(kind: str = "tracks", username: str = "", period: str = "overall") -> str:
    """
    Total plays across all of a user's top tracks, albums or artists for a period.
    Fetches every page, so this can take a while for large libraries.

    Args:
        kind: tracks, albums or artists
        username: Last.fm username (empty for the configured default)
        period: overall, 7day, 1month, 3month, 6month or 12month
    """
    try:
        top_method, _ = get_kind(kind)
        client = get_client()
        builder = getattr(client, top_method)(resolve_username(username))
        total = builder.period(period).limit(1000).play_count_sum()
        return f"Total plays ({kind}, {period}): {total}"

    except InvalidPeriodError as e:
        return str(e)
    except LastfmError as e:
        return f"API Error: {str(e)}"
    except (FileNotFoundError, ValueError) as e:
        return str(e)


@mcp.tool()
def check_auth_status() -> str:
    """Check that an API key is configured and the Last.fm API is reachable."""
    config_file = get_config_dir() / "config.json"
    status = []

    if os.environ.get(API_KEY_ENV):
        status.append(f"API Key: OK (from {API_KEY_ENV})")
    elif config_file.exists():
        status.append("API Key: OK (from config.json)")
    else:
        status.append("API Key: MISSING - Run: lastfm-mcp init --api-key YOUR_KEY")
        return "\n".join(status)

    try:
        username = get_default_username()
    except ValueError as e:
        status.append(f"Config: ERROR - {str(e)}")
        return "\n".join(status)
    if not username:
        status.append("Default User: NOT SET")
        return "\n".join(status)
    status.append(f"Default User: {username}")

    try:
        get_client().user_info(username).get()
        status.append("API Connection: OK")
    except LastfmError as e:
        logger.warning(f"Status check failed: {e}")
        status.append(f"API Connection: FAILED - {str(e)}")
    except (FileNotFoundError, ValueError) as e:
        status.append(f"API Key: ERROR - {str(e)}")

    return "\n".join(status)


def main():
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
