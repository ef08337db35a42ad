"""Fluent query builder for the Last.fm API.

Usage:

    tracks = Lastfm(api_key).user_top_tracks("rj").period("7day").limit(5).get()

Endpoint methods and parameter setters only change the pending query; nothing
is sent until ``get()`` (or one of the helpers that call it) runs.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from .constants import PERIODS
from .exceptions import InvalidPeriodError
from .fetcher import DataFetcher
from .transport import QueryValue, RequestsTransport, Transport

logger = logging.getLogger(__name__)


def _week_bounds(startdate: datetime) -> dict[str, int]:
    """Unix timestamps for ``startdate`` and seven calendar days later."""
    enddate = startdate + timedelta(days=7)
    return {
        "from": int(startdate.timestamp()),
        "to": int(enddate.timestamp()),
    }


class Lastfm:
    """Build and run one Last.fm API request.

    Every endpoint method overwrites the API method and the pluck path, so the
    last one called wins. ``period``, ``limit`` and ``page`` can be set in any
    order. Not meant to be shared between threads: build one instance per
    query chain.
    """

    def __init__(self, api_key: str, transport: Optional[Transport] = None):
        self.transport = transport if transport is not None else RequestsTransport()
        self._query: dict[str, QueryValue] = {
            "format": "json",
            "api_key": api_key,
        }
        self._pluck: Optional[str] = None
        self.data: Any = None

    @property
    def query(self) -> dict[str, QueryValue]:
        """A copy of the parameters that will be sent."""
        return dict(self._query)

    @property
    def pluck(self) -> Optional[str]:
        """The path that will be extracted from the response."""
        return self._pluck

    def update_query(self, params: dict[str, QueryValue]) -> None:
        self._query.update(params)

    def _select(self, method: str, pluck: str, **params: QueryValue) -> "Lastfm":
        self.update_query({"method": method, **params})
        self._pluck = pluck
        return self

    # ============ ENDPOINTS ============

    def user_info(self, username: str) -> "Lastfm":
        """Profile information for a user."""
        return self._select("user.getInfo", "user", user=username)

    def user_top_albums(self, username: str) -> "Lastfm":
        """A user's most played albums."""
        return self._select("user.getTopAlbums", "topalbums.album", user=username)

    def user_top_artists(self, username: str) -> "Lastfm":
        """A user's most played artists."""
        return self._select("user.getTopArtists", "topartists.artist", user=username)

    def user_top_tracks(self, username: str) -> "Lastfm":
        """A user's most played tracks."""
        return self._select("user.getTopTracks", "toptracks.track", user=username)

    def user_weekly_top_albums(self, username: str, startdate: datetime) -> "Lastfm":
        """Album chart for the week starting at ``startdate``."""
        return self._select(
            "user.getWeeklyAlbumChart",
            "weeklyalbumchart.album",
            user=username,
            **_week_bounds(startdate),
        )

    def user_weekly_top_artists(self, username: str, startdate: datetime) -> "Lastfm":
        """Artist chart for the week starting at ``startdate``."""
        return self._select(
            "user.getWeeklyArtistChart",
            "weeklyartistchart.artist",
            user=username,
            **_week_bounds(startdate),
        )

    def user_weekly_top_tracks(self, username: str, startdate: datetime) -> "Lastfm":
        """Track chart for the week starting at ``startdate``."""
        return self._select(
            "user.getWeeklyTrackChart",
            "weeklytrackchart.track",
            user=username,
            **_week_bounds(startdate),
        )

    def user_weekly_chart_list(self, username: str) -> "Lastfm":
        """The date ranges for which weekly charts are available."""
        return self._select("user.getWeeklyChartList", "weeklychartlist.chart", user=username)

    def user_recent_tracks(self, username: str) -> "Lastfm":
        """Recently scrobbled tracks, most recent first."""
        return self._select("user.getRecentTracks", "recenttracks.track", user=username)

    def now_listening(self, username: str) -> Union[dict, bool]:
        """Return the track the user is playing right now, or False.

        This runs the request immediately. Parameters set on the builder
        afterwards have no effect on the returned value.
        """
        self._select("user.getRecentTracks", "recenttracks.track.0", user=username)

        most_recent_track = self.limit(1).get()

        if not isinstance(most_recent_track, dict):
            return False
        attrs = most_recent_track.get("@attr")
        if not isinstance(attrs, dict) or "nowplaying" not in attrs:
            return False

        return most_recent_track

    # ============ PARAMETERS ============

    def period(self, period: str) -> "Lastfm":
        """Set or overwrite the period requested from the API.

        Raises:
            InvalidPeriodError: if ``period`` is not one of ``PERIODS``
        """
        if period not in PERIODS:
            raise InvalidPeriodError(
                f"Request period '{period}' is not valid. "
                f"Valid values: {', '.join(sorted(PERIODS))}"
            )
        self.update_query({"period": period})
        return self

    def limit(self, limit: int) -> "Lastfm":
        """Set or overwrite the number of items per page. Not validated."""
        self.update_query({"limit": limit})
        return self

    def page(self, page: int) -> "Lastfm":
        """Set or overwrite the page to fetch. Not validated."""
        self.update_query({"page": page})
        return self

    # ============ FETCHING ============

    def play_count_sum(self) -> int:
        """Sum ``playcount`` over every page of the selected endpoint.

        Fetches page 1, 2, ... until a page comes back empty. Any failure
        aborts the whole sum.
        """
        play_count = 0
        page = 1
        while True:
            self.update_query({"page": page})
            results = self.get()
            if not results:
                break
            for result in results:
                play_count += int(result["playcount"])
            page += 1

        logger.debug(f"Summed {play_count} plays over {page - 1} page(s)")
        return play_count

    def get(self) -> Any:
        """Send the request and return the plucked result."""
        fetcher = DataFetcher(self.transport)
        self.data = fetcher.get(self._query, self._pluck)
        return self.data
