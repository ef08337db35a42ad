"""Fixed values for the Last.fm API."""

API_ROOT = "https://ws.audioscrobbler.com/2.0/"

# Seconds per request
DEFAULT_TIMEOUT = 15.0

# Valid values for the ``period`` parameter of the user.getTop* methods
PERIODS = frozenset({
    "overall",
    "7day",
    "1month",
    "3month",
    "6month",
    "12month",
})
