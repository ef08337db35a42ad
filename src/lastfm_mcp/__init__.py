"""Fluent client and MCP server for the Last.fm API."""

from .client import Lastfm
from .constants import PERIODS
from .exceptions import (
    ApiError,
    InvalidPeriodError,
    LastfmError,
    ParseError,
    PluckNavigationError,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "Lastfm",
    "PERIODS",
    "LastfmError",
    "InvalidPeriodError",
    "TransportError",
    "ApiError",
    "ParseError",
    "PluckNavigationError",
]
