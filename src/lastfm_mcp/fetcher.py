"""Send a query to Last.fm and pluck the interesting part out of the response.

A pluck path is a dotted string such as ``"toptracks.track"`` or
``"recenttracks.track.0"``. Segments made only of ASCII digits index into a list,
every other segment is a key into a mapping.

Navigation rules:
- a missing key or an index past the end of a list means the result is
  absent, and ``[]`` is returned (Last.fm's way of saying "no results")
- index 0 applied to a mapping returns the mapping itself, since Last.fm
  sends a lone item instead of a one-item list; higher indexes are absent
- a segment that does not fit the node it is applied to (a key into a list,
  anything into a scalar) raises ``PluckNavigationError``
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .exceptions import ApiError, ParseError, PluckNavigationError
from .transport import QueryValue, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeySegment:
    """Look up ``key`` in a mapping."""

    key: str


@dataclass(frozen=True)
class IndexSegment:
    """Take element ``index`` of a list."""

    index: int


Segment = Union[KeySegment, IndexSegment]


class _Absent(Exception):
    """Internal signal: the path points at something that isn't there."""


def parse_pluck_path(path: str) -> list[Segment]:
    """Split a dotted pluck path into key and index segments."""
    segments: list[Segment] = []
    for part in path.split("."):
        if not part:
            raise PluckNavigationError(f"Empty segment in pluck path '{path}'")
        if part.isascii() and part.isdigit():
            segments.append(IndexSegment(int(part)))
        else:
            segments.append(KeySegment(part))
    return segments


def _step(node: Any, segment: Segment) -> Any:
    if isinstance(segment, KeySegment):
        if isinstance(node, dict):
            if segment.key not in node:
                raise _Absent()
            return node[segment.key]
    elif isinstance(node, list):
        if segment.index >= len(node):
            raise _Absent()
        return node[segment.index]
    elif isinstance(node, dict):
        # Last.fm collapses a one-item list into the bare item
        if segment.index > 0:
            raise _Absent()
        return node

    raise PluckNavigationError(
        f"Cannot apply {segment!r} to a value of type {type(node).__name__}"
    )


def pluck(envelope: Any, path: Optional[str]) -> Any:
    """Walk ``path`` through ``envelope`` and return what it points at.

    Args:
        envelope: Parsed JSON response
        path: Dotted pluck path, or None for the whole envelope

    Returns:
        The located value, or an empty list when it is absent
    """
    if path is None:
        return envelope

    node = envelope
    try:
        for segment in parse_pluck_path(path):
            node = _step(node, segment)
    except _Absent:
        return []

    return [] if node is None else node


class DataFetcher:
    """Perform the single network call behind ``Lastfm.get()``."""

    def __init__(self, transport: Transport):
        self.transport = transport

    def get(self, query: Mapping[str, QueryValue], pluck_path: Optional[str] = None) -> Any:
        logger.debug(
            f"Fetching {query.get('method')} (page={query.get('page', 1)}, pluck={pluck_path})"
        )
        body = self.transport.send(query)

        try:
            envelope = json.loads(body)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON in Last.fm response: {e}") from e

        if isinstance(envelope, dict) and "error" in envelope:
            code = envelope.get("error")
            message = envelope.get("message", "Unknown Last.fm error")
            raise ApiError(
                f"Last.fm API error {code}: {message}",
                code=code if isinstance(code, int) else None,
            )

        return pluck(envelope, pluck_path)
