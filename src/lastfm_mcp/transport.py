"""HTTP transport for the Last.fm API."""

import logging
from typing import Mapping, Optional, Protocol, Union

import requests

from .constants import API_ROOT, DEFAULT_TIMEOUT
from .exceptions import TransportError

logger = logging.getLogger(__name__)

QueryValue = Union[str, int]


class Transport(Protocol):
    """Anything that can send a query to Last.fm and return the raw body."""

    def send(self, query: Mapping[str, QueryValue]) -> str:
        ...


def _error_detail(response: Optional[requests.Response]) -> str:
    """Pull the Last.fm error message out of a failed response, if it has one."""
    if response is None:
        return ""
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict) and "message" in body:
        return f" ({body.get('error')}: {body['message']})"
    return ""


class RequestsTransport:
    """Send queries as HTTP GET requests using ``requests``.

    Any ``requests`` failure, including non-2xx responses, is raised as
    ``TransportError`` with the original exception chained.
    """

    def __init__(
        self,
        base_url: str = API_ROOT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, query: Mapping[str, QueryValue]) -> str:
        """GET ``base_url`` with ``query`` as parameters and return the body text."""
        response = None
        try:
            response = self.session.get(
                self.base_url, params=dict(query), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            status = response.status_code if response is not None else None
            logger.debug(f"Request for {query.get('method')} failed: {e}")
            raise TransportError(
                f"Last.fm request failed: {e}{_error_detail(response)}",
                status_code=status,
            ) from e

        return response.text
