"""Exceptions raised by the Last.fm client."""

from typing import Optional


class LastfmError(Exception):
    """Base class for every error raised by this package."""


class InvalidPeriodError(LastfmError, ValueError):
    """Raised when a period outside ``PERIODS`` is requested."""


class TransportError(LastfmError):
    """Network or HTTP level failure while talking to Last.fm."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiError(TransportError):
    """Last.fm answered with an error envelope (``{"error": 6, "message": ...}``)."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, status_code=status_code)
        self.code = code


class ParseError(LastfmError, ValueError):
    """The response body is not valid JSON."""


class PluckNavigationError(LastfmError, LookupError):
    """A pluck path segment does not fit the shape of the response."""
