"""
Error taxonomy for the attendance engine.

Callers distinguish three families:
- ValidationError: bad input (missing or past dates, duplicate exclusions)
- NotFoundError: a ledger index that does not exist
- UpstreamError: the portal could not be reached or refused the request

AuthorizationExpiredError is the UpstreamError raised when the portal
rejects the token, so callers can trigger re-authentication.
"""

from typing import Optional


class AttendanceError(Exception):
    """Base class for all engine errors."""


class ValidationError(AttendanceError):
    """Raised when input data is invalid."""


class NotFoundError(AttendanceError):
    """Raised when a referenced item does not exist."""


class UpstreamError(AttendanceError):
    """
    Raised when an external fetch fails.

    Attributes:
        status: HTTP status code, if the portal replied at all
        path: API path that was requested
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        path: Optional[str] = None
    ):
        super().__init__(message)
        self.status = status
        self.path = path


class AuthorizationExpiredError(UpstreamError):
    """Raised when the session token is missing, expired or rejected."""
