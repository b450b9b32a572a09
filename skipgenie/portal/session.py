"""
Portal token session.

Tracks the authorization token handed out by the portal at login and
whether it is still inside its validity window.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from ..models.result import Result
from ..utils.config import SecureString


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Session states."""

    NOT_LOGGED_IN = "not_logged_in"
    LOGGED_IN = "logged_in"
    EXPIRED = "expired"


class TokenSession:
    """
    Holds the portal token and its issue time.

    A token is considered valid for 30 days after it was issued. The
    portal may still reject it earlier; the client calls
    mark_logged_out() when that happens.

    Examples:
        >>> session = TokenSession(SecureString("eyJ..."), issued_at=datetime.now())
        >>> session.require_login().is_success
        True
        >>> session.mark_logged_out()
        >>> session.state
        <SessionState.NOT_LOGGED_IN: 'not_logged_in'>
    """

    TOKEN_LIFETIME = timedelta(days=30)

    def __init__(
        self,
        token: Optional[SecureString] = None,
        issued_at: Optional[datetime] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize TokenSession.

        Args:
            token: Portal token (None means not logged in)
            issued_at: When the token was issued (defaults to now)
            clock: Returns the current time
        """
        self._clock = clock
        self._token: Optional[SecureString] = None
        self._issued_at: Optional[datetime] = None
        self._state = SessionState.NOT_LOGGED_IN

        if token is not None and token.get_value():
            self.mark_logged_in(token, issued_at)

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        if self._state == SessionState.LOGGED_IN and self.is_token_expired():
            self._state = SessionState.EXPIRED
        return self._state

    @property
    def is_logged_in(self) -> bool:
        return self.state == SessionState.LOGGED_IN

    @property
    def token(self) -> Optional[SecureString]:
        return self._token

    def mark_logged_in(self, token: SecureString, issued_at: Optional[datetime] = None):
        """
        Store a freshly issued token.

        Args:
            token: Portal token
            issued_at: Issue time (defaults to now)
        """
        self._token = token
        self._issued_at = issued_at or self._clock()
        self._state = SessionState.LOGGED_IN
        logger.info("Session marked as logged in")

    def mark_logged_out(self):
        """Drop the token. Call after logout or when the portal rejects it."""
        self._token = None
        self._issued_at = None
        self._state = SessionState.NOT_LOGGED_IN
        logger.info("Session marked as logged out")

    def is_token_expired(self) -> bool:
        """
        Check if the token is outside its validity window.

        Returns:
            True if there is no token or it is older than TOKEN_LIFETIME
        """
        if self._token is None or self._issued_at is None:
            return True
        return self._clock() - self._issued_at > self.TOKEN_LIFETIME

    def require_login(self) -> Result[None]:
        """
        Check whether requests can be sent with the current token.

        Returns:
            Result.success if a valid token is held, Result.failure otherwise

        Examples:
            >>> result = session.require_login()
            >>> if result.is_failure:
            ...     # prompt for a new token
            ...     ...
        """
        state = self.state
        if state == SessionState.NOT_LOGGED_IN:
            return Result.failure("Not logged in")

        if state == SessionState.EXPIRED:
            logger.warning("Session token expired, re-login required")
            return Result.failure("Session expired. Please login again.")

        return Result.success(None, "Login valid")

    def get_session_info(self) -> dict:
        """
        Get session information for debugging.

        Returns:
            Dictionary with session details (never the token itself)
        """
        info = {
            "state": self.state.value,
            "logged_in": self.is_logged_in,
            "issued_at": self._issued_at.isoformat() if self._issued_at else None,
            "expired": self.is_token_expired(),
        }

        if self._issued_at:
            age = self._clock() - self._issued_at
            info["token_age_days"] = age.total_seconds() / 86400

        return info
