"""
Student portal access.

This module provides the abstract AttendancePortal interface, the
aiohttp-based PortalClient and the TokenSession it authenticates with.

Usage:
    >>> from skipgenie.portal import PortalClient, TokenSession
    >>> from skipgenie.utils.config import config
    >>>
    >>> session = TokenSession(config.portal_token, config.portal_token_issued_at)
    >>> async with PortalClient(config.portal_url, session) as portal:
    ...     courses = await portal.fetch_roster()
"""

from .client import PortalClient
from .interfaces import AttendancePortal
from .session import SessionState, TokenSession

__all__ = [
    "AttendancePortal",
    "PortalClient",
    "SessionState",
    "TokenSession",
]
