"""
Portal API client.

Async client for the student portal's JSON API. All requests carry the
session token in the Authorization header; 401/403 replies invalidate
the session and raise AuthorizationExpiredError.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import aiohttp

from .interfaces import AttendancePortal
from .payloads import parse_lecture_history, parse_roster, parse_schedule, unwrap_envelope
from .session import TokenSession
from ..attendance.calendar import default_schedule_window
from ..attendance.dates import format_date
from ..exceptions import AuthorizationExpiredError, UpstreamError
from ..models.attendance import CourseAttendance, LectureHistory, ScheduleEntry


logger = logging.getLogger(__name__)


class PortalClient(AttendancePortal):
    """
    Client for the attendance portal API.

    Use as an async context manager so the HTTP session is opened and
    closed around a unit of work.

    Examples:
        >>> session = TokenSession(SecureString(token))
        >>> async with PortalClient("https://kiet.cybervidya.net/api", session) as portal:
        ...     courses = await portal.fetch_roster()
        ...     schedule = await portal.fetch_weekly_schedule()
    """

    ROSTER_PATH = "/student/dashboard/registered-courses"
    SCHEDULE_PATH = "/student/schedule/class"
    LECTURE_HISTORY_PATH = "/attendance/schedule/student/course/attendance/percentage"

    def __init__(
        self,
        base_url: str,
        session: TokenSession,
        timeout: int = 30
    ):
        """
        Initialize PortalClient.

        Args:
            base_url: Portal API base URL
            session: Token session supplying the Authorization header
            timeout: Total request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.session = session
        self.timeout = timeout
        self._http_session: Optional[aiohttp.ClientSession] = None

        logger.info(f"PortalClient initialized with base_url: {self.base_url}")

    async def __aenter__(self):
        """Async context manager entry."""
        self._http_session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={
                'Accept': 'application/json',
                'Content-Type': 'application/json',
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        if self._http_session:
            await self._http_session.close()
            self._http_session = None

    def _auth_headers(self) -> Dict[str, str]:
        login = self.session.require_login()
        if login.is_failure:
            raise AuthorizationExpiredError(login.message)
        return {'Authorization': self.session.token.get_value()}

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Send one request and return the unwrapped JSON reply.

        Raises:
            AuthorizationExpiredError: If the token is invalid or rejected
            UpstreamError: On transport failures or non-success replies
        """
        if self._http_session is None:
            raise UpstreamError("PortalClient used outside 'async with'", path=path)

        headers = self._auth_headers()
        url = self.base_url + path

        try:
            async with self._http_session.request(
                method, url, params=params, json=body, headers=headers
            ) as response:
                if response.status in (401, 403):
                    logger.warning(f"Portal rejected token ({response.status}) for {path}")
                    self.session.mark_logged_out()
                    raise AuthorizationExpiredError(
                        "Session expired. Please login again.",
                        status=response.status,
                        path=path
                    )

                if response.status >= 400:
                    raise UpstreamError(
                        f"API error {response.status}: {path}",
                        status=response.status,
                        path=path
                    )

                payload = await response.json(content_type=None)

        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Request to {path} failed: {e}")
            raise UpstreamError(f"Request to {path} failed: {e}", path=path) from e

        return unwrap_envelope(payload)

    async def fetch_roster(self) -> List[CourseAttendance]:
        payload = await self._request('GET', self.ROSTER_PATH)
        return parse_roster(payload)

    async def fetch_weekly_schedule(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> List[ScheduleEntry]:
        default_start, default_end = default_schedule_window(start or date.today())
        params = {
            'weekStartDate': format_date(start or default_start),
            'weekEndDate': format_date(end or default_end),
        }
        payload = await self._request('GET', self.SCHEDULE_PATH, params=params)
        return parse_schedule(payload)

    async def fetch_lecture_history(
        self,
        student_id: int,
        course_id: int,
        course_comp_id: int
    ) -> LectureHistory:
        payload = await self._request('POST', self.LECTURE_HISTORY_PATH, body={
            'studentId': student_id,
            'courseId': course_id,
            'courseCompId': course_comp_id,
        })
        return parse_lecture_history(payload)
