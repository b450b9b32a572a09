"""
Attendance session state.

AttendanceSession owns everything that is cached between user actions:
the roster, lecture histories, today's status map, the last projection
and the exclusion ledger. All of it lives for the process lifetime only.

Every fetch is tagged with the generation that was current when it was
launched. invalidate() (and therefore refresh()) bumps the generation,
so a reply that arrives after a refresh is dropped instead of
overwriting the newer data.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .calendar import default_schedule_window, group_by_day, week_bounds
from .ledger import ExclusionLedger
from .projection import ProjectionEngine
from .ratio import summarize
from .today_status import TodayStatusResolver
from ..exceptions import AuthorizationExpiredError, UpstreamError, ValidationError
from ..models.attendance import (
    AttendanceSummary,
    CourseAttendance,
    CourseComponent,
    LectureHistory,
    ProjectionMode,
    ProjectionReport,
    ScheduleEntry,
    TodayStatus,
)
from ..portal.interfaces import AttendancePortal
from ..portal.session import TokenSession


logger = logging.getLogger(__name__)

HistoryKey = Tuple[int, int]


class AttendanceSession:
    """
    Owner of cached attendance state for one logged-in student.

    Examples:
        >>> session = AttendanceSession(portal)
        >>> courses = await session.load_roster()
        >>> today = await session.resolve_today()
        >>> session.ledger.add("2025-10-22")
        >>> report = session.project("2025-10-24", ProjectionMode.UNIFORM)
        >>> days = await session.week_timetable(offset=-1)   # last week, by day
        >>> await session.refresh()   # discards caches and re-fetches
    """

    def __init__(
        self,
        portal: AttendancePortal,
        ledger: Optional[ExclusionLedger] = None,
        clock: Callable[[], datetime] = datetime.now,
        token_session: Optional[TokenSession] = None
    ):
        """
        Initialize AttendanceSession.

        Args:
            portal: Data source for roster, timetable and lecture histories
            ledger: Exclusion ledger (a new one is created if omitted)
            clock: Returns the current local time
            token_session: TokenSession to log out of on logout()
        """
        self.portal = portal
        self._clock = clock
        self.ledger = ledger if ledger is not None else ExclusionLedger(
            clock=lambda: self._clock().date()
        )
        self.token_session = token_session

        self._resolver = TodayStatusResolver()
        self._engine = ProjectionEngine(clock=lambda: self._clock().date())

        self._generation = 0
        self._courses: Optional[List[CourseAttendance]] = None
        self._lecture_cache: Dict[HistoryKey, LectureHistory] = {}
        self._today: Optional[Dict[int, TodayStatus]] = None
        self._last_projection: Optional[ProjectionReport] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loaded(self) -> bool:
        return self._courses is not None

    @property
    def courses(self) -> List[CourseAttendance]:
        return list(self._courses or [])

    @property
    def today_statuses(self) -> Dict[int, TodayStatus]:
        return dict(self._today or {})

    @property
    def last_projection(self) -> Optional[ProjectionReport]:
        return self._last_projection

    def _is_current(self, generation: int, what: str) -> bool:
        if generation != self._generation:
            logger.debug(
                f"Discarding stale {what} from generation {generation} "
                f"(current: {self._generation})"
            )
            return False
        return True

    def invalidate(self):
        """Drop roster, lecture cache, today map and last projection."""
        self._generation += 1
        self._courses = None
        self._lecture_cache = {}
        self._today = None
        self._last_projection = None
        logger.info(f"Attendance caches invalidated (generation {self._generation})")

    async def load_roster(self) -> List[CourseAttendance]:
        """
        Get the roster, fetching it on first use.

        Returns:
            Registered courses

        Raises:
            UpstreamError: If the portal cannot supply the roster
        """
        if self._courses is not None:
            return self.courses

        generation = self._generation
        courses = await self.portal.fetch_roster()

        if self._is_current(generation, "roster"):
            self._courses = list(courses)
            logger.info(f"Loaded {len(courses)} courses")
            return self.courses

        # A refresh started while this fetch was in flight; do not cache
        return list(courses)

    async def refresh(self) -> List[CourseAttendance]:
        """Discard every cache and re-fetch the roster."""
        self.invalidate()
        return await self.load_roster()

    async def lecture_history(
        self,
        course: CourseAttendance,
        component: CourseComponent
    ) -> LectureHistory:
        """
        Get a component's lecture history, cached by (course, component).

        Raises:
            UpstreamError: If the portal fetch fails
        """
        key = (course.course_id, component.course_comp_id)
        cached = self._lecture_cache.get(key)
        if cached is not None:
            return cached

        generation = self._generation
        history = await self.portal.fetch_lecture_history(
            course.student_id, course.course_id, component.course_comp_id
        )
        if self._is_current(generation, f"lecture history {key}"):
            self._lecture_cache[key] = history
        return history

    async def resolve_today(self) -> Dict[int, TodayStatus]:
        """
        Resolve today's per-course status.

        Best effort: a failed timetable fetch yields an empty map and a
        failed component fetch counts as "no data". An expired
        authorization, whether reported by the timetable fetch or left
        behind by a rejected component fetch, is raised so the caller can
        re-login.

        Returns:
            Mapping course_id -> TodayStatus
        """
        now = self._clock()
        if now.weekday() >= 5:
            return {}

        generation = self._generation
        courses = await self.load_roster()

        try:
            schedule = await self.portal.fetch_weekly_schedule(
                *default_schedule_window(now.date())
            )
        except AuthorizationExpiredError:
            raise
        except UpstreamError as e:
            logger.warning(f"Timetable unavailable, skipping today's status: {e}")
            return {}

        statuses = await self._resolver.resolve(
            courses, schedule, self.lecture_history, now=now
        )
        if self.token_session is not None and not self.token_session.is_logged_in:
            raise AuthorizationExpiredError("Session expired. Please login again.")

        if self._is_current(generation, "today status"):
            self._today = statuses
        return statuses

    async def week_timetable(self, offset: int = 0) -> Dict[date, List[ScheduleEntry]]:
        """
        Fetch one Monday-to-Sunday week of the timetable, bucketed by day.

        Args:
            offset: Weeks from the current one (negative for past weeks)

        Returns:
            Each of the seven days mapped to its entries, sorted by start

        Raises:
            UpstreamError: If the timetable cannot be fetched
        """
        monday, sunday = week_bounds(self._clock().date(), offset)
        schedule = await self.portal.fetch_weekly_schedule(monday, sunday)
        logger.info(f"Loaded {len(schedule)} timetable entries for week of {monday.isoformat()}")
        return group_by_day(schedule, monday)

    def project(
        self,
        target_date: Any,
        mode: Union[ProjectionMode, str] = ProjectionMode.UNIFORM
    ) -> ProjectionReport:
        """
        Project the loaded roster to target_date using the session ledger.

        Raises:
            ValidationError: If no roster is loaded or the target is invalid
        """
        if self._courses is None:
            raise ValidationError("Load your attendance first")

        report = self._engine.project(
            self._courses, target_date, mode, self.ledger,
            today=self._clock().date()
        )
        self._last_projection = report
        return report

    def summary(self) -> AttendanceSummary:
        """Aggregate attendance across the loaded roster."""
        return summarize(self._courses or [])

    def logout(self):
        """Forget the token, all caches and all planned absences."""
        if self.token_session is not None:
            self.token_session.mark_logged_out()
        self.invalidate()
        self.ledger.clear()
