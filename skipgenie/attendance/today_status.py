"""
Today's per-course attendance status.

Reconciles today's timetable with lecture-wise attendance records:

- class still running or upcoming -> SCHEDULED
- a component has a PRESENT/ABSENT record dated today -> that mark
- class held today but nothing marked yet -> PENDING
- no class today -> no entry
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from ..exceptions import UpstreamError
from ..models.attendance import (
    CourseAttendance,
    CourseComponent,
    LectureHistory,
    ScheduleEntry,
    ScheduleKind,
    TodayStatus,
)
from ..models.result import Result


logger = logging.getLogger(__name__)

HistoryFetcher = Callable[[CourseAttendance, CourseComponent], Awaitable[LectureHistory]]


def _normalize_code(code: Optional[str]) -> str:
    return (code or "").strip()


class TodayStatusResolver:
    """
    Resolves a status for each course with a class today.

    Lecture histories are fetched through the injected fetcher so the
    resolver does not care whether they come from a cache or the portal.
    Courses are resolved concurrently; a failed component fetch is treated
    as "no data for that component".

    Examples:
        >>> resolver = TodayStatusResolver()
        >>> statuses = await resolver.resolve(courses, schedule, session.lecture_history)
        >>> statuses.get(course.course_id)
        <TodayStatus.PRESENT: 'PRESENT'>
    """

    async def resolve(
        self,
        courses: Sequence[CourseAttendance],
        schedule: Sequence[ScheduleEntry],
        fetch_history: HistoryFetcher,
        now: Optional[datetime] = None
    ) -> Dict[int, TodayStatus]:
        """
        Resolve today's status for every course.

        Args:
            courses: Registered courses
            schedule: Timetable entries covering at least today
            fetch_history: Coroutine returning a component's lecture history
            now: Current instant (defaults to datetime.now())

        Returns:
            Mapping course_id -> TodayStatus; courses without a class today
            are absent from the mapping
        """
        now = now or datetime.now()
        today = now.date()

        if today.weekday() >= 5:
            return {}

        todays_classes = [
            entry for entry in schedule
            if entry.kind != ScheduleKind.HOLIDAY
            and entry.start is not None
            and entry.start.date() == today
        ]
        if not todays_classes:
            return {}

        statuses = await asyncio.gather(*(
            self._resolve_course(course, todays_classes, fetch_history, now)
            for course in courses
        ))

        return {
            course.course_id: status
            for course, status in zip(courses, statuses)
            if status is not None
        }

    async def _resolve_course(
        self,
        course: CourseAttendance,
        todays_classes: List[ScheduleEntry],
        fetch_history: HistoryFetcher,
        now: datetime
    ) -> Optional[TodayStatus]:
        code = _normalize_code(course.course_code)
        scheduled = next(
            (e for e in todays_classes if _normalize_code(e.course_code) == code),
            None
        )
        if scheduled is None:
            return None

        if scheduled.end is not None and scheduled.end > now:
            return TodayStatus.SCHEDULED

        histories = await asyncio.gather(*(
            self._fetch_component(course, component, fetch_history)
            for component in course.valid_components
        ))

        # First component (in source order) with a definitive mark wins
        for history in histories:
            if history.is_failure:
                continue
            lecture = history.value.find_on(now.date())
            if lecture is not None and lecture.is_definitive:
                return TodayStatus(lecture.mark.value)

        return TodayStatus.PENDING

    async def _fetch_component(
        self,
        course: CourseAttendance,
        component: CourseComponent,
        fetch_history: HistoryFetcher
    ) -> Result[LectureHistory]:
        try:
            history = await fetch_history(course, component)
            return Result.success(history)
        except UpstreamError as e:
            logger.warning(
                f"No lecture data for course {course.course_id} "
                f"component {component.course_comp_id}: {e}"
            )
            return Result.failure("Lecture history unavailable", e)
