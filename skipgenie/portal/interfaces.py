"""
Abstract interface for the attendance portal.

The engine depends on this abstraction rather than on PortalClient, so
tests and alternative backends can supply their own implementation.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from ..models.attendance import CourseAttendance, LectureHistory, ScheduleEntry


class AttendancePortal(ABC):
    """
    Source of roster, timetable and lecture-wise attendance.

    Every method raises UpstreamError (or AuthorizationExpiredError) when
    the data cannot be obtained.
    """

    @abstractmethod
    async def fetch_roster(self) -> List[CourseAttendance]:
        """
        Fetch registered courses with cumulative attendance counts.

        Returns:
            Courses in portal order
        """
        pass

    @abstractmethod
    async def fetch_weekly_schedule(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> List[ScheduleEntry]:
        """
        Fetch timetable entries between start and end (inclusive).

        Args:
            start: First day (defaults to today)
            end: Last day (defaults to six days after start)

        Returns:
            Timetable entries in portal order
        """
        pass

    @abstractmethod
    async def fetch_lecture_history(
        self,
        student_id: int,
        course_id: int,
        course_comp_id: int
    ) -> LectureHistory:
        """
        Fetch lecture-wise attendance for one course component.

        Returns:
            LectureHistory (empty when the portal has no lectures yet)
        """
        pass
