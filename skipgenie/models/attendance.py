"""
Attendance data models.

Dataclasses for the values the engine reads from the portal (courses,
lecture histories, schedule entries) and the values it derives from
them (ratios, projection results).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class AttendanceMark(Enum):
    """Mark recorded for a single lecture."""
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    UNMARKED = "UNMARKED"

    @classmethod
    def from_raw(cls, value: Any) -> 'AttendanceMark':
        """Map a portal mark to an AttendanceMark (anything unknown is UNMARKED)."""
        text = str(value or "").strip().upper()
        if text == cls.PRESENT.value:
            return cls.PRESENT
        if text == cls.ABSENT.value:
            return cls.ABSENT
        return cls.UNMARKED


class RiskStatus(Enum):
    """Attendance standing against the 75% minimum."""
    SAFE = "safe"
    WARN = "warn"
    DANGER = "danger"


class ScheduleKind(Enum):
    """Kind of a timetable entry."""
    CLASS = "CLASS"
    HOLIDAY = "HOLIDAY"


class TodayStatus(Enum):
    """Per-course status for the current day."""
    SCHEDULED = "SCHEDULED"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    PENDING = "PENDING"


class ProjectionMode(Enum):
    """
    Assumption used when projecting attendance forward.

    NONE: no more classes happen before the target date
    UNIFORM: one lecture per course on every working day
    """
    NONE = "none"
    UNIFORM = "uniform"


@dataclass(frozen=True)
class LectureRecord:
    """A single planned lecture and its attendance mark."""

    date: Optional[datetime]
    time_slot: str = ""
    mark: AttendanceMark = AttendanceMark.UNMARKED

    @property
    def is_definitive(self) -> bool:
        return self.mark in (AttendanceMark.PRESENT, AttendanceMark.ABSENT)


@dataclass(frozen=True)
class LectureHistory:
    """
    Lecture-wise attendance of one course component.

    Attributes:
        present_count: Present lectures as reported by the portal
        lecture_count: Lectures held as reported by the portal
        percent: Portal-computed percentage
        lectures: Lecture records in portal order
    """

    present_count: int = 0
    lecture_count: int = 0
    percent: float = 0.0
    lectures: Tuple[LectureRecord, ...] = ()

    def find_on(self, day: date) -> Optional[LectureRecord]:
        """
        Find the first lecture dated on the given calendar day.

        Args:
            day: Calendar day to look for

        Returns:
            The matching LectureRecord, or None
        """
        for lecture in self.lectures:
            if lecture.date is not None and lecture.date.date() == day:
                return lecture
        return None


@dataclass(frozen=True)
class CourseComponent:
    """A gradable sub-unit of a course (lecture, lab, ...)."""

    course_comp_id: int
    present_count: int
    total_count: int


@dataclass(frozen=True)
class CourseAttendance:
    """
    A registered course with its cumulative attendance counts.

    The first component is the recognized attendance component: the
    course-level counts are read from it. Components keep their portal
    positions; an entry that failed validation is held as None, so an
    invalid first component leaves the course without recognized counts.

    Attributes:
        student_id: Portal student identifier
        course_id: Portal course identifier
        course_code: Course code used to match timetable entries
        course_name: Display name
        components: Components in portal order (None where invalid)
    """

    student_id: int
    course_id: int
    course_code: str
    course_name: str
    components: Tuple[Optional[CourseComponent], ...] = ()

    @property
    def primary_component(self) -> Optional[CourseComponent]:
        return self.components[0] if self.components else None

    @property
    def valid_components(self) -> Tuple[CourseComponent, ...]:
        """Components that passed validation, in portal order."""
        return tuple(c for c in self.components if c is not None)

    @property
    def has_attendance(self) -> bool:
        return self.primary_component is not None

    @property
    def course_comp_id(self) -> Optional[int]:
        component = self.primary_component
        return component.course_comp_id if component else None

    @property
    def present_count(self) -> int:
        component = self.primary_component
        return component.present_count if component else 0

    @property
    def total_count(self) -> int:
        component = self.primary_component
        return component.total_count if component else 0


@dataclass(frozen=True)
class ScheduleEntry:
    """A timetable entry (class or holiday)."""

    course_code: str
    start: Optional[datetime]
    end: Optional[datetime]
    kind: ScheduleKind = ScheduleKind.CLASS
    course_name: str = ""
    venue: str = ""
    faculty: str = ""
    title: str = ""


@dataclass(frozen=True)
class ExclusionEntry:
    """
    A planned future absence.

    Attributes:
        date: Day of the absence
        course_id: Course the absence applies to, or None for a full day
        label: Display label (course name or "Full Day")
    """

    date: date
    course_id: Optional[int] = None
    label: str = "Full Day"

    @property
    def is_full_day(self) -> bool:
        return self.course_id is None


@dataclass(frozen=True)
class RatioInfo:
    """Percentage, status and threshold distances for a present/total pair."""

    percentage: float
    status: RiskStatus
    can_miss: int
    must_attend: int


@dataclass(frozen=True)
class AttendanceSummary:
    """Aggregate attendance across all courses with recognized counts."""

    course_count: int
    total_present: int
    total_lectures: int
    ratio: RatioInfo
    at_risk_count: int


@dataclass(frozen=True)
class ProjectionResult:
    """Current and projected standing of one course."""

    course_id: int
    course_name: str
    current_present: int
    current_total: int
    projected_present: int
    projected_total: int
    current_percentage: float
    projected_percentage: float
    projected_status: RiskStatus
    must_attend: int

    @property
    def delta(self) -> float:
        return self.projected_percentage - self.current_percentage

    @property
    def trend(self) -> str:
        if self.delta > 0.1:
            return "up"
        if self.delta < -0.1:
            return "down"
        return "same"


@dataclass
class ProjectionReport:
    """
    Output of a projection run.

    Attributes:
        target_date: Date the projection runs up to (inclusive)
        mode: Assumption used for future lectures
        working_days: Mon-Fri days from tomorrow through target_date
        results: One result per course with recognized counts, in course order
    """

    target_date: date
    mode: ProjectionMode
    working_days: int
    results: List[ProjectionResult] = field(default_factory=list)

    @property
    def at_risk(self) -> List[ProjectionResult]:
        """Results projected below the minimum, in course order."""
        return [r for r in self.results if r.projected_status != RiskStatus.SAFE]

    def to_records(self) -> List[Dict[str, Any]]:
        """Flatten results into rows suitable for a DataFrame or JSON."""
        return [
            {
                "course_id": r.course_id,
                "course_name": r.course_name,
                "current_present": r.current_present,
                "current_total": r.current_total,
                "current_percentage": round(r.current_percentage, 2),
                "projected_present": r.projected_present,
                "projected_total": r.projected_total,
                "projected_percentage": round(r.projected_percentage, 2),
                "projected_status": r.projected_status.value,
                "must_attend": r.must_attend,
                "delta": round(r.delta, 2),
            }
            for r in self.results
        ]
