"""Data models for the attendance engine."""

from .attendance import (
    AttendanceMark,
    AttendanceSummary,
    CourseAttendance,
    CourseComponent,
    ExclusionEntry,
    LectureHistory,
    LectureRecord,
    ProjectionMode,
    ProjectionReport,
    ProjectionResult,
    RatioInfo,
    RiskStatus,
    ScheduleEntry,
    ScheduleKind,
    TodayStatus,
)
from .result import Result, ResultStatus

__all__ = [
    "AttendanceMark",
    "AttendanceSummary",
    "CourseAttendance",
    "CourseComponent",
    "ExclusionEntry",
    "LectureHistory",
    "LectureRecord",
    "ProjectionMode",
    "ProjectionReport",
    "ProjectionResult",
    "RatioInfo",
    "RiskStatus",
    "ScheduleEntry",
    "ScheduleKind",
    "TodayStatus",
    "Result",
    "ResultStatus",
]
