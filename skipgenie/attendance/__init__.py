"""
Attendance statistics and projection engine.

Usage:
    >>> from skipgenie.attendance import compute_ratio, ExclusionLedger, ProjectionEngine
    >>>
    >>> compute_ratio(20, 30).must_attend
    10
"""

from .calendar import count_working_days, iter_working_days, week_bounds
from .dates import format_date, is_same_day, parse_flex_date
from .ledger import ExclusionLedger
from .projection import ProjectionEngine
from .ratio import classify, compute_ratio, summarize
from .today_status import TodayStatusResolver
from .session import AttendanceSession

__all__ = [
    "AttendanceSession",
    "ExclusionLedger",
    "ProjectionEngine",
    "TodayStatusResolver",
    "classify",
    "compute_ratio",
    "count_working_days",
    "format_date",
    "is_same_day",
    "iter_working_days",
    "parse_flex_date",
    "summarize",
    "week_bounds",
]
