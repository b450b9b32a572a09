"""
Forward projection of attendance.

Projects each course's present/total counts to a target date under a
simple assumption about future lectures, applying the planned absences
from an ExclusionLedger.
"""

import logging
from datetime import date
from typing import Any, Callable, List, Optional, Sequence, Union

from .calendar import count_working_days, iter_working_days
from .dates import to_date
from .ledger import ExclusionLedger
from .ratio import compute_ratio
from ..exceptions import ValidationError
from ..models.attendance import (
    CourseAttendance,
    ProjectionMode,
    ProjectionReport,
    ProjectionResult,
)


logger = logging.getLogger(__name__)


def _coerce_mode(mode: Union[ProjectionMode, str]) -> ProjectionMode:
    if isinstance(mode, ProjectionMode):
        return mode
    try:
        return ProjectionMode(str(mode).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown projection mode: {mode} "
            f"(must be one of: {', '.join(m.value for m in ProjectionMode)})"
        )


class ProjectionEngine:
    """
    Projects attendance to a future date.

    Modes:
    - NONE: no more lectures; projected counts equal current counts
    - UNIFORM: one lecture per course on every working day from tomorrow
      through the target date. An excluded day still adds a lecture to the
      total (it happens, the student is absent) but not to present.

    Examples:
        >>> engine = ProjectionEngine()
        >>> report = engine.project(courses, "2025-10-24", ProjectionMode.UNIFORM, ledger)
        >>> report.working_days
        5
        >>> [r.course_name for r in report.at_risk]
        ['Physics']
    """

    def __init__(self, clock: Callable[[], date] = date.today):
        self._clock = clock

    def project(
        self,
        courses: Sequence[CourseAttendance],
        target_date: Any,
        mode: Union[ProjectionMode, str],
        ledger: ExclusionLedger,
        today: Optional[date] = None
    ) -> ProjectionReport:
        """
        Project every course to target_date.

        Args:
            courses: Courses with current cumulative counts
            target_date: Last day of the projection (date or date text)
            mode: ProjectionMode or its string value
            ledger: Planned absences
            today: Reference day (defaults to the engine clock)

        Returns:
            ProjectionReport with one result per course that has a
            recognized attendance component

        Raises:
            ValidationError: If target_date is missing, unparseable or not
                strictly after today, or mode is unknown
        """
        mode = _coerce_mode(mode)
        today = today or self._clock()

        if target_date is None or (isinstance(target_date, str) and not target_date.strip()):
            raise ValidationError("Please select a target date")

        target = to_date(target_date)
        if target is None:
            raise ValidationError(f"Invalid target date: {target_date}")
        if target <= today:
            raise ValidationError(
                f"Target date must be in the future, got {target.isoformat()}"
            )

        working_days = count_working_days(today, target)
        future_days = list(iter_working_days(today, target))
        full_day = ledger.full_day_dates()

        results: List[ProjectionResult] = []
        for course in courses:
            if not course.has_attendance:
                logger.debug(f"Skipping course {course.course_id}: no attendance component")
                continue

            present = course.present_count
            total = course.total_count
            projected_present = present
            projected_total = total

            if mode == ProjectionMode.UNIFORM:
                course_days = ledger.course_dates(course.course_id)
                for day in future_days:
                    projected_total += 1
                    if day not in full_day and day not in course_days:
                        projected_present += 1

            current = compute_ratio(present, total)
            projected = compute_ratio(projected_present, projected_total)

            results.append(ProjectionResult(
                course_id=course.course_id,
                course_name=course.course_name,
                current_present=present,
                current_total=total,
                projected_present=projected_present,
                projected_total=projected_total,
                current_percentage=current.percentage,
                projected_percentage=projected.percentage,
                projected_status=projected.status,
                must_attend=projected.must_attend,
            ))

        report = ProjectionReport(
            target_date=target,
            mode=mode,
            working_days=working_days,
            results=results,
        )
        logger.info(
            f"Projection to {target.isoformat()} ({mode.value}): "
            f"{working_days} working days, {len(report.at_risk)} course(s) at risk"
        )
        return report
