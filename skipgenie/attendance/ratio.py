"""
Attendance ratio math.

Percentages, risk status and distances to the 75% minimum. Status
boundaries are decided in integer arithmetic so that values sitting
exactly on 75% or 65% classify the same way on every platform.
"""

from typing import Iterable

from ..exceptions import ValidationError
from ..models.attendance import (
    AttendanceSummary,
    CourseAttendance,
    RatioInfo,
    RiskStatus,
)


MIN_ATTENDANCE_PERCENT = 75
WARN_FLOOR_PERCENT = 65


def classify(present: int, total: int) -> RiskStatus:
    """
    Classify a present/total pair.

    Args:
        present: Lectures attended
        total: Lectures held

    Returns:
        SAFE at or above 75%, WARN in [65, 75), DANGER below 65%.
        A course with no lectures yet is SAFE.
    """
    if total == 0:
        return RiskStatus.SAFE
    if 100 * present >= MIN_ATTENDANCE_PERCENT * total:
        return RiskStatus.SAFE
    if 100 * present >= WARN_FLOOR_PERCENT * total:
        return RiskStatus.WARN
    return RiskStatus.DANGER


def compute_ratio(present: int, total: int) -> RatioInfo:
    """
    Compute percentage, status and threshold distances.

    can_miss is the largest k with present / (total + k) >= 0.75 and is
    only reported for SAFE courses. must_attend is the smallest k with
    (present + k) / (total + k) >= 0.75 and is only reported otherwise.

    Args:
        present: Lectures attended (0 <= present <= total)
        total: Lectures held

    Returns:
        RatioInfo for the pair

    Raises:
        ValidationError: If counts are negative or present exceeds total

    Examples:
        >>> compute_ratio(27, 30)
        RatioInfo(percentage=90.0, status=<RiskStatus.SAFE: 'safe'>, can_miss=6, must_attend=0)
        >>> compute_ratio(20, 30).must_attend
        10
    """
    if present < 0 or total < 0:
        raise ValidationError(
            f"Attendance counts must be non-negative, got {present}/{total}"
        )
    if present > total:
        raise ValidationError(
            f"Present count {present} exceeds total {total}"
        )

    if total == 0:
        return RatioInfo(0.0, RiskStatus.SAFE, 0, 0)

    percentage = 100 * present / total
    status = classify(present, total)

    # present / (total + k) >= 3/4  <=>  k <= (4 * present - 3 * total) / 3
    can_miss = 0
    must_attend = 0
    if status == RiskStatus.SAFE:
        can_miss = max(0, (4 * present - 3 * total) // 3)
    else:
        must_attend = max(0, 3 * total - 4 * present)

    return RatioInfo(percentage, status, can_miss, must_attend)


def summarize(courses: Iterable[CourseAttendance]) -> AttendanceSummary:
    """
    Aggregate attendance across courses.

    Only courses with a recognized attendance component contribute to the
    totals and the at-risk count; course_count covers every course.

    Args:
        courses: Registered courses

    Returns:
        AttendanceSummary with overall ratio
    """
    course_count = 0
    total_present = 0
    total_lectures = 0
    at_risk = 0

    for course in courses:
        course_count += 1
        if not course.has_attendance:
            continue
        total_present += course.present_count
        total_lectures += course.total_count
        if classify(course.present_count, course.total_count) != RiskStatus.SAFE:
            at_risk += 1

    return AttendanceSummary(
        course_count=course_count,
        total_present=total_present,
        total_lectures=total_lectures,
        ratio=compute_ratio(total_present, total_lectures),
        at_risk_count=at_risk,
    )
