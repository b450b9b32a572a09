"""
Unit tests for attendance ratio math.
"""

import pytest

from skipgenie.attendance.ratio import classify, compute_ratio, summarize
from skipgenie.exceptions import ValidationError
from skipgenie.models.attendance import CourseAttendance, CourseComponent, RiskStatus


def make_course(course_id, present=None, total=None):
    components = ()
    if present is not None:
        components = (CourseComponent(course_id * 10, present, total),)
    return CourseAttendance(
        student_id=1,
        course_id=course_id,
        course_code=f"C{course_id}",
        course_name=f"Course {course_id}",
        components=components,
    )


class TestComputeRatio:
    """Test cases for compute_ratio."""

    def test_no_lectures_is_safe(self):
        """Test a course with no lectures held."""
        info = compute_ratio(0, 0)

        assert info.percentage == 0
        assert info.status == RiskStatus.SAFE
        assert info.can_miss == 0
        assert info.must_attend == 0

    def test_warn_example(self):
        """Test 20 of 30 lectures attended."""
        info = compute_ratio(20, 30)

        assert info.percentage == pytest.approx(66.67, abs=0.01)
        assert info.status == RiskStatus.WARN
        assert info.must_attend == 10
        assert info.can_miss == 0

    def test_safe_example(self):
        """Test 27 of 30 lectures attended."""
        info = compute_ratio(27, 30)

        assert info.percentage == pytest.approx(90)
        assert info.status == RiskStatus.SAFE
        assert info.can_miss == 6
        assert info.must_attend == 0

    def test_exactly_75_is_safe(self):
        """Test the 75% boundary is inclusive."""
        info = compute_ratio(3, 4)

        assert info.status == RiskStatus.SAFE
        assert info.can_miss == 0

    def test_exactly_65_is_warn(self):
        """Test the 65% boundary is inclusive."""
        assert compute_ratio(13, 20).status == RiskStatus.WARN

    def test_below_65_is_danger(self):
        """Test values just below 65%."""
        info = compute_ratio(129, 200)

        assert info.status == RiskStatus.DANGER
        assert info.must_attend == 3 * 200 - 4 * 129

    def test_full_attendance(self):
        """Test 100% attendance."""
        info = compute_ratio(10, 10)

        assert info.percentage == 100
        assert info.can_miss == 3

    def test_negative_counts_rejected(self):
        """Test negative counts raise ValidationError."""
        with pytest.raises(ValidationError):
            compute_ratio(-1, 5)

        with pytest.raises(ValidationError):
            compute_ratio(0, -5)

    def test_present_above_total_rejected(self):
        """Test present > total raises ValidationError."""
        with pytest.raises(ValidationError):
            compute_ratio(6, 5)

    def test_percentage_and_boundaries_for_small_counts(self):
        """Test percentage and status for every pair up to 60 lectures."""
        for total in range(0, 61):
            for present in range(0, total + 1):
                info = compute_ratio(present, total)
                expected = 100 * present / total if total else 0

                assert info.percentage == pytest.approx(expected)
                assert info.status == classify(present, total)
                if total and expected >= 75:
                    assert info.status == RiskStatus.SAFE
                elif total and expected >= 65:
                    assert info.status == RiskStatus.WARN
                elif total:
                    assert info.status == RiskStatus.DANGER

    def test_can_miss_is_largest(self):
        """Test can_miss keeps the course at 75% and one more would not."""
        for total in range(1, 61):
            for present in range(0, total + 1):
                info = compute_ratio(present, total)
                if info.status != RiskStatus.SAFE:
                    continue
                k = info.can_miss

                assert k >= 0
                assert 4 * present >= 3 * (total + k)
                assert 4 * present < 3 * (total + k + 1)

    def test_must_attend_is_smallest(self):
        """Test must_attend reaches 75% and one fewer would not."""
        for total in range(1, 61):
            for present in range(0, total + 1):
                info = compute_ratio(present, total)
                if info.status == RiskStatus.SAFE:
                    continue
                m = info.must_attend

                assert 4 * (present + m) >= 3 * (total + m)
                if m > 0:
                    assert 4 * (present + m - 1) < 3 * (total + m - 1)


class TestSummarize:
    """Test cases for the aggregate summary."""

    def test_summary_totals(self):
        """Test totals and at-risk count across courses."""
        courses = [
            make_course(1, 27, 30),
            make_course(2, 20, 30),
            make_course(3),
        ]

        summary = summarize(courses)

        assert summary.course_count == 3
        assert summary.total_present == 47
        assert summary.total_lectures == 60
        assert summary.at_risk_count == 1
        assert summary.ratio.status == RiskStatus.SAFE
        assert summary.ratio.can_miss == (4 * 47 - 3 * 60) // 3

    def test_empty_roster(self):
        """Test summary of no courses."""
        summary = summarize([])

        assert summary.course_count == 0
        assert summary.ratio.percentage == 0
        assert summary.at_risk_count == 0
