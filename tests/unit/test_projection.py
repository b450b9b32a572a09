"""
Unit tests for the projection engine.
"""

from datetime import date

import pytest

from skipgenie.attendance.ledger import ExclusionLedger
from skipgenie.attendance.projection import ProjectionEngine
from skipgenie.exceptions import ValidationError
from skipgenie.models.attendance import (
    CourseAttendance,
    CourseComponent,
    ProjectionMode,
    RiskStatus,
)


TODAY = date(2025, 10, 17)
NEXT_FRIDAY = date(2025, 10, 24)


def make_course(course_id, name, present=None, total=None):
    components = ()
    if present is not None:
        components = (CourseComponent(course_id * 100, present, total),)
    return CourseAttendance(1, course_id, f"C{course_id}", name, components)


class TestProjectionEngine:
    """Test cases for ProjectionEngine."""

    @pytest.fixture
    def courses(self):
        """Create a roster with one safe, one warning and one empty course."""
        return [
            make_course(1, "Maths", 27, 30),
            make_course(2, "Physics", 20, 30),
            make_course(3, "Seminar"),
        ]

    @pytest.fixture
    def ledger(self):
        """Create an empty ledger pinned to TODAY."""
        return ExclusionLedger(clock=lambda: TODAY)

    @pytest.fixture
    def engine(self):
        """Create an engine pinned to TODAY."""
        return ProjectionEngine(clock=lambda: TODAY)

    def test_none_mode_keeps_counts(self, engine, courses, ledger):
        """Test NONE leaves counts unchanged."""
        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.NONE, ledger)

        assert report.mode == ProjectionMode.NONE
        assert report.working_days == 5
        for r in report.results:
            assert r.projected_present == r.current_present
            assert r.projected_total == r.current_total
            assert r.projected_percentage == pytest.approx(r.current_percentage)
            assert r.trend == "same"

    def test_course_without_components_omitted(self, engine, courses, ledger):
        """Test courses without recognized counts are left out."""
        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        assert [r.course_id for r in report.results] == [1, 2]

    def test_uniform_mode(self, engine, courses, ledger):
        """Test UNIFORM adds one attended lecture per working day."""
        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        maths, physics = report.results
        assert (maths.projected_present, maths.projected_total) == (32, 35)
        assert (physics.projected_present, physics.projected_total) == (25, 35)
        assert physics.projected_status == RiskStatus.WARN
        assert physics.must_attend == 3 * 35 - 4 * 25
        assert physics.trend == "up"

    def test_course_with_invalid_first_component_omitted(self, engine, courses, ledger):
        """Test a valid later component does not stand in for the first."""
        courses.append(CourseAttendance(1, 5, "C5", "Lab", (None, CourseComponent(501, 2, 10))))

        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        assert [r.course_id for r in report.results] == [1, 2]

    def test_at_risk(self, engine, courses, ledger):
        """Test the at-risk list keeps course order."""
        courses.append(make_course(4, "Chemistry", 10, 30))

        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        assert [r.course_name for r in report.at_risk] == ["Physics", "Chemistry"]

    def test_full_day_exclusion(self, engine, courses, ledger):
        """Test a full-day exclusion costs every course one present lecture."""
        ledger.add("2025-10-22")

        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        maths, physics = report.results
        assert (maths.projected_present, maths.projected_total) == (31, 35)
        assert (physics.projected_present, physics.projected_total) == (24, 35)

    def test_course_exclusion(self, engine, courses, ledger):
        """Test a course exclusion only affects that course."""
        ledger.add("2025-10-22", course_id=2)

        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        maths, physics = report.results
        assert maths.projected_present == 32
        assert physics.projected_present == 24

    def test_overlapping_exclusions_counted_once(self, engine, courses, ledger):
        """Test full-day and course exclusions on one date are not double counted."""
        ledger.add("2025-10-22")
        ledger.add("2025-10-22", course_id=2)

        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        assert report.results[1].projected_present == 24
        assert report.results[1].projected_total == 35

    def test_exclusion_outside_range_ignored(self, engine, courses, ledger):
        """Test weekend and post-target exclusions have no effect."""
        ledger.add("2025-10-18")
        ledger.add("2025-10-31")

        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        assert report.results[0].projected_present == 32

    def test_exclusions_ignored_in_none_mode(self, engine, courses, ledger):
        """Test NONE ignores the ledger."""
        ledger.add("2025-10-22")

        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.NONE, ledger)

        assert report.results[0].projected_present == 27

    def test_string_mode_and_target(self, engine, courses, ledger):
        """Test string inputs for mode and target date."""
        report = engine.project(courses, "24/10/2025", "Uniform", ledger)

        assert report.mode == ProjectionMode.UNIFORM
        assert report.target_date == NEXT_FRIDAY

    def test_unknown_mode(self, engine, courses, ledger):
        """Test an unknown mode is rejected."""
        with pytest.raises(ValidationError, match="Unknown projection mode"):
            engine.project(courses, NEXT_FRIDAY, "weekly", ledger)

    @pytest.mark.parametrize("target", [None, ""])
    def test_missing_target(self, engine, courses, ledger, target):
        """Test a missing target date."""
        with pytest.raises(ValidationError, match="Please select a target date"):
            engine.project(courses, target, ProjectionMode.UNIFORM, ledger)

    def test_invalid_target(self, engine, courses, ledger):
        """Test an unparseable target date."""
        with pytest.raises(ValidationError, match="Invalid target date"):
            engine.project(courses, "someday", ProjectionMode.UNIFORM, ledger)

    @pytest.mark.parametrize("target", [TODAY, date(2025, 10, 1)])
    def test_target_not_in_future(self, engine, courses, ledger, target):
        """Test a target on or before today."""
        with pytest.raises(ValidationError, match="must be in the future"):
            engine.project(courses, target, ProjectionMode.UNIFORM, ledger)

    def test_explicit_today(self, courses, ledger):
        """Test an explicit reference day overrides the clock."""
        engine = ProjectionEngine(clock=lambda: date(2000, 1, 1))

        report = engine.project(
            courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger, today=date(2025, 10, 20)
        )

        assert report.working_days == 4

    def test_to_records(self, engine, courses, ledger):
        """Test flattening into rows."""
        report = engine.project(courses, NEXT_FRIDAY, ProjectionMode.UNIFORM, ledger)

        rows = report.to_records()

        assert len(rows) == 2
        assert rows[1]["course_name"] == "Physics"
        assert rows[1]["projected_status"] == "warn"
        assert rows[1]["projected_percentage"] == pytest.approx(71.43, abs=0.01)
