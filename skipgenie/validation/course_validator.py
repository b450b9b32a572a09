"""
Roster payload validators.

Validates registered-course entries and their attendance components as
they come back from the portal, before they become models.
"""

from typing import Any, Dict

from .validators import Validator, ValidationResult


class CourseValidator(Validator):
    """
    Validator for a registered-course entry.

    Validates:
    - Required fields (studentId, courseId, courseName)
    - Identifier types
    - Presence of a course code (warning only; without it the course
      cannot be matched against the timetable)

    Examples:
        >>> validator = CourseValidator()
        >>> course = {
        ...     "studentId": 1001,
        ...     "courseId": 42,
        ...     "courseCode": "KCS501",
        ...     "courseName": "Database Systems",
        ...     "studentCourseCompDetails": [],
        ... }
        >>> validator.validate(course).is_valid
        True
    """

    REQUIRED_FIELDS = ["studentId", "courseId", "courseName"]

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        if not isinstance(data, dict):
            return result.add_error(
                f"Course entry must be an object, got {type(data).__name__}"
            )

        for error in self.validate_required_fields(data, self.REQUIRED_FIELDS):
            result.add_error(error)

        if not result.is_valid:
            return result

        for name in ("studentId", "courseId"):
            error = self.validate_identifier(data[name], name)
            if error:
                result.add_error(error)

        code = data.get("courseCode")
        if not isinstance(code, str) or not code.strip():
            result.add_warning(
                f"Course {data['courseId']} has no course code; "
                f"today's status cannot be resolved for it"
            )

        components = data.get("studentCourseCompDetails")
        if components is not None and not isinstance(components, list):
            result.add_error("studentCourseCompDetails must be a list")
        elif not components:
            result.add_warning(f"Course {data['courseId']} has no attendance components")

        return result


class CourseComponentValidator(Validator):
    """
    Validator for one attendance component of a course.

    Enforces 0 <= presentLecture <= totalLecture.
    """

    REQUIRED_FIELDS = ["courseCompId", "presentLecture", "totalLecture"]

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        if not isinstance(data, dict):
            return result.add_error(
                f"Component entry must be an object, got {type(data).__name__}"
            )

        for error in self.validate_required_fields(data, self.REQUIRED_FIELDS):
            result.add_error(error)

        if not result.is_valid:
            return result

        error = self.validate_identifier(data["courseCompId"], "courseCompId")
        if error:
            result.add_error(error)

        present_error = self.validate_non_negative_int(data["presentLecture"], "presentLecture")
        total_error = self.validate_non_negative_int(data["totalLecture"], "totalLecture")
        for error in (present_error, total_error):
            if error:
                result.add_error(error)

        if not present_error and not total_error:
            if data["presentLecture"] > data["totalLecture"]:
                result.add_error(
                    f"presentLecture ({data['presentLecture']}) exceeds "
                    f"totalLecture ({data['totalLecture']})"
                )

        return result
