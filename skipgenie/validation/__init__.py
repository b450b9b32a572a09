"""Payload validation for portal data."""

from .validators import ValidationResult, Validator
from .course_validator import CourseComponentValidator, CourseValidator

__all__ = [
    "ValidationResult",
    "Validator",
    "CourseValidator",
    "CourseComponentValidator",
]
