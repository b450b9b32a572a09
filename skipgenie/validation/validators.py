"""
Payload validation primitives.

Portal payloads are checked before they become models. Each validator
returns a ValidationResult instead of raising, so the caller can log the
problems and skip the entry.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class ValidationResult:
    """
    Outcome of checking one payload entry.

    Errors make the entry unusable; warnings are logged and the entry is
    kept.
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> 'ValidationResult':
        """Record a problem that makes the entry unusable. Returns self."""
        self.errors.append(message)
        self.is_valid = False
        return self

    def add_warning(self, message: str) -> 'ValidationResult':
        self.warnings.append(message)
        return self

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def get_summary(self) -> str:
        """Multi-line text listing errors then warnings, for log messages."""
        if self.is_valid and not self.has_warnings:
            return "Validation passed"

        parts = []

        if self.has_errors:
            parts.append(f"Errors ({len(self.errors)}):")
            for error in self.errors:
                parts.append(f"  - {error}")

        if self.has_warnings:
            parts.append(f"Warnings ({len(self.warnings)}):")
            for warning in self.warnings:
                parts.append(f"  - {warning}")

        return "\n".join(parts)


class Validator(ABC):
    """
    Base class for portal payload validators.

    Subclasses implement validate() for one payload shape and reuse the
    field checks below.
    """

    @abstractmethod
    def validate(self, data: Any) -> ValidationResult:
        """Check one decoded JSON entry; never raises on bad input."""

    def validate_required_fields(
        self,
        data: dict,
        required_fields: List[str]
    ) -> List[str]:
        """One error per field that is absent or null."""
        errors = []
        for name in required_fields:
            if name not in data or data[name] is None:
                errors.append(f"Missing required field: {name}")
        return errors

    def validate_non_negative_int(
        self,
        value: Any,
        field_name: str
    ) -> Optional[str]:
        """Lecture counts: a real int (not bool), zero or more. Returns the error or None."""
        if isinstance(value, bool) or not isinstance(value, int):
            return f"{field_name} must be an integer, got {type(value).__name__}"

        if value < 0:
            return f"{field_name} must not be negative, got {value}"

        return None

    def validate_identifier(
        self,
        value: Any,
        field_name: str
    ) -> Optional[str]:
        """Portal ids: a real int (not bool) above zero. Returns the error or None."""
        if isinstance(value, bool) or not isinstance(value, int):
            return f"{field_name} must be an integer, got {type(value).__name__}"

        if value <= 0:
            return f"{field_name} must be positive, got {value}"

        return None
