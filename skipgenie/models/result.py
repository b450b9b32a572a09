"""
Result<T> pattern for best-effort operations.

Fetches whose failure should degrade to "no data" instead of aborting
their caller are wrapped in a Result, so the caller can fold over
successes and skip failures without nested try/except blocks.
"""

from dataclasses import dataclass
from typing import Optional, Generic, TypeVar
from enum import Enum


T = TypeVar('T')


class ResultStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome of a fetch or check that is allowed to fail.

    Attributes:
        status: SUCCESS or FAILURE
        value: Payload of a success (None for a failure)
        error: Exception behind a failure, when there was one
        message: Short reason shown to the user or logged

    Examples:
        >>> Result.success(history).unwrap_or(None) is history
        True

        >>> failed = Result.failure("Lecture history unavailable", UpstreamError("timeout"))
        >>> failed.unwrap_or(LectureHistory()).lectures
        ()
    """

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILURE

    @classmethod
    def success(cls, value: T, message: Optional[str] = None) -> 'Result[T]':
        """Wrap a value that was obtained."""
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def failure(
        cls,
        message: str,
        error: Optional[Exception] = None
    ) -> 'Result[T]':
        """
        Record that no value could be obtained.

        Args:
            message: Why the value is missing
            error: Exception raised by the underlying call, if any
        """
        return cls(status=ResultStatus.FAILURE, message=message, error=error)

    def unwrap(self) -> T:
        """
        Get the value of a success.

        Raises:
            ValueError: If called on a failure
        """
        if self.is_failure:
            raise ValueError(
                f"Cannot unwrap failure result: {self.message}"
            )
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.is_success else default
