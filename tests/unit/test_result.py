"""
Unit tests for Result<T> pattern.
"""

import pytest

from skipgenie.exceptions import UpstreamError
from skipgenie.models.result import Result, ResultStatus


class TestResult:
    """Test cases for Result class."""

    def test_success_creation(self):
        """Test creating a successful result."""
        result = Result.success(42, "Fetched")

        assert result.is_success
        assert not result.is_failure
        assert result.status == ResultStatus.SUCCESS
        assert result.value == 42
        assert result.message == "Fetched"
        assert result.error is None

    def test_failure_creation(self):
        """Test creating a failure result."""
        error = UpstreamError("API error 500", status=500)
        result = Result.failure("Lecture history unavailable", error)

        assert result.is_failure
        assert result.status == ResultStatus.FAILURE
        assert result.value is None
        assert result.error is error

    def test_unwrap_failure_raises(self):
        """Test unwrapping failure raises exception."""
        result = Result.failure("Not logged in")

        with pytest.raises(ValueError, match="Cannot unwrap failure result"):
            result.unwrap()

    def test_unwrap_or(self):
        """Test unwrap_or with success and failure."""
        assert Result.success(42).unwrap_or(0) == 42
        assert Result.failure("Error").unwrap_or(0) == 0

    def test_result_with_none_value(self):
        """Test result with None as valid value."""
        result = Result.success(None, "Login valid")

        assert result.is_success
        assert result.unwrap() is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
