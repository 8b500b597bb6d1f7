"""
Assertion result models.

Every check in nanotests produces an AssertionResult instead of raising,
so a suite runner can record failures and carry on. Tests that prefer a
plain assert use raise_for_status() (or the assert_* helpers built on it).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AssertionStatus(str, Enum):
    """Status of an assertion check."""
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"  # the check could not be evaluated (bad URL escape, bad XPath, SQL error)


@dataclass
class AssertionResult:
    """
    Result of a single assertion check.

    Attributes:
        status: Whether the assertion passed, failed, or errored
        message: Human-readable description of the result
        subject: What was inspected (URL, header name, XPath, SQL, ...)
        expected: What was expected
        actual: What was actually found
        details: Additional context for debugging
    """
    status: AssertionStatus
    message: str
    subject: str | None = None
    expected: Any = None
    actual: Any = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status == AssertionStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == AssertionStatus.FAILED

    def raise_for_status(self, message: str | None = None) -> AssertionResult:
        """
        Raise AssertionError unless the check passed.

        Args:
            message: Identifying message used instead of the generated one

        Returns:
            self, so calls can be chained
        """
        if self.passed:
            return self
        if message:
            raise AssertionError(f"{message}\n{self}")
        raise AssertionError(str(self))

    def __str__(self) -> str:
        """Format as a human-readable string."""
        if self.status == AssertionStatus.PASSED:
            return f"PASS: {self.message}"

        lines = [f"{self.status.value.upper()}: {self.message}"]

        if self.subject:
            lines.append(f"   Subject:  {self.subject}")

        if self.expected is not None:
            lines.append(f"   Expected: {_format_value(self.expected)}")

        if self.actual is not None:
            lines.append(f"   Actual:   {_format_value(self.actual)}")

        for key, value in self.details.items():
            lines.append(f"   {key}: {_format_value(value)}")

        return "\n".join(lines)

    @classmethod
    def passed_result(
        cls,
        message: str,
        subject: str | None = None,
        actual: Any = None,
    ) -> AssertionResult:
        """Create a passing result."""
        return cls(
            status=AssertionStatus.PASSED,
            message=message,
            subject=subject,
            actual=actual,
        )

    @classmethod
    def failed_result(
        cls,
        message: str,
        subject: str | None = None,
        expected: Any = None,
        actual: Any = None,
        details: dict[str, Any] | None = None,
    ) -> AssertionResult:
        """Create a failing result."""
        return cls(
            status=AssertionStatus.FAILED,
            message=message,
            subject=subject,
            expected=expected,
            actual=actual,
            details=details or {},
        )

    @classmethod
    def error_result(
        cls,
        message: str,
        subject: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AssertionResult:
        """Create an error result (assertion couldn't be evaluated)."""
        return cls(
            status=AssertionStatus.ERROR,
            message=message,
            subject=subject,
            details=details or {},
        )

    @classmethod
    def compare(
        cls,
        actual: Any,
        expected: Any,
        what: str,
        subject: str | None = None,
    ) -> AssertionResult:
        """Build a pass/fail result from an equality check on `what`."""
        if actual == expected:
            return cls.passed_result(f"{what} matches", subject=subject, actual=actual)
        details = {}
        if actual is not None and type(expected) != type(actual):
            details["hint"] = (
                f"Type mismatch: expected {type(expected).__name__}, "
                f"got {type(actual).__name__}"
            )
        return cls.failed_result(
            f"{what} does not match",
            subject=subject,
            expected=expected,
            actual="<absent>" if actual is None else actual,
            details=details,
        )


def _format_value(value: Any, max_length: int = 100) -> str:
    """Format a value for display, truncating if too long."""
    if value is None:
        return "null"

    if isinstance(value, (list, dict)):
        try:
            formatted = json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            formatted = repr(value)
    else:
        formatted = repr(value)

    if len(formatted) > max_length:
        return formatted[: max_length - 3] + "..."

    return formatted
