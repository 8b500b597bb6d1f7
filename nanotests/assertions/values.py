"""
General value assertions missing from plain `assert`.
"""

from __future__ import annotations

import math
import numbers
from datetime import datetime
from typing import Any, Iterable

from .models import AssertionResult

FLOAT_TOLERANCE = 0.0001


def _round_half_up(seconds: float) -> int:
    return math.floor(seconds + 0.5)


def dates_equal(actual: datetime, expected: datetime) -> AssertionResult:
    """Assert that two datetimes are equal with one second precision."""
    actual_s = _round_half_up(actual.timestamp())
    expected_s = _round_half_up(expected.timestamp())
    if actual_s == expected_s:
        return AssertionResult.passed_result("Dates are equal", actual=actual.isoformat())
    return AssertionResult.failed_result(
        "Dates differ",
        expected=expected.isoformat(),
        actual=actual.isoformat(),
        details={"difference_s": actual_s - expected_s},
    )


def not_equal(actual: Any, unexpected: Any) -> AssertionResult:
    """Assert that two values differ; floats closer than 1e-4 count as equal."""
    if _is_real(actual) and _is_real(unexpected) and (
        isinstance(actual, float) or isinstance(unexpected, float)
    ):
        same = abs(actual - unexpected) < FLOAT_TOLERANCE
    else:
        same = actual == unexpected

    if not same:
        return AssertionResult.passed_result("Values differ", actual=actual)
    return AssertionResult.failed_result(
        f"Actual value is the same as expected: {unexpected!r}",
        expected=f"anything but {unexpected!r}",
        actual=actual,
    )


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def in_set(superset: Iterable[Any], subset: Iterable[Any]) -> AssertionResult:
    """Assert that every element of subset occurs in superset."""
    pool = list(superset)
    for element in subset:
        if element not in pool:
            return AssertionResult.failed_result(
                f"Element {element!r} is not found in superset",
                expected=pool,
                actual=element,
            )
    return AssertionResult.passed_result("All elements found in superset")


def assert_dates_equal(actual: datetime, expected: datetime, message: str | None = None) -> None:
    dates_equal(actual, expected).raise_for_status(message)


def assert_not_equal(actual: Any, unexpected: Any, message: str | None = None) -> None:
    not_equal(actual, unexpected).raise_for_status(message)


def assert_in_set(superset: Iterable[Any], subset: Iterable[Any], message: str | None = None) -> None:
    in_set(superset, subset).raise_for_status(message)
