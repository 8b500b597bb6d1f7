"""tests/test_values.py"""

from datetime import datetime, timedelta, timezone

import pytest

from nanotests.assertions import (
    assert_dates_equal,
    assert_in_set,
    assert_not_equal,
    dates_equal,
    in_set,
    not_equal,
)

BASE = datetime(2024, 1, 15, 10, 0, 0, 100000, tzinfo=timezone.utc)


class TestDatesEqual:
    """Tests for dates_equal()."""

    def test_sub_second_difference_passes(self):
        """Test dates within the same second are equal."""
        assert dates_equal(BASE, BASE + timedelta(milliseconds=200)).passed

    def test_seconds_difference_fails(self):
        """Test dates seconds apart differ."""
        result = dates_equal(BASE, BASE + timedelta(seconds=5))
        assert result.failed
        assert result.details["difference_s"] == -5

    def test_half_second_rounds_up(self):
        """Test a timestamp ending in .5 rounds to the next second."""
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert dates_equal(epoch + timedelta(seconds=10.5), epoch + timedelta(seconds=11)).passed
        assert dates_equal(epoch + timedelta(seconds=11.5), epoch + timedelta(seconds=12)).passed

    def test_helper(self):
        """Test the raising helper."""
        assert_dates_equal(BASE, BASE)
        with pytest.raises(AssertionError):
            assert_dates_equal(BASE, BASE + timedelta(minutes=1))


class TestNotEqual:
    """Tests for not_equal()."""

    def test_different_values_pass(self):
        """Test distinct values pass."""
        assert not_equal("a", "b").passed
        assert not_equal(1, 2).passed

    def test_same_values_fail(self):
        """Test equal values fail with a message naming the value."""
        result = not_equal("a", "a")
        assert result.failed
        assert result.message == "Actual value is the same as expected: 'a'"

    def test_float_tolerance(self):
        """Test floats closer than 1e-4 count as equal."""
        assert not_equal(1.0, 1.00001).failed
        assert not_equal(1.0, 1.001).passed

    def test_float_against_non_number(self):
        """Test a float compared with a string gives a result instead of raising."""
        assert not_equal(1.0, "x").passed
        assert not_equal(None, 0.5).passed

    def test_helper(self):
        """Test the raising helper."""
        assert_not_equal(1, 2)
        with pytest.raises(AssertionError, match="ids must differ"):
            assert_not_equal(3, 3, "ids must differ")


class TestInSet:
    """Tests for in_set()."""

    def test_subset_passes(self):
        """Test every element present passes."""
        assert in_set([1, 2, 3], [3, 1]).passed
        assert in_set(["a"], []).passed

    def test_missing_element_fails(self):
        """Test the first missing element is reported."""
        result = in_set([1, 2, 3], [1, 4, 5])
        assert result.failed
        assert result.message == "Element 4 is not found in superset"
        assert result.actual == 4

    def test_accepts_iterables(self):
        """Test generators work as superset."""
        assert in_set((x for x in "abc"), "cab").passed

    def test_helper(self):
        """Test the raising helper."""
        assert_in_set({"x", "y"}, ["x"])
        with pytest.raises(AssertionError):
            assert_in_set({"x"}, ["z"])
