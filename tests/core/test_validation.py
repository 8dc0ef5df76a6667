"""
Tests for input validators.
"""

import numpy as np
import pytest

from pystatcore.core.exceptions import DimensionError, ValidationError
from pystatcore.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_2d,
    check_square,
    check_consistent_length,
    check_positive,
    check_probability,
    check_int_range,
)


class TestCheckArray:

    def test_converts_ints_to_float64(self):
        result = check_array([1, 2, 3], "x")
        assert result.dtype == np.float64

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="x:"):
            check_array(["a", "b"], "x")

    def test_rejects_ragged(self):
        with pytest.raises(ValidationError):
            check_array([[1, 2], [3]], "x")


class TestShapes:

    def test_check_finite(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan]), "x")

    def test_check_1d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((2, 2)), "x")

    def test_check_2d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros(3), "X")

    def test_check_square(self):
        check_square(np.eye(3), "M")
        with pytest.raises(DimensionError, match="square"):
            check_square(np.zeros((2, 3)), "M")

    def test_consistent_length(self):
        check_consistent_length(np.zeros(3), np.zeros((3, 2)), names=("a", "b"))
        with pytest.raises(DimensionError, match="a=3, b=4"):
            check_consistent_length(np.zeros(3), np.zeros(4), names=("a", "b"))

    def test_consistent_length_name_count(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(3), names=("a", "b"))


class TestScalars:

    @pytest.mark.parametrize("value", [0, -1, np.inf, np.nan])
    def test_check_positive_rejects(self, value):
        with pytest.raises(ValidationError, match="df"):
            check_positive(value, "df")

    def test_check_probability(self):
        check_probability(0.0, "p")
        check_probability(1.0, "p")
        with pytest.raises(ValidationError):
            check_probability(1.5, "p")

    def test_int_range_uses_given_message(self):
        with pytest.raises(ValidationError, match="^AR order must be between 0 and 5$"):
            check_int_range(6, 0, 5, "AR order must be between 0 and 5")

    def test_int_range_rejects_float_and_bool(self):
        with pytest.raises(ValidationError):
            check_int_range(1.5, 0, 5, "bad")
        with pytest.raises(ValidationError):
            check_int_range(True, 0, 5, "bad")

    def test_int_range_accepts_bounds(self):
        check_int_range(0, 0, 2, "bad")
        check_int_range(np.int64(2), 0, 2, "bad")
