"""
Tests for Sample coercion of raw cells.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from pystatcore.core.exceptions import ValidationError
from pystatcore.core.sample import Sample


class TestNumeric:

    def test_numbers_and_numeric_strings(self):
        s = Sample.of("x", [1, "2", " 3.5 ", 4.0])
        assert_array_equal(s.numeric(), [1.0, 2.0, 3.5, 4.0])
        assert s.is_numeric

    def test_missing_cells_become_nan(self):
        s = Sample.of("x", [1, None, "", 4])
        values = s.numeric()
        assert np.isnan(values[1]) and np.isnan(values[2])
        assert s.is_numeric

    def test_text_is_not_numeric(self):
        s = Sample.of("x", [1, "abc", 3])
        assert not s.is_numeric
        assert np.isnan(s.numeric()[1])

    def test_declared_missing_markers(self):
        s = Sample.of("x", [1, 99, 3, "NA"], missing_values=(99, "NA"))
        values = s.numeric()
        assert np.isnan(values[1]) and np.isnan(values[3])
        assert s.is_numeric

    def test_empty(self):
        s = Sample.of("x", [])
        assert s.numeric().shape == (0,)
        assert len(s) == 0


class TestTrim:

    def test_trailing_missing_removed(self):
        s = Sample.of("x", [1, None, 2, None, ""]).trim_trailing_missing()
        assert len(s) == 3
        assert s.values[-1] == 2

    def test_no_trailing_missing_returns_self(self):
        s = Sample.of("x", [1, 2])
        assert s.trim_trailing_missing() is s


class TestConstruction:

    def test_display_name(self):
        assert Sample.of("sales", [1], label="Monthly sales").display_name == "sales (Monthly sales)"
        assert Sample.of("sales", [1]).display_name == "sales"

    def test_values_stored_as_tuple(self):
        assert isinstance(Sample.of("x", [1, 2]).values, tuple)

    def test_bad_measure(self):
        with pytest.raises(ValidationError, match="measure"):
            Sample.of("x", [1], measure="interval")

    def test_empty_name(self):
        with pytest.raises(ValidationError):
            Sample.of("", [1])
