"""
Tests for the time-series validation gate: order of checks and the exact
messages shown to users.
"""

import numpy as np
import pytest

from pystatcore.core.exceptions import InsufficientDataError, ValidationError
from pystatcore.core.sample import Sample
from pystatcore.timeseries import DecompositionDesign, ArimaDesign, TimeSpec


def _sample(values, name="sales"):
    return Sample.of(name, values)


# ═══════════════════════════════════════════════════════════════════════
# Decomposition gate
# ═══════════════════════════════════════════════════════════════════════


class TestDecompositionGate:

    def test_no_variable(self):
        with pytest.raises(ValidationError, match="^Please select at least one used variable.$"):
            DecompositionDesign.from_samples([], 'ym')

    def test_not_numeric(self):
        with pytest.raises(InsufficientDataError, match="^Selected variable is not numeric$"):
            DecompositionDesign.from_samples([_sample([1, "abc", 3])], 'ym')

    def test_no_data(self):
        with pytest.raises(InsufficientDataError,
                           match="^No data available for the selected variables.$"):
            DecompositionDesign.from_samples([_sample([None, None, ""])], 'ym')

    @pytest.mark.parametrize("spec", [None, 'nd', TimeSpec.ND])
    def test_not_dated(self, spec):
        with pytest.raises(ValidationError, match="^Time specification is not dated.$"):
            DecompositionDesign.from_samples([_sample(range(1, 49))], spec)

    def test_no_periodicity(self):
        with pytest.raises(ValidationError,
                           match="^Please the selected time specification don't have periodicity.$"):
            DecompositionDesign.from_samples([_sample(range(1, 49))], 'y')

    def test_less_than_four_cycles(self):
        with pytest.raises(InsufficientDataError,
                           match="^Data length is less than 4 times the periodicity$") as info:
            DecompositionDesign.from_samples([_sample(range(1, 26))], 'ym')
        assert info.value.required == 48
        assert info.value.actual == 25

    def test_not_a_multiple(self):
        with pytest.raises(InsufficientDataError,
                           match="^Data length is not a multiple of the periodicity$"):
            DecompositionDesign.from_samples([_sample(range(1, 50))], 'wwd5')

    def test_first_failure_wins(self):
        # non-numeric and undated: the numeric check comes first
        with pytest.raises(InsufficientDataError, match="not numeric"):
            DecompositionDesign.from_samples([_sample(["x"] * 10)], None)

    def test_trailing_empty_rows_trimmed(self):
        values = list(range(1, 49)) + [None, "", None]
        design = DecompositionDesign.from_samples([_sample(values)], 'ym')
        assert design.n == 48
        assert design.period == 12

    def test_only_first_variable_used(self):
        design = DecompositionDesign.from_samples(
            [_sample(range(1, 17), "a"), _sample(["x"], "b")], 'yq')
        assert design.name == "a"

    def test_unknown_method(self):
        with pytest.raises(ValidationError, match="method"):
            DecompositionDesign.build(np.arange(1.0, 17.0), 'yq', method='stl')

    def test_multiplicative_needs_positive(self):
        y = np.arange(16.0) - 3.0
        with pytest.raises(ValidationError, match="positive"):
            DecompositionDesign.build(y, 'yq', method='multiplicative')

    def test_unknown_time_spec(self):
        with pytest.raises(ValidationError, match="time_spec"):
            DecompositionDesign.build(np.arange(1.0, 17.0), 'fortnight')


# ═══════════════════════════════════════════════════════════════════════
# ARIMA gate
# ═══════════════════════════════════════════════════════════════════════


class TestArimaGate:

    @pytest.mark.parametrize("kwargs,message", [
        ({'ar_order': 6}, "^AR order must be between 0 and 5$"),
        ({'ar_order': -1}, "^AR order must be between 0 and 5$"),
        ({'diff_order': 3}, "^Differencing order must be between 0 and 2$"),
        ({'ma_order': 6}, "^MA order must be between 0 and 5$"),
    ])
    def test_order_ranges(self, kwargs, message):
        with pytest.raises(ValidationError, match=message):
            ArimaDesign.build(np.arange(30.0), **kwargs)

    def test_too_short(self):
        with pytest.raises(InsufficientDataError,
                           match="^Data length is less than 20 observations.$"):
            ArimaDesign.build(np.arange(19.0))

    def test_twenty_is_enough(self):
        assert ArimaDesign.build(np.arange(20.0)).n == 20

    def test_trailing_missing_not_counted(self):
        with pytest.raises(InsufficientDataError, match="less than 20"):
            ArimaDesign.build(list(range(19)) + [None, None])

    def test_no_data(self):
        with pytest.raises(InsufficientDataError, match="No data available"):
            ArimaDesign.from_samples([_sample([None, None])])

    def test_no_variable(self):
        with pytest.raises(ValidationError, match="Please select at least one used variable."):
            ArimaDesign.from_samples([])

    def test_parameter_count(self):
        design = ArimaDesign.build(np.arange(30.0), ar_order=2, ma_order=1)
        assert design.n_parameters == 4
        assert design.order == (2, 0, 1)
