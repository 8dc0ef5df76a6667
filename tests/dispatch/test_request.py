"""
Tests for requests, option defaults and error values.
"""

import pytest

from pystatcore.core.defaults import AnalysisKind, REGRESSION_TABLES
from pystatcore.core.exceptions import (
    ValidationError,
    InsufficientDataError,
    DimensionError,
    SingularMatrixError,
    ConvergenceError,
)
from pystatcore.core.sample import Sample
from pystatcore.dispatch import (
    AnalysisRequest,
    AnalysisError,
    AnalysisOutput,
    ErrorKind,
    RegressionOptions,
    ArimaOptions,
    ChiSquareOptions,
    DecompositionOptions,
)


# ═══════════════════════════════════════════════════════════════════════
# Options
# ═══════════════════════════════════════════════════════════════════════


class TestOptions:

    def test_regression_defaults(self):
        opts = RegressionOptions()
        assert opts.confidence_level == 0.95
        assert opts.casewise_threshold == 3.0
        assert opts.tables == REGRESSION_TABLES
        assert opts.save == ()

    def test_explicit_values_kept(self):
        opts = RegressionOptions(confidence_level=0.9, tables=["anova"])
        assert opts.confidence_level == 0.9
        assert opts.tables == ("anova",)

    def test_arima_partial(self):
        opts = ArimaOptions(ar_order=2)
        assert opts.ar_order == 2
        assert opts.diff_order == 0
        assert opts.include_constant is True
        assert opts.min_observations == 20

    def test_decomposition_defaults(self):
        opts = DecompositionOptions(time_spec='ym')
        assert opts.method == 'additive'
        assert opts.trend == 'linear'
        assert opts.save_forecast is False

    def test_chi_square_expected_values_frozen(self):
        opts = ChiSquareOptions(expected_values=[1, 2])
        assert opts.expected_values == (1, 2)
        assert opts.expected_range == 'get_from_data'

    def test_options_immutable(self):
        opts = ArimaOptions()
        with pytest.raises(AttributeError):
            opts.ar_order = 3


# ═══════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════


class TestRequest:

    def test_kind_from_string(self):
        request = AnalysisRequest('arima')
        assert request.kind is AnalysisKind.ARIMA
        assert isinstance(request.options, ArimaOptions)

    def test_options_must_match_kind(self):
        with pytest.raises(ValidationError, match="requires ArimaOptions"):
            AnalysisRequest(AnalysisKind.ARIMA, options=RegressionOptions())

    def test_chi_square_variables_as_independents(self):
        a = Sample.of("a", [1, 2])
        request = AnalysisRequest.chi_square([a], descriptive=True)
        assert request.independents == (a,)
        assert request.options.descriptive is True

    def test_decomposition_constructor(self):
        s = Sample.of("s", [1, 2])
        request = AnalysisRequest.decomposition(s, 'yq', method='multiplicative')
        assert request.dependent is s
        assert request.options.time_spec == 'yq'
        assert request.options.method == 'multiplicative'

    def test_unknown_option(self):
        with pytest.raises(TypeError):
            AnalysisRequest.arima(None, seasonal=True)


# ═══════════════════════════════════════════════════════════════════════
# Error values
# ═══════════════════════════════════════════════════════════════════════


class TestAnalysisError:

    @pytest.mark.parametrize("exc,kind", [
        (InsufficientDataError("few"), ErrorKind.INSUFFICIENT_DATA),
        (ValidationError("bad"), ErrorKind.INVALID_PARAMETER),
        (DimensionError("shape"), ErrorKind.INVALID_PARAMETER),
        (SingularMatrixError("singular"), ErrorKind.SINGULAR_MATRIX),
        (ConvergenceError("stuck", iterations=5), ErrorKind.NON_CONVERGENCE),
    ])
    def test_engine_exceptions(self, exc, kind):
        error = AnalysisError.from_exception(exc)
        assert error.kind is kind
        assert error.message == str(exc)

    def test_unexpected_exception_is_internal(self):
        error = AnalysisError.from_exception(KeyError("boom"))
        assert error.kind is ErrorKind.INTERNAL
        assert error.message.startswith("Internal error: ")

    def test_to_dict(self):
        error = AnalysisError(ErrorKind.INSUFFICIENT_DATA, "No data")
        assert error.to_dict() == {'kind': 'InsufficientData', 'message': 'No data'}


class TestAnalysisOutput:

    def test_missing_table(self):
        output = AnalysisOutput(title="x", tables=[])
        with pytest.raises(KeyError):
            output.table("ANOVA")
        assert output.to_dict() == {'title': 'x', 'tables': [], 'series': {}, 'warnings': []}
