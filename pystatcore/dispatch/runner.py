"""
run_analysis: execute one AnalysisRequest synchronously.

This is the job boundary. Engine exceptions are converted to
AnalysisError values here and nothing is raised to the caller.
"""

import logging
from typing import Callable

from pystatcore.core.defaults import AnalysisKind
from pystatcore.core.protocols import DataSource
from pystatcore.core.exceptions import InsufficientDataError
from pystatcore.dispatch.errors import AnalysisError, ErrorKind
from pystatcore.dispatch.output import AnalysisOutput
from pystatcore.dispatch.request import AnalysisRequest
from pystatcore.regression.design import RegressionDesign
from pystatcore.regression.solvers import solve_design as solve_regression
from pystatcore.timeseries.design import DecompositionDesign, ArimaDesign
from pystatcore.timeseries.solvers import solve_decomposition, solve_arima
from pystatcore.categorical.design import ChiSquareDesign
from pystatcore.categorical.solvers import solve_design as solve_chi_square

logger = logging.getLogger(__name__)


def _series_samples(request: AnalysisRequest) -> list:
    return [] if request.dependent is None else [request.dependent]


def _log_design(design: DataSource) -> None:
    logger.debug("Validated design: %d observations, %s",
                 design.n_observations, design.metadata)


def _run_regression(request: AnalysisRequest) -> AnalysisOutput:
    opts = request.options
    if request.dependent is None:
        raise InsufficientDataError(
            "Please select a dependent variable.", required=1, actual=0
        )
    design = RegressionDesign.from_samples(
        request.dependent,
        request.independents,
        request.weights,
        confidence_level=opts.confidence_level,
    )
    _log_design(design)
    solution = solve_regression(design)
    return AnalysisOutput(
        title="Linear Regression",
        tables=solution.tables(opts.tables, opts.casewise_threshold),
        series=solution.series(opts.save),
        warnings=solution.warnings,
        timing=solution.timing,
    )


def _run_decomposition(request: AnalysisRequest) -> AnalysisOutput:
    opts = request.options
    design = DecompositionDesign.from_samples(
        _series_samples(request),
        opts.time_spec,
        method=opts.method,
        trend=opts.trend,
        start_period=opts.start_period,
        start_position=opts.start_position,
    )
    _log_design(design)
    solution = solve_decomposition(design)
    return AnalysisOutput(
        title="Classical Decomposition",
        tables=solution.tables(),
        series=solution.series(opts.save_forecast),
        warnings=solution.warnings,
        timing=solution.timing,
    )


def _run_arima(request: AnalysisRequest) -> AnalysisOutput:
    opts = request.options
    design = ArimaDesign.from_samples(
        _series_samples(request),
        ar_order=opts.ar_order,
        diff_order=opts.diff_order,
        ma_order=opts.ma_order,
        include_constant=opts.include_constant,
        forecast_horizon=opts.forecast_horizon,
        max_iter=opts.max_iter,
        min_observations=opts.min_observations,
        time_spec=opts.time_spec,
        start_period=opts.start_period,
        start_position=opts.start_position,
    )
    _log_design(design)
    solution = solve_arima(design)
    return AnalysisOutput(
        title="ARIMA",
        tables=solution.tables(opts.forecast),
        series=solution.series(opts.save_forecast),
        warnings=solution.warnings,
        timing=solution.timing,
    )


def _run_chi_square(request: AnalysisRequest) -> AnalysisOutput:
    opts = request.options
    design = ChiSquareDesign.from_samples(
        request.independents,
        expected_range=opts.expected_range,
        lower=opts.lower,
        upper=opts.upper,
        expected_values=opts.expected_values,
    )
    _log_design(design)
    solution = solve_chi_square(design)
    return AnalysisOutput(
        title="Chi-Square Test",
        tables=solution.tables(opts.descriptive, opts.quartiles),
        warnings=solution.warnings,
        timing=solution.timing,
    )


_RUNNERS: dict[AnalysisKind, Callable[[AnalysisRequest], AnalysisOutput]] = {
    AnalysisKind.REGRESSION_DIAGNOSTICS: _run_regression,
    AnalysisKind.DECOMPOSITION: _run_decomposition,
    AnalysisKind.ARIMA: _run_arima,
    AnalysisKind.CHI_SQUARE: _run_chi_square,
}


def run_analysis(request: AnalysisRequest) -> AnalysisOutput | AnalysisError:
    """
    Run one analysis to completion.

    Args:
        request: The analysis to run

    Returns:
        AnalysisOutput on success, AnalysisError on any failure
    """
    logger.debug("Running %s analysis", request.kind.value)
    try:
        output = _RUNNERS[request.kind](request)
    except Exception as exc:
        error = AnalysisError.from_exception(exc)
        if error.kind is ErrorKind.INTERNAL:
            logger.exception("Internal error in %s analysis", request.kind.value)
        else:
            logger.debug("%s analysis failed: %s", request.kind.value, error.message)
        return error
    logger.debug("Finished %s analysis with %d table(s)",
                 request.kind.value, len(output.tables))
    return output
