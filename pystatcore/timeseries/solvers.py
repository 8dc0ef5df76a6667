"""
Solver dispatch for the time-series engine.

Public functions decompose() and arima(), plus solve_* variants taking an
already-built design.
"""

from typing import Any, Sequence
from numpy.typing import ArrayLike

from pystatcore.core.sample import Sample
from pystatcore.timeseries.design import DecompositionDesign, ArimaDesign
from pystatcore.timeseries.solution import DecompositionSolution, ArimaSolution
from pystatcore.timeseries.backends.cpu import (
    CPUClassicalDecompositionBackend,
    CPUCssArimaBackend,
)
from pystatcore.timeseries._timespec import TimeSpec


def decompose(
    y: ArrayLike | Sample | Sequence[Sample],
    time_spec: TimeSpec | str | None,
    *,
    method: str = 'additive',
    trend: str = 'linear',
    name: str = "series",
    start_period: int = 1,
    start_position: int = 1,
) -> DecompositionSolution:
    """
    Classical decomposition of a seasonal series.

    Args:
        y: Series values (NaN/None as missing) or Sample(s); the first
            sample is decomposed
        time_spec: Dating scheme giving the seasonal period (e.g. 'ym' = 12)
        method: 'additive' or 'multiplicative'
        trend: 'linear' or 'exponential' (multiplicative only)
        name: Series name when y is an array

    Raises:
        ValidationError / InsufficientDataError: From the validation gate

    Example:
        >>> sol = decompose(sales, 'yq', method='multiplicative')
        >>> sol.seasonal_indices
    """
    design = DecompositionDesign.build(
        y, time_spec,
        name=name,
        method=method,
        trend=trend,
        start_period=start_period,
        start_position=start_position,
    )
    return solve_decomposition(design)


def solve_decomposition(design: DecompositionDesign) -> DecompositionSolution:
    result = CPUClassicalDecompositionBackend().solve(design)
    return DecompositionSolution(_result=result, _design=design)


def arima(
    y: ArrayLike | Sample | Sequence[Sample],
    *,
    ar: int = 0,
    i: int = 0,
    ma: int = 0,
    include_constant: bool = True,
    forecast_horizon: int = 0,
    name: str = "series",
    **kwargs: Any,
) -> ArimaSolution:
    """
    Fit ARIMA(ar, i, ma) by conditional sum of squares.

    Args:
        y: Series values or Sample(s); at least 20 observations
        ar: AR order, 0..5
        i: Differencing order, 0..2
        ma: MA order, 0..5
        include_constant: Estimate a constant term
        forecast_horizon: Out-of-sample steps appended to the forecast

    Raises:
        ValidationError: Orders out of range
        InsufficientDataError: Fewer than 20 observations
        ConvergenceError: If the optimizer fails

    Example:
        >>> sol = arima(series, ar=1, i=1, ma=1, forecast_horizon=4)
        >>> sol.criteria['Akaike Info Criterion']
    """
    design = ArimaDesign.build(
        y,
        name=name,
        ar_order=ar,
        diff_order=i,
        ma_order=ma,
        include_constant=include_constant,
        forecast_horizon=forecast_horizon,
        **kwargs,
    )
    return solve_arima(design)


def solve_arima(design: ArimaDesign) -> ArimaSolution:
    result = CPUCssArimaBackend().solve(design)
    return ArimaSolution(_result=result, _design=design)
