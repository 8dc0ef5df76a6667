"""
Time-series decomposition and forecasting.

Public API:
    decompose(y, time_spec, method=..., trend=...) -> DecompositionSolution
    arima(y, ar=..., i=..., ma=...) -> ArimaSolution
    solve_decomposition(design), solve_arima(design)
    DecompositionDesign, ArimaDesign
    TimeSpec, periodicity, generate_dates
"""

from pystatcore.timeseries._timespec import TimeSpec, periodicity, generate_dates
from pystatcore.timeseries.design import DecompositionDesign, ArimaDesign
from pystatcore.timeseries.solution import DecompositionSolution, ArimaSolution
from pystatcore.timeseries.solvers import (
    decompose,
    arima,
    solve_decomposition,
    solve_arima,
)

__all__ = [
    "decompose",
    "arima",
    "solve_decomposition",
    "solve_arima",
    "DecompositionDesign",
    "ArimaDesign",
    "DecompositionSolution",
    "ArimaSolution",
    "TimeSpec",
    "periodicity",
    "generate_dates",
]
