"""
Parameter payloads for the time-series engine.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.timeseries._decomposition import TrendFit


@dataclass(frozen=True)
class DecompositionParams:
    """
    Components of a classical decomposition, each aligned with the series.

    Attributes:
        seasonal_indices: One index per position in the cycle
        trend_fit: Fitted trend (multiplicative only)
        evaluation: ME, MSE, RMSE, MAE, MPE, MAPE of forecast vs. actual
    """
    centered_moving_average: NDArray[np.floating[Any]]
    seasonal_indices: NDArray[np.floating[Any]]
    seasonal: NDArray[np.floating[Any]]
    deseasonalized: NDArray[np.floating[Any]]
    trend: NDArray[np.floating[Any]]
    irregular: NDArray[np.floating[Any]]
    forecast: NDArray[np.floating[Any]]
    trend_fit: TrendFit | None
    evaluation: dict[str, float]


@dataclass(frozen=True)
class ArimaParams:
    """
    Fitted ARIMA model.

    Coefficient arrays follow the order Constant, AR(1..p), MA(1..q).
    Criteria are computed on the differenced series over the m effective
    observations that have a residual.
    """
    names: tuple[str, ...]
    coefficients: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]]
    t_values: NDArray[np.floating[Any]]
    p_values: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    n_effective: int
    df_residual: int
    criteria: dict[str, float]
    fitted: NDArray[np.floating[Any]]
    forecast: NDArray[np.floating[Any]]
    evaluation: dict[str, float]
