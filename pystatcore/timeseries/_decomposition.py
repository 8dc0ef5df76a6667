"""
Classical decomposition.

    additive:        y = T + S + I, T is the centered moving average
    multiplicative:  y = T * S * I, T is a linear or exponential fit to
                     the deseasonalized series

Seasonal indices are averaged per position in the cycle over every cycle
where the centered moving average exists, then normalized (mean 0 for
additive, mean 1 for multiplicative).
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.core.exceptions import ValidationError
from pystatcore.core.compute.linalg import least_squares


@dataclass(frozen=True)
class TrendFit:
    """T(t) = a + b t (linear) or a * b^t (exponential), t = 1..n."""
    method: str
    a: float
    b: float

    def evaluate(self, t: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        if self.method == 'linear':
            return self.a + self.b * t
        return self.a * np.power(self.b, t)

    def equation(self, decimals: int = 3) -> str:
        if self.method == 'linear':
            sign = '-' if self.b < 0 else '+'
            return f"Tt = {self.a:.{decimals}f} {sign} {abs(self.b):.{decimals}f}t"
        return f"Tt = {self.a:.{decimals}f} * {self.b:.{decimals}f}^t"


def centered_moving_average(
    y: NDArray[np.floating[Any]],
    period: int,
) -> NDArray[np.floating[Any]]:
    """
    Centered moving average of order `period`.

    Even periods use the 2 x MA (half weights on both ends). The first
    and last period // 2 positions are NaN.
    """
    n = y.size
    half = period // 2
    cma = np.full(n, np.nan)
    if period % 2 == 1:
        weights = np.ones(period) / period
    else:
        weights = np.ones(period + 1)
        weights[0] = weights[-1] = 0.5
        weights /= period
    for t in range(half, n - half):
        cma[t] = float(np.dot(weights, y[t - half:t + half + 1]))
    return cma


def seasonal_indices(
    y: NDArray[np.floating[Any]],
    cma: NDArray[np.floating[Any]],
    period: int,
    method: str,
) -> NDArray[np.floating[Any]]:
    """Normalized seasonal index for each position 0..period-1 in the cycle."""
    positions = np.arange(y.size) % period
    if method == 'multiplicative':
        with np.errstate(divide='ignore', invalid='ignore'):
            detrended = y / cma
    else:
        detrended = y - cma
    raw = np.array([
        np.nanmean(detrended[(positions == j) & np.isfinite(detrended)])
        for j in range(period)
    ])
    if method == 'multiplicative':
        return raw / np.mean(raw)
    return raw - np.mean(raw)


def fit_trend(
    series: NDArray[np.floating[Any]],
    method: str,
) -> TrendFit:
    """
    Least-squares trend over t = 1..n.

    Raises:
        ValidationError: If an exponential trend meets a non-positive value
    """
    n = series.size
    t = np.arange(1, n + 1, dtype=np.float64)
    T = np.column_stack([np.ones(n), t])
    if method == 'linear':
        beta, _ = least_squares(T, series)
        return TrendFit('linear', float(beta[0]), float(beta[1]))
    if np.any(series <= 0):
        raise ValidationError(
            "Exponential trend requires a positive deseasonalized series"
        )
    beta, _ = least_squares(T, np.log(series))
    return TrendFit('exponential', float(np.exp(beta[0])), float(np.exp(beta[1])))


@dataclass(frozen=True)
class Components:
    cma: NDArray[np.floating[Any]]
    indices: NDArray[np.floating[Any]]
    seasonal: NDArray[np.floating[Any]]
    deseasonalized: NDArray[np.floating[Any]]
    trend: NDArray[np.floating[Any]]
    irregular: NDArray[np.floating[Any]]
    forecast: NDArray[np.floating[Any]]
    trend_fit: TrendFit | None


def decompose_series(
    y: NDArray[np.floating[Any]],
    period: int,
    method: str,
    trend_method: str,
) -> Components:
    """Split y into trend, seasonal and irregular components."""
    n = y.size
    cma = centered_moving_average(y, period)
    indices = seasonal_indices(y, cma, period, method)
    seasonal = indices[np.arange(n) % period]

    if method == 'multiplicative':
        deseasonalized = y / seasonal
        trend_fit = fit_trend(deseasonalized, trend_method)
        trend = trend_fit.evaluate(np.arange(1, n + 1, dtype=np.float64))
        forecast = trend * seasonal
        with np.errstate(divide='ignore', invalid='ignore'):
            irregular = y / forecast
    else:
        deseasonalized = y - seasonal
        trend_fit = None
        trend = cma
        forecast = trend + seasonal
        irregular = y - trend - seasonal

    return Components(
        cma=cma,
        indices=indices,
        seasonal=seasonal,
        deseasonalized=deseasonalized,
        trend=trend,
        irregular=irregular,
        forecast=forecast,
        trend_fit=trend_fit,
    )
