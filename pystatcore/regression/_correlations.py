"""
Coefficient covariance/correlation and zero-order, partial and part
correlations of each predictor with the dependent variable.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.core.compute.linalg import least_squares
from pystatcore.regression._ols import weighted_mean


@dataclass(frozen=True)
class PredictorCorrelations:
    """Per-predictor correlations with the dependent variable (k,)."""
    zero_order: NDArray[np.floating[Any]]
    partial: NDArray[np.floating[Any]]
    part: NDArray[np.floating[Any]]


def weighted_corr(
    a: NDArray[np.floating[Any]],
    b: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
) -> float:
    """Weighted Pearson correlation; NaN when either series is constant."""
    da = a - weighted_mean(a, w)
    db = b - weighted_mean(b, w)
    denom = float(np.sqrt(np.sum(w * da * da) * np.sum(w * db * db)))
    if denom == 0.0:
        return float('nan')
    return float(np.clip(np.sum(w * da * db) / denom, -1.0, 1.0))


def coefficient_covariance(
    xtwx_inv: NDArray[np.floating[Any]],
    sigma2: float,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Covariance sigma^2 (X'WX)^{-1} and the matching correlation matrix.

    Off-diagonal correlations are cov_ij / sqrt(var_i var_j); the
    diagonal is fixed at 1. A zero variance (exact fit) leaves NaN
    off-diagonal correlations.
    """
    cov = sigma2 * xtwx_inv
    var = np.diag(cov)
    with np.errstate(divide='ignore', invalid='ignore'):
        cor = cov / np.sqrt(np.outer(var, var))
    np.fill_diagonal(cor, 1.0)
    return cov, cor


def predictor_correlations(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
) -> PredictorCorrelations:
    """
    For each predictor x_i with the remaining predictors Z (plus the
    intercept): zero-order = corr(y, x_i), partial = corr(resid(y|Z),
    resid(x_i|Z)), part = corr(y, resid(x_i|Z)).
    """
    k = X.shape[1] - 1
    zero_order = np.empty(k)
    partial = np.empty(k)
    part = np.empty(k)
    for i in range(k):
        x_i = X[:, i + 1]
        Z = np.delete(X, i + 1, axis=1)
        _, resid_y = least_squares(Z, y, w)
        _, resid_x = least_squares(Z, x_i, w)
        zero_order[i] = weighted_corr(y, x_i, w)
        partial[i] = weighted_corr(resid_y, resid_x, w)
        part[i] = weighted_corr(y, resid_x, w)
    return PredictorCorrelations(zero_order=zero_order, partial=partial, part=part)
