"""
Weighted least squares through the Gauss-Jordan kernel.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.core.compute.linalg import transpose, multiply, inverse


def weighted_mean(a: NDArray[np.floating[Any]], w: NDArray[np.floating[Any]]) -> float:
    return float(np.sum(w * a) / np.sum(w))


def weighted_sd(a: NDArray[np.floating[Any]], w: NDArray[np.floating[Any]]) -> float:
    """Weighted standard deviation with (sum(w) - 1) in the denominator."""
    total = float(np.sum(w))
    if total <= 1.0:
        return float('nan')
    m = weighted_mean(a, w)
    return float(np.sqrt(np.sum(w * (a - m) ** 2) / (total - 1.0)))


def fit_wls(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Solve beta = (X'WX)^{-1} X'Wy.

    Returns:
        (beta, (X'WX)^{-1})

    Raises:
        SingularMatrixError: If X'WX is singular (collinear predictors)
    """
    XtW = transpose(X) * w
    xtwx_inv = inverse(multiply(XtW, X), name="X'WX")
    beta = multiply(xtwx_inv, multiply(XtW, y))
    return beta, xtwx_inv
