"""
ARIMA(p, d, q) by conditional sum of squares.

Model for the d-times differenced series z:

    z_t = c + phi_1 z_{t-1} + ... + phi_p z_{t-p}
              + e_t + theta_1 e_{t-1} + ... + theta_q e_{t-q}

Residuals are computed for t = p .. m-1 with pre-sample errors set to
zero, and their sum of squares is minimized with BFGS.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import minimize

from pystatcore.core.exceptions import ConvergenceError
from pystatcore.core.compute.linalg import least_squares, inverse, multiply, transpose

logger = logging.getLogger(__name__)

_PENALTY = 1e300


@dataclass(frozen=True)
class CssFit:
    """Raw optimizer output."""
    params: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    sse: float
    iterations: int
    message: str
    precision_warning: bool


def difference(y: NDArray[np.floating[Any]], d: int) -> NDArray[np.floating[Any]]:
    """Apply d rounds of first differencing."""
    z = y
    for _ in range(d):
        z = np.diff(z)
    return z


def split_params(
    params: NDArray[np.floating[Any]],
    p: int,
    q: int,
    include_constant: bool,
) -> tuple[float, NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """(constant, phi, theta) from the packed parameter vector."""
    offset = 1 if include_constant else 0
    c = float(params[0]) if include_constant else 0.0
    return c, params[offset:offset + p], params[offset + p:offset + p + q]


def css_residuals(
    params: NDArray[np.floating[Any]],
    z: NDArray[np.floating[Any]],
    p: int,
    q: int,
    include_constant: bool,
) -> NDArray[np.floating[Any]]:
    """Conditional residuals e_p .. e_{m-1}."""
    c, phi, theta = split_params(params, p, q, include_constant)
    m = z.size
    e = np.zeros(m)
    for t in range(p, m):
        value = z[t] - c
        for i in range(p):
            value -= phi[i] * z[t - 1 - i]
        for j in range(q):
            if t - 1 - j >= p:
                value -= theta[j] * e[t - 1 - j]
        e[t] = value
    return e[p:]


def _start_values(
    z: NDArray[np.floating[Any]],
    p: int,
    q: int,
    include_constant: bool,
) -> NDArray[np.floating[Any]]:
    """AR part from a least-squares autoregression, MA part zero."""
    k = p + q + (1 if include_constant else 0)
    start = np.zeros(k)
    if p == 0:
        if include_constant:
            start[0] = float(np.mean(z))
        return start
    m = z.size
    lags = np.column_stack([z[p - 1 - i:m - 1 - i] for i in range(p)])
    if include_constant:
        lags = np.column_stack([np.ones(m - p), lags])
    beta, _ = least_squares(lags, z[p:], name="AR start values")
    start[:beta.size] = beta
    return start


def fit_css(
    z: NDArray[np.floating[Any]],
    p: int,
    q: int,
    include_constant: bool,
    max_iter: int,
) -> CssFit:
    """
    Minimize the conditional sum of squares.

    Raises:
        ConvergenceError: If BFGS hits max_iter or fails for a reason other
            than lost precision at the optimum
    """
    k = p + q + (1 if include_constant else 0)
    if k == 0:
        residuals = css_residuals(np.zeros(0), z, p, q, include_constant)
        return CssFit(np.zeros(0), residuals, float(residuals @ residuals), 0,
                      "no parameters", False)

    def objective(theta: NDArray[np.floating[Any]]) -> float:
        with np.errstate(over='ignore', invalid='ignore'):
            e = css_residuals(theta, z, p, q, include_constant)
            sse = float(e @ e)
        return sse if math.isfinite(sse) else _PENALTY

    x0 = _start_values(z, p, q, include_constant)
    opt = minimize(
        objective,
        x0,
        method='BFGS',
        options={'maxiter': max_iter, 'gtol': 1e-6, 'disp': False},
    )

    # status 2: precision loss in the line search, usual at a flat optimum
    precision_warning = opt.status == 2
    if not opt.success and not precision_warning:
        raise ConvergenceError(
            f"ARIMA estimation did not converge: {opt.message}",
            iterations=int(opt.nit),
            final_change=float(np.max(np.abs(opt.jac))) if opt.jac is not None else None,
            reason='max_iterations' if opt.status == 1 else 'optimizer_failure',
            threshold=1e-6,
        )
    if not math.isfinite(float(opt.fun)) or opt.fun >= _PENALTY:
        raise ConvergenceError(
            "ARIMA estimation diverged: residuals are not finite",
            iterations=int(opt.nit),
            reason='divergence',
        )

    residuals = css_residuals(opt.x, z, p, q, include_constant)
    logger.debug("CSS fit: nit=%d, sse=%.6g, status=%d", opt.nit, opt.fun, opt.status)
    return CssFit(
        params=np.asarray(opt.x, dtype=np.float64),
        residuals=residuals,
        sse=float(residuals @ residuals),
        iterations=int(opt.nit),
        message=str(opt.message),
        precision_warning=precision_warning,
    )


def residual_jacobian(
    params: NDArray[np.floating[Any]],
    z: NDArray[np.floating[Any]],
    p: int,
    q: int,
    include_constant: bool,
) -> NDArray[np.floating[Any]]:
    """Central-difference Jacobian of the residual vector (m_eff x k)."""
    base = css_residuals(params, z, p, q, include_constant)
    J = np.empty((base.size, params.size))
    for j in range(params.size):
        h = 1e-6 * max(1.0, abs(float(params[j])))
        up = params.copy()
        down = params.copy()
        up[j] += h
        down[j] -= h
        J[:, j] = (
            css_residuals(up, z, p, q, include_constant)
            - css_residuals(down, z, p, q, include_constant)
        ) / (2.0 * h)
    return J


def parameter_covariance(
    params: NDArray[np.floating[Any]],
    z: NDArray[np.floating[Any]],
    p: int,
    q: int,
    include_constant: bool,
    sigma2: float,
) -> NDArray[np.floating[Any]]:
    """
    Gauss-Newton covariance sigma^2 (J'J)^{-1}.

    Raises:
        SingularMatrixError: If J'J is singular
    """
    if params.size == 0:
        return np.zeros((0, 0))
    J = residual_jacobian(params, z, p, q, include_constant)
    return sigma2 * inverse(multiply(transpose(J), J), name="J'J")


def one_step_predictions(
    y: NDArray[np.floating[Any]],
    residuals: NDArray[np.floating[Any]],
    d: int,
    p: int,
) -> NDArray[np.floating[Any]]:
    """
    In-sample one-step-ahead predictions on the original scale.

    The residual of differenced position t belongs to original position
    t + d, and y_hat = y - e there. Positions without a residual are NaN.
    """
    fitted = np.full(y.size, np.nan)
    first = d + p
    fitted[first:] = y[first:] - residuals
    return fitted


def forecast_ahead(
    y: NDArray[np.floating[Any]],
    z: NDArray[np.floating[Any]],
    residuals: NDArray[np.floating[Any]],
    params: NDArray[np.floating[Any]],
    p: int,
    d: int,
    q: int,
    include_constant: bool,
    horizon: int,
) -> NDArray[np.floating[Any]]:
    """
    Out-of-sample forecasts on the original scale.

    Future errors are zero; the differenced forecasts are integrated back
    d times starting from the last observed value of each level.
    """
    if horizon == 0:
        return np.zeros(0)
    c, phi, theta = split_params(params, p, q, include_constant)
    z_ext = list(z)
    e_ext = [0.0] * p + list(residuals)
    for _ in range(horizon):
        t = len(z_ext)
        value = c
        for i in range(p):
            value += phi[i] * z_ext[t - 1 - i]
        for j in range(q):
            if t - 1 - j >= 0:
                value += theta[j] * e_ext[t - 1 - j]
        z_ext.append(value)
        e_ext.append(0.0)
    future = np.asarray(z_ext[z.size:], dtype=np.float64)

    levels = [y]
    for _ in range(d):
        levels.append(np.diff(levels[-1]))
    for level in range(d - 1, -1, -1):
        future = levels[level][-1] + np.cumsum(future)
    return future
