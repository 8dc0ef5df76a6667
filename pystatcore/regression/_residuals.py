"""
Case-level diagnostics: leverage, five residual types, influence measures
and prediction intervals.

With case weights every quantity is computed on the weighted scale:
leverage h_i = w_i x_i (X'WX)^{-1} x_i', and residuals are scaled by
sqrt(w_i) before standardizing. Unit weights reproduce ordinary least
squares exactly.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.core.exceptions import SingularMatrixError
from pystatcore.core.compute.tolerances import LEVERAGE_TOLERANCE
from pystatcore.distributions import student_t_quantile
from pystatcore.regression._ols import weighted_mean, weighted_sd


@dataclass(frozen=True)
class CaseDiagnostics:
    """Per-case series, aligned with the retained cases of the design."""
    predicted: NDArray[np.floating[Any]]
    standardized_predicted: NDArray[np.floating[Any]]
    se_mean_prediction: NDArray[np.floating[Any]]
    residual: NDArray[np.floating[Any]]
    standardized_residual: NDArray[np.floating[Any]]
    studentized_residual: NDArray[np.floating[Any]]
    deleted_residual: NDArray[np.floating[Any]]
    studentized_deleted_residual: NDArray[np.floating[Any]]
    leverage: NDArray[np.floating[Any]]
    centered_leverage: NDArray[np.floating[Any]]
    cooks_distance: NDArray[np.floating[Any]]
    mahalanobis_distance: NDArray[np.floating[Any]]
    mean_ci_lower: NDArray[np.floating[Any]]
    mean_ci_upper: NDArray[np.floating[Any]]
    individual_ci_lower: NDArray[np.floating[Any]]
    individual_ci_upper: NDArray[np.floating[Any]]
    exact_fit: bool


def hat_diagonal(
    X: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
    xtwx_inv: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """Leverage h_i = w_i x_i (X'WX)^{-1} x_i'."""
    return w * np.einsum('ij,jk,ik->i', X, xtwx_inv, X)


def is_exact_fit(sse: float, y: NDArray[np.floating[Any]], w: NDArray[np.floating[Any]]) -> bool:
    """SSE indistinguishable from zero relative to the size of the response."""
    scale = max(1.0, float(np.linalg.norm(np.sqrt(w) * y)))
    return float(np.sqrt(max(sse, 0.0))) <= LEVERAGE_TOLERANCE * scale


def case_diagnostics(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
    fitted: NDArray[np.floating[Any]],
    xtwx_inv: NDArray[np.floating[Any]],
    sse: float,
    conf_level: float,
) -> CaseDiagnostics:
    """
    Compute all case-level diagnostics from a fitted model.

    Args:
        X: Design matrix with intercept (C x p*)
        y: Response (C,)
        w: Case weights (C,)
        fitted: X beta
        xtwx_inv: (X'WX)^{-1}
        sse: Weighted residual sum of squares
        conf_level: Level for the mean and individual prediction intervals

    Raises:
        SingularMatrixError: If some case has leverage 1 (1 - h <= 1e-10),
            the residual degrees of freedom do not exceed 1, or a
            studentized deleted residual would divide by zero
    """
    n, p_star = X.shape
    df = n - p_star
    e = y - fitted
    root_w = np.sqrt(w)

    h = hat_diagonal(X, w, xtwx_inv)
    one_minus_h = 1.0 - h
    degenerate = np.flatnonzero(one_minus_h <= LEVERAGE_TOLERANCE)
    if degenerate.size:
        case = int(degenerate[0]) + 1
        raise SingularMatrixError(
            f"Leverage of case {case} equals 1; deleted and studentized "
            f"residuals are undefined",
            matrix_name="hat matrix",
            pivot_index=case - 1,
            pivot_value=float(one_minus_h[degenerate[0]]),
        )

    exact = is_exact_fit(sse, y, w)
    s = 0.0 if exact else float(np.sqrt(sse / df))

    deleted = e / one_minus_h
    if exact:
        zeros = np.zeros(n)
        standardized = zeros
        studentized = zeros.copy()
        studentized_deleted = zeros.copy()
        cooks = zeros.copy()
    else:
        standardized = root_w * e / s
        studentized = standardized / np.sqrt(one_minus_h)
        if df <= 1:
            raise SingularMatrixError(
                f"Too few cases for studentized deleted residuals: residual "
                f"degrees of freedom must exceed 1, got {df}",
                matrix_name="deleted-case variance",
            )
        denominator = df - studentized ** 2
        bad = np.flatnonzero(denominator <= LEVERAGE_TOLERANCE * df)
        if bad.size:
            case = int(bad[0]) + 1
            raise SingularMatrixError(
                f"Studentized deleted residual of case {case} is undefined "
                f"(residual degrees of freedom {df})",
                matrix_name="deleted-case variance",
                pivot_index=case - 1,
                pivot_value=float(denominator[bad[0]]),
            )
        studentized_deleted = studentized * np.sqrt((df - 1) / denominator)
        cooks = studentized ** 2 * h / (p_star * one_minus_h)

    centered = h - 1.0 / n
    mahalanobis = (n - 1) * centered

    mean_fit = weighted_mean(fitted, w)
    sd_fit = weighted_sd(fitted, w)
    if np.isfinite(sd_fit) and sd_fit > 0:
        standardized_predicted = (fitted - mean_fit) / sd_fit
    else:
        standardized_predicted = np.full(n, np.nan)

    se_mean = s * np.sqrt(h / w)
    se_individual = s * np.sqrt((1.0 + h) / w)
    t_crit = student_t_quantile(1.0 - (1.0 - conf_level) / 2.0, df)

    return CaseDiagnostics(
        predicted=fitted,
        standardized_predicted=standardized_predicted,
        se_mean_prediction=se_mean,
        residual=e,
        standardized_residual=standardized,
        studentized_residual=studentized,
        deleted_residual=deleted,
        studentized_deleted_residual=studentized_deleted,
        leverage=h,
        centered_leverage=centered,
        cooks_distance=cooks,
        mahalanobis_distance=mahalanobis,
        mean_ci_lower=fitted - t_crit * se_mean,
        mean_ci_upper=fitted + t_crit * se_mean,
        individual_ci_lower=fitted - t_crit * se_individual,
        individual_ci_upper=fitted + t_crit * se_individual,
        exact_fit=exact,
    )
