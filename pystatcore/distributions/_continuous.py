"""
Student-t, chi-square, F and normal distribution functions.

All t and F probabilities are expressed through the regularized incomplete
beta, chi-square through the regularized incomplete gamma. Quantiles are
found with scipy.optimize.brentq on a bracket of the CDF.
"""

import logging
import math
from typing import Callable

from scipy import optimize

from pystatcore.core.exceptions import ConvergenceError, ValidationError
from pystatcore.core.validation import check_positive, check_probability
from pystatcore.core.compute.tolerances import QUANTILE_MAX_ITER, QUANTILE_XTOL
from pystatcore.distributions._special import (
    regularized_incomplete_beta,
    regularized_lower_gamma,
    regularized_upper_gamma,
)

logger = logging.getLogger(__name__)


def _clamp(p: float) -> float:
    return min(1.0, max(0.0, p))


def _check_statistic(x: float, name: str) -> float:
    x = float(x)
    if math.isnan(x):
        raise ValidationError(f"{name}: must not be NaN")
    return x


# ═══════════════════════════════════════════════════════════════════════
# Student-t
# ═══════════════════════════════════════════════════════════════════════

def student_t_two_sided_p(t: float, df: float) -> float:
    """P(|T| >= |t|) for T ~ t(df), as I_x(df/2, 1/2) with x = df/(df + t^2)."""
    t = _check_statistic(t, "t")
    check_positive(df, "df")
    if math.isinf(t):
        return 0.0
    x = df / (df + t * t)
    return regularized_incomplete_beta(x, 0.5 * df, 0.5)


def student_t_cdf(t: float, df: float) -> float:
    """
    Cumulative distribution function of Student's t.

    Raises:
        ValidationError: If df <= 0 or t is NaN
    """
    t = _check_statistic(t, "t")
    check_positive(df, "df")
    if t == 0.0:
        return 0.5
    tail = 0.5 * student_t_two_sided_p(t, df)
    return _clamp(1.0 - tail if t > 0 else tail)


def student_t_sf(t: float, df: float) -> float:
    """Upper tail P(T > t)."""
    return student_t_cdf(-_check_statistic(t, "t"), df)


# ═══════════════════════════════════════════════════════════════════════
# Chi-square
# ═══════════════════════════════════════════════════════════════════════

def chi_square_cdf(x: float, df: float) -> float:
    """
    Cumulative distribution function of chi-square: P(df/2, x/2).

    Raises:
        ValidationError: If df <= 0 or x is NaN
    """
    x = _check_statistic(x, "x")
    check_positive(df, "df")
    if x <= 0.0:
        return 0.0
    return regularized_lower_gamma(0.5 * df, 0.5 * x)


def chi_square_sf(x: float, df: float) -> float:
    """Upper tail P(X > x), computed as Q(df/2, x/2) without cancellation."""
    x = _check_statistic(x, "x")
    check_positive(df, "df")
    if x <= 0.0:
        return 1.0
    return regularized_upper_gamma(0.5 * df, 0.5 * x)


# ═══════════════════════════════════════════════════════════════════════
# F
# ═══════════════════════════════════════════════════════════════════════

def f_cdf(F: float, d1: float, d2: float) -> float:
    """
    Cumulative distribution function of F(d1, d2): I_x(d1/2, d2/2),
    x = d1 F / (d1 F + d2).
    """
    F = _check_statistic(F, "F")
    check_positive(d1, "d1")
    check_positive(d2, "d2")
    if F <= 0.0:
        return 0.0
    if math.isinf(F):
        return 1.0
    x = d1 * F / (d1 * F + d2)
    return regularized_incomplete_beta(x, 0.5 * d1, 0.5 * d2)


def f_sf(F: float, d1: float, d2: float) -> float:
    """
    p-value of an F statistic: 1 - I_x(d1/2, d2/2).

    Evaluated as I_{1-x}(d2/2, d1/2), the same quantity without the
    subtraction, so small p-values keep their digits.
    """
    F = _check_statistic(F, "F")
    check_positive(d1, "d1")
    check_positive(d2, "d2")
    if F <= 0.0:
        return 1.0
    if math.isinf(F):
        return 0.0
    y = d2 / (d1 * F + d2)
    return regularized_incomplete_beta(y, 0.5 * d2, 0.5 * d1)


# ═══════════════════════════════════════════════════════════════════════
# Normal
# ═══════════════════════════════════════════════════════════════════════

def normal_cdf(z: float) -> float:
    """Standard normal CDF via the complementary error function."""
    z = _check_statistic(z, "z")
    return _clamp(0.5 * math.erfc(-z / math.sqrt(2.0)))


# ═══════════════════════════════════════════════════════════════════════
# Quantiles
# ═══════════════════════════════════════════════════════════════════════

def _invert_cdf(
    cdf: Callable[[float], float],
    p: float,
    lower_bound: float | None,
    name: str,
) -> float:
    """
    Solve cdf(x) = p with Brent's method on a doubling bracket.

    Raises:
        ConvergenceError: If brentq does not reach QUANTILE_XTOL within
            QUANTILE_MAX_ITER iterations
    """
    if lower_bound is None:
        lo, hi = -1.0, 1.0
        while cdf(lo) > p:
            lo *= 2.0
        while cdf(hi) < p:
            hi *= 2.0
    else:
        lo, hi = lower_bound, 1.0
        while cdf(hi) < p:
            lo = hi
            hi *= 2.0

    root, info = optimize.brentq(
        lambda x: cdf(x) - p,
        lo,
        hi,
        xtol=QUANTILE_XTOL,
        maxiter=QUANTILE_MAX_ITER,
        full_output=True,
        disp=False,
    )
    if not info.converged:
        raise ConvergenceError(
            f"{name} quantile did not converge for p={p}",
            iterations=info.iterations,
            final_change=abs(cdf(root) - p),
            reason=info.flag,
            threshold=QUANTILE_XTOL,
        )
    logger.debug("%s quantile converged in %d iterations", name, info.iterations)
    return root


def student_t_quantile(p: float, df: float) -> float:
    """
    Inverse CDF of Student's t.

    Returns -inf at p = 0 and +inf at p = 1.

    Raises:
        ValidationError: If p is outside [0, 1] or df <= 0
        ConvergenceError: If root finding fails
    """
    check_probability(p, "p")
    check_positive(df, "df")
    if p == 0.0:
        return -math.inf
    if p == 1.0:
        return math.inf
    if p == 0.5:
        return 0.0
    # Solve in the upper half and reflect; the t distribution is symmetric
    upper = max(p, 1.0 - p)
    root = _invert_cdf(
        lambda t: student_t_cdf(t, df),
        upper,
        lower_bound=0.0,
        name="Student-t",
    )
    return root if p > 0.5 else -root


def chi_square_quantile(p: float, df: float) -> float:
    """Inverse CDF of chi-square; +inf at p = 1."""
    check_probability(p, "p")
    check_positive(df, "df")
    if p == 0.0:
        return 0.0
    if p == 1.0:
        return math.inf
    return _invert_cdf(
        lambda x: chi_square_cdf(x, df),
        p,
        lower_bound=0.0,
        name="Chi-square",
    )


def f_quantile(p: float, d1: float, d2: float) -> float:
    """Inverse CDF of F(d1, d2); +inf at p = 1."""
    check_probability(p, "p")
    check_positive(d1, "d1")
    check_positive(d2, "d2")
    if p == 0.0:
        return 0.0
    if p == 1.0:
        return math.inf
    return _invert_cdf(
        lambda x: f_cdf(x, d1, d2),
        p,
        lower_bound=0.0,
        name="F",
    )
