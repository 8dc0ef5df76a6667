"""
Probability distributions for PyStatCore.

Hand-written special functions and the t, chi-square and F distributions
built on them. All probabilities are clamped to [0, 1]; degrees of
freedom <= 0 raise ValidationError.

Public API:
    log_gamma(z)
    regularized_incomplete_beta(x, a, b)
    regularized_lower_gamma(s, x), regularized_upper_gamma(s, x)
    student_t_cdf / student_t_sf / student_t_two_sided_p / student_t_quantile
    chi_square_cdf / chi_square_sf / chi_square_quantile
    f_cdf / f_sf / f_quantile
    normal_cdf
    DistributionQuery, evaluate
"""

from pystatcore.distributions._special import (
    log_gamma,
    log_beta,
    betacf,
    regularized_incomplete_beta,
    regularized_lower_gamma,
    regularized_upper_gamma,
)
from pystatcore.distributions._continuous import (
    student_t_cdf,
    student_t_sf,
    student_t_two_sided_p,
    student_t_quantile,
    chi_square_cdf,
    chi_square_sf,
    chi_square_quantile,
    f_cdf,
    f_sf,
    f_quantile,
    normal_cdf,
)
from pystatcore.distributions.query import DistributionQuery, evaluate

__all__ = [
    "log_gamma",
    "log_beta",
    "betacf",
    "regularized_incomplete_beta",
    "regularized_lower_gamma",
    "regularized_upper_gamma",
    "student_t_cdf",
    "student_t_sf",
    "student_t_two_sided_p",
    "student_t_quantile",
    "chi_square_cdf",
    "chi_square_sf",
    "chi_square_quantile",
    "f_cdf",
    "f_sf",
    "f_quantile",
    "normal_cdf",
    "DistributionQuery",
    "evaluate",
]
