"""
DistributionQuery: a stateless request to evaluate t, chi-square or F.
"""

from dataclasses import dataclass
from typing import Literal

from pystatcore.core.exceptions import ValidationError
from pystatcore.core.validation import check_positive
from pystatcore.distributions._continuous import (
    student_t_cdf,
    student_t_sf,
    student_t_quantile,
    chi_square_cdf,
    chi_square_sf,
    chi_square_quantile,
    f_cdf,
    f_sf,
    f_quantile,
)

DistributionName = Literal['t', 'chisq', 'f']
QueryKind = Literal['cdf', 'sf', 'quantile']


@dataclass(frozen=True)
class DistributionQuery:
    """
    Evaluate a named distribution at a statistic value.

    For kind='quantile' the statistic is the probability p.

    Attributes:
        distribution: 't', 'chisq' or 'f'
        statistic: Value (or probability, for quantiles)
        df1: Degrees of freedom (numerator df for F)
        df2: Denominator degrees of freedom, F only
        kind: 'cdf', 'sf' or 'quantile'

    Raises:
        ValidationError: On unknown names, df <= 0, or df2 given/missing
            inconsistently with the distribution
    """
    distribution: DistributionName
    statistic: float
    df1: float
    df2: float | None = None
    kind: QueryKind = 'cdf'

    def __post_init__(self):
        if self.distribution not in ('t', 'chisq', 'f'):
            raise ValidationError(
                f"distribution: must be 't', 'chisq' or 'f', got {self.distribution!r}"
            )
        if self.kind not in ('cdf', 'sf', 'quantile'):
            raise ValidationError(
                f"kind: must be 'cdf', 'sf' or 'quantile', got {self.kind!r}"
            )
        check_positive(self.df1, "df1")
        if self.distribution == 'f':
            if self.df2 is None:
                raise ValidationError("df2: required for the F distribution")
            check_positive(self.df2, "df2")
        elif self.df2 is not None:
            raise ValidationError(
                f"df2: only used by the F distribution, got {self.df2} for {self.distribution!r}"
            )


def evaluate(query: DistributionQuery) -> float:
    """
    Evaluate a DistributionQuery.

    Example:
        >>> p_value = evaluate(DistributionQuery("f", 4.2, 2, 17, kind="sf"))
    """
    x = query.statistic
    if query.distribution == 't':
        if query.kind == 'cdf':
            return student_t_cdf(x, query.df1)
        if query.kind == 'sf':
            return student_t_sf(x, query.df1)
        return student_t_quantile(x, query.df1)

    if query.distribution == 'chisq':
        if query.kind == 'cdf':
            return chi_square_cdf(x, query.df1)
        if query.kind == 'sf':
            return chi_square_sf(x, query.df1)
        return chi_square_quantile(x, query.df1)

    if query.kind == 'cdf':
        return f_cdf(x, query.df1, query.df2)
    if query.kind == 'sf':
        return f_sf(x, query.df1, query.df2)
    return f_quantile(x, query.df1, query.df2)
