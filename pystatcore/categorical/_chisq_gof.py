"""
Chi-square goodness-of-fit computation for one variable.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.core.exceptions import ValidationError, InsufficientDataError
from pystatcore.distributions import chi_square_sf

LOW_EXPECTED = 5.0


@dataclass(frozen=True)
class GoodnessOfFit:
    """
    Observed and expected frequencies and the test for one variable.

    Attributes:
        categories: Category values (integers stored as float)
        n_low_expected: Number of cells with expected frequency < 5
        min_expected: Smallest expected frequency
    """
    variable: str
    categories: NDArray[np.floating[Any]]
    observed: NDArray[np.floating[Any]]
    expected: NDArray[np.floating[Any]]
    residual: NDArray[np.floating[Any]]
    statistic: float
    df: int
    p_value: float
    n: int
    n_low_expected: int
    min_expected: float

    @property
    def low_expected_note(self) -> str:
        k = self.categories.size
        pct = 100.0 * self.n_low_expected / k
        return (
            f"{self.n_low_expected} cells ({pct:.1f}%) have expected frequencies "
            f"less than 5. The minimum expected cell frequency is {self.min_expected:.1f}."
        )


def goodness_of_fit(
    variable: str,
    values: NDArray[np.floating[Any]],
    lower: int | None = None,
    upper: int | None = None,
    expected_values: tuple[float, ...] | None = None,
) -> GoodnessOfFit:
    """
    Chi-square goodness of fit of floored values.

    Without a range the categories are the distinct values observed. With
    a range [lower, upper] every integer in it is a category, values
    outside are excluded, and empty categories count with observed 0.

    Expected frequencies are equal across categories, or proportional to
    expected_values normalized to the observed total.

    Raises:
        InsufficientDataError: No values, or fewer than two categories
        ValidationError: expected_values length differs from the number of
            categories
    """
    if lower is not None and upper is not None:
        in_range = values[(values >= lower) & (values <= upper)]
        categories = np.arange(lower, upper + 1, dtype=np.float64)
        observed = np.array([np.sum(in_range == c) for c in categories], dtype=np.float64)
    else:
        categories, counts = np.unique(values, return_counts=True)
        categories = categories.astype(np.float64)
        observed = counts.astype(np.float64)

    n = int(observed.sum())
    if n == 0:
        raise InsufficientDataError(
            f"No data available for {variable}.", required=1, actual=0
        )
    k = categories.size
    df = k - 1
    if df < 1:
        raise InsufficientDataError(
            f"{variable} has fewer than two categories", required=2, actual=k
        )

    if expected_values is None:
        expected = np.full(k, n / k)
    else:
        if len(expected_values) != k:
            raise ValidationError(
                f"The number of expected values ({len(expected_values)}) must equal "
                f"the number of categories ({k}) of {variable}"
            )
        weights = np.asarray(expected_values, dtype=np.float64)
        expected = weights / weights.sum() * n

    residual = observed - expected
    statistic = float(np.sum(residual ** 2 / expected))

    return GoodnessOfFit(
        variable=variable,
        categories=categories,
        observed=observed,
        expected=expected,
        residual=residual,
        statistic=statistic,
        df=df,
        p_value=chi_square_sf(statistic, df),
        n=n,
        n_low_expected=int(np.sum(expected < LOW_EXPECTED)),
        min_expected=float(expected.min()),
    )
