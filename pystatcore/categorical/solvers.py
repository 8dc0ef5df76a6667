"""
Solver dispatch for the categorical engine.
"""

from typing import Any, Sequence
from numpy.typing import ArrayLike

from pystatcore.core.sample import Sample
from pystatcore.categorical.design import ChiSquareDesign
from pystatcore.categorical.solution import ChiSquareSolution
from pystatcore.categorical.backends.cpu import CPUChiSquareBackend


def chisquare_gof(
    data: ArrayLike | Sample | Sequence[Sample],
    *,
    names: Sequence[str] | None = None,
    lower: int | None = None,
    upper: int | None = None,
    expected_values: Sequence[float] | None = None,
) -> ChiSquareSolution:
    """
    Chi-square goodness-of-fit test.

    Args:
        data: Values of one variable, a 2D array with one column per
            variable, or Sample(s)
        names: Variable names for array input
        lower, upper: Inclusive integer range; when both are given every
            integer in it is a category
        expected_values: Relative expected frequencies per category
            (default: all categories equal)

    Example:
        >>> sol = chisquare_gof([1, 1, 1, 2, 2, 3])
        >>> sol.statistics['var1']
        1.0
    """
    range_kwargs: dict[str, Any] = {}
    if lower is not None or upper is not None:
        range_kwargs = {'expected_range': 'use_specified_range', 'lower': lower, 'upper': upper}
    design = ChiSquareDesign.build(
        data,
        names=names,
        expected_values=expected_values,
        **range_kwargs,
    )
    return solve_design(design)


def solve_design(design: ChiSquareDesign) -> ChiSquareSolution:
    result = CPUChiSquareBackend().solve(design)
    return ChiSquareSolution(_result=result, _design=design)
