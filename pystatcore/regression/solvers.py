"""
Solver dispatch for regression diagnostics.

This module provides the diagnose() function (public API) and backend selection.
"""

from typing import Literal, Sequence
from numpy.typing import ArrayLike

from pystatcore.regression.design import RegressionDesign
from pystatcore.regression.solution import RegressionSolution
from pystatcore.regression.backends.cpu import CPUNormalEquationsBackend

BackendChoice = Literal['auto', 'cpu']


def diagnose(
    y: ArrayLike,
    X: ArrayLike,
    weights: ArrayLike | None = None,
    *,
    dependent_name: str = "y",
    predictor_names: Sequence[str] | None = None,
    confidence_level: float = 0.95,
    backend: BackendChoice = 'auto',
) -> RegressionSolution:
    """
    Fit a linear model with intercept and compute its diagnostics.

    Solves the weighted least squares problem min_b sum w_i (y_i - x_i b)^2
    and derives leverage, residuals, collinearity and correlation
    diagnostics from it.

    Args:
        y: Dependent variable (n,); NaN marks a missing case
        X: Predictors (n,) or (n, k), without the intercept column
        weights: Optional case weights (n,); cases with weight <= 0 are dropped
        dependent_name: Label for the dependent variable
        predictor_names: Labels for the predictors
        confidence_level: Level for confidence intervals
        backend: 'auto' or 'cpu'

    Returns:
        RegressionSolution

    Raises:
        InsufficientDataError: Too few complete cases or no predictors
        DimensionError: Inconsistent input lengths
        SingularMatrixError: Collinear predictors or a case with leverage 1

    Example:
        >>> sol = diagnose([1, 2, 3, 4, 5], [1, 2, 3, 4, 5])
        >>> sol.coefficients  # intercept 0, slope 1
    """
    design = RegressionDesign.build(
        y, X, weights,
        dependent_name=dependent_name,
        predictor_names=predictor_names,
        confidence_level=confidence_level,
    )
    return solve_design(design, backend=backend)


def solve_design(
    design: RegressionDesign,
    *,
    backend: BackendChoice = 'auto',
) -> RegressionSolution:
    """Run diagnostics on an already-built design."""
    backend_impl = _get_backend(backend)
    result = backend_impl.solve(design)
    return RegressionSolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice):
    if choice in ('auto', 'cpu'):
        return CPUNormalEquationsBackend()
    raise ValueError(f"Unknown backend: {choice!r}")
