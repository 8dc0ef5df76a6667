"""
Regression diagnostics.

Weighted least squares with intercept and the full set of case,
coefficient and collinearity diagnostics.

Public API:
    diagnose(y, X, weights=None, ...) -> RegressionSolution
    solve_design(design) -> RegressionSolution
    RegressionDesign
    RegressionSolution
    RegressionParams
"""

from pystatcore.regression.design import RegressionDesign
from pystatcore.regression.solution import RegressionSolution
from pystatcore.regression._common import RegressionParams
from pystatcore.regression.solvers import diagnose, solve_design

__all__ = [
    "diagnose",
    "solve_design",
    "RegressionDesign",
    "RegressionSolution",
    "RegressionParams",
]
