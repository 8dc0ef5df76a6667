"""
Categorical tests.

Public API:
    chisquare_gof(data, lower=None, upper=None, expected_values=None)
    solve_design(design) -> ChiSquareSolution
    ChiSquareDesign, ChiSquareSolution, GoodnessOfFit
"""

from pystatcore.categorical.design import ChiSquareDesign
from pystatcore.categorical.solution import ChiSquareSolution
from pystatcore.categorical._chisq_gof import GoodnessOfFit, goodness_of_fit
from pystatcore.categorical.solvers import chisquare_gof, solve_design

__all__ = [
    "chisquare_gof",
    "solve_design",
    "goodness_of_fit",
    "ChiSquareDesign",
    "ChiSquareSolution",
    "GoodnessOfFit",
]
