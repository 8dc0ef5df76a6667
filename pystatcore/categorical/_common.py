"""
Parameter payload for the categorical engine.
"""

from dataclasses import dataclass

from pystatcore.categorical._chisq_gof import GoodnessOfFit


@dataclass(frozen=True)
class Descriptives:
    """Descriptive statistics of one variable's valid (unfloored) values."""
    variable: str
    n: int
    mean: float
    std: float
    minimum: float
    maximum: float
    p25: float
    p50: float
    p75: float


@dataclass(frozen=True)
class ChiSquareParams:
    tests: tuple[GoodnessOfFit, ...]
    descriptives: tuple[Descriptives, ...]
