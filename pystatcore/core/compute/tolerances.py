"""
Numerical tolerances for the linear algebra and special-function kernels.

These are fixed constants of the algorithms, not user options: changing
them changes which matrices count as singular and how many terms the
continued fractions may use.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


SYMMETRY = ToleranceTier(
    rtol=1e-8,
    atol=1e-12,
    name='symmetry',
    description='Relative asymmetry accepted by the Jacobi eigen-solver',
)

# Gauss-Jordan: |pivot| below this means singular
PIVOT_TOLERANCE = 1e-10

# Jacobi eigen-decomposition (max_iter counts sweeps)
JACOBI_EPS = 1e-10
JACOBI_MAX_ITER = 100

# Lentz continued fraction for the incomplete beta
BETACF_MAX_ITER = 100
BETACF_EPS = 3e-7
BETACF_FPMIN = 1e-30

# Incomplete gamma (series and continued fraction)
GAMMA_MAX_ITER = 500
GAMMA_EPS = 1e-14

# Quantile root finding (brentq)
QUANTILE_MAX_ITER = 200
QUANTILE_XTOL = 1e-12

# Regression: 1 - h below this is treated as h == 1
LEVERAGE_TOLERANCE = 1e-10
