"""
Linear algebra kernel for PyStatCore.

All engines build on these routines rather than calling numpy.linalg
directly, so singularity and convergence are judged by one set of rules.

Submodules:
    matrix: transpose, multiply, Gauss-Jordan inverse/solve, least squares
    eigen: Jacobi eigen-decomposition for symmetric matrices
"""

from pystatcore.core.compute.linalg.matrix import (
    identity,
    transpose,
    multiply,
    inverse,
    solve,
    least_squares,
)
from pystatcore.core.compute.linalg.eigen import (
    EigenResult,
    is_symmetric,
    jacobi_eigen,
)

__all__ = [
    "identity",
    "transpose",
    "multiply",
    "inverse",
    "solve",
    "least_squares",
    "EigenResult",
    "is_symmetric",
    "jacobi_eigen",
]
