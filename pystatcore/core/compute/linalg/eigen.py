"""
Jacobi eigen-decomposition for real symmetric matrices.

Classical (largest-element) Jacobi: each rotation locates the largest
off-diagonal entry and applies the Givens rotation that annihilates it.
Rotations are accumulated column-wise into the eigenvector matrix.

The budget is counted in sweeps of n(n-1)/2 rotations, so the default
scales with the matrix order. Running out of it is not an error: the
current diagonal is returned as an approximation with converged=False,
a warning is logged, and callers carry a warning string in their Result.
"""

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystatcore.core.exceptions import ValidationError
from pystatcore.core.validation import check_array, check_square, check_finite
from pystatcore.core.compute.tolerances import JACOBI_EPS, JACOBI_MAX_ITER, SYMMETRY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EigenResult:
    """
    Result of a Jacobi eigen-decomposition.

    Attributes:
        values: Eigenvalues, in the order the diagonal holds them (unsorted)
        vectors: Eigenvectors as columns; vectors[:, i] pairs with values[i]
        iterations: Number of rotations applied
        converged: False if the sweep budget was exhausted before the largest
            off-diagonal magnitude fell below eps
        max_off_diagonal: Largest remaining off-diagonal magnitude
    """
    values: NDArray[np.floating[Any]]
    vectors: NDArray[np.floating[Any]]
    iterations: int
    converged: bool
    max_off_diagonal: float

    def sorted_descending(self) -> 'EigenResult':
        """Return a copy with eigenpairs ordered by decreasing eigenvalue."""
        order = np.argsort(-self.values, kind='stable')
        return EigenResult(
            values=self.values[order].copy(),
            vectors=self.vectors[:, order].copy(),
            iterations=self.iterations,
            converged=self.converged,
            max_off_diagonal=self.max_off_diagonal,
        )


def is_symmetric(M: NDArray[np.floating[Any]]) -> bool:
    """True if M equals its transpose within the SYMMETRY tolerance."""
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        return False
    scale = max(1.0, float(np.max(np.abs(M)))) if M.size else 1.0
    return bool(np.max(np.abs(M - M.T), initial=0.0) <= SYMMETRY.rtol * scale)


def _largest_off_diagonal(A: NDArray[np.floating[Any]]) -> tuple[int, int, float]:
    n = A.shape[0]
    if n < 2:
        return 0, 0, 0.0
    upper = np.abs(np.triu(A, k=1))
    flat = int(np.argmax(upper))
    p, q = divmod(flat, n)
    return p, q, float(upper[p, q])


def jacobi_eigen(
    M: ArrayLike,
    eps: float = JACOBI_EPS,
    max_iter: int = JACOBI_MAX_ITER,
) -> EigenResult:
    """
    Eigenvalues and eigenvectors of a real symmetric matrix.

    Args:
        M: Symmetric square matrix
        eps: Stop when the largest off-diagonal magnitude is below this
        max_iter: Maximum number of sweeps; one sweep is n(n-1)/2 rotations

    Returns:
        EigenResult (eigenvalues unsorted; see EigenResult.sorted_descending)

    Raises:
        DimensionError: If M is not square
        ValidationError: If M is not symmetric or contains NaN/Inf
    """
    A = check_array(M, "M")
    check_square(A, "M")
    check_finite(A, "M")
    if not is_symmetric(A):
        raise ValidationError("M: Jacobi eigen-decomposition requires a symmetric matrix")
    if max_iter < 0:
        raise ValidationError(f"max_iter: must be non-negative, got {max_iter}")

    A = 0.5 * (A + A.T)
    n = A.shape[0]
    V = np.eye(n)
    max_rotations = max_iter * max(1, n * (n - 1) // 2)

    iterations = 0
    p, q, off = _largest_off_diagonal(A)
    while off >= eps and iterations < max_rotations:
        app, aqq, apq = A[p, p], A[q, q], A[p, q]
        theta = (aqq - app) / (2.0 * apq)
        if theta == 0.0:
            t = 1.0
        else:
            t = np.sign(theta) / (abs(theta) + np.sqrt(theta * theta + 1.0))
        c = 1.0 / np.sqrt(t * t + 1.0)
        s = t * c

        G = np.eye(n)
        G[p, p] = c
        G[q, q] = c
        G[p, q] = s
        G[q, p] = -s

        A = G.T @ A @ G
        A[p, q] = 0.0
        A[q, p] = 0.0
        V = V @ G

        iterations += 1
        p, q, off = _largest_off_diagonal(A)

    converged = off < eps
    if converged:
        logger.debug("Jacobi converged after %d rotations (n=%d)", iterations, n)
    else:
        logger.warning(
            "Jacobi eigen-decomposition stopped after %d rotations with "
            "off-diagonal magnitude %.3e (eps=%.1e, %d sweeps); "
            "returning approximate eigenpairs",
            iterations, off, eps, max_iter,
        )

    return EigenResult(
        values=np.diag(A).copy(),
        vectors=V,
        iterations=iterations,
        converged=converged,
        max_off_diagonal=off,
    )
