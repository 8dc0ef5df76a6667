"""
Collinearity diagnostics.

Eigen-analysis of the column-scaled cross-product matrix (Belsley, Kuh &
Welsch): condition indices and variance-decomposition proportions, plus
tolerance and VIF for each predictor.
"""

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.core.compute.linalg import transpose, multiply, jacobi_eigen, least_squares
from pystatcore.regression._ols import weighted_mean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollinearityDiagnostics:
    """
    Attributes:
        eigenvalues: Eigenvalues of the scaled X'X, descending (p*,)
        condition_indices: sqrt(lambda_max / lambda_j) (p*,)
        variance_proportions: (dimension j, parameter k) proportions; each
            column sums to 1
        tolerance: 1 - R^2_j for each predictor (k,)
        vif: 1 / tolerance (k,)
        converged: Whether the Jacobi solver met its tolerance
        iterations: Rotations used by the Jacobi solver
    """
    eigenvalues: NDArray[np.floating[Any]]
    condition_indices: NDArray[np.floating[Any]]
    variance_proportions: NDArray[np.floating[Any]]
    tolerance: NDArray[np.floating[Any]]
    vif: NDArray[np.floating[Any]]
    converged: bool
    iterations: int


def _scaled_cross_product(
    X: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    X'X after scaling every column of sqrt(W) X to unit length.

    For unit weights the constant column is divided by sqrt(C), the others
    by their Euclidean norm.
    """
    Xw = np.sqrt(w)[:, None] * X
    norms = np.sqrt(np.sum(Xw ** 2, axis=0))
    norms[norms == 0.0] = 1.0
    Xs = Xw / norms
    return multiply(transpose(Xs), Xs)


def _tolerances(
    X: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """Tolerance 1 - R^2_j of each predictor regressed on the others."""
    k = X.shape[1] - 1
    tol = np.ones(k)
    if k == 1:
        return tol
    for j in range(k):
        target = X[:, j + 1]
        others = np.delete(X, j + 1, axis=1)
        _, resid = least_squares(others, target, w)
        sse = float(np.sum(w * resid ** 2))
        sst = float(np.sum(w * (target - weighted_mean(target, w)) ** 2))
        tol[j] = sse / sst if sst > 0 else 0.0
    return tol


def collinearity_diagnostics(
    X: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
) -> tuple[CollinearityDiagnostics, list[str]]:
    """
    Compute collinearity diagnostics for a design with intercept.

    Returns:
        (diagnostics, warnings). A warning is produced when the Jacobi
        solver exhausted its sweep budget.
    """
    warnings_list: list[str] = []

    cross = _scaled_cross_product(X, w)
    eig = jacobi_eigen(cross).sorted_descending()
    if not eig.converged:
        warnings_list.append(
            f"Collinearity eigen-decomposition stopped after {eig.iterations} "
            f"rotations (largest off-diagonal {eig.max_off_diagonal:.3e}); "
            f"eigenvalues are approximate"
        )

    values = eig.values
    lam_max = float(values[0])
    with np.errstate(divide='ignore', invalid='ignore'):
        condition = np.where(values > 0, np.sqrt(lam_max / values), np.inf)
        # phi[k, j] = v_kj^2 / lambda_j, proportions normalized over j
        phi = np.where(values > 0, eig.vectors ** 2 / values, np.inf)
        proportions = (phi / np.sum(phi, axis=1, keepdims=True)).T

    tol = _tolerances(X, w)
    with np.errstate(divide='ignore'):
        vif = np.where(tol > 0, 1.0 / tol, np.inf)

    logger.debug(
        "Collinearity: max condition index %.3g after %d rotations",
        float(condition[-1]), eig.iterations,
    )

    return CollinearityDiagnostics(
        eigenvalues=values,
        condition_indices=condition,
        variance_proportions=proportions,
        tolerance=tol,
        vif=vif,
        converged=eig.converged,
        iterations=eig.iterations,
    ), warnings_list
