"""
Dense matrix kernel: transpose, multiply, Gauss-Jordan inverse and solve.

Every engine expresses its algebra through these functions so that the
singularity rule is the same everywhere: elimination stops with
SingularMatrixError as soon as the best available pivot is smaller than
PIVOT_TOLERANCE in magnitude.
"""

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystatcore.core.exceptions import DimensionError, SingularMatrixError
from pystatcore.core.validation import check_array, check_2d, check_square
from pystatcore.core.compute.tolerances import PIVOT_TOLERANCE


def identity(n: int) -> NDArray[np.floating[Any]]:
    """n x n identity matrix."""
    return np.eye(n, dtype=np.float64)


def transpose(M: ArrayLike) -> NDArray[np.floating[Any]]:
    """Return M' as a new array (never a view of the caller's data)."""
    M = check_array(M, "M")
    check_2d(M, "M")
    return np.ascontiguousarray(M.T)


def multiply(A: ArrayLike, B: ArrayLike) -> NDArray[np.floating[Any]]:
    """
    Matrix product A @ B.

    B may be a 1D vector, in which case the result is a vector.

    Raises:
        DimensionError: If A is not 2D or A.cols != B.rows
    """
    A = check_array(A, "A")
    B = check_array(B, "B")
    check_2d(A, "A")
    if B.ndim not in (1, 2):
        raise DimensionError(f"B: expected 1D or 2D array, got {B.ndim}D")
    if A.shape[1] != B.shape[0]:
        raise DimensionError(
            f"Cannot multiply: A has {A.shape[1]} columns but B has {B.shape[0]} rows"
        )
    return A @ B


def _eliminate(
    augmented: NDArray[np.floating[Any]],
    n: int,
    matrix_name: str,
) -> NDArray[np.floating[Any]]:
    """
    In-place Gauss-Jordan elimination on an n-row augmented matrix.

    The left n x n block is reduced to the identity; the right block
    becomes A^{-1} times whatever it held.
    """
    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(augmented[col:, col])))
        pivot = augmented[pivot_row, col]
        if abs(pivot) < PIVOT_TOLERANCE:
            raise SingularMatrixError(
                "Matrix is singular and cannot be inverted",
                matrix_name=matrix_name,
                pivot_index=col,
                pivot_value=float(abs(pivot)),
            )
        if pivot_row != col:
            augmented[[col, pivot_row]] = augmented[[pivot_row, col]]

        augmented[col] /= augmented[col, col]
        for row in range(n):
            if row != col:
                factor = augmented[row, col]
                if factor != 0.0:
                    augmented[row] -= factor * augmented[col]
    return augmented


def inverse(M: ArrayLike, name: str = "M") -> NDArray[np.floating[Any]]:
    """
    Inverse of a square matrix by Gauss-Jordan elimination.

    Partial pivoting: for each column the row with the largest absolute
    value at or below the diagonal becomes the pivot row.

    Args:
        M: Square matrix
        name: Matrix description used in error attributes

    Returns:
        M^{-1}

    Raises:
        DimensionError: If M is not square
        SingularMatrixError: If a pivot magnitude is below 1e-10
    """
    M = check_array(M, name)
    check_square(M, name)
    n = M.shape[0]
    augmented = np.hstack([M.astype(np.float64, copy=True), identity(n)])
    _eliminate(augmented, n, name)
    return augmented[:, n:].copy()


def solve(A: ArrayLike, b: ArrayLike, name: str = "A") -> NDArray[np.floating[Any]]:
    """
    Solve A x = b with the same elimination as inverse().

    Args:
        A: Square coefficient matrix
        b: Right-hand side, vector or matrix with A.rows rows

    Raises:
        DimensionError: If A is not square or b has the wrong length
        SingularMatrixError: If a pivot magnitude is below 1e-10
    """
    A = check_array(A, name)
    b = check_array(b, "b")
    check_square(A, name)
    n = A.shape[0]
    if b.shape[0] != n:
        raise DimensionError(
            f"Cannot solve: {name} has {n} rows but b has {b.shape[0]}"
        )
    rhs = b.reshape(n, -1)
    augmented = np.hstack([A.astype(np.float64, copy=True), rhs.astype(np.float64)])
    _eliminate(augmented, n, name)
    x = augmented[:, n:]
    return x.ravel().copy() if b.ndim == 1 else x.copy()


def least_squares(
    X: ArrayLike,
    y: ArrayLike,
    weights: ArrayLike | None = None,
    name: str = "X'WX",
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Weighted least squares through the normal equations.

    Returns:
        (beta, residuals) where beta = (X'WX)^{-1} X'Wy and residuals = y - X beta

    Raises:
        SingularMatrixError: If X'WX is singular
    """
    X = check_array(X, "X")
    y = check_array(y, "y")
    check_2d(X, "X")
    if weights is None:
        w = np.ones(X.shape[0])
    else:
        w = check_array(weights, "weights")
    Xt = transpose(X)
    xtwx = multiply(Xt * w, X)
    xtwy = multiply(Xt * w, y)
    beta = solve(xtwx, xtwy, name=name)
    return beta, y - multiply(X, beta)
