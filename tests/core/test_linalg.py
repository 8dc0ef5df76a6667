"""
Tests for the Gauss-Jordan kernel and the Jacobi eigen-solver.
"""

import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pystatcore.core.exceptions import DimensionError, SingularMatrixError, ValidationError
from pystatcore.core.compute.linalg import (
    identity,
    transpose,
    multiply,
    inverse,
    solve,
    least_squares,
    jacobi_eigen,
    is_symmetric,
)


def _spd(rng, n):
    A = rng.standard_normal((n, n))
    return A @ A.T + n * np.eye(n)


# ═══════════════════════════════════════════════════════════════════════
# Matrix kernel
# ═══════════════════════════════════════════════════════════════════════


class TestMultiply:

    def test_matches_numpy(self, rng):
        A = rng.standard_normal((3, 4))
        B = rng.standard_normal((4, 2))
        assert_allclose(multiply(A, B), A @ B)

    def test_vector_on_right(self):
        assert_allclose(multiply(np.eye(2) * 2, [1.0, 3.0]), [2.0, 6.0])

    def test_inner_dimension_mismatch(self):
        with pytest.raises(DimensionError, match="columns"):
            multiply(np.zeros((2, 3)), np.zeros((2, 2)))

    def test_transpose_is_copy(self):
        M = np.arange(6.0).reshape(2, 3)
        T = transpose(M)
        T[0, 0] = 99.0
        assert M[0, 0] == 0.0
        assert T.shape == (3, 2)


class TestInverse:

    @pytest.mark.parametrize("n", [1, 2, 5, 10])
    def test_inverse_times_matrix_is_identity(self, rng, n):
        M = _spd(rng, n)
        assert_allclose(multiply(M, inverse(M)), identity(n), atol=1e-8)

    def test_needs_pivoting(self):
        M = np.array([[0.0, 1.0], [1.0, 0.0]])
        assert_allclose(inverse(M), M)

    def test_singular(self):
        M = np.array([[1.0, 2.0], [2.0, 4.0]])
        with pytest.raises(SingularMatrixError) as info:
            inverse(M, name="X'X")
        assert info.value.matrix_name == "X'X"
        assert info.value.pivot_index == 1

    def test_non_square(self):
        with pytest.raises(DimensionError):
            inverse(np.zeros((2, 3)))

    def test_input_not_modified(self, rng):
        M = _spd(rng, 3)
        before = M.copy()
        inverse(M)
        assert_allclose(M, before)


class TestSolve:

    def test_vector_rhs(self, rng):
        A = _spd(rng, 4)
        b = rng.standard_normal(4)
        assert_allclose(A @ solve(A, b), b, atol=1e-10)

    def test_matrix_rhs(self, rng):
        A = _spd(rng, 3)
        B = rng.standard_normal((3, 2))
        assert solve(A, B).shape == (3, 2)

    def test_wrong_rhs_length(self):
        with pytest.raises(DimensionError):
            solve(np.eye(3), np.ones(2))

    def test_least_squares_matches_lstsq(self, rng):
        X = np.column_stack([np.ones(30), rng.standard_normal((30, 2))])
        y = rng.standard_normal(30)
        beta, resid = least_squares(X, y)
        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        assert_allclose(beta, expected, atol=1e-10)
        assert_allclose(resid, y - X @ expected, atol=1e-10)


# ═══════════════════════════════════════════════════════════════════════
# Jacobi eigen-decomposition
# ═══════════════════════════════════════════════════════════════════════


class TestJacobi:

    @pytest.mark.parametrize("n", [2, 3, 6])
    def test_eigenpairs(self, rng, n):
        M = _spd(rng, n)
        result = jacobi_eigen(M, max_iter=1000)
        assert result.converged
        for i in range(n):
            v = result.vectors[:, i]
            assert_allclose(M @ v, result.values[i] * v, atol=1e-8)

    def test_trace_preserved(self, rng):
        M = _spd(rng, 5)
        result = jacobi_eigen(M, max_iter=1000)
        assert result.values.sum() == pytest.approx(np.trace(M), rel=1e-10)

    def test_matches_numpy_eigvalsh(self, rng):
        M = _spd(rng, 4)
        result = jacobi_eigen(M, max_iter=1000).sorted_descending()
        assert_allclose(result.values, np.linalg.eigvalsh(M)[::-1], rtol=1e-9)
        assert np.all(np.diff(result.values) <= 0)

    def test_vectors_orthonormal(self, rng):
        result = jacobi_eigen(_spd(rng, 4), max_iter=1000)
        assert_allclose(result.vectors.T @ result.vectors, np.eye(4), atol=1e-10)

    def test_diagonal_needs_no_rotation(self):
        result = jacobi_eigen(np.diag([3.0, 1.0, 2.0]))
        assert result.iterations == 0
        assert result.converged
        assert_allclose(result.values, [3.0, 1.0, 2.0])

    def test_exhausted_budget_is_a_warning(self, rng, caplog):
        M = _spd(rng, 6)
        with caplog.at_level(logging.WARNING):
            result = jacobi_eigen(M, max_iter=0)
        assert not result.converged
        assert result.iterations == 0
        assert result.max_off_diagonal > 1e-10
        assert "Jacobi" in caplog.text

    def test_budget_scales_with_order(self, rng):
        M = _spd(rng, 4)
        result = jacobi_eigen(M, max_iter=1)
        assert result.iterations <= 6

    def test_ten_by_ten_with_defaults(self, rng, caplog):
        M = _spd(rng, 10)
        with caplog.at_level(logging.WARNING):
            result = jacobi_eigen(M)
        assert result.converged
        assert "Jacobi" not in caplog.text
        assert_allclose(
            np.sort(result.values), np.linalg.eigvalsh(M), rtol=1e-8, atol=1e-8
        )

    def test_non_symmetric_rejected(self):
        with pytest.raises(ValidationError, match="symmetric"):
            jacobi_eigen(np.array([[1.0, 2.0], [0.0, 1.0]]))

    def test_is_symmetric(self):
        assert is_symmetric(np.eye(3))
        assert not is_symmetric(np.array([[1.0, 1.0], [0.0, 1.0]]))
        assert not is_symmetric(np.zeros((2, 3)))
