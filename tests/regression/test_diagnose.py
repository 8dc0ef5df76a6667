"""
Tests for diagnose(): coefficients, residual diagnostics and influence
measures, checked against direct numpy computations.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import stats

from pystatcore.core.exceptions import (
    DimensionError,
    InsufficientDataError,
    SingularMatrixError,
    ValidationError,
)
from pystatcore.regression import diagnose, RegressionDesign, RegressionSolution


def _ols(X, y):
    Xc = np.column_stack([np.ones(len(y)), X])
    beta, *_ = np.linalg.lstsq(Xc, y, rcond=None)
    return Xc, beta, y - Xc @ beta


# ═══════════════════════════════════════════════════════════════════════
# Perfect fit
# ═══════════════════════════════════════════════════════════════════════


class TestPerfectFit:
    """y = x = 1..5 has zero residuals; every standardized form is 0."""

    @pytest.fixture
    def solution(self):
        x = [1.0, 2.0, 3.0, 4.0, 5.0]
        return diagnose(x, x)

    def test_coefficients(self, solution):
        assert_allclose(solution.coefficients, [0.0, 1.0], atol=1e-10)

    def test_residuals_zero(self, solution):
        assert_allclose(solution.residuals, 0.0, atol=1e-10)

    def test_r_squared_one(self, solution):
        assert solution.r_squared == pytest.approx(1.0)
        assert solution.info['exact_fit']

    def test_standardized_forms_zero(self, solution):
        cases = solution.params.cases
        for series in (cases.standardized_residual, cases.studentized_residual,
                       cases.studentized_deleted_residual, cases.cooks_distance):
            assert_allclose(series, 0.0)

    def test_tables_render(self, solution):
        for table in solution.tables():
            table.to_dict()


# ═══════════════════════════════════════════════════════════════════════
# Agreement with direct computation
# ═══════════════════════════════════════════════════════════════════════


class TestAgainstNumpy:

    @pytest.fixture
    def fitted(self, simple_regression_data):
        X, y = simple_regression_data
        return X, y, diagnose(y, X, predictor_names=["x1", "x2"])

    def test_returns_solution(self, fitted):
        assert isinstance(fitted[2], RegressionSolution)
        assert fitted[2].backend_name == 'cpu_normal_equations'

    def test_coefficients(self, fitted):
        X, y, sol = fitted
        _, beta, _ = _ols(X, y)
        assert_allclose(sol.coefficients, beta, rtol=1e-10)

    def test_standard_errors(self, fitted):
        X, y, sol = fitted
        Xc, _, e = _ols(X, y)
        sigma2 = e @ e / (len(y) - 3)
        se = np.sqrt(np.diag(sigma2 * np.linalg.inv(Xc.T @ Xc)))
        assert_allclose(sol.standard_errors, se, rtol=1e-8)

    def test_leverage_is_hat_diagonal(self, fitted):
        X, y, sol = fitted
        Xc, _, _ = _ols(X, y)
        H = Xc @ np.linalg.inv(Xc.T @ Xc) @ Xc.T
        assert_allclose(sol.leverage, np.diag(H), rtol=1e-8)
        assert sol.leverage.sum() == pytest.approx(3.0)

    def test_studentized_deleted_matches_leave_one_out(self, fitted):
        X, y, sol = fitted
        Xc, _, e = _ols(X, y)
        h = sol.leverage
        expected = np.empty(len(y))
        for i in range(len(y)):
            keep = np.arange(len(y)) != i
            _, _, e_i = _ols(X[keep], y[keep])
            s_i = np.sqrt(e_i @ e_i / (keep.sum() - 3))
            expected[i] = e[i] / (s_i * np.sqrt(1 - h[i]))
        assert_allclose(sol.params.cases.studentized_deleted_residual, expected, rtol=1e-7)

    def test_cooks_distance_matches_leave_one_out(self, fitted):
        X, y, sol = fitted
        Xc, beta, e = _ols(X, y)
        s2 = e @ e / (len(y) - 3)
        expected = np.empty(len(y))
        for i in range(len(y)):
            keep = np.arange(len(y)) != i
            _, beta_i, _ = _ols(X[keep], y[keep])
            diff = Xc @ beta - Xc @ beta_i
            expected[i] = diff @ diff / (3 * s2)
        assert_allclose(sol.params.cases.cooks_distance, expected, rtol=1e-7)

    def test_deleted_residual(self, fitted):
        _, _, sol = fitted
        cases = sol.params.cases
        assert_allclose(cases.deleted_residual, cases.residual / (1 - cases.leverage))

    def test_mahalanobis_and_centered_leverage(self, fitted):
        _, y, sol = fitted
        cases = sol.params.cases
        n = len(y)
        assert_allclose(cases.centered_leverage, cases.leverage - 1 / n)
        assert_allclose(cases.mahalanobis_distance, (n - 1) * cases.centered_leverage)

    def test_model_fit(self, fitted):
        X, y, sol = fitted
        _, _, e = _ols(X, y)
        sst = np.sum((y - y.mean()) ** 2)
        r2 = 1 - e @ e / sst
        p = sol.params
        assert p.r_squared == pytest.approx(r2, rel=1e-10)
        assert p.adjusted_r_squared == pytest.approx(1 - (1 - r2) * (len(y) - 1) / (len(y) - 3))
        f = (r2 / 2) / ((1 - r2) / (len(y) - 3))
        assert p.f_statistic == pytest.approx(f, rel=1e-8)
        assert p.f_p_value == pytest.approx(stats.f.sf(f, 2, len(y) - 3), rel=1e-4, abs=1e-12)

    def test_durbin_watson(self, fitted):
        X, y, sol = fitted
        _, _, e = _ols(X, y)
        assert sol.params.durbin_watson == pytest.approx(np.sum(np.diff(e) ** 2) / (e @ e))

    def test_confidence_intervals(self, fitted):
        _, y, sol = fitted
        p = sol.params
        t_crit = stats.t.ppf(0.975, len(y) - 3)
        assert_allclose(p.ci_upper - p.coefficients, t_crit * p.standard_errors, rtol=1e-5)

    def test_p_values(self, fitted):
        _, y, sol = fitted
        p = sol.params
        expected = 2 * stats.t.sf(np.abs(p.t_values), len(y) - 3)
        assert_allclose(p.p_values, expected, rtol=1e-4, atol=1e-10)

    def test_prediction_intervals_nest(self, fitted):
        cases = fitted[2].params.cases
        assert np.all(cases.individual_ci_lower < cases.mean_ci_lower)
        assert np.all(cases.mean_ci_upper < cases.individual_ci_upper)

    def test_coefficient_correlation_diagonal(self, fitted):
        cor = fitted[2].params.correlation
        assert_allclose(np.diag(cor), 1.0)
        assert_allclose(cor, cor.T)


# ═══════════════════════════════════════════════════════════════════════
# Collinearity and correlations
# ═══════════════════════════════════════════════════════════════════════


class TestCollinearity:

    @pytest.fixture
    def correlated(self, rng):
        n = 80
        x1 = rng.standard_normal(n)
        x2 = 0.8 * x1 + 0.6 * rng.standard_normal(n)
        x3 = rng.standard_normal(n)
        X = np.column_stack([x1, x2, x3])
        y = 1.0 + X @ np.array([1.0, 0.5, -0.5]) + rng.standard_normal(n)
        return X, y

    def test_vif_matches_inverse_correlation(self, correlated):
        X, y = correlated
        sol = diagnose(y, X)
        expected = np.diag(np.linalg.inv(np.corrcoef(X, rowvar=False)))
        assert_allclose(sol.params.collinearity.vif, expected, rtol=1e-8)
        assert_allclose(sol.params.collinearity.tolerance, 1 / expected, rtol=1e-8)

    def test_eigenvalues_of_scaled_cross_product(self, correlated):
        X, y = correlated
        sol = diagnose(y, X)
        Xc = np.column_stack([np.ones(len(y)), X])
        Xs = Xc / np.linalg.norm(Xc, axis=0)
        expected = np.linalg.eigvalsh(Xs.T @ Xs)[::-1]
        c = sol.params.collinearity
        assert c.converged
        assert_allclose(c.eigenvalues, expected, rtol=1e-8)
        assert c.eigenvalues.sum() == pytest.approx(4.0)
        assert c.condition_indices[0] == pytest.approx(1.0)
        assert np.all(np.diff(c.condition_indices) >= 0)

    def test_variance_proportions_sum_to_one(self, correlated):
        X, y = correlated
        c = diagnose(y, X).params.collinearity
        assert c.variance_proportions.shape == (4, 4)
        assert_allclose(c.variance_proportions.sum(axis=0), 1.0)

    def test_single_predictor_correlations_coincide(self, rng):
        x = rng.standard_normal(30)
        y = 2 * x + rng.standard_normal(30)
        corr = diagnose(y, x).params.correlations
        r = np.corrcoef(x, y)[0, 1]
        assert corr.zero_order[0] == pytest.approx(r)
        assert corr.partial[0] == pytest.approx(r)
        assert corr.part[0] == pytest.approx(r)

    def test_partial_correlation(self, correlated):
        X, y = correlated
        corr = diagnose(y, X).params.correlations
        Z = np.column_stack([np.ones(len(y)), X[:, 1:]])
        ry = y - Z @ np.linalg.lstsq(Z, y, rcond=None)[0]
        rx = X[:, 0] - Z @ np.linalg.lstsq(Z, X[:, 0], rcond=None)[0]
        assert corr.partial[0] == pytest.approx(np.corrcoef(ry, rx)[0, 1], rel=1e-8)
        assert corr.part[0] == pytest.approx(np.corrcoef(y, rx)[0, 1], rel=1e-8)


# ═══════════════════════════════════════════════════════════════════════
# Weights and missing data
# ═══════════════════════════════════════════════════════════════════════


class TestWeightsAndMissing:

    def test_unit_weights_reproduce_ols(self, simple_regression_data):
        X, y = simple_regression_data
        plain = diagnose(y, X)
        weighted = diagnose(y, X, weights=np.ones(len(y)))
        assert_allclose(weighted.coefficients, plain.coefficients)
        assert_allclose(weighted.params.cases.studentized_residual,
                        plain.params.cases.studentized_residual)
        assert weighted.info['weighted']

    def test_weighted_coefficients(self, simple_regression_data, rng):
        X, y = simple_regression_data
        w = rng.uniform(0.5, 2.0, len(y))
        sol = diagnose(y, X, weights=w)
        Xc = np.column_stack([np.ones(len(y)), X])
        expected = np.linalg.solve(Xc.T @ (w[:, None] * Xc), Xc.T @ (w * y))
        assert_allclose(sol.coefficients, expected, rtol=1e-10)
        assert sol.leverage.sum() == pytest.approx(3.0)

    def test_non_positive_weights_drop_cases(self, simple_regression_data):
        X, y = simple_regression_data
        w = np.ones(len(y))
        w[[0, 5]] = [0.0, -1.0]
        sol = diagnose(y, X, weights=w)
        assert sol.info['n_cases'] == len(y) - 2
        assert sol.info['n_excluded'] == 2

    def test_listwise_deletion(self, simple_regression_data):
        X, y = simple_regression_data
        y = y.copy()
        X = X.copy()
        y[3] = np.nan
        X[7, 1] = np.nan
        sol = diagnose(y, X)
        assert sol.info['n_cases'] == len(y) - 2
        saved = sol.series(['residual', 'leverage'])
        assert saved['residual'][3] is None
        assert saved['leverage'][7] is None
        assert len(saved['residual']) == len(y)
        assert saved['residual'][0] == pytest.approx(sol.residuals[0])


# ═══════════════════════════════════════════════════════════════════════
# Failures
# ═══════════════════════════════════════════════════════════════════════


class TestFailures:

    def test_collinear_predictors(self, collinear_data):
        X, y = collinear_data
        with pytest.raises(SingularMatrixError):
            diagnose(y, X)

    def test_leverage_one(self):
        x1 = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        indicator = np.array([0.0, 0.0, 0.0, 0.0, 1.0, 0.0])
        y = np.array([1.2, 1.9, 3.3, 3.8, 9.0, 6.1])
        with pytest.raises(SingularMatrixError, match="Leverage of case 5 equals 1"):
            diagnose(y, np.column_stack([x1, indicator]))

    def test_one_residual_degree_of_freedom(self):
        with pytest.raises(SingularMatrixError, match="Too few cases for studentized deleted residuals") as info:
            diagnose([1.0, 2.5, 2.9], [1.0, 2.0, 3.0])
        assert "case 1" not in str(info.value)

    def test_no_predictors(self):
        with pytest.raises(InsufficientDataError, match="at least one independent variable"):
            RegressionDesign.build([1.0, 2.0, 3.0], np.empty((3, 0)))

    def test_too_few_cases(self):
        with pytest.raises(InsufficientDataError, match="must exceed the number of parameters"):
            diagnose([1.0, 2.0], [3.0, 5.0])

    def test_all_missing(self):
        with pytest.raises(InsufficientDataError, match="No data available"):
            diagnose([np.nan, np.nan, np.nan], [1.0, 2.0, 3.0])

    def test_length_mismatch(self):
        with pytest.raises(DimensionError):
            diagnose([1.0, 2.0, 3.0, 4.0], [1.0, 2.0, 3.0])

    def test_duplicate_names(self, simple_regression_data):
        X, y = simple_regression_data
        with pytest.raises(ValidationError, match="unique"):
            diagnose(y, X, predictor_names=["a", "a"])

    def test_bad_confidence_level(self, simple_regression_data):
        X, y = simple_regression_data
        with pytest.raises(ValidationError, match="confidence_level"):
            diagnose(y, X, confidence_level=1.5)
