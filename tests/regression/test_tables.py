"""
Tests for the regression output tables.
"""

import numpy as np
import pytest

from pystatcore.core.defaults import REGRESSION_TABLES, REGRESSION_SERIES
from pystatcore.core.exceptions import ValidationError
from pystatcore.regression import diagnose


@pytest.fixture
def solution(simple_regression_data):
    X, y = simple_regression_data
    return diagnose(y, X, dependent_name="sales", predictor_names=["price", "ads"])


class TestTableSet:

    def test_all_tables_in_order(self, solution):
        titles = [t.title for t in solution.tables()]
        assert titles == [
            "Variables Entered/Removed",
            "Model Summary",
            "R Square Change",
            "ANOVA",
            "Coefficients",
            "Coefficient Correlations",
            "Collinearity Diagnostics",
            "Residuals Statistics",
            "Casewise Diagnostics",
        ]
        assert len(titles) == len(REGRESSION_TABLES)

    def test_subset_keeps_standard_order(self, solution):
        tables = solution.tables(include=["coefficients", "anova"])
        assert [t.title for t in tables] == ["ANOVA", "Coefficients"]

    def test_unknown_table(self, solution):
        with pytest.raises(ValidationError, match="unknown table"):
            solution.tables(include=["histogram"])

    def test_every_table_serializes(self, solution):
        for table in solution.tables():
            out = table.to_dict()
            assert out["title"] == table.title
            assert out["rows"]


class TestContents:

    def test_model_summary(self, solution):
        row = solution.model_summary_table().row("1")
        assert row.cells["RSquare"] == pytest.approx(solution.r_squared)
        assert row.cells["R"] == pytest.approx(np.sqrt(solution.r_squared))
        assert row.cells["StdErrorEstimate"] == pytest.approx(solution.std_error_of_estimate)

    def test_anova_is_nested(self, solution):
        table = solution.anova_table()
        model = table.row("1")
        assert [c.row_header for c in model.children] == [("Regression",), ("Residual",), ("Total",)]
        regression, residual, total = (c.cells for c in model.children)
        assert regression["SumOfSquares"] + residual["SumOfSquares"] == pytest.approx(
            total["SumOfSquares"])
        assert regression["df"] == 2
        assert total["df"] == len(solution.residuals) - 1

    def test_coefficients_rows(self, solution):
        table = solution.coefficients_table()
        constant = table.row("1", "(Constant)")
        assert "Beta" not in constant.cells
        ads = table.row("1", "ads")
        assert ads.cells["B"] == pytest.approx(solution.coefficients[2])
        assert ads.cells["VIF"] >= 1.0
        assert "LowerBound" in table.leaf_keys()

    def test_confidence_level_in_header(self, simple_regression_data):
        X, y = simple_regression_data
        table = diagnose(y, X, confidence_level=0.9).coefficients_table()
        headers = [c.header for c in table.column_headers]
        assert "90.0% Confidence Interval for B" in headers

    def test_coefficient_correlations_blocks(self, solution):
        model = solution.coefficient_correlations_table().row("1")
        assert [b.row_header for b in model.children] == [("Correlations",), ("Covariances",)]
        price = model.children[0].children[0]
        assert price.cells["C_0"] == pytest.approx(1.0)

    def test_collinearity_dimensions(self, solution):
        model = solution.collinearity_table().row("1")
        assert len(model.children) == 3
        assert model.children[0].cells["ConditionIndex"] == pytest.approx(1.0)

    def test_residuals_statistics(self, solution):
        table = solution.residuals_statistics_table()
        residual = table.row("Residual").cells
        assert residual["Mean"] == pytest.approx(0.0, abs=1e-10)
        assert residual["N"] == len(solution.residuals)

    def test_casewise_lists_outlier(self, simple_regression_data):
        X, y = simple_regression_data
        y = y.copy()
        y[10] += 25.0
        table = diagnose(y, X, dependent_name="sales").casewise_table(3.0)
        assert [r.row_header for r in table.rows] == [("11",)]
        assert table.rows[0].cells["StdResidual"] > 3.0

    def test_casewise_empty_has_note(self, solution):
        table = solution.casewise_table(50.0)
        assert table.rows == ()
        assert "No case" in table.footnote


class TestSeries:

    def test_all_series_available(self, solution):
        saved = solution.series(REGRESSION_SERIES)
        assert set(saved) == set(REGRESSION_SERIES)
        n = len(solution.residuals)
        assert all(len(v) == n for v in saved.values())

    def test_unknown_series(self, solution):
        with pytest.raises(ValidationError, match="unknown series"):
            solution.series(["dfbeta"])

    def test_summary_and_repr(self, solution):
        assert "R-squared" in solution.summary()
        assert "RegressionSolution" in repr(solution)
