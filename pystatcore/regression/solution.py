"""
Regression solution: accessors and ResultTable rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pystatcore.core.exceptions import ValidationError
from pystatcore.core.result import Result
from pystatcore.core.table import ColumnNode, RowNode, ResultTable
from pystatcore.core.defaults import REGRESSION_TABLES, REGRESSION_SERIES
from pystatcore.regression._common import RegressionParams

if TYPE_CHECKING:
    from pystatcore.regression.design import RegressionDesign


def _f(value: Any) -> float:
    return float(value)


def _summary_stats(values: NDArray[np.floating[Any]]) -> dict[str, Any]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return {'Minimum': None, 'Maximum': None, 'Mean': None,
                'StdDeviation': None, 'N': int(values.size)}
    sd = float(np.std(finite, ddof=1)) if finite.size > 1 else float('nan')
    return {
        'Minimum': float(finite.min()),
        'Maximum': float(finite.max()),
        'Mean': float(finite.mean()),
        'StdDeviation': sd,
        'N': int(values.size),
    }


@dataclass
class RegressionSolution:
    """
    User-facing regression diagnostics.

    Wraps the backend Result and renders the standard output tables.
    """
    _result: Result[RegressionParams]
    _design: 'RegressionDesign'

    @property
    def params(self) -> RegressionParams:
        return self._result.params

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        return self._result.params.standard_errors

    @property
    def r_squared(self) -> float:
        return self._result.params.r_squared

    @property
    def adjusted_r_squared(self) -> float:
        return self._result.params.adjusted_r_squared

    @property
    def std_error_of_estimate(self) -> float:
        return float(np.sqrt(self._result.params.sigma2))

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.cases.residual

    @property
    def leverage(self) -> NDArray[np.floating[Any]]:
        return self._result.params.cases.leverage

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # ═══════════════════════════════════════════════════════════════════
    # Tables
    # ═══════════════════════════════════════════════════════════════════

    def _dependent_note(self) -> str:
        return f"Dependent Variable: {self._design.dependent_name}"

    def variables_table(self) -> ResultTable:
        columns = (
            ColumnNode("Model"),
            ColumnNode("Variables Entered", key="Entered"),
            ColumnNode("Variables Removed", key="Removed"),
            ColumnNode("Method"),
        )
        row = RowNode(("1",), {
            'Entered': ", ".join(self._design.predictor_names),
            'Removed': None,
            'Method': "Enter",
        })
        return ResultTable("Variables Entered/Removed", columns, (row,),
                           footnote=self._dependent_note())

    def model_summary_table(self) -> ResultTable:
        p = self.params
        columns = (
            ColumnNode("Model"),
            ColumnNode("R"),
            ColumnNode("R Square", key="RSquare"),
            ColumnNode("Adjusted R Square", key="AdjustedRSquare"),
            ColumnNode("Std. Error of the Estimate", key="StdErrorEstimate"),
            ColumnNode("Durbin-Watson", key="DurbinWatson"),
        )
        row = RowNode(("1",), {
            'R': float(np.sqrt(max(p.r_squared, 0.0))),
            'RSquare': p.r_squared,
            'AdjustedRSquare': p.adjusted_r_squared,
            'StdErrorEstimate': self.std_error_of_estimate,
            'DurbinWatson': p.durbin_watson,
        })
        note = (f"Predictors: (Constant), {', '.join(self._design.predictor_names)}. "
                f"{self._dependent_note()}")
        return ResultTable("Model Summary", columns, (row,), footnote=note)

    def r_square_change_table(self) -> ResultTable:
        p = self.params
        columns = (
            ColumnNode("Model"),
            ColumnNode("Change Statistics", children=(
                ColumnNode("R Square Change", key="RSquareChange"),
                ColumnNode("F Change", key="FChange"),
                ColumnNode("df1"),
                ColumnNode("df2"),
                ColumnNode("Sig. F Change", key="SigFChange"),
            )),
        )
        row = RowNode(("1",), {
            'RSquareChange': p.r_squared,
            'FChange': p.f_statistic,
            'df1': p.df_model,
            'df2': p.df_residual,
            'SigFChange': p.f_p_value,
        })
        return ResultTable("R Square Change", columns, (row,))

    def anova_table(self) -> ResultTable:
        p = self.params
        columns = (
            ColumnNode("Model"),
            ColumnNode("Sum of Squares", key="SumOfSquares"),
            ColumnNode("df"),
            ColumnNode("Mean Square", key="MeanSquare"),
            ColumnNode("F"),
            ColumnNode("Sig."),
        )
        children = (
            RowNode(("Regression",), {
                'SumOfSquares': p.ssr,
                'df': p.df_model,
                'MeanSquare': p.ssr / p.df_model,
                'F': p.f_statistic,
                'Sig.': p.f_p_value,
            }),
            RowNode(("Residual",), {
                'SumOfSquares': p.sse,
                'df': p.df_residual,
                'MeanSquare': p.sigma2,
            }),
            RowNode(("Total",), {
                'SumOfSquares': p.sst,
                'df': p.df_model + p.df_residual,
            }),
        )
        return ResultTable("ANOVA", columns, (RowNode(("1",), children=children),),
                           footnote=self._dependent_note())

    def coefficients_table(self) -> ResultTable:
        p = self.params
        level = int(round(self._design.conf_level * 100))
        columns = (
            ColumnNode("Model"),
            ColumnNode("Unstandardized Coefficients", children=(
                ColumnNode("B"),
                ColumnNode("Std. Error", key="StdError"),
            )),
            ColumnNode("Standardized Coefficients", children=(
                ColumnNode("Beta"),
            )),
            ColumnNode("t"),
            ColumnNode("Sig."),
            ColumnNode(f"{level}.0% Confidence Interval for B", children=(
                ColumnNode("Lower Bound", key="LowerBound"),
                ColumnNode("Upper Bound", key="UpperBound"),
            )),
            ColumnNode("Correlations", children=(
                ColumnNode("Zero-order", key="ZeroOrder"),
                ColumnNode("Partial"),
                ColumnNode("Part"),
            )),
            ColumnNode("Collinearity Statistics", children=(
                ColumnNode("Tolerance"),
                ColumnNode("VIF"),
            )),
        )
        rows = []
        for j, name in enumerate(self._design.parameter_names):
            cells: dict[str, Any] = {
                'B': _f(p.coefficients[j]),
                'StdError': _f(p.standard_errors[j]),
                't': _f(p.t_values[j]),
                'Sig.': _f(p.p_values[j]),
                'LowerBound': _f(p.ci_lower[j]),
                'UpperBound': _f(p.ci_upper[j]),
            }
            if j > 0:
                i = j - 1
                cells.update({
                    'Beta': _f(p.standardized_coefficients[j]),
                    'ZeroOrder': _f(p.correlations.zero_order[i]),
                    'Partial': _f(p.correlations.partial[i]),
                    'Part': _f(p.correlations.part[i]),
                    'Tolerance': _f(p.collinearity.tolerance[i]),
                    'VIF': _f(p.collinearity.vif[i]),
                })
            rows.append(RowNode(("1", name), cells))
        return ResultTable("Coefficients", columns, tuple(rows),
                           footnote=self._dependent_note())

    def coefficient_correlations_table(self) -> ResultTable:
        p = self.params
        names = self._design.predictor_names
        columns = (
            ColumnNode("Model"),
            ColumnNode("Statistic"),
            ColumnNode("Predictor"),
        ) + tuple(ColumnNode(name, key=f"C_{j}") for j, name in enumerate(names))

        def block(label: str, matrix: NDArray[np.floating[Any]]) -> RowNode:
            children = tuple(
                RowNode((name,), {f"C_{j}": _f(matrix[i + 1, j + 1])
                                  for j in range(len(names))})
                for i, name in enumerate(names)
            )
            return RowNode((label,), children=children)

        model = RowNode(("1",), children=(
            block("Correlations", p.correlation),
            block("Covariances", p.covariance),
        ))
        return ResultTable("Coefficient Correlations", columns, (model,),
                           footnote=self._dependent_note())

    def collinearity_table(self) -> ResultTable:
        c = self.params.collinearity
        names = self._design.parameter_names
        columns = (
            ColumnNode("Model"),
            ColumnNode("Dimension"),
            ColumnNode("Eigenvalue"),
            ColumnNode("Condition Index", key="ConditionIndex"),
            ColumnNode("Variance Proportions", children=tuple(
                ColumnNode(name, key=f"VP_{j}") for j, name in enumerate(names)
            )),
        )
        dimensions = []
        for d in range(len(c.eigenvalues)):
            cells: dict[str, Any] = {
                'Eigenvalue': _f(c.eigenvalues[d]),
                'ConditionIndex': _f(c.condition_indices[d]),
            }
            for j in range(len(names)):
                cells[f"VP_{j}"] = _f(c.variance_proportions[d, j])
            dimensions.append(RowNode((str(d + 1),), cells))
        footnote = self._dependent_note()
        if not c.converged:
            footnote += (f". Eigenvalues are approximate: the Jacobi solver stopped "
                         f"after {c.iterations} rotations")
        return ResultTable("Collinearity Diagnostics", columns,
                           (RowNode(("1",), children=tuple(dimensions)),),
                           footnote=footnote)

    def residuals_statistics_table(self) -> ResultTable:
        cases = self.params.cases
        columns = (
            ColumnNode("Statistic"),
            ColumnNode("Minimum"),
            ColumnNode("Maximum"),
            ColumnNode("Mean"),
            ColumnNode("Std. Deviation", key="StdDeviation"),
            ColumnNode("N"),
        )
        entries = (
            ("Predicted Value", cases.predicted),
            ("Std. Predicted Value", cases.standardized_predicted),
            ("Standard Error of Predicted Value", cases.se_mean_prediction),
            ("Residual", cases.residual),
            ("Std. Residual", cases.standardized_residual),
            ("Stud. Residual", cases.studentized_residual),
            ("Deleted Residual", cases.deleted_residual),
            ("Stud. Deleted Residual", cases.studentized_deleted_residual),
            ("Mahal. Distance", cases.mahalanobis_distance),
            ("Cook's Distance", cases.cooks_distance),
            ("Centered Leverage Value", cases.centered_leverage),
        )
        rows = tuple(RowNode((label,), _summary_stats(values)) for label, values in entries)
        return ResultTable("Residuals Statistics", columns, rows,
                           footnote=self._dependent_note())

    def casewise_table(self, threshold: float = 3.0) -> ResultTable:
        cases = self.params.cases
        dep = self._design.dependent_name
        columns = (
            ColumnNode("Case Number", key="CaseNumber"),
            ColumnNode("Std. Residual", key="StdResidual"),
            ColumnNode(dep, key="Observed"),
            ColumnNode("Predicted Value", key="Predicted"),
            ColumnNode("Residual"),
        )
        outliers = np.flatnonzero(np.abs(cases.standardized_residual) >= threshold)
        rows = tuple(
            RowNode((str(int(self._design.case_index[i]) + 1),), {
                'StdResidual': _f(cases.standardized_residual[i]),
                'Observed': _f(self._design.y[i]),
                'Predicted': _f(cases.predicted[i]),
                'Residual': _f(cases.residual[i]),
            })
            for i in outliers
        )
        note = self._dependent_note()
        if not rows:
            note = f"No case has |Std. Residual| >= {threshold:g}. " + note
        return ResultTable("Casewise Diagnostics", columns, rows, footnote=note)

    def tables(
        self,
        include: Sequence[str] | None = None,
        casewise_threshold: float = 3.0,
    ) -> tuple[ResultTable, ...]:
        """
        Render the requested tables, in standard order.

        Args:
            include: Subset of REGRESSION_TABLES (default: all)
            casewise_threshold: |standardized residual| cut-off for casewise rows

        Raises:
            ValidationError: On an unknown table name
        """
        wanted = REGRESSION_TABLES if include is None else tuple(include)
        unknown = [t for t in wanted if t not in REGRESSION_TABLES]
        if unknown:
            raise ValidationError(f"tables: unknown table names {unknown}")

        builders = {
            'variables': self.variables_table,
            'model_summary': self.model_summary_table,
            'r_square_change': self.r_square_change_table,
            'anova': self.anova_table,
            'coefficients': self.coefficients_table,
            'coefficient_correlations': self.coefficient_correlations_table,
            'collinearity_diagnostics': self.collinearity_table,
            'residuals_statistics': self.residuals_statistics_table,
            'casewise_diagnostics': lambda: self.casewise_table(casewise_threshold),
        }
        return tuple(builders[name]() for name in REGRESSION_TABLES if name in wanted)

    def series(self, names: Sequence[str]) -> dict[str, tuple[float | None, ...]]:
        """
        Case-aligned series for persistence.

        Each series has one entry per original case; cases removed by
        listwise deletion are None.

        Raises:
            ValidationError: On an unknown series name
        """
        unknown = [s for s in names if s not in REGRESSION_SERIES]
        if unknown:
            raise ValidationError(f"save: unknown series names {unknown}")

        cases = self.params.cases
        out: dict[str, tuple[float | None, ...]] = {}
        for name in names:
            values = getattr(cases, name)
            full: list[float | None] = [None] * self._design.n_total
            for position, value in zip(self._design.case_index, values):
                full[int(position)] = float(value) if np.isfinite(value) else None
            out[name] = tuple(full)
        return out

    def summary(self) -> str:
        p = self.params
        lines = [
            "Regression Diagnostics",
            "=" * 60,
            f"Dependent: {self._design.dependent_name}",
            f"Cases: {self._design.n} (excluded {self._design.n_total - self._design.n})",
            f"R-squared: {p.r_squared:.6f}",
            f"Adj. R-squared: {p.adjusted_r_squared:.6f}",
            f"F({p.df_model}, {p.df_residual}) = {p.f_statistic:.4f}, p = {p.f_p_value:.4g}",
            "",
            f"{'Parameter':<16} {'B':>12} {'Std.Error':>12} {'t':>10} {'Sig.':>8}",
            "-" * 60,
        ]
        for j, name in enumerate(self._design.parameter_names):
            lines.append(
                f"{name:<16} {p.coefficients[j]:12.6f} {p.standard_errors[j]:12.6f} "
                f"{p.t_values[j]:10.3f} {p.p_values[j]:8.4f}"
            )
        lines.append("-" * 60)
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"RegressionSolution(n={self._design.n}, p={self._design.p}, "
            f"r_squared={self.r_squared:.4f})"
        )
