"""
Time-series solutions: accessors and ResultTable rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pystatcore.core.result import Result
from pystatcore.core.table import ColumnNode, RowNode, ResultTable
from pystatcore.timeseries._common import DecompositionParams, ArimaParams
from pystatcore.timeseries._evaluation import EVALUATION_MEASURES
from pystatcore.timeseries._timespec import generate_dates, spec_label

if TYPE_CHECKING:
    from pystatcore.timeseries.design import DecompositionDesign, ArimaDesign

_DESCRIPTION_COLUMNS = (ColumnNode("Description"), ColumnNode("Value"))


def _nullable(values: NDArray[np.floating[Any]]) -> tuple[float | None, ...]:
    return tuple(float(v) if np.isfinite(v) else None for v in values)


def _description(title: str, items: list[tuple[str, Any]]) -> ResultTable:
    rows = tuple(RowNode((label,), {'Value': value}) for label, value in items)
    return ResultTable(title, _DESCRIPTION_COLUMNS, rows)


def _evaluation_table(title: str, evaluation: dict[str, float]) -> ResultTable:
    rows = tuple(RowNode((m,), {'Value': evaluation[m]}) for m in EVALUATION_MEASURES)
    return ResultTable(title, (ColumnNode("Measure"), ColumnNode("Value")), rows)


def _series_period(spec, n: int, start_period: int, start_position: int) -> str:
    if spec is None:
        return f"1 - {n}"
    labels = generate_dates(spec, n, start_period, start_position)
    return f"{labels[0]} - {labels[-1]}"


@dataclass
class DecompositionSolution:
    """User-facing classical decomposition."""
    _result: Result[DecompositionParams]
    _design: 'DecompositionDesign'

    @property
    def params(self) -> DecompositionParams:
        return self._result.params

    @property
    def seasonal_indices(self) -> NDArray[np.floating[Any]]:
        return self._result.params.seasonal_indices

    @property
    def trend(self) -> NDArray[np.floating[Any]]:
        return self._result.params.trend

    @property
    def seasonal(self) -> NDArray[np.floating[Any]]:
        return self._result.params.seasonal

    @property
    def irregular(self) -> NDArray[np.floating[Any]]:
        return self._result.params.irregular

    @property
    def forecast(self) -> NDArray[np.floating[Any]]:
        return self._result.params.forecast

    @property
    def evaluation(self) -> dict[str, float]:
        return self._result.params.evaluation

    @property
    def trend_method(self) -> str:
        return self._result.info['trend']

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    def description_table(self) -> ResultTable:
        d = self._design
        return _description("Description Table", [
            ("Decomposition Method", f"{d.method.capitalize()} Decomposition"),
            ("Formula of Calculating Decomposition", "Classical Decomposition"),
            ("Trend Method", self.trend_method),
            ("Series Name", d.name),
            ("Series Period", _series_period(d.time_spec, d.n, d.start_period, d.start_position)),
            ("Periodicity", d.period),
            ("Observations", d.n),
        ])

    def seasonal_indices_table(self) -> ResultTable:
        period = self._design.period
        spec = self._design.time_spec
        title = "Seasonal Indices" if spec is None else f"Seasonal Indices {spec_label(spec)}"
        columns = (ColumnNode("Period"), ColumnNode("Seasonal Index", key="SeasonalIndex"))
        rows = tuple(
            RowNode((f"period {i + 1} of {period}",), {'SeasonalIndex': float(v)})
            for i, v in enumerate(self.seasonal_indices)
        )
        return ResultTable(title, columns, rows)

    def trend_equation_table(self) -> ResultTable | None:
        fit = self._result.params.trend_fit
        if fit is None:
            return None
        rows = (
            RowNode(("Equation",), {'Value': fit.equation(self._design.decimals)}),
            RowNode(("a",), {'Value': fit.a}),
            RowNode(("b",), {'Value': fit.b}),
        )
        return ResultTable(f"Trend Equation ({fit.method.capitalize()})",
                           (ColumnNode("Term"), ColumnNode("Value")), rows)

    def evaluation_table(self) -> ResultTable:
        return _evaluation_table("Decomposition Forecasting Evaluation", self.evaluation)

    def tables(self) -> tuple[ResultTable, ...]:
        tables = [self.description_table(), self.seasonal_indices_table()]
        trend = self.trend_equation_table()
        if trend is not None:
            tables.append(trend)
        tables.append(self.evaluation_table())
        return tuple(tables)

    def series(self, save_forecast: bool = False) -> dict[str, tuple[float | None, ...]]:
        p = self._result.params
        out = {
            'trend': _nullable(p.trend),
            'seasonal': _nullable(p.seasonal),
            'irregular': _nullable(p.irregular),
            'forecast': _nullable(p.forecast),
            'centered_moving_average': _nullable(p.centered_moving_average),
        }
        if save_forecast:
            out[f"{self._design.name} Decomposition"] = _nullable(p.forecast)
        return out

    def __repr__(self) -> str:
        return (
            f"DecompositionSolution(method={self._design.method!r}, "
            f"n={self._design.n}, period={self._design.period})"
        )


@dataclass
class ArimaSolution:
    """User-facing ARIMA fit."""
    _result: Result[ArimaParams]
    _design: 'ArimaDesign'

    @property
    def params(self) -> ArimaParams:
        return self._result.params

    @property
    def order(self) -> tuple[int, int, int]:
        return self._design.order

    @property
    def coefficients(self) -> dict[str, float]:
        p = self._result.params
        return {name: float(v) for name, v in zip(p.names, p.coefficients)}

    @property
    def criteria(self) -> dict[str, float]:
        return self._result.params.criteria

    @property
    def forecast(self) -> NDArray[np.floating[Any]]:
        return self._result.params.forecast

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    def _order_label(self, sep: str = ",") -> str:
        p, d, q = self.order
        return f"({p}{sep}{d}{sep}{q})"

    def description_table(self) -> ResultTable:
        d = self._design
        return _description("Description Table", [
            ("Model", f"ARIMA{self._order_label()}"),
            ("Series Name", d.name),
            ("Series Period", _series_period(d.time_spec, d.n, d.start_period, d.start_position)),
            ("Observations", d.n),
            ("Effective Observations", self.params.n_effective),
            ("Estimation Method", "Conditional Sum of Squares"),
        ])

    def coefficient_table(self) -> ResultTable:
        p = self.params
        columns = (
            ColumnNode("Variable"),
            ColumnNode("Coefficient"),
            ColumnNode("Std. Error", key="StdError"),
            ColumnNode("t-Statistic", key="tStatistic"),
            ColumnNode("Prob."),
        )
        rows = tuple(
            RowNode((name,), {
                'Coefficient': float(p.coefficients[i]),
                'StdError': float(p.standard_errors[i]),
                'tStatistic': float(p.t_values[i]),
                'Prob.': float(p.p_values[i]),
            })
            for i, name in enumerate(p.names)
        )
        return ResultTable(f"Coefficient Test for ARIMA{self._order_label()}", columns, rows)

    def criteria_table(self) -> ResultTable:
        rows = tuple(RowNode((label,), {'Value': value})
                     for label, value in self.criteria.items())
        return ResultTable(f"Criteria Selection for ARIMA{self._order_label()}",
                           (ColumnNode("Criterion"), ColumnNode("Value")), rows)

    def evaluation_table(self) -> ResultTable:
        return _evaluation_table("Forecasting Evaluation", self.params.evaluation)

    def tables(self, forecast: bool = False) -> tuple[ResultTable, ...]:
        tables = [self.description_table(), self.coefficient_table(), self.criteria_table()]
        if forecast:
            tables.append(self.evaluation_table())
        return tuple(tables)

    @property
    def forecast_name(self) -> str:
        return f"{self._design.name} ARIMA {self._order_label()}"

    def series(self, save_forecast: bool = False) -> dict[str, tuple[float | None, ...]]:
        if not save_forecast:
            return {}
        return {self.forecast_name: _nullable(self.forecast)}

    def summary(self) -> str:
        p = self.params
        lines = [
            f"ARIMA{self._order_label()} - Conditional Sum of Squares",
            "=" * 60,
            f"Series: {self._design.name}  Observations: {self._design.n}  "
            f"Effective: {p.n_effective}",
            "",
            f"{'Variable':<12} {'Coefficient':>12} {'Std.Error':>12} {'t':>10} {'Prob.':>8}",
            "-" * 60,
        ]
        for i, name in enumerate(p.names):
            lines.append(
                f"{name:<12} {p.coefficients[i]:12.6f} {p.standard_errors[i]:12.6f} "
                f"{p.t_values[i]:10.3f} {p.p_values[i]:8.4f}"
            )
        lines.append("-" * 60)
        for key in ('Akaike Info Criterion', 'Schwarz Criterion', 'Hannan-Quinn Criterion'):
            lines.append(f"{key}: {p.criteria[key]:.6f}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ArimaSolution(order={self.order}, n={self._design.n})"
