"""
Chi-square goodness-of-fit solution and its tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from pystatcore.core.result import Result
from pystatcore.core.table import ColumnNode, RowNode, ResultTable
from pystatcore.categorical._common import ChiSquareParams
from pystatcore.categorical._chisq_gof import GoodnessOfFit

if TYPE_CHECKING:
    from pystatcore.categorical.design import ChiSquareDesign


def _category_label(value: float) -> str:
    return str(int(value))


@dataclass
class ChiSquareSolution:
    """User-facing chi-square goodness-of-fit results."""
    _result: Result[ChiSquareParams]
    _design: 'ChiSquareDesign'

    @property
    def tests(self) -> tuple[GoodnessOfFit, ...]:
        return self._result.params.tests

    @property
    def statistics(self) -> dict[str, float]:
        return {t.variable: t.statistic for t in self.tests}

    @property
    def p_values(self) -> dict[str, float]:
        return {t.variable: t.p_value for t in self.tests}

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    def frequency_table(self, test: GoodnessOfFit) -> ResultTable:
        """Observed/expected/residual per category for one variable."""
        columns = (
            ColumnNode("Category"),
            ColumnNode("Observed N", key="ObservedN"),
            ColumnNode("Expected N", key="ExpectedN"),
            ColumnNode("Residual"),
        )
        rows = [
            RowNode((_category_label(c),), {
                'ObservedN': int(test.observed[i]),
                'ExpectedN': float(test.expected[i]),
                'Residual': float(test.residual[i]),
            })
            for i, c in enumerate(test.categories)
        ]
        rows.append(RowNode(("Total",), {'ObservedN': test.n}))
        return ResultTable(test.variable, columns, tuple(rows))

    def combined_frequency_table(self) -> ResultTable:
        """All variables side by side over a specified range."""
        columns = tuple(
            ColumnNode(t.variable, children=(
                ColumnNode("Category", key=f"Category_{j}"),
                ColumnNode("Observed N", key=f"ObservedN_{j}"),
                ColumnNode("Expected N", key=f"ExpectedN_{j}"),
                ColumnNode("Residual", key=f"Residual_{j}"),
            ))
            for j, t in enumerate(self.tests)
        )
        k = self.tests[0].categories.size
        rows = []
        for i in range(k):
            cells: dict[str, Any] = {}
            for j, t in enumerate(self.tests):
                cells[f"Category_{j}"] = _category_label(t.categories[i])
                cells[f"ObservedN_{j}"] = int(t.observed[i])
                cells[f"ExpectedN_{j}"] = float(t.expected[i])
                cells[f"Residual_{j}"] = float(t.residual[i])
            rows.append(RowNode((str(i + 1),), cells))
        rows.append(RowNode(("Total",), {f"ObservedN_{j}": t.n for j, t in enumerate(self.tests)}))
        return ResultTable("Frequencies", (ColumnNode(""),) + columns, tuple(rows))

    def test_statistics_table(self) -> ResultTable:
        columns = (ColumnNode(""),) + tuple(
            ColumnNode(t.variable, key=f"V{j}") for j, t in enumerate(self.tests)
        )
        rows = (
            RowNode(("Chi-Square",), {f"V{j}": t.statistic for j, t in enumerate(self.tests)}),
            RowNode(("df",), {f"V{j}": t.df for j, t in enumerate(self.tests)}),
            RowNode(("Asymp. Sig.",), {f"V{j}": t.p_value for j, t in enumerate(self.tests)}),
        )
        notes = [
            f"{chr(ord('a') + j)}. {t.low_expected_note}"
            for j, t in enumerate(self.tests)
        ]
        return ResultTable("Test Statistics", columns, rows, footnote=" ".join(notes))

    def descriptive_table(self, descriptive: bool = True, quartiles: bool = False) -> ResultTable:
        columns: list[ColumnNode] = [ColumnNode("Variable"), ColumnNode("N")]
        if descriptive:
            columns += [
                ColumnNode("Mean"),
                ColumnNode("Std. Deviation", key="StdDeviation"),
                ColumnNode("Minimum"),
                ColumnNode("Maximum"),
            ]
        if quartiles:
            columns.append(ColumnNode("Percentiles", children=(
                ColumnNode("25th", key="P25"),
                ColumnNode("50th (Median)", key="P50"),
                ColumnNode("75th", key="P75"),
            )))
        rows = []
        for d in self._result.params.descriptives:
            cells: dict[str, Any] = {'N': d.n}
            if descriptive:
                cells.update({'Mean': d.mean, 'StdDeviation': d.std,
                              'Minimum': d.minimum, 'Maximum': d.maximum})
            if quartiles:
                cells.update({'P25': d.p25, 'P50': d.p50, 'P75': d.p75})
            rows.append(RowNode((d.variable,), cells))
        return ResultTable("Descriptive Statistics", tuple(columns), tuple(rows))

    def tables(self, descriptive: bool = False, quartiles: bool = False) -> tuple[ResultTable, ...]:
        """
        Descriptive Statistics (when requested), Frequencies, Test Statistics.

        With a specified range the frequencies of all variables share one
        table; otherwise each variable gets its own.
        """
        tables: list[ResultTable] = []
        if descriptive or quartiles:
            tables.append(self.descriptive_table(descriptive, quartiles))
        if self._design.range_specified:
            tables.append(self.combined_frequency_table())
        else:
            tables.extend(self.frequency_table(t) for t in self.tests)
        tables.append(self.test_statistics_table())
        return tuple(tables)

    def summary(self) -> str:
        lines = ["Chi-Square Goodness of Fit", "=" * 50]
        for t in self.tests:
            lines.append(
                f"{t.variable}: X-squared = {t.statistic:.4f}, df = {t.df}, "
                f"p-value = {t.p_value:.4g}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ChiSquareSolution(variables={list(self._design.names)})"
