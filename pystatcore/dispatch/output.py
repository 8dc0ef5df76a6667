"""
AnalysisOutput: the success value returned across the job boundary.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from pystatcore.core.table import ResultTable


@dataclass(frozen=True)
class AnalysisOutput:
    """
    Tables plus plain numeric series for persistence.

    Attributes:
        title: Analysis title
        tables: Rendered result tables, in display order
        series: Case-aligned columns (residuals, forecasts); None marks an
            undefined position
        warnings: Non-fatal issues raised while computing
        timing: Seconds per computation section
    """
    title: str
    tables: tuple[ResultTable, ...]
    series: Mapping[str, tuple[float | None, ...]] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()
    timing: Mapping[str, float] | None = None

    def __post_init__(self):
        object.__setattr__(self, 'tables', tuple(self.tables))
        object.__setattr__(self, 'series', dict(self.series))
        object.__setattr__(self, 'warnings', tuple(self.warnings))

    def table(self, title: str) -> ResultTable:
        """
        First table with the given title.

        Raises:
            KeyError: If no table has that title
        """
        for table in self.tables:
            if table.title == title:
                return table
        raise KeyError(f"No table titled {title!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            'title': self.title,
            'tables': [t.to_dict() for t in self.tables],
            'series': {k: list(v) for k, v in self.series.items()},
            'warnings': list(self.warnings),
        }
