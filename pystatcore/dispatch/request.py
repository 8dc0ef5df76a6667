"""
AnalysisRequest and the per-kind options records.

Options fields left as None are filled from the frozen defaults of their
analysis kind (see pystatcore.core.defaults), so a request is always
complete once constructed.
"""

from dataclasses import dataclass, fields
from typing import Any, Sequence

from pystatcore.core.defaults import AnalysisKind, resolve_defaults
from pystatcore.core.exceptions import ValidationError
from pystatcore.core.sample import Sample


def _fill_from_defaults(options: Any, kind: AnalysisKind) -> None:
    defaults = resolve_defaults(kind)
    for f in fields(defaults):
        if getattr(options, f.name) is None:
            object.__setattr__(options, f.name, getattr(defaults, f.name))


@dataclass(frozen=True)
class RegressionOptions:
    """
    Attributes:
        confidence_level: Level of coefficient and prediction intervals
        casewise_threshold: |standardized residual| listed in Casewise Diagnostics
        tables: Table names to render (default: all)
        save: Case series to return for persistence
    """
    confidence_level: float | None = None
    casewise_threshold: float | None = None
    tables: Sequence[str] | None = None
    save: Sequence[str] | None = None

    def __post_init__(self):
        _fill_from_defaults(self, AnalysisKind.REGRESSION_DIAGNOSTICS)
        object.__setattr__(self, 'tables', tuple(self.tables))
        object.__setattr__(self, 'save', tuple(self.save))


@dataclass(frozen=True)
class DecompositionOptions:
    time_spec: str | None = None
    method: str | None = None
    trend: str | None = None
    start_period: int | None = None
    start_position: int | None = None
    save_forecast: bool | None = None

    def __post_init__(self):
        _fill_from_defaults(self, AnalysisKind.DECOMPOSITION)


@dataclass(frozen=True)
class ArimaOptions:
    """
    Attributes:
        forecast: Render the Forecasting Evaluation table
        forecast_horizon: Out-of-sample steps
        save_forecast: Return the forecast series for persistence
    """
    ar_order: int | None = None
    diff_order: int | None = None
    ma_order: int | None = None
    include_constant: bool | None = None
    forecast: bool | None = None
    forecast_horizon: int | None = None
    save_forecast: bool | None = None
    max_iter: int | None = None
    min_observations: int | None = None
    time_spec: str | None = None
    start_period: int = 1
    start_position: int = 1

    def __post_init__(self):
        _fill_from_defaults(self, AnalysisKind.ARIMA)


@dataclass(frozen=True)
class ChiSquareOptions:
    expected_range: str | None = None
    lower: int | None = None
    upper: int | None = None
    expected_values: Sequence[float] | None = None
    descriptive: bool | None = None
    quartiles: bool | None = None

    def __post_init__(self):
        _fill_from_defaults(self, AnalysisKind.CHI_SQUARE)
        if self.expected_values is not None:
            object.__setattr__(self, 'expected_values', tuple(self.expected_values))


AnalysisOptions = RegressionOptions | DecompositionOptions | ArimaOptions | ChiSquareOptions

_OPTIONS_TYPES: dict[AnalysisKind, type] = {
    AnalysisKind.REGRESSION_DIAGNOSTICS: RegressionOptions,
    AnalysisKind.DECOMPOSITION: DecompositionOptions,
    AnalysisKind.ARIMA: ArimaOptions,
    AnalysisKind.CHI_SQUARE: ChiSquareOptions,
}


@dataclass(frozen=True)
class AnalysisRequest:
    """
    One analysis to run.

    Time-series analyses read the dependent sample; the chi-square test
    reads its test variables from independents.

    Use the per-kind constructors (regression(), decomposition(), arima(),
    chi_square()) rather than building this directly.

    Raises:
        ValidationError: If the options record does not match the kind
    """
    kind: AnalysisKind
    dependent: Sample | None = None
    independents: tuple[Sample, ...] = ()
    weights: Sample | None = None
    options: AnalysisOptions | None = None

    def __post_init__(self):
        kind = AnalysisKind(self.kind)
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'independents', tuple(self.independents))
        expected = _OPTIONS_TYPES[kind]
        if self.options is None:
            object.__setattr__(self, 'options', expected())
        elif not isinstance(self.options, expected):
            raise ValidationError(
                f"options: {kind.value} requires {expected.__name__}, "
                f"got {type(self.options).__name__}"
            )

    @classmethod
    def regression(
        cls,
        dependent: Sample | None,
        independents: Sequence[Sample],
        weights: Sample | None = None,
        **options: Any,
    ) -> 'AnalysisRequest':
        return cls(
            AnalysisKind.REGRESSION_DIAGNOSTICS,
            dependent=dependent,
            independents=tuple(independents),
            weights=weights,
            options=RegressionOptions(**options),
        )

    @classmethod
    def decomposition(
        cls,
        series: Sample | None,
        time_spec: str | None,
        **options: Any,
    ) -> 'AnalysisRequest':
        return cls(
            AnalysisKind.DECOMPOSITION,
            dependent=series,
            options=DecompositionOptions(time_spec=time_spec, **options),
        )

    @classmethod
    def arima(cls, series: Sample | None, **options: Any) -> 'AnalysisRequest':
        return cls(AnalysisKind.ARIMA, dependent=series, options=ArimaOptions(**options))

    @classmethod
    def chi_square(cls, variables: Sequence[Sample], **options: Any) -> 'AnalysisRequest':
        return cls(
            AnalysisKind.CHI_SQUARE,
            independents=tuple(variables),
            options=ChiSquareOptions(**options),
        )
