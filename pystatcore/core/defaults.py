"""
Immutable per-analysis defaults.

Each analysis kind has one frozen defaults record. Options objects ask
resolve_defaults() for the record of their kind and fill every field the
caller left unset from it; nothing in this module can be modified at
runtime.
"""

from dataclasses import dataclass
from enum import Enum


class AnalysisKind(Enum):
    """Analyses the dispatcher can run."""
    REGRESSION_DIAGNOSTICS = 'regression_diagnostics'
    DECOMPOSITION = 'decomposition'
    ARIMA = 'arima'
    CHI_SQUARE = 'chi_square'


REGRESSION_TABLES = (
    'variables',
    'model_summary',
    'r_square_change',
    'anova',
    'coefficients',
    'coefficient_correlations',
    'collinearity_diagnostics',
    'residuals_statistics',
    'casewise_diagnostics',
)

REGRESSION_SERIES = (
    'predicted',
    'standardized_predicted',
    'se_mean_prediction',
    'residual',
    'standardized_residual',
    'studentized_residual',
    'deleted_residual',
    'studentized_deleted_residual',
    'leverage',
    'centered_leverage',
    'cooks_distance',
    'mahalanobis_distance',
    'mean_ci_lower',
    'mean_ci_upper',
    'individual_ci_lower',
    'individual_ci_upper',
)


@dataclass(frozen=True)
class RegressionDefaults:
    confidence_level: float = 0.95
    casewise_threshold: float = 3.0
    tables: tuple[str, ...] = REGRESSION_TABLES
    save: tuple[str, ...] = ()


@dataclass(frozen=True)
class DecompositionDefaults:
    method: str = 'additive'
    trend: str = 'linear'
    start_period: int = 1
    start_position: int = 1
    save_forecast: bool = False


@dataclass(frozen=True)
class ArimaDefaults:
    ar_order: int = 0
    diff_order: int = 0
    ma_order: int = 0
    include_constant: bool = True
    forecast: bool = False
    forecast_horizon: int = 0
    save_forecast: bool = False
    max_iter: int = 500
    min_observations: int = 20


@dataclass(frozen=True)
class ChiSquareDefaults:
    expected_range: str = 'get_from_data'
    lower: int | None = None
    upper: int | None = None
    expected_values: tuple[float, ...] | None = None
    descriptive: bool = False
    quartiles: bool = False


@dataclass(frozen=True)
class DispatchDefaults:
    timeout: float = 60.0
    executor: str = 'thread'
    max_workers: int | None = None


DefaultsRecord = RegressionDefaults | DecompositionDefaults | ArimaDefaults | ChiSquareDefaults

_DEFAULTS: dict[AnalysisKind, type] = {
    AnalysisKind.REGRESSION_DIAGNOSTICS: RegressionDefaults,
    AnalysisKind.DECOMPOSITION: DecompositionDefaults,
    AnalysisKind.ARIMA: ArimaDefaults,
    AnalysisKind.CHI_SQUARE: ChiSquareDefaults,
}


def resolve_defaults(kind: AnalysisKind) -> DefaultsRecord:
    """
    Defaults record for an analysis kind.

    Args:
        kind: AnalysisKind member, or its string value

    Returns:
        A fresh frozen defaults instance

    Raises:
        ValueError: If kind is not a known analysis kind
    """
    kind = AnalysisKind(kind)
    return _DEFAULTS[kind]()


def dispatch_defaults() -> DispatchDefaults:
    """Defaults for the job dispatcher (60 second wall-clock budget)."""
    return DispatchDefaults()
