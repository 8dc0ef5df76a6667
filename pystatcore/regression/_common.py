"""
Parameter payload for regression diagnostics.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.regression._residuals import CaseDiagnostics
from pystatcore.regression._collinearity import CollinearityDiagnostics
from pystatcore.regression._correlations import PredictorCorrelations


@dataclass(frozen=True)
class RegressionParams:
    """
    Immutable output of the regression backend.

    Sums of squares are weighted; degrees of freedom use the unweighted
    case count C.
    """
    coefficients: NDArray[np.floating[Any]]
    standard_errors: NDArray[np.floating[Any]]
    t_values: NDArray[np.floating[Any]]
    p_values: NDArray[np.floating[Any]]
    ci_lower: NDArray[np.floating[Any]]
    ci_upper: NDArray[np.floating[Any]]
    standardized_coefficients: NDArray[np.floating[Any]]
    covariance: NDArray[np.floating[Any]]
    correlation: NDArray[np.floating[Any]]
    sse: float
    ssr: float
    sst: float
    df_model: int
    df_residual: int
    sigma2: float
    r_squared: float
    adjusted_r_squared: float
    f_statistic: float
    f_p_value: float
    durbin_watson: float
    cases: CaseDiagnostics
    collinearity: CollinearityDiagnostics
    correlations: PredictorCorrelations
