"""
Forecast accuracy measures shared by decomposition and ARIMA.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

EVALUATION_MEASURES = ('ME', 'MSE', 'RMSE', 'MAE', 'MPE', 'MAPE')


def forecast_evaluation(
    actual: NDArray[np.floating[Any]],
    forecast: NDArray[np.floating[Any]],
) -> dict[str, float]:
    """
    Error measures over the positions where both values exist.

    Percentage measures skip positions where the actual value is zero.
    Measures with no usable positions are NaN.
    """
    mask = np.isfinite(actual) & np.isfinite(forecast)
    e = actual[mask] - forecast[mask]
    if e.size == 0:
        return {m: float('nan') for m in EVALUATION_MEASURES}

    mse = float(np.mean(e ** 2))
    out = {
        'ME': float(np.mean(e)),
        'MSE': mse,
        'RMSE': float(np.sqrt(mse)),
        'MAE': float(np.mean(np.abs(e))),
    }
    a = actual[mask]
    nonzero = a != 0
    if np.any(nonzero):
        pct = 100.0 * e[nonzero] / a[nonzero]
        out['MPE'] = float(np.mean(pct))
        out['MAPE'] = float(np.mean(np.abs(pct)))
    else:
        out['MPE'] = float('nan')
        out['MAPE'] = float('nan')
    return out
