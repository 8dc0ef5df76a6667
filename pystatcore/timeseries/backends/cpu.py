"""
CPU backends for classical decomposition and CSS ARIMA.
"""

import logging
import math
from typing import Any

import numpy as np

from pystatcore.core.exceptions import InsufficientDataError
from pystatcore.core.result import Result
from pystatcore.core.compute.timing import Timer
from pystatcore.distributions import student_t_two_sided_p, f_sf
from pystatcore.timeseries.design import DecompositionDesign, ArimaDesign
from pystatcore.timeseries._common import DecompositionParams, ArimaParams
from pystatcore.timeseries._decomposition import decompose_series
from pystatcore.timeseries._evaluation import forecast_evaluation
from pystatcore.timeseries._arima import (
    difference,
    fit_css,
    parameter_covariance,
    one_step_predictions,
    forecast_ahead,
)

logger = logging.getLogger(__name__)


class CPUClassicalDecompositionBackend:
    """Classical (moving-average) decomposition."""

    @property
    def name(self) -> str:
        return 'cpu_classical'

    def solve(self, design: DecompositionDesign) -> Result[DecompositionParams]:
        timer = Timer()
        timer.start()

        with timer.section('decomposition'):
            comp = decompose_series(design.y, design.period, design.method, design.trend)

        with timer.section('evaluation'):
            evaluation = forecast_evaluation(design.y, comp.forecast)

        timer.stop()
        logger.debug(
            "Decomposition %s of %r: n=%d, period=%d",
            design.method, design.name, design.n, design.period,
        )

        params = DecompositionParams(
            centered_moving_average=comp.cma,
            seasonal_indices=comp.indices,
            seasonal=comp.seasonal,
            deseasonalized=comp.deseasonalized,
            trend=comp.trend,
            irregular=comp.irregular,
            forecast=comp.forecast,
            trend_fit=comp.trend_fit,
            evaluation=evaluation,
        )
        info: dict[str, Any] = {
            'method': design.method,
            'trend': design.trend if design.method == 'multiplicative' else 'none',
            'periodicity': design.period,
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )


def _parameter_names(design: ArimaDesign) -> tuple[str, ...]:
    names = ["Constant"] if design.include_constant else []
    names += [f"AR({i + 1})" for i in range(design.p)]
    names += [f"MA({j + 1})" for j in range(design.q)]
    return tuple(names)


def _criteria(
    z_eff: np.ndarray,
    residuals: np.ndarray,
    k: int,
    k_regressors: int,
) -> dict[str, float]:
    """Model-selection and fit statistics on the differenced series."""
    m = residuals.size
    sse = float(residuals @ residuals)
    df = m - k
    sigma2 = sse / df
    mse = sse / m
    if sse > 0:
        log_lik = -0.5 * m * (1.0 + math.log(2.0 * math.pi) + math.log(mse))
        aic = -2.0 * log_lik + 2.0 * k
        sbc = -2.0 * log_lik + k * math.log(m)
        hqc = -2.0 * log_lik + 2.0 * k * math.log(math.log(m))
        dw = float(np.sum(np.diff(residuals) ** 2) / sse)
    else:
        log_lik = aic = sbc = hqc = dw = float('nan')

    sst = float(np.sum((z_eff - np.mean(z_eff)) ** 2))
    if sst > 0:
        r2 = 1.0 - sse / sst
        adj_r2 = 1.0 - (1.0 - r2) * (m - 1) / df
    else:
        r2 = adj_r2 = float('nan')

    if k_regressors > 0 and math.isfinite(r2) and r2 < 1.0:
        f_stat = (r2 / k_regressors) / ((1.0 - r2) / df)
        f_prob = f_sf(max(f_stat, 0.0), k_regressors, df)
    else:
        f_stat = f_prob = float('nan')

    return {
        'Log Likelihood': log_lik,
        'Akaike Info Criterion': aic,
        'Schwarz Criterion': sbc,
        'Hannan-Quinn Criterion': hqc,
        'Sum Squared Resid': sse,
        'Mean Squared Error': mse,
        'Residual Variance': sigma2,
        'S.E. of Regression': math.sqrt(sigma2),
        'R-squared': r2,
        'Adjusted R-squared': adj_r2,
        'Mean Dependent Var': float(np.mean(z_eff)),
        'S.D. Dependent Var': float(np.std(z_eff, ddof=1)) if m > 1 else float('nan'),
        'Durbin-Watson Stat': dw,
        'F-statistic': f_stat,
        'Prob(F-statistic)': f_prob,
    }


class CPUCssArimaBackend:
    """ARIMA estimation by conditional sum of squares (BFGS)."""

    @property
    def name(self) -> str:
        return 'cpu_css'

    def solve(self, design: ArimaDesign) -> Result[ArimaParams]:
        """
        Raises:
            InsufficientDataError: Too few observations after differencing
            ConvergenceError: If the optimizer fails
            SingularMatrixError: If the information matrix is singular
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []
        p, d, q = design.order
        k = design.n_parameters

        with timer.section('differencing'):
            z = difference(design.y, d)
            m = z.size - p
            if m - k < 1:
                raise InsufficientDataError(
                    f"ARIMA({p},{d},{q}) needs more than {k} effective observations, "
                    f"got {m}",
                    required=k + 1,
                    actual=m,
                )

        with timer.section('optimization'):
            fit = fit_css(z, p, q, design.include_constant, design.max_iter)
        if fit.precision_warning:
            logger.warning("ARIMA optimizer stopped early: %s", fit.message)
            warnings_list.append(
                f"Optimization stopped after {fit.iterations} iterations: {fit.message}"
            )

        with timer.section('standard_errors'):
            df = m - k
            sigma2 = fit.sse / df
            cov = parameter_covariance(fit.params, z, p, q, design.include_constant, sigma2)
            se = np.sqrt(np.clip(np.diag(cov), 0.0, None))
            with np.errstate(divide='ignore', invalid='ignore'):
                t_values = fit.params / se
            p_values = np.array([
                float('nan') if math.isnan(t) else student_t_two_sided_p(float(t), df)
                for t in t_values
            ])

        with timer.section('criteria'):
            k_regressors = p + q
            criteria = _criteria(z[p:], fit.residuals, k, k_regressors)

        with timer.section('forecast'):
            fitted = one_step_predictions(design.y, fit.residuals, d, p)
            ahead = forecast_ahead(
                design.y, z, fit.residuals, fit.params,
                p, d, q, design.include_constant, design.forecast_horizon,
            )
            evaluation = forecast_evaluation(design.y, fitted)

        timer.stop()
        logger.debug("ARIMA(%d,%d,%d) of %r: sse=%.6g", p, d, q, design.name, fit.sse)

        params = ArimaParams(
            names=_parameter_names(design),
            coefficients=fit.params,
            standard_errors=se,
            t_values=t_values,
            p_values=p_values,
            residuals=fit.residuals,
            n_effective=m,
            df_residual=df,
            criteria=criteria,
            fitted=fitted,
            forecast=np.concatenate([fitted, ahead]),
            evaluation=evaluation,
        )
        info: dict[str, Any] = {
            'method': 'css',
            'order': design.order,
            'iterations': fit.iterations,
            'converged': not fit.precision_warning,
            'message': fit.message,
        }
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
