"""
CPU backend for regression diagnostics.

Solves the weighted normal equations with the Gauss-Jordan kernel and
derives every diagnostic from the single (X'WX)^{-1}.
"""

import logging
import math
from typing import Any

import numpy as np

from pystatcore.core.result import Result
from pystatcore.core.compute.timing import Timer
from pystatcore.core.compute.linalg import multiply
from pystatcore.distributions import student_t_two_sided_p, student_t_quantile, f_sf
from pystatcore.regression.design import RegressionDesign
from pystatcore.regression._common import RegressionParams
from pystatcore.regression._ols import fit_wls, weighted_mean, weighted_sd
from pystatcore.regression._residuals import case_diagnostics
from pystatcore.regression._collinearity import collinearity_diagnostics
from pystatcore.regression._correlations import coefficient_covariance, predictor_correlations

logger = logging.getLogger(__name__)


def _two_sided_p(t: float, df: int) -> float:
    if math.isnan(t):
        return float('nan')
    return student_t_two_sided_p(t, df)


def _f_test(ssr: float, sse: float, df1: int, df2: int, exact: bool) -> tuple[float, float]:
    """F = (SSR/df1) / (SSE/df2) and its upper-tail p-value."""
    if exact:
        if ssr > 0:
            return math.inf, 0.0
        return float('nan'), float('nan')
    f_stat = (ssr / df1) / (sse / df2)
    return f_stat, f_sf(max(f_stat, 0.0), df1, df2)


class CPUNormalEquationsBackend:
    """
    CPU backend: Gauss-Jordan inverse of X'WX.

    Implements the Backend protocol for RegressionDesign -> RegressionParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_normal_equations'

    def solve(self, design: RegressionDesign) -> Result[RegressionParams]:
        """
        Fit the model and compute every diagnostic.

        Raises:
            SingularMatrixError: If X'WX is singular or a case has leverage 1
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        X, y, w = design.X, design.y, design.weights
        n, p_star = X.shape
        k = p_star - 1
        df_residual = n - p_star

        with timer.section('coefficients'):
            beta, xtwx_inv = fit_wls(X, y, w)
            fitted = multiply(X, beta)
            e = y - fitted

        with timer.section('sums_of_squares'):
            sse = float(np.sum(w * e ** 2))
            sst = float(np.sum(w * (y - weighted_mean(y, w)) ** 2))
            ssr = max(sst - sse, 0.0)
            sigma2 = sse / df_residual

        with timer.section('residuals'):
            cases = case_diagnostics(X, y, w, fitted, xtwx_inv, sse, design.conf_level)
        if cases.exact_fit:
            sse = 0.0
            sigma2 = 0.0
            ssr = sst

        with timer.section('coefficient_tests'):
            covariance, correlation = coefficient_covariance(xtwx_inv, sigma2)
            se = np.sqrt(np.clip(np.diag(covariance), 0.0, None))
            with np.errstate(divide='ignore', invalid='ignore'):
                t_values = beta / se
            p_values = np.array([_two_sided_p(float(t), df_residual) for t in t_values])
            t_crit = student_t_quantile(1.0 - (1.0 - design.conf_level) / 2.0, df_residual)
            sd_y = weighted_sd(y, w)
            standardized = np.full(p_star, np.nan)
            if sd_y > 0:
                for j in range(1, p_star):
                    standardized[j] = beta[j] * weighted_sd(X[:, j], w) / sd_y

        with timer.section('collinearity'):
            collinearity, collinearity_warnings = collinearity_diagnostics(X, w)
            warnings_list.extend(collinearity_warnings)

        with timer.section('correlations'):
            correlations = predictor_correlations(X, y, w)

        with timer.section('model_fit'):
            if sst > 0:
                r_squared = ssr / sst
            else:
                r_squared = 1.0 if sse == 0 else 0.0
            adjusted = 1.0 - (1.0 - r_squared) * (n - 1) / df_residual
            f_stat, f_p = _f_test(ssr, sse, k, df_residual, cases.exact_fit)
            scaled = np.sqrt(w) * e
            denom = float(np.sum(scaled ** 2))
            if cases.exact_fit or denom == 0.0:
                durbin_watson = float('nan')
            else:
                durbin_watson = float(np.sum(np.diff(scaled) ** 2) / denom)

        timer.stop()

        logger.debug(
            "Regression diagnostics: n=%d, p*=%d, R2=%.6f, exact_fit=%s",
            n, p_star, r_squared, cases.exact_fit,
        )

        params = RegressionParams(
            coefficients=beta,
            standard_errors=se,
            t_values=t_values,
            p_values=p_values,
            ci_lower=beta - t_crit * se,
            ci_upper=beta + t_crit * se,
            standardized_coefficients=standardized,
            covariance=covariance,
            correlation=correlation,
            sse=sse,
            ssr=ssr,
            sst=sst,
            df_model=k,
            df_residual=df_residual,
            sigma2=sigma2,
            r_squared=r_squared,
            adjusted_r_squared=adjusted,
            f_statistic=f_stat,
            f_p_value=f_p,
            durbin_watson=durbin_watson,
            cases=cases,
            collinearity=collinearity,
            correlations=correlations,
        )

        info: dict[str, Any] = {
            'method': 'gauss_jordan',
            'n_cases': n,
            'n_excluded': design.n_total - n,
            'weighted': design.weighted,
            'exact_fit': cases.exact_fit,
            'jacobi_converged': collinearity.converged,
            'jacobi_iterations': collinearity.iterations,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
