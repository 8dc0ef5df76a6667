"""
CPU backend for chi-square goodness-of-fit.
"""

import logging
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystatcore.core.result import Result
from pystatcore.core.compute.timing import Timer
from pystatcore.categorical.design import ChiSquareDesign
from pystatcore.categorical._common import ChiSquareParams, Descriptives
from pystatcore.categorical._chisq_gof import goodness_of_fit

logger = logging.getLogger(__name__)


def describe(variable: str, values: NDArray[np.floating[Any]]) -> Descriptives:
    """
    N, mean, SD, range and quartiles.

    Quartiles use the (n + 1) p position rule ('weibull' in numpy).
    """
    n = int(values.size)
    if n == 0:
        nan = float('nan')
        return Descriptives(variable, 0, nan, nan, nan, nan, nan, nan, nan)
    p25, p50, p75 = np.percentile(values, [25, 50, 75], method='weibull')
    return Descriptives(
        variable=variable,
        n=n,
        mean=float(np.mean(values)),
        std=float(np.std(values, ddof=1)) if n > 1 else float('nan'),
        minimum=float(np.min(values)),
        maximum=float(np.max(values)),
        p25=float(p25),
        p50=float(p50),
        p75=float(p75),
    )


class CPUChiSquareBackend:
    """Chi-square goodness-of-fit for every test variable."""

    @property
    def name(self) -> str:
        return 'cpu_chisq_gof'

    def solve(self, design: ChiSquareDesign) -> Result[ChiSquareParams]:
        """
        Raises:
            InsufficientDataError: A variable has no values or one category
            ValidationError: Expected values do not match the categories
        """
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        with timer.section('goodness_of_fit'):
            tests = tuple(
                goodness_of_fit(
                    name, values,
                    lower=design.lower,
                    upper=design.upper,
                    expected_values=design.expected_values,
                )
                for name, values in zip(design.names, design.values)
            )

        with timer.section('descriptives'):
            descriptives = tuple(
                describe(name, raw) for name, raw in zip(design.names, design.raw_values)
            )

        for test in tests:
            if test.n_low_expected:
                warnings_list.append(f"{test.variable}: {test.low_expected_note}")

        timer.stop()
        logger.debug("Chi-square goodness of fit for %d variable(s)", len(tests))

        info: dict[str, Any] = {
            'method': 'pearson',
            'range': (design.lower, design.upper) if design.range_specified else None,
        }
        return Result(
            params=ChiSquareParams(tests=tests, descriptives=descriptives),
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
