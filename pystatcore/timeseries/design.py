"""
Designs for the time-series engine.

Both designs run the validation gate on the raw Sample: checks happen in a
fixed order and the first failure wins, with the exact messages the
workbench shows to its users.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import NDArray, ArrayLike

from pystatcore.core.exceptions import ValidationError, InsufficientDataError
from pystatcore.core.sample import Sample
from pystatcore.core.validation import check_int_range
from pystatcore.timeseries._timespec import TimeSpec, as_time_spec, periodicity

MSG_NO_VARIABLE = "Please select at least one used variable."
MSG_NOT_NUMERIC = "Selected variable is not numeric"
MSG_NO_DATA = "No data available for the selected variables."
MSG_NOT_DATED = "Time specification is not dated."
MSG_NO_PERIODICITY = "Please the selected time specification don't have periodicity."
MSG_TOO_SHORT = "Data length is less than 4 times the periodicity"
MSG_NOT_MULTIPLE = "Data length is not a multiple of the periodicity"
MSG_ARIMA_TOO_SHORT = "Data length is less than 20 observations."

VALID_METHODS = ('additive', 'multiplicative')
VALID_TRENDS = ('linear', 'exponential')


def _series_values(samples: Sequence[Sample]) -> tuple[Sample, NDArray[np.floating[Any]]]:
    """
    Common first checks: a variable is selected and numeric.

    Trailing empty rows are trimmed; remaining missing cells are skipped.
    """
    if not samples:
        raise ValidationError(MSG_NO_VARIABLE)
    sample = samples[0].trim_trailing_missing()
    if not sample.is_numeric:
        raise InsufficientDataError(MSG_NOT_NUMERIC)
    values = sample.numeric()
    return sample, values[np.isfinite(values)]


def _as_samples(y: ArrayLike | Sample | Sequence[Sample], name: str) -> list[Sample]:
    if isinstance(y, Sample):
        return [y]
    if isinstance(y, (list, tuple)) and y and all(isinstance(s, Sample) for s in y):
        return list(y)
    return [Sample.of(name, list(np.asarray(y, dtype=object).ravel()))]


@dataclass(frozen=True)
class DecompositionDesign:
    """
    Validated input for classical decomposition.

    Do not construct directly; use from_samples() or build().
    """
    _y: NDArray[np.floating[Any]]
    _name: str
    _time_spec: TimeSpec
    _period: int
    _method: str
    _trend: str
    _start_period: int = 1
    _start_position: int = 1
    _decimals: int = 3

    @classmethod
    def from_samples(
        cls,
        samples: Sequence[Sample],
        time_spec: TimeSpec | str | None,
        *,
        method: str = 'additive',
        trend: str = 'linear',
        start_period: int = 1,
        start_position: int = 1,
    ) -> DecompositionDesign:
        """
        Run the validation gate and build the design.

        Order: variable selected, numeric, data present, time specification
        dated, periodicity defined, n >= 4 * period, n a multiple of period.

        Raises:
            ValidationError: No variable, undated or aperiodic specification,
                bad method/trend, or non-positive data for multiplicative
            InsufficientDataError: Non-numeric, empty or too-short data
        """
        sample, y = _series_values(samples)
        if y.size == 0:
            raise InsufficientDataError(MSG_NO_DATA, required=1, actual=0)

        spec = as_time_spec(time_spec)
        if spec is None or spec is TimeSpec.ND:
            raise ValidationError(MSG_NOT_DATED)
        period = periodicity(spec)
        if period == 0:
            raise ValidationError(MSG_NO_PERIODICITY)

        n = y.size
        if n < 4 * period:
            raise InsufficientDataError(MSG_TOO_SHORT, required=4 * period, actual=n)
        if n % period != 0:
            raise InsufficientDataError(MSG_NOT_MULTIPLE, actual=n)

        if method not in VALID_METHODS:
            raise ValidationError(f"method: must be one of {VALID_METHODS}, got {method!r}")
        if trend not in VALID_TRENDS:
            raise ValidationError(f"trend: must be one of {VALID_TRENDS}, got {trend!r}")
        if method == 'multiplicative' and np.any(y <= 0):
            raise ValidationError(
                "Multiplicative decomposition requires all values to be positive"
            )

        return cls(
            _y=y,
            _name=sample.name,
            _time_spec=spec,
            _period=period,
            _method=method,
            _trend=trend,
            _start_period=start_period,
            _start_position=start_position,
            _decimals=sample.decimals,
        )

    @classmethod
    def build(
        cls,
        y: ArrayLike | Sample | Sequence[Sample],
        time_spec: TimeSpec | str | None,
        *,
        name: str = "series",
        **kwargs: Any,
    ) -> DecompositionDesign:
        """Build from an array (NaN/None as missing) or Sample(s)."""
        return cls.from_samples(_as_samples(y, name), time_spec, **kwargs)

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        return self._y

    @property
    def n(self) -> int:
        return self._y.size

    @property
    def n_observations(self) -> int:
        return self.n

    @property
    def name(self) -> str:
        return self._name

    @property
    def time_spec(self) -> TimeSpec:
        return self._time_spec

    @property
    def period(self) -> int:
        return self._period

    @property
    def method(self) -> str:
        return self._method

    @property
    def trend(self) -> str:
        return self._trend

    @property
    def start_period(self) -> int:
        return self._start_period

    @property
    def start_position(self) -> int:
        return self._start_position

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def metadata(self) -> dict[str, Any]:
        return {'n': self.n, 'periodicity': self._period, 'method': self._method}


@dataclass(frozen=True)
class ArimaDesign:
    """
    Validated input for ARIMA(p, d, q) fitting.

    Do not construct directly; use from_samples() or build().
    """
    _y: NDArray[np.floating[Any]]
    _name: str
    _p: int
    _d: int
    _q: int
    _include_constant: bool = True
    _forecast_horizon: int = 0
    _max_iter: int = 500
    _time_spec: TimeSpec | None = None
    _start_period: int = 1
    _start_position: int = 1
    _decimals: int = 3

    @classmethod
    def from_samples(
        cls,
        samples: Sequence[Sample],
        *,
        ar_order: int = 0,
        diff_order: int = 0,
        ma_order: int = 0,
        include_constant: bool = True,
        forecast_horizon: int = 0,
        max_iter: int = 500,
        min_observations: int = 20,
        time_spec: TimeSpec | str | None = None,
        start_period: int = 1,
        start_position: int = 1,
    ) -> ArimaDesign:
        """
        Run the ARIMA validation gate and build the design.

        Order: variable selected, numeric, data present, orders in range,
        at least 20 observations.

        Raises:
            ValidationError: No variable, orders or horizon out of range
            InsufficientDataError: Non-numeric, empty or too-short data
        """
        sample, y = _series_values(samples)
        if y.size == 0:
            raise InsufficientDataError(MSG_NO_DATA, required=min_observations, actual=0)

        check_int_range(ar_order, 0, 5, "AR order must be between 0 and 5")
        check_int_range(diff_order, 0, 2, "Differencing order must be between 0 and 2")
        check_int_range(ma_order, 0, 5, "MA order must be between 0 and 5")
        check_int_range(forecast_horizon, 0, 10_000,
                        "Forecast horizon must be a non-negative integer")
        if max_iter < 1:
            raise ValidationError(f"max_iter: must be >= 1, got {max_iter}")

        if y.size < min_observations:
            raise InsufficientDataError(
                MSG_ARIMA_TOO_SHORT, required=min_observations, actual=y.size
            )

        return cls(
            _y=y,
            _name=sample.name,
            _p=int(ar_order),
            _d=int(diff_order),
            _q=int(ma_order),
            _include_constant=bool(include_constant),
            _forecast_horizon=int(forecast_horizon),
            _max_iter=int(max_iter),
            _time_spec=as_time_spec(time_spec),
            _start_period=start_period,
            _start_position=start_position,
            _decimals=sample.decimals,
        )

    @classmethod
    def build(
        cls,
        y: ArrayLike | Sample | Sequence[Sample],
        *,
        name: str = "series",
        **kwargs: Any,
    ) -> ArimaDesign:
        """Build from an array (NaN/None as missing) or Sample(s)."""
        return cls.from_samples(_as_samples(y, name), **kwargs)

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        return self._y

    @property
    def n(self) -> int:
        return self._y.size

    @property
    def n_observations(self) -> int:
        return self.n

    @property
    def name(self) -> str:
        return self._name

    @property
    def order(self) -> tuple[int, int, int]:
        return (self._p, self._d, self._q)

    @property
    def p(self) -> int:
        return self._p

    @property
    def d(self) -> int:
        return self._d

    @property
    def q(self) -> int:
        return self._q

    @property
    def include_constant(self) -> bool:
        return self._include_constant

    @property
    def forecast_horizon(self) -> int:
        return self._forecast_horizon

    @property
    def max_iter(self) -> int:
        return self._max_iter

    @property
    def time_spec(self) -> TimeSpec | None:
        return self._time_spec

    @property
    def start_period(self) -> int:
        return self._start_period

    @property
    def start_position(self) -> int:
        return self._start_position

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def n_parameters(self) -> int:
        return self._p + self._q + (1 if self._include_constant else 0)

    @property
    def metadata(self) -> dict[str, Any]:
        return {'n': self.n, 'order': self.order, 'constant': self._include_constant}
