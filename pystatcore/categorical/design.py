"""
ChiSquareDesign: validated input for chi-square goodness-of-fit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import NDArray, ArrayLike

from pystatcore.core.exceptions import ValidationError
from pystatcore.core.sample import Sample

VALID_RANGES = ('get_from_data', 'use_specified_range')


def _to_samples(data: Any, names: Sequence[str] | None) -> list[Sample]:
    if isinstance(data, Sample):
        return [data]
    if isinstance(data, (list, tuple)) and data and all(isinstance(s, Sample) for s in data):
        return list(data)
    arr = np.asarray(data, dtype=object)
    columns = [arr] if arr.ndim == 1 else [arr[:, j] for j in range(arr.shape[1])]
    if names is None:
        names = [f"var{j + 1}" for j in range(len(columns))]
    if len(names) != len(columns):
        raise ValidationError(
            f"names: expected {len(columns)} names, got {len(names)}"
        )
    return [Sample.of(name, list(col)) for name, col in zip(names, columns)]


@dataclass(frozen=True)
class ChiSquareDesign:
    """
    One or more test variables plus the expected-frequency specification.

    Do not construct directly; use from_samples() or build().
    """
    _names: tuple[str, ...]
    _values: tuple[NDArray[np.floating[Any]], ...]
    _raw: tuple[NDArray[np.floating[Any]], ...]
    _expected_range: str = 'get_from_data'
    _lower: int | None = None
    _upper: int | None = None
    _expected_values: tuple[float, ...] | None = None

    @classmethod
    def from_samples(
        cls,
        samples: Sequence[Sample],
        *,
        expected_range: str = 'get_from_data',
        lower: int | None = None,
        upper: int | None = None,
        expected_values: Sequence[float] | None = None,
    ) -> ChiSquareDesign:
        """
        Validate options and extract floored values per test variable.

        Missing and non-numeric cells are dropped per variable.

        Raises:
            ValidationError: No test variable, bad range or expected values
        """
        if not samples:
            raise ValidationError("Please select at least one test variable.")
        if expected_range not in VALID_RANGES:
            raise ValidationError(
                f"expected_range: must be one of {VALID_RANGES}, got {expected_range!r}"
            )
        if expected_range == 'use_specified_range':
            if lower is None or upper is None:
                raise ValidationError(
                    "Lower and upper values are required for a specified range"
                )
            if int(lower) != lower or int(upper) != upper:
                raise ValidationError("Lower and upper values must be integers")
            lower, upper = int(lower), int(upper)
            if lower >= upper:
                raise ValidationError("Lower value must be less than upper value")
        else:
            lower = upper = None

        if expected_values is not None:
            expected_values = tuple(float(v) for v in expected_values)
            if not expected_values:
                raise ValidationError("Please enter at least one expected value.")
            if any(not np.isfinite(v) or v <= 0 for v in expected_values):
                raise ValidationError("Expected values must be greater than 0")

        names = []
        raw = []
        floored = []
        for sample in samples:
            values = sample.numeric()
            values = values[np.isfinite(values)]
            names.append(sample.name)
            raw.append(values)
            floored.append(np.floor(values))
        if len(set(names)) != len(names):
            raise ValidationError(f"Test variables must have unique names, got {names}")

        return cls(
            _names=tuple(names),
            _values=tuple(floored),
            _raw=tuple(raw),
            _expected_range=expected_range,
            _lower=lower,
            _upper=upper,
            _expected_values=expected_values,
        )

    @classmethod
    def build(
        cls,
        data: ArrayLike | Sample | Sequence[Sample],
        *,
        names: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> ChiSquareDesign:
        """Build from a 1D array, a 2D array (one column per variable) or Samples."""
        return cls.from_samples(_to_samples(data, names), **kwargs)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def values(self) -> tuple[NDArray[np.floating[Any]], ...]:
        """Integer-floored valid values per variable."""
        return self._values

    @property
    def raw_values(self) -> tuple[NDArray[np.floating[Any]], ...]:
        """Valid values before flooring (for descriptive statistics)."""
        return self._raw

    @property
    def range_specified(self) -> bool:
        return self._expected_range == 'use_specified_range'

    @property
    def lower(self) -> int | None:
        return self._lower

    @property
    def upper(self) -> int | None:
        return self._upper

    @property
    def expected_values(self) -> tuple[float, ...] | None:
        return self._expected_values

    @property
    def n_observations(self) -> int:
        return int(sum(v.size for v in self._values))

    @property
    def metadata(self) -> dict[str, Any]:
        return {
            'n_variables': len(self._names),
            'range': (self._lower, self._upper) if self.range_specified else None,
            'expected': 'values' if self._expected_values else 'all_equal',
        }
