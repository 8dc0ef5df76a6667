"""
Sample: one variable's raw observations as handed over by the caller.

Cells may be numbers, numeric strings, free text, None or a declared
missing marker. Engines never read the raw cells directly; they ask for
numeric() and decide per analysis what to do with the NaN positions.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pystatcore.core.exceptions import ValidationError

Measure = Literal['scale', 'ordinal', 'nominal']

_MEASURES = ('scale', 'ordinal', 'nominal')


@dataclass(frozen=True)
class Sample:
    """
    Immutable observations for one variable.

    Attributes:
        name: Variable name (used in table titles and saved series names)
        values: Raw cells in case order
        label: Optional descriptive label
        decimals: Display precision carried through to saved series
        measure: Level of measurement
        missing_values: Cells that count as missing in addition to empty ones
    """
    name: str
    values: tuple[Any, ...]
    label: str = ""
    decimals: int = 3
    measure: Measure = 'scale'
    missing_values: tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'values', tuple(self.values))
        object.__setattr__(self, 'missing_values', tuple(self.missing_values))
        if not self.name:
            raise ValidationError("name: sample must have a non-empty name")
        if self.measure not in _MEASURES:
            raise ValidationError(
                f"measure: must be one of {_MEASURES}, got {self.measure!r}"
            )
        if self.decimals < 0:
            raise ValidationError(f"decimals: must be >= 0, got {self.decimals}")

    @classmethod
    def of(cls, name: str, values: Sequence[Any], **kwargs: Any) -> 'Sample':
        """Convenience constructor accepting any sequence (list, ndarray, ...)."""
        return cls(name=name, values=tuple(values), **kwargs)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def display_name(self) -> str:
        """'name (label)' when a label is set, otherwise the bare name."""
        return f"{self.name} ({self.label})" if self.label else self.name

    def _cells(self) -> pd.Series:
        raw = pd.Series(list(self.values), dtype=object)
        return raw.map(lambda v: v.strip() if isinstance(v, str) else v)

    def _masks(self) -> tuple[pd.Series, pd.Series]:
        """(numeric values with NaN for unparseable cells, missing mask)."""
        cells = self._cells()
        numbers = pd.to_numeric(cells, errors='coerce').astype(np.float64)
        empty = cells.isna() | cells.map(lambda v: isinstance(v, str) and v == "")
        missing = empty
        if self.missing_values:
            markers = [m.strip() if isinstance(m, str) else m for m in self.missing_values]
            numeric_markers = pd.to_numeric(
                pd.Series(markers, dtype=object), errors='coerce'
            ).dropna()
            missing = missing | cells.isin(markers)
            if len(numeric_markers):
                missing = missing | numbers.isin(numeric_markers.to_list())
        return numbers, missing

    def numeric(self) -> NDArray[np.floating[Any]]:
        """
        Cells as float64, with missing and non-numeric cells set to NaN.

        Returns:
            1D array of len(self) floats
        """
        if not self.values:
            return np.empty(0, dtype=np.float64)
        numbers, missing = self._masks()
        numbers = numbers.mask(missing)
        return numbers.to_numpy(dtype=np.float64, na_value=np.nan)

    @property
    def is_numeric(self) -> bool:
        """True when every non-missing cell parses as a number."""
        if not self.values:
            return True
        numbers, missing = self._masks()
        return bool(numbers[~missing].notna().all())

    def trim_trailing_missing(self) -> 'Sample':
        """Copy without the trailing run of missing cells."""
        if not self.values:
            return self
        _, missing = self._masks()
        keep = len(self.values)
        while keep > 0 and bool(missing.iloc[keep - 1]):
            keep -= 1
        if keep == len(self.values):
            return self
        return Sample(
            name=self.name,
            values=self.values[:keep],
            label=self.label,
            decimals=self.decimals,
            measure=self.measure,
            missing_values=self.missing_values,
        )
