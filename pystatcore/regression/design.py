"""
RegressionDesign: validated input for regression diagnostics.

Builds the weighted design matrix with an intercept column, applies
listwise deletion and remembers which original cases survived so that
saved series and casewise diagnostics can be reported by case number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import NDArray, ArrayLike

from pystatcore.core.exceptions import ValidationError, InsufficientDataError
from pystatcore.core.sample import Sample
from pystatcore.core.validation import (
    check_array,
    check_1d,
    check_2d,
    check_consistent_length,
)

CONSTANT_NAME = "(Constant)"


def _validate_conf_level(conf_level: float) -> float:
    """Validate confidence level is in (0, 1)."""
    if not (0.0 < conf_level < 1.0):
        raise ValidationError(
            f"confidence_level must be in (0, 1), got {conf_level}"
        )
    return float(conf_level)


@dataclass(frozen=True)
class RegressionDesign:
    """
    Regression design with intercept.

    Immutable after construction. Use build() or from_samples().

    Attributes exposed as properties:
        X: Design matrix (C x p*), first column all ones
        y: Dependent variable (C,)
        weights: Case weights (C,), all ones when unweighted
        case_index: Original 0-based position of each retained case
        n_total: Number of cases before listwise deletion
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _w: NDArray[np.floating[Any]]
    _case_index: NDArray[np.intp]
    _n_total: int
    _dependent_name: str
    _predictor_names: tuple[str, ...]
    _weighted: bool
    _conf_level: float = 0.95

    @classmethod
    def build(
        cls,
        y: ArrayLike,
        X: ArrayLike,
        weights: ArrayLike | None = None,
        *,
        dependent_name: str = "y",
        predictor_names: Sequence[str] | None = None,
        confidence_level: float = 0.95,
    ) -> RegressionDesign:
        """
        Build a design from arrays (NaN marks a missing cell).

        Args:
            y: Dependent variable (n,)
            X: Predictors without intercept, (n,) or (n, k)
            weights: Optional case weights (n,)
            dependent_name: Name used in table labels
            predictor_names: Names for the k predictors (default x1..xk)
            confidence_level: Level for coefficient and prediction intervals

        Raises:
            DimensionError: If y, X and weights have unequal lengths
            InsufficientDataError: If there are no predictors, no complete
                cases, or no more cases than parameters
            ValidationError: On duplicate predictor names or a bad level
        """
        y_arr = check_array(y, 'y')
        X_arr = check_array(X, 'X')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        check_1d(y_arr, 'y')
        check_2d(X_arr, 'X')

        k = X_arr.shape[1]
        if k == 0:
            raise InsufficientDataError(
                "Please select at least one independent variable.",
                required=1,
                actual=0,
            )

        if weights is None:
            w_arr = np.ones(y_arr.shape[0])
            weighted = False
        else:
            w_arr = check_array(weights, 'weights')
            check_1d(w_arr, 'weights')
            weighted = True
        check_consistent_length(y_arr, X_arr, w_arr, names=('y', 'X', 'weights'))

        if predictor_names is None:
            predictor_names = tuple(f"x{j + 1}" for j in range(k))
        predictor_names = tuple(predictor_names)
        if len(predictor_names) != k:
            raise ValidationError(
                f"predictor_names: expected {k} names, got {len(predictor_names)}"
            )
        if len(set(predictor_names)) != k or CONSTANT_NAME in predictor_names:
            raise ValidationError(
                f"predictor_names: names must be unique, got {list(predictor_names)}"
            )

        # Listwise deletion; non-positive weights drop the case
        complete = (
            np.isfinite(y_arr)
            & np.all(np.isfinite(X_arr), axis=1)
            & np.isfinite(w_arr)
            & (w_arr > 0)
        )
        case_index = np.flatnonzero(complete)
        n = case_index.shape[0]
        p_star = k + 1
        if n == 0:
            raise InsufficientDataError(
                "No data available for the selected variables.",
                required=p_star + 1,
                actual=0,
            )
        if n <= p_star:
            raise InsufficientDataError(
                f"Number of cases ({n}) must exceed the number of parameters ({p_star}).",
                required=p_star + 1,
                actual=n,
            )

        design_matrix = np.column_stack([np.ones(n), X_arr[complete]])

        return cls(
            _X=design_matrix,
            _y=y_arr[complete].copy(),
            _w=w_arr[complete].copy(),
            _case_index=case_index,
            _n_total=y_arr.shape[0],
            _dependent_name=dependent_name,
            _predictor_names=predictor_names,
            _weighted=weighted,
            _conf_level=_validate_conf_level(confidence_level),
        )

    @classmethod
    def from_samples(
        cls,
        dependent: Sample,
        independents: Sequence[Sample],
        weights: Sample | None = None,
        *,
        confidence_level: float = 0.95,
    ) -> RegressionDesign:
        """Build a design from Samples; non-numeric cells become missing."""
        if not independents:
            raise InsufficientDataError(
                "Please select at least one independent variable.",
                required=1,
                actual=0,
            )
        columns = [s.numeric() for s in independents]
        check_consistent_length(
            dependent.numeric(), *columns,
            names=(dependent.name,) + tuple(s.name for s in independents),
        )
        X = np.column_stack(columns)
        return cls.build(
            dependent.numeric(),
            X,
            None if weights is None else weights.numeric(),
            dependent_name=dependent.name,
            predictor_names=[s.name for s in independents],
            confidence_level=confidence_level,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix including the intercept column (C x p*)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        return self._y

    @property
    def weights(self) -> NDArray[np.floating[Any]]:
        return self._w

    @property
    def case_index(self) -> NDArray[np.intp]:
        return self._case_index

    @property
    def n(self) -> int:
        """Number of cases C (unweighted count)."""
        return self._X.shape[0]

    @property
    def n_observations(self) -> int:
        return self.n

    @property
    def n_total(self) -> int:
        return self._n_total

    @property
    def k(self) -> int:
        """Number of predictors, excluding the intercept."""
        return self._X.shape[1] - 1

    @property
    def p(self) -> int:
        """Number of parameters p* including the intercept."""
        return self._X.shape[1]

    @property
    def dependent_name(self) -> str:
        return self._dependent_name

    @property
    def predictor_names(self) -> tuple[str, ...]:
        return self._predictor_names

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return (CONSTANT_NAME,) + self._predictor_names

    @property
    def weighted(self) -> bool:
        return self._weighted

    @property
    def conf_level(self) -> float:
        return self._conf_level

    @property
    def metadata(self) -> dict[str, Any]:
        return {
            'n': self.n,
            'p': self.p,
            'n_excluded': self._n_total - self.n,
            'weighted': self._weighted,
        }
