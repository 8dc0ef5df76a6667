"""
Exception hierarchy for PyStatCore.

All exceptions inherit from PyStatCoreError so callers can catch any
engine-specific error in one place. Engines raise these; the job
boundary in pystatcore.dispatch turns them into AnalysisError values.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are what the end user sees, verbatim
    - Never catch and re-raise with less information
"""


class PyStatCoreError(Exception):
    """Base exception for all PyStatCore errors."""
    pass


class ValidationError(PyStatCoreError):
    """
    Input validation failed.

    Raised when a request option or input array is out of range or
    malformed (an "invalid parameter" at the job boundary).
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when matrix shapes don't line up (e.g. multiply with mismatched
    inner dimensions) or samples have unequal lengths.
    """
    pass


class InsufficientDataError(ValidationError):
    """
    Not enough usable observations.

    Raised for empty, too-short or non-numeric input: a series shorter
    than four cycles, a regression with no more cases than parameters,
    a variable with a single category.

    Attributes:
        required: Minimum count that was needed, if meaningful
        actual: Count that was available, if meaningful
    """

    def __init__(
        self,
        message: str,
        required: int | None = None,
        actual: int | None = None,
    ):
        super().__init__(message)
        self.required = required
        self.actual = actual


class NumericalError(PyStatCoreError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or a division by a vanishing quantity was required.

    Raised when Gauss-Jordan elimination meets a pivot below tolerance,
    and for degenerate leverage (h = 1) in residual diagnostics.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Column at which elimination failed, if applicable
        pivot_value: Magnitude of the failing pivot, if applicable
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        pivot_value: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.pivot_value = pivot_value


class ConvergenceError(PyStatCoreError):
    """
    Iterative algorithm failed to converge.

    Raised by root-finding (t quantile) and by the ARIMA optimizer when the
    iteration bound is hit. The Jacobi eigen-solver does NOT raise this;
    it reports an approximate result with converged=False instead.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final parameter or objective change
        reason: Why convergence failed (e.g., 'max_iterations')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold


class TableStructureError(PyStatCoreError):
    """
    A ResultTable was assembled with an inconsistent structure.

    Raised for a table with no columns, duplicate leaf keys, or cells
    keyed by something that is not a leaf column. User input cannot
    produce these, so the job boundary reports them as internal errors.
    """
    pass
