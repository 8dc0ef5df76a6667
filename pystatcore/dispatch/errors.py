"""
AnalysisError: the failure value returned across the job boundary.

Engines raise exceptions from pystatcore.core.exceptions; the dispatcher
converts them into an AnalysisError so that callers receive either tables
or an error value and never an exception.
"""

from dataclasses import dataclass
from enum import Enum

from pystatcore.core.exceptions import (
    ValidationError,
    InsufficientDataError,
    SingularMatrixError,
    ConvergenceError,
)


class ErrorKind(Enum):
    INSUFFICIENT_DATA = 'InsufficientData'
    INVALID_PARAMETER = 'InvalidParameter'
    SINGULAR_MATRIX = 'SingularMatrix'
    NON_CONVERGENCE = 'NonConvergence'
    INTERNAL = 'Internal'


@dataclass(frozen=True)
class AnalysisError:
    """
    A failed analysis.

    Attributes:
        kind: Failure category
        message: User-facing message
    """
    kind: ErrorKind
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> 'AnalysisError':
        """
        Map an engine exception onto an error kind.

        InsufficientDataError is checked before ValidationError because it
        is a subclass. TableStructureError and anything outside the engine
        hierarchy are reported as internal errors.
        """
        if isinstance(exc, InsufficientDataError):
            return cls(ErrorKind.INSUFFICIENT_DATA, str(exc))
        if isinstance(exc, ValidationError):
            return cls(ErrorKind.INVALID_PARAMETER, str(exc))
        if isinstance(exc, SingularMatrixError):
            return cls(ErrorKind.SINGULAR_MATRIX, str(exc))
        if isinstance(exc, ConvergenceError):
            return cls(ErrorKind.NON_CONVERGENCE, str(exc))
        return cls(ErrorKind.INTERNAL, f"Internal error: {exc}")

    def to_dict(self) -> dict[str, str]:
        return {'kind': self.kind.value, 'message': self.message}
