"""
Generic result container for all PyStatCore computations.

Every backend returns a Result envelope. Domains define their own
parameter payloads (RegressionParams, DecompositionParams, ...) while
timing, warnings and metadata travel the same way everywhere, so the
dispatcher can collect them without knowing the analysis kind.

Design decisions:
    - Generic over parameter payload P
    - info dict for flexible metadata (method, iterations, convergence)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True); results are handed to the caller read-only
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific payload (coefficients, components, counts)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=RegressionParams(...),
        ...     info={'method': 'gauss_jordan', 'n_cases': 20},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_normal_equations'
        ... )

        >>> Result(
        ...     params=ArimaParams(...),
        ...     info={'method': 'css', 'converged': True, 'iterations': 23},
        ...     timing={'total_seconds': 0.5, 'optimization': 0.4},
        ...     backend_name='cpu_css'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
