"""
Core protocols for PyStatCore.

Structural interfaces shared by the analysis engines. Protocol (structural
typing) rather than ABC keeps designs and backends plain dataclasses and
classes with no registration step.
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type


@runtime_checkable
class DataSource(Protocol):
    """
    Minimal protocol for a validated analysis input.

    RegressionDesign, DecompositionDesign, ArimaDesign and ChiSquareDesign
    all satisfy it, which lets the dispatcher log request sizes without
    knowing the analysis kind.
    """

    @property
    def n_observations(self) -> int:
        """Number of usable cases after missing-value handling."""
        ...

    @property
    def metadata(self) -> dict[str, Any]:
        """
        Domain-specific metadata.

        Examples:
            Regression: {'n': 20, 'p': 3, 'weighted': False}
            Decomposition: {'n': 48, 'periodicity': 12, 'method': 'additive'}
        """
        ...


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.

    Backends are stateless: all configuration travels in the design.

    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_normal_equations', 'cpu_classical', 'cpu_css'
        """
        ...

    def solve(self, design: D) -> 'Result[P]':
        """
        Execute the statistical computation.

        Raises:
            ConvergenceError: If an iterative method fails to converge
            NumericalError: If numerical issues prevent solution
            ValidationError: If design is invalid for this backend
        """
        ...
