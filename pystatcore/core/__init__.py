"""
Core infrastructure for PyStatCore.

Shared abstractions used by every analysis engine (regression,
timeseries, categorical) and by the dispatcher.

Key components:
    protocols: DataSource, Backend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    sample: Raw variable observations
    table: ResultTable, ColumnNode, RowNode
    defaults: AnalysisKind and immutable per-analysis defaults
    compute: Timing, tolerances, linear algebra kernel
"""

from pystatcore.core.protocols import DataSource, Backend
from pystatcore.core.result import Result
from pystatcore.core.sample import Sample
from pystatcore.core.table import ColumnNode, RowNode, ResultTable, leaf_keys
from pystatcore.core.defaults import AnalysisKind, resolve_defaults
from pystatcore.core.exceptions import (
    PyStatCoreError,
    ValidationError,
    DimensionError,
    InsufficientDataError,
    NumericalError,
    SingularMatrixError,
    ConvergenceError,
    TableStructureError,
)

__all__ = [
    # Protocols
    "DataSource",
    "Backend",
    # Result
    "Result",
    # Data model
    "Sample",
    "ColumnNode",
    "RowNode",
    "ResultTable",
    "leaf_keys",
    # Defaults
    "AnalysisKind",
    "resolve_defaults",
    # Exceptions
    "PyStatCoreError",
    "ValidationError",
    "DimensionError",
    "InsufficientDataError",
    "NumericalError",
    "SingularMatrixError",
    "ConvergenceError",
    "TableStructureError",
]
