"""
Job dispatch.

Public API:
    run_analysis(request) -> AnalysisOutput | AnalysisError
    JobDispatcher(max_workers=None, executor='thread', timeout=60.0)
    AnalysisRequest, RegressionOptions, DecompositionOptions,
    ArimaOptions, ChiSquareOptions
    AnalysisOutput, AnalysisError, ErrorKind
"""

from pystatcore.dispatch.errors import AnalysisError, ErrorKind
from pystatcore.dispatch.output import AnalysisOutput
from pystatcore.dispatch.request import (
    AnalysisRequest,
    RegressionOptions,
    DecompositionOptions,
    ArimaOptions,
    ChiSquareOptions,
)
from pystatcore.dispatch.runner import run_analysis
from pystatcore.dispatch.pool import JobDispatcher, JobHandle

__all__ = [
    "run_analysis",
    "JobDispatcher",
    "JobHandle",
    "AnalysisRequest",
    "RegressionOptions",
    "DecompositionOptions",
    "ArimaOptions",
    "ChiSquareOptions",
    "AnalysisOutput",
    "AnalysisError",
    "ErrorKind",
]
