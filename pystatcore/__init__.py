"""
PyStatCore: numerical engine of a statistical workbench.

Submodules:
    core: Samples, result tables, exceptions, linear algebra kernel
    distributions: t, chi-square and F distributions
    regression: Linear regression diagnostics
    timeseries: Classical decomposition and ARIMA
    categorical: Chi-square goodness of fit
    dispatch: Analysis requests, error values and the job dispatcher
"""

__version__ = "0.1.0"

from pystatcore import core
from pystatcore import distributions
from pystatcore import regression
from pystatcore import timeseries
from pystatcore import categorical
from pystatcore import dispatch

__all__ = [
    "__version__",
    "core",
    "distributions",
    "regression",
    "timeseries",
    "categorical",
    "dispatch",
]
