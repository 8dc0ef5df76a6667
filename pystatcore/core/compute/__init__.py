"""
Shared compute infrastructure for PyStatCore.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Fixed kernel tolerances
    linalg: Linear algebra kernel (Gauss-Jordan, Jacobi)
"""

from pystatcore.core.compute.timing import Timer

__all__ = [
    "Timer",
]
