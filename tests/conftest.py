"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pystatcore.core.sample import Sample


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Two-predictor regression dataset with small noise."""
    n = 60
    X = rng.standard_normal((n, 2))
    y = 1.5 + X @ np.array([2.0, -1.0]) + rng.standard_normal(n) * 0.5
    return X, y


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity (should fail)."""
    n = 40
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2  # Perfect collinearity
    X = np.column_stack([x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y


@pytest.fixture
def seasonal_series():
    """Six years of quarterly data: linear trend plus a fixed seasonal pattern."""
    t = np.arange(24, dtype=np.float64)
    pattern = np.array([5.0, -2.0, -6.0, 3.0])
    return 100.0 + 2.0 * t + pattern[np.arange(24) % 4]


@pytest.fixture
def ar1_series(rng):
    """AR(1) series with phi = 0.6 and mean 10."""
    n = 300
    e = rng.standard_normal(n)
    z = np.zeros(n)
    for t in range(1, n):
        z[t] = 0.6 * z[t - 1] + e[t]
    return 10.0 + z


@pytest.fixture
def make_sample():
    """Factory for Samples from plain lists."""
    def _make(name, values, **kwargs):
        return Sample.of(name, values, **kwargs)
    return _make
