"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pystepwise.core.datasource import DataSource


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def signal_source(rng):
    """Y = 2*A + noise; B and C carry no signal."""
    n = 100
    A = rng.standard_normal(n)
    B = rng.standard_normal(n)
    C = rng.standard_normal(n)
    Y = 2.0 * A + rng.standard_normal(n) * 0.5
    return DataSource.from_arrays(Y=Y, A=A, B=B, C=C)


@pytest.fixture
def informative_source(rng):
    """Every predictor matters: Y = 1.5*A - 2*B + C + noise."""
    n = 200
    A = rng.standard_normal(n)
    B = rng.standard_normal(n)
    C = rng.standard_normal(n)
    Y = 1.5 * A - 2.0 * B + C + rng.standard_normal(n) * 0.5
    return DataSource.from_arrays(Y=Y, A=A, B=B, C=C)


@pytest.fixture
def duplicate_source(rng):
    """A2 is an exact copy of A, so any model holding both is rank-deficient."""
    n = 80
    A = rng.standard_normal(n)
    B = rng.standard_normal(n)
    Y = 2.0 * A + rng.standard_normal(n) * 0.5
    return DataSource.from_arrays(Y=Y, A=A, A2=A.copy(), B=B)


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression arrays (no intercept column) for fit()."""
    n, p = 100, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true
