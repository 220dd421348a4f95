"""
Random train/test splitting and prediction error.

Randomness always comes from an injected seed or Generator, never from
global state, so a split is reproducible from its seed.
"""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np
from numpy.typing import ArrayLike

from pystepwise.core.datasource import DataSource
from pystepwise.core.validation import (
    check_array,
    check_1d,
    check_consistent_length,
    check_not_empty,
)
from pystepwise.regression.solution import LinearSolution

SeedLike = int | np.random.Generator | None


def train_count(train: float | int, n: int) -> int:
    """
    Number of training rows for a split of `n` rows.

    `train` is a fraction in (0, 1), rounded to the nearest row, or an
    absolute count. Both parts of the split must be non-empty.

    Raises:
        ValueError: If the resulting split leaves either part empty
    """
    if isinstance(train, bool):
        raise ValueError(f"train must be a fraction or a row count, got {train!r}")
    if isinstance(train, numbers.Integral):
        n_train = int(train)
    elif isinstance(train, numbers.Real):
        if not 0.0 < train < 1.0:
            raise ValueError(f"train fraction must be in (0, 1), got {train}")
        n_train = int(round(float(train) * n))
    else:
        raise ValueError(f"train must be a fraction or a row count, got {train!r}")

    if not 1 <= n_train <= n - 1:
        raise ValueError(
            f"train={train!r} gives {n_train} training rows out of {n}; "
            f"both parts of the split must be non-empty"
        )
    return n_train


def train_test_split(
    source: DataSource,
    train: float | int = 0.5,
    *,
    seed: SeedLike = None,
) -> tuple[DataSource, DataSource]:
    """
    Uniform random partition of the rows into a training and a test set.

    Training rows are drawn without replacement; the test set is the
    complement. Within each part rows keep their original order.

    Args:
        source: Dataset to split
        train: Fraction in (0, 1) or absolute number of training rows
        seed: int seed, numpy Generator (advanced in place), or None

    Returns:
        (train, test) DataSources

    Raises:
        EmptyDatasetError: If the source has no rows
        ValueError: If either part would be empty
    """
    n = source.n_observations
    check_not_empty(n, 'data')
    n_train = train_count(train, n)

    rng = np.random.default_rng(seed)
    train_idx = np.sort(rng.choice(n, size=n_train, replace=False))
    in_train = np.zeros(n, dtype=bool)
    in_train[train_idx] = True

    return source.take(train_idx), source.take(np.flatnonzero(~in_train))


def rmspe(observed: ArrayLike, predicted: ArrayLike) -> float:
    """
    Root-mean-squared prediction error: sqrt(mean((predicted - observed)^2)).
    """
    obs = check_array(observed, 'observed')
    pred = check_array(predicted, 'predicted')
    check_1d(obs, 'observed')
    check_1d(pred, 'predicted')
    check_consistent_length(obs, pred, names=('observed', 'predicted'))
    check_not_empty(len(obs), 'observed')
    return float(np.sqrt(np.mean((pred - obs) ** 2)))


def prediction_error(model: LinearSolution, test: DataSource) -> float:
    """
    RMSPE of a fitted model on a held-out DataSource.

    The observed values are the test set's column named by the model's
    response.
    """
    spec: Any = model.spec
    if spec is None:
        raise ValueError("model was fitted from arrays; fit it with fit_spec()")
    return rmspe(test[spec.response], model.predict(test))
