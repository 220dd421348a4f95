"""
Public API for holdout evaluation.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import warnings

from pystepwise.core.datasource import DataSource
from pystepwise.evaluation._split import SeedLike
from pystepwise.evaluation.design import HoldoutDesign, ModelLike
from pystepwise.evaluation.solution import HoldoutSolution
from pystepwise.evaluation.backends.cpu import CPUHoldoutBackend
from pystepwise.regression.design import ModelSpec


def holdout(
    source: DataSource,
    models: Mapping[str, ModelLike] | Sequence[ModelSpec] | ModelSpec,
    *,
    train: float | int = 0.5,
    n_splits: int = 100,
    seed: SeedLike = None,
) -> HoldoutSolution:
    """
    Compare models by test-set RMSPE averaged over random splits.

    Each repetition draws one uniform random train/test split, fits
    every model on the training part and scores its root-mean-squared
    prediction error on the test part. A single split is noisy; the
    average over many splits is the estimate of out-of-sample error.

    Args:
        source: Dataset to split.
        models: Mapping of names to ModelSpecs, or to callables taking
            the training DataSource and returning a ModelSpec (to run a
            selection inside every training set). A sequence of
            ModelSpecs is named by formula.
        train: Fraction in (0, 1) or number of training rows.
        n_splits: Number of random splits.
        seed: int, numpy Generator, or None.

    Returns:
        HoldoutSolution with the per-split RMSPE matrix and summaries.

    Example:
        >>> full = ModelSpec('y', ('a', 'b', 'c'))
        >>> res = holdout(ds, {
        ...     'full': full,
        ...     'stepwise': lambda tr: select(tr, full, 'backward'),
        ... }, n_splits=200, seed=1)
        >>> print(res.summary())
    """
    design = HoldoutDesign.for_holdout(
        source,
        models,
        train=train,
        n_splits=n_splits,
        seed=seed,
    )

    backend = CPUHoldoutBackend()
    result = backend.solve(design)

    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    return HoldoutSolution(_result=result, _design=design)
