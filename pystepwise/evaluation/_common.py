"""
Common data structures for holdout evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystepwise.regression.design import ModelSpec


@dataclass(frozen=True)
class HoldoutParams:
    """
    Parameter payload for repeated holdout evaluation.

    - errors: test-set RMSPE, shape (n_splits, n_models); NaN where the
      model's training fit was rank-deficient
    - names: model names, one per column of errors
    - specs: the ModelSpec each model used on each split, shape
      (n_splits, n_models); differs across splits only for models
      selected from the training data
    """
    errors: NDArray[np.floating[Any]]
    names: tuple[str, ...]
    specs: tuple[tuple[ModelSpec, ...], ...]
    n_train: int
    n_test: int
