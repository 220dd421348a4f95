"""
Common data structures for bootstrap resampling.

BootParams is the parameter payload wrapped by Result[P] and exposed
through BootstrapSolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

CI_TYPES = ("normal", "basic", "perc", "bca")


@dataclass(frozen=True)
class BootParams:
    """
    Parameter payload for bootstrap results.

    Matches R's boot object structure:
    - t0: observed statistic(s) on original data
    - t: matrix of bootstrap replicates (R rows, k columns); NaN marks a
      replicate on which a statistic could not be computed
    - bias: mean(t) - t0, ignoring NaN replicates
    - se: sd(t), ignoring NaN replicates
    - ci: confidence intervals (populated by boot_ci)
    """
    t0: NDArray[np.floating[Any]]              # shape (k,)
    t: NDArray[np.floating[Any]]               # shape (R, k)
    R: int
    bias: NDArray[np.floating[Any]]            # shape (k,)
    se: NDArray[np.floating[Any]]              # shape (k,)
    ci: dict[str, NDArray] | None = None       # keyed by CI type, (k, 2)
    ci_conf_level: float | None = None
