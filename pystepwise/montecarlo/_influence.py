"""
Jackknife influence values for BCa confidence intervals.

Computes leave-one-out jackknife influence values used by the BCa
method to estimate the acceleration parameter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pystepwise.montecarlo.solution import BootstrapSolution


def jackknife_influence(
    boot_out: 'BootstrapSolution',
    stat_index: int = 0,
) -> NDArray:
    """
    Compute jackknife influence values for a bootstrap statistic.

    Uses the standard delete-1 jackknife:
        L_i = (n-1) * (theta_bar_{-i} - theta_{-i})

    where theta_{-i} is the statistic computed on data with observation
    i removed, and theta_bar_{-i} is the mean of all leave-one-out
    estimates. Leave-one-out estimates that come out NaN get influence
    NaN and are left out of the mean.

    Args:
        boot_out: Bootstrap solution containing data and statistic function.
        stat_index: Which element of the statistic vector to compute
            influence for (0-indexed).

    Returns:
        Influence values, shape (n,).
    """
    design = boot_out._design
    statistic = design.statistic
    n = design.n
    jack_stats = np.empty(n, dtype=np.float64)

    for i in range(n):
        if design.stype == "i":
            loo_indices = np.concatenate([np.arange(i), np.arange(i + 1, n)])
            loo_data = design.subset(loo_indices)
            val = statistic(loo_data, np.arange(n - 1))
        else:
            freqs = np.ones(n, dtype=np.float64)
            freqs[i] = 0.0
            if design.stype == "w":
                freqs = freqs / freqs.sum()
            val = statistic(design.data, freqs)
        jack_stats[i] = np.atleast_1d(np.asarray(val, dtype=np.float64))[stat_index]

    mean_jack = np.nanmean(jack_stats) if np.any(~np.isnan(jack_stats)) else np.nan
    return (n - 1) * (mean_jack - jack_stats)
