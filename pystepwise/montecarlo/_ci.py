"""
Bootstrap confidence intervals.

The nonparametric methods of R's boot.ci():
- normal: bias-corrected normal approximation
- basic: basic (pivotal) interval
- perc: percentile interval
- bca: bias-corrected and accelerated

Intervals are computed one statistic at a time from that statistic's
finite replicates only. A statistic without enough finite replicates
gets a NaN interval.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pystepwise.montecarlo._common import CI_TYPES

if TYPE_CHECKING:
    from pystepwise.montecarlo.solution import BootstrapSolution

# (finite replicates, t0, alpha, boot_out, column) -> (lower, upper)
IntervalFn = Callable[[NDArray, float, float, 'BootstrapSolution', int], tuple[float, float]]


def resolve_ci_types(type: str | list[str] | tuple[str, ...]) -> list[str]:
    """Normalize the `type` argument of boot_ci to a list of method names."""
    if isinstance(type, str):
        types = list(CI_TYPES) if type == "all" else [type]
    else:
        types = list(type)
    if not types:
        raise ValueError("type: at least one interval type is required")
    unknown = [ci_type for ci_type in types if ci_type not in CI_TYPES]
    if unknown:
        raise ValueError(
            f"Unknown CI type(s): {unknown}; expected any of "
            f"{', '.join(CI_TYPES)} or 'all'"
        )
    return types


def compute_ci(
    boot_out: 'BootstrapSolution',
    types: list[str],
    conf_level: float,
) -> dict[str, NDArray]:
    """
    Intervals for every statistic of `boot_out`.

    Returns:
        Dict mapping each type in `types` to an array of shape (k, 2).
    """
    alpha = 1.0 - conf_level
    return {
        ci_type: _columnwise(boot_out, _METHODS[ci_type], alpha)
        for ci_type in types
    }


def _columnwise(boot_out: 'BootstrapSolution', method: IntervalFn, alpha: float) -> NDArray:
    t0, t = boot_out.t0, boot_out.t
    ci = np.full((len(t0), 2), np.nan, dtype=np.float64)
    for j in range(len(t0)):
        t_j = t[:, j][np.isfinite(t[:, j])]
        if len(t_j) < 2 or not np.isfinite(t0[j]):
            continue
        ci[j] = method(t_j, t0[j], alpha, boot_out, j)
    return ci


def _normal(t_j, t0, alpha, boot_out, j):
    """Centred at 2*t0 - mean(t), not at t0; width from sd(t)."""
    z = sp_stats.norm.ppf(1.0 - alpha / 2.0)
    center = 2.0 * t0 - np.mean(t_j)
    se = np.std(t_j, ddof=1)
    return center - z * se, center + z * se


def _basic(t_j, t0, alpha, boot_out, j):
    """[2*t0 - Q(1 - alpha/2), 2*t0 - Q(alpha/2)]; the upper quantile sets the lower bound."""
    hi_q, lo_q = np.quantile(t_j, [1.0 - alpha / 2.0, alpha / 2.0])
    return 2.0 * t0 - hi_q, 2.0 * t0 - lo_q


def _percentile(t_j, t0, alpha, boot_out, j):
    lo, hi = np.quantile(t_j, [alpha / 2.0, 1.0 - alpha / 2.0])
    return lo, hi


def _bca(t_j, t0, alpha, boot_out, j):
    """
    Percentile interval at adjusted levels.

    z0 = Phi^-1(share of replicates below t0) corrects median bias and
    a = sum(L^3) / (6 * sum(L^2)^1.5), from jackknife influence values L,
    corrects skewness.
    """
    from pystepwise.montecarlo._influence import jackknife_influence

    R = len(t_j)
    edge = 0.5 / R
    z0 = sp_stats.norm.ppf(np.clip(np.mean(t_j < t0), edge, 1.0 - edge))

    L = jackknife_influence(boot_out, j)
    L = L[np.isfinite(L)]
    ss = np.sum(L ** 2)
    a = np.sum(L ** 3) / (6.0 * ss ** 1.5) if ss > 0 else 0.0

    levels = []
    for z_alpha in sp_stats.norm.ppf([alpha / 2.0, 1.0 - alpha / 2.0]):
        shift = z0 + z_alpha
        denom = 1.0 - a * shift
        level = 0.5 if abs(denom) < 1e-15 else sp_stats.norm.cdf(z0 + shift / denom)
        levels.append(np.clip(level, edge, 1.0 - edge))

    lo, hi = np.quantile(t_j, levels)
    return lo, hi


_METHODS: dict[str, IntervalFn] = {
    "normal": _normal,
    "basic": _basic,
    "perc": _percentile,
    "bca": _bca,
}
