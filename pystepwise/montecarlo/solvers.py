"""
Public API for bootstrap resampling.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable
import warnings

import numpy as np

from pystepwise.core.datasource import DataSource
from pystepwise.montecarlo._ci import compute_ci, resolve_ci_types
from pystepwise.montecarlo.design import BootstrapDesign
from pystepwise.montecarlo.solution import BootstrapSolution
from pystepwise.montecarlo.backends.cpu import CPUBootstrapBackend
from pystepwise.regression.design import ModelSpec, RegressionDesign
from pystepwise.regression.solvers import fit_spec


def boot(
    data,
    statistic: Callable,
    R: int = 999,
    *,
    sim: str = "ordinary",
    stype: str = "i",
    strata=None,
    seed: int | np.random.Generator | None = None,
    names=None,
) -> BootstrapSolution:
    """
    Nonparametric bootstrap, following R's boot::boot().

    Args:
        data: 1D or 2D array-like, or a DataSource (rows are resampled).
        statistic: fn(data, i) -> scalar or (k,) array. With stype="i"
            the second argument holds the resampled row indices; with
            "f" the frequency of each row; with "w" frequencies / n.
        R: Number of replicates.
        sim: "ordinary" or "balanced".
        stype: "i", "f" or "w".
        strata: Resample within the groups of this vector.
        seed: int, numpy Generator, or None.
        names: Labels for the statistics.

    Returns:
        BootstrapSolution with t0, t, bias and se.

    Example:
        >>> x = np.random.default_rng(0).normal(size=50)
        >>> res = boot(x, lambda d, i: np.mean(d[i]), R=2000, seed=1)
        >>> res.se
    """
    design = BootstrapDesign.for_bootstrap(
        data,
        statistic,
        R,
        sim=sim,
        stype=stype,
        strata=strata,
        seed=seed,
        names=names,
    )

    backend = CPUBootstrapBackend()
    result = backend.solve(design)

    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    return BootstrapSolution(_result=result, _design=design)


def boot_ci(
    boot_out: BootstrapSolution,
    conf: float = 0.95,
    type: str | list[str] = "perc",
) -> BootstrapSolution:
    """
    Bootstrap confidence intervals, following R's boot::boot.ci().

    Args:
        boot_out: Result of boot() or boot_coefficients().
        conf: Confidence level in (0, 1).
        type: "normal", "basic", "perc", "bca", "all", or a list of these.

    Returns:
        A new BootstrapSolution with `ci` populated, one (k, 2) array
        per interval type.

    Raises:
        ValueError: If conf or type is invalid.
    """
    if not 0.0 < conf < 1.0:
        raise ValueError(f"conf must be in (0, 1), got {conf}")
    types = resolve_ci_types(type)

    ci = compute_ci(boot_out, types, conf)
    params = replace(boot_out._result.params, ci=ci, ci_conf_level=conf)
    result = replace(boot_out._result, params=params)
    return BootstrapSolution(_result=result, _design=boot_out._design)


def boot_coefficients(
    source: DataSource,
    spec: ModelSpec,
    R: int = 999,
    *,
    seed: int | np.random.Generator | None = None,
    sim: str = "ordinary",
) -> BootstrapSolution:
    """
    Case-resampling bootstrap of the OLS coefficients of `spec`.

    Rows of `source` are resampled with replacement and the model is
    refitted on each resample. A resample on which the design is
    rank-deficient keeps NaN for the aliased coefficients; bias,
    standard errors and intervals use the remaining replicates, and the
    number of affected replicates is reported as a RuntimeWarning.

    Example:
        >>> res = boot_coefficients(ds, ModelSpec('y', ('a', 'b')), R=500, seed=3)
        >>> boot_ci(res, type='perc').ci['perc']

    Raises:
        InvalidSpecificationError: If `spec` names unknown columns
        EmptyDatasetError: If the source has no rows
    """
    columns = (spec.response,) + spec.predictors
    full = RegressionDesign.from_spec(source, spec)
    data = source.select(columns)

    def statistic(d: DataSource, i) -> np.ndarray:
        return fit_spec(d.take(i), spec).coefficients

    design = BootstrapDesign.for_bootstrap(
        data,
        statistic,
        R,
        sim=sim,
        stype="i",
        seed=seed,
        names=full.names,
    )

    backend = CPUBootstrapBackend()
    result = backend.solve(design)

    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    return BootstrapSolution(_result=result, _design=design)
