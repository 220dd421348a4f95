"""
CPU backend for nonparametric bootstrap.

CPUBootstrapBackend: ordinary and balanced resampling, optionally
stratified.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pystepwise.core.result import Result
from pystepwise.core.compute.timing import Timer
from pystepwise.montecarlo._common import BootParams
from pystepwise.montecarlo.design import BootstrapDesign


class CPUBootstrapBackend:
    """
    CPU backend for bootstrap resampling.

    Supports ordinary and balanced simulation types. A replicate whose
    statistic contains NaN is kept in `t` as is; bias and standard
    error are computed from the finite replicates of each statistic.
    """

    @property
    def name(self) -> str:
        return 'cpu_bootstrap'

    def solve(self, design: BootstrapDesign) -> Result[BootParams]:
        """Run bootstrap and return Result[BootParams]."""
        timer = Timer()
        timer.start()

        R = design.R
        n = design.n
        rng = np.random.default_rng(design.seed)

        with timer.section('t0_computation'):
            t0 = self._evaluate(design, np.arange(n))

        k = len(t0)
        t = np.empty((R, k), dtype=np.float64)

        with timer.section('bootstrap_replicates'):
            if design.sim == "balanced":
                indices = self._balanced_indices(n, R, design.strata, rng)
                for b in range(R):
                    t[b] = self._evaluate(design, indices[b])
            else:
                for b in range(R):
                    if design.strata is not None:
                        idx = self._stratified_sample(n, design.strata, rng)
                    else:
                        idx = rng.choice(n, size=n, replace=True)
                    t[b] = self._evaluate(design, idx)

        with timer.section('summary_statistics'):
            n_finite = np.sum(~np.isnan(t), axis=0)
            bias = np.full(k, np.nan)
            se = np.full(k, np.nan)
            has = n_finite > 0
            bias[has] = np.nanmean(t[:, has], axis=0) - t0[has]
            two = n_finite > 1
            se[two] = np.nanstd(t[:, two], axis=0, ddof=1)

        timer.stop()

        n_failed = int(np.sum(np.any(np.isnan(t), axis=1)))
        warnings_list: list[str] = []
        if n_failed:
            warnings_list.append(
                f"{n_failed} of {R} bootstrap replicates produced NaN; "
                f"they are ignored in bias, standard error and intervals"
            )

        params = BootParams(
            t0=t0,
            t=t,
            R=R,
            bias=bias,
            se=se,
        )

        return Result(
            params=params,
            info={
                'sim': design.sim,
                'stype': design.stype,
                'stratified': design.strata is not None,
                'n': n,
                'k': k,
                'n_failed': n_failed,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _evaluate(self, design: BootstrapDesign, indices: NDArray) -> NDArray:
        """Call the statistic for one resample in the form stype asks for."""
        n = design.n
        if design.stype == "i":
            value = design.statistic(design.data, indices)
        else:
            freqs = np.bincount(indices, minlength=n).astype(np.float64)
            if design.stype == "w":
                freqs = freqs / n
            value = design.statistic(design.data, freqs)
        return np.atleast_1d(np.asarray(value, dtype=np.float64))

    def _balanced_indices(
        self,
        n: int,
        R: int,
        strata: NDArray | None,
        rng: np.random.Generator,
    ) -> NDArray:
        """
        Balanced bootstrap: each observation appears exactly R times total.

        Pre-generates a pool of n*R indices where each of {0,...,n-1}
        appears exactly R times, then shuffles and splits into R samples
        of size n. With strata the balancing happens within each stratum.
        """
        if strata is None:
            pool = np.tile(np.arange(n), R)
            rng.shuffle(pool)
            return pool.reshape(R, n)

        all_indices = np.empty((R, n), dtype=int)
        for s in np.unique(strata):
            mask = strata == s
            ns = int(mask.sum())
            pool = np.tile(np.flatnonzero(mask), R)
            rng.shuffle(pool)
            all_indices[:, mask] = pool.reshape(R, ns)
        return all_indices

    def _stratified_sample(
        self,
        n: int,
        strata: NDArray,
        rng: np.random.Generator,
    ) -> NDArray:
        """Sample with replacement within each stratum."""
        indices = np.empty(n, dtype=int)
        for s in np.unique(strata):
            mask = strata == s
            s_indices = np.flatnonzero(mask)
            indices[mask] = rng.choice(s_indices, size=len(s_indices), replace=True)
        return indices
