"""
Solution wrapper for bootstrap results.

BootstrapSolution wraps Result[BootParams]. Statistics are labelled by
name (coefficient names for boot_coefficients), and replicates that
produced NaN are reported rather than hidden.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pystepwise.core.result import Result
from pystepwise.montecarlo._common import BootParams

if TYPE_CHECKING:
    import pandas as pd
    from pystepwise.montecarlo.design import BootData, BootstrapDesign


_TITLES = {
    "ordinary": "ORDINARY NONPARAMETRIC BOOTSTRAP",
    "balanced": "BALANCED BOOTSTRAP",
}


@dataclass
class BootstrapSolution:
    """
    User-facing bootstrap results.

    Mirrors R's boot object: t0, t, bias and standard error per
    statistic, plus intervals once boot_ci() has been applied.
    """
    _result: Result[BootParams]
    _design: 'BootstrapDesign'

    # --- Replicates ---

    @property
    def t0(self) -> NDArray[np.floating[Any]]:
        """Statistic(s) on the original data, shape (k,)."""
        return self._result.params.t0

    @property
    def t(self) -> NDArray[np.floating[Any]]:
        """Bootstrap replicates, shape (R, k). Failed replicates hold NaN."""
        return self._result.params.t

    @property
    def R(self) -> int:
        return self._result.params.R

    @property
    def names(self) -> tuple[str, ...]:
        """Statistic labels; t1*, t2*, ... unless names were given."""
        if self._design.names is not None:
            return self._design.names
        return tuple(f"t{i + 1}*" for i in range(len(self.t0)))

    @property
    def n_failed(self) -> int:
        """Replicates with at least one NaN statistic."""
        return self._result.info.get('n_failed', 0)

    @property
    def n_valid(self) -> NDArray[np.intp]:
        """Finite replicates per statistic, shape (k,)."""
        return np.sum(np.isfinite(self.t), axis=0)

    # --- Summaries ---

    @property
    def bias(self) -> NDArray[np.floating[Any]]:
        """mean(t) - t0 over finite replicates, shape (k,)."""
        return self._result.params.bias

    @property
    def se(self) -> NDArray[np.floating[Any]]:
        """sd(t) over finite replicates, shape (k,)."""
        return self._result.params.se

    @property
    def ci(self) -> dict[str, NDArray] | None:
        """Intervals keyed by type, each of shape (k, 2); None before boot_ci()."""
        return self._result.params.ci

    @property
    def ci_conf_level(self) -> float | None:
        return self._result.params.ci_conf_level

    # --- Metadata ---

    @property
    def data(self) -> 'BootData':
        return self._design.data

    @property
    def sim(self) -> str:
        return self._design.sim

    @property
    def seed(self) -> int | np.random.Generator | None:
        return self._design.seed

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Display ---

    def to_frame(self) -> 'pd.DataFrame':
        """
        One row per statistic: original, bias, std_error and n_valid,
        then <type>_lower / <type>_upper for every computed interval.
        """
        import pandas as pd

        table = {
            'original': self.t0,
            'bias': self.bias,
            'std_error': self.se,
            'n_valid': self.n_valid,
        }
        for ci_type, bounds in (self.ci or {}).items():
            table[f'{ci_type}_lower'] = bounds[:, 0]
            table[f'{ci_type}_upper'] = bounds[:, 1]
        return pd.DataFrame(table, index=pd.Index(self.names, name='statistic'))

    def summary(self) -> str:
        """
        R-style print.boot output.

            ORDINARY NONPARAMETRIC BOOTSTRAP

            Call: boot(data, statistic, R=999, sim="ordinary")

            Bootstrap Statistics :
                           original           bias     std. error
            (Intercept)     0.01234        0.00012        0.05011
            A               1.98765       -0.00310        0.04876
        """
        title = _TITLES.get(self.sim, "BOOTSTRAP")
        if self._design.strata is not None:
            title = "STRATIFIED " + title

        lines = [
            "",
            title,
            "",
            f"Call: boot(data, statistic, R={self.R}, sim=\"{self.sim}\")",
            "",
            "Bootstrap Statistics :",
        ]

        width = max([8, *(len(name) for name in self.names)])
        lines.append(f"{'':<{width}s} {'original':>14s} {'bias':>14s} {'std. error':>14s}")
        for label, t0, bias, se in zip(self.names, self.t0, self.bias, self.se):
            lines.append(f"{label:<{width}s} {t0:14.5f} {bias:14.5f} {se:14.5f}")

        if self.n_failed:
            lines.append("")
            lines.append(f"Failed replicates: {self.n_failed} of {self.R} (ignored)")

        if self.ci is not None:
            conf_pct = round((self.ci_conf_level or 0.95) * 100, 2)
            for ci_type, bounds in self.ci.items():
                lines.append("")
                lines.append(f"{conf_pct:g}% {ci_type} CI:")
                for label, (lo, hi) in zip(self.names, bounds):
                    lines.append(f"  {label:<{width}s} ({lo:.5f}, {hi:.5f})")

        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BootstrapSolution(R={self.R}, k={len(self.t0)}, "
            f"sim={self.sim!r}, backend={self.backend_name!r})"
        )
