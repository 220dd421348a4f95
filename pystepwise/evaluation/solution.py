"""
Solution wrapper for repeated holdout evaluation.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pystepwise.core.result import Result
from pystepwise.evaluation._common import HoldoutParams

if TYPE_CHECKING:
    from pystepwise.evaluation.design import HoldoutDesign


@dataclass
class HoldoutSolution:
    """
    User-facing holdout results.

    Summaries ignore splits on which a model's training fit was
    rank-deficient (NaN entries of `errors`).
    """
    _result: Result[HoldoutParams]
    _design: 'HoldoutDesign'

    @property
    def errors(self) -> NDArray[np.floating[Any]]:
        """Test RMSPE per split and model, shape (n_splits, n_models)."""
        return self._result.params.errors

    @property
    def names(self) -> tuple[str, ...]:
        return self._result.params.names

    @property
    def n_splits(self) -> int:
        return self.errors.shape[0]

    @property
    def n_train(self) -> int:
        return self._result.params.n_train

    @property
    def n_test(self) -> int:
        return self._result.params.n_test

    @property
    def mean(self) -> NDArray[np.floating[Any]]:
        """Average RMSPE per model; NaN for a model that never fitted."""
        counts = self._counts()
        mean = np.full(len(self.names), np.nan)
        ok = counts > 0
        mean[ok] = np.nanmean(self.errors[:, ok], axis=0)
        return mean

    @property
    def sd(self) -> NDArray[np.floating[Any]]:
        """Standard deviation of RMSPE across splits, per model."""
        counts = self._counts()
        sd = np.full(len(self.names), np.nan)
        ok = counts > 1
        sd[ok] = np.nanstd(self.errors[:, ok], axis=0, ddof=1)
        return sd

    @property
    def se(self) -> NDArray[np.floating[Any]]:
        """Monte Carlo standard error of the average RMSPE."""
        with np.errstate(divide='ignore', invalid='ignore'):
            return self.sd / np.sqrt(self._counts())

    @property
    def rmspe(self) -> dict[str, float]:
        """Average RMSPE keyed by model name."""
        return {name: float(m) for name, m in zip(self.names, self.mean)}

    @property
    def best(self) -> str:
        """Name of the model with the lowest average RMSPE."""
        return self.names[int(np.nanargmin(self.mean))]

    def selection_frequency(self, name: str) -> dict[str, int]:
        """
        How often each formula was used for model `name` across splits.

        Only informative for models chosen from the training data.
        """
        j = self.names.index(name)
        return dict(Counter(row[j].formula() for row in self._result.params.specs))

    def _counts(self) -> NDArray[np.int_]:
        return np.sum(~np.isnan(self.errors), axis=0)

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

    def summary(self) -> str:
        """Table of average test RMSPE per model, best first."""
        width = max(12, max(len(n) for n in self.names))
        lines = [
            "Repeated Holdout Evaluation",
            "=" * (width + 40),
            f"Splits: {self.n_splits} (train {self.n_train}, test {self.n_test})",
            "",
            f"{'Model':<{width}} {'RMSPE':>12} {'SD':>12} {'SE':>12}",
            "-" * (width + 40),
        ]
        order = np.argsort(self.mean)
        mean, sd, se = self.mean, self.sd, self.se
        for j in order:
            lines.append(
                f"{self.names[j]:<{width}} {mean[j]:12.5f} {sd[j]:12.5f} {se[j]:12.5f}"
            )
        lines.append("-" * (width + 40))
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"HoldoutSolution(models={len(self.names)}, splits={self.n_splits}, "
            f"best={self.best!r})"
        )
