"""
Information criteria for stepwise selection.

A Criterion turns a fitted model into one number and fixes which
direction is better. The selector only ever asks two questions of it:
what a model scores, and whether one score strictly improves on another.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import numbers
import numpy as np

from pystepwise.regression.solution import LinearSolution


@dataclass(frozen=True)
class Criterion:
    """
    Model score with an explicit sign convention.

    Attributes:
        name: Label used in traces and summaries
        fn: LinearSolution -> float
        greater_is_better: If False (default), lower scores are better
    """
    name: str
    fn: Callable[[LinearSolution], float]
    greater_is_better: bool = False

    def score(self, model: LinearSolution) -> float:
        return float(self.fn(model))

    def improves(self, candidate: float, current: float) -> bool:
        """True if `candidate` is strictly better than `current`."""
        if self.greater_is_better:
            return candidate > current
        return candidate < current

    @property
    def worst(self) -> float:
        """A score every finite score improves on."""
        return -np.inf if self.greater_is_better else np.inf


def _aic(model: LinearSolution) -> float:
    return model.extract_aic(k=2.0)


def _bic(model: LinearSolution) -> float:
    return model.extract_aic(k=np.log(model.n_observations))


def _adj_r2(model: LinearSolution) -> float:
    return model.adjusted_r_squared


AIC = Criterion('AIC', _aic)
BIC = Criterion('BIC', _bic)
ADJ_R2 = Criterion('adj_r2', _adj_r2, greater_is_better=True)

_NAMED = {
    'aic': AIC,
    'bic': BIC,
    'adj_r2': ADJ_R2,
}


def resolve_criterion(
    criterion: str | float | Criterion | Callable[[LinearSolution], float],
) -> Criterion:
    """
    Turn a user-facing criterion argument into a Criterion.

    Accepts:
        'aic', 'bic', 'adj_r2': built-in criteria
        a number k: n * log(RSS / n) + k * edf (R's step(k=...))
        a Criterion: used as is
        a callable: LinearSolution -> float, lower is better

    Raises:
        ValueError: If the name is unknown or k is negative
        TypeError: If the argument is none of the above
    """
    if isinstance(criterion, Criterion):
        return criterion
    if isinstance(criterion, str):
        try:
            return _NAMED[criterion.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown criterion: {criterion!r}. "
                f"Valid options: {sorted(_NAMED)}"
            ) from None
    if isinstance(criterion, numbers.Real) and not isinstance(criterion, bool):
        k = float(criterion)
        if not np.isfinite(k) or k < 0:
            raise ValueError(f"criterion penalty k must be finite and >= 0, got {k}")
        return Criterion(f"k={k:g}", lambda model: model.extract_aic(k=k))
    if callable(criterion):
        name = getattr(criterion, '__name__', 'custom')
        return Criterion(name, criterion)
    raise TypeError(
        f"criterion must be a name, a penalty k, a Criterion or a callable, "
        f"got {type(criterion).__name__}"
    )
