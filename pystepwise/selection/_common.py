"""
Common data structures for stepwise selection.

StepwiseParams is the payload wrapped by Result[P]; CandidateMove,
CandidateScore and StepRecord make up the path it records.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from pystepwise.regression.design import ModelSpec

# Candidate outcomes
STATUS_OK = 'ok'
STATUS_DEGENERATE = 'degenerate'
STATUS_VISITED = 'visited'
STATUS_NONFINITE = 'nonfinite'


@dataclass(frozen=True)
class CandidateMove:
    """One atomic transition: add an excluded predictor or drop an included one."""
    action: Literal['add', 'drop']
    predictor: str

    def apply(self, spec: ModelSpec, order: Sequence[str]) -> ModelSpec:
        """The spec this move leads to from `spec`."""
        if self.action == 'add':
            return spec.with_predictor(self.predictor, order=order)
        return spec.without_predictor(self.predictor)

    def __str__(self) -> str:
        sign = '+' if self.action == 'add' else '-'
        return f"{sign} {self.predictor}"


@dataclass(frozen=True)
class CandidateScore:
    """
    Outcome of evaluating one candidate move.

    score is None unless status is 'ok'.
    """
    move: CandidateMove
    score: float | None
    status: str = STATUS_OK

    @property
    def usable(self) -> bool:
        return self.status == STATUS_OK


@dataclass(frozen=True)
class StepRecord:
    """
    One accepted model on the selection path.

    Attributes:
        step: 0 for the initial model, then 1, 2, ...
        move: The move that produced this model (None for the start)
        spec: The model
        score: Its criterion score
        candidates: Every move evaluated from this model, in scope order
    """
    step: int
    move: CandidateMove | None
    spec: ModelSpec
    score: float
    candidates: tuple[CandidateScore, ...]


@dataclass(frozen=True)
class StepwiseParams:
    """
    Parameter payload for stepwise selection.

    - spec: the selected model (last entry of path)
    - score: its criterion score
    - path: accepted models, initial first; scores strictly improve
    - converged: False if max_steps stopped the search early
    """
    spec: ModelSpec
    score: float
    path: tuple[StepRecord, ...]
    converged: bool
