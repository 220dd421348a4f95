"""
Solution wrapper for stepwise selection.

StepwiseSolution wraps Result[StepwiseParams] and provides accessors
for the selected model, the path that led to it, and an R-style trace.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pystepwise.core.result import Result
from pystepwise.regression.design import ModelSpec
from pystepwise.regression.solution import LinearSolution
from pystepwise.regression.solvers import fit_spec
from pystepwise.selection._common import (
    CandidateMove,
    StepRecord,
    StepwiseParams,
    STATUS_OK,
)

if TYPE_CHECKING:
    from pystepwise.selection.design import StepwiseDesign


@dataclass
class StepwiseSolution:
    """
    User-facing stepwise selection results.
    """
    _result: Result[StepwiseParams]
    _design: 'StepwiseDesign'

    _model: LinearSolution | None = None

    # --- Selected model ---

    @property
    def spec(self) -> ModelSpec:
        """The selected model."""
        return self._result.params.spec

    @property
    def selected(self) -> tuple[str, ...]:
        """Selected predictors, in scope order."""
        return self.spec.predictors

    @property
    def score(self) -> float:
        """Criterion score of the selected model."""
        return self._result.params.score

    @property
    def model(self) -> LinearSolution:
        """The selected model fitted on the full dataset."""
        if self._model is None:
            self._model = fit_spec(self._design.source, self.spec)
        return self._model

    # --- Path ---

    @property
    def path(self) -> tuple[StepRecord, ...]:
        """Accepted models, initial first."""
        return self._result.params.path

    @property
    def moves(self) -> tuple[CandidateMove, ...]:
        """Accepted moves, in order."""
        return tuple(r.move for r in self.path if r.move is not None)

    @property
    def scores(self) -> NDArray[np.floating[Any]]:
        """Criterion score of each accepted model (strictly improving)."""
        return np.array([r.score for r in self.path], dtype=np.float64)

    @property
    def n_steps(self) -> int:
        return len(self.path) - 1

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    # --- Metadata ---

    @property
    def initial(self) -> ModelSpec:
        return self._design.initial

    @property
    def direction(self) -> str:
        return self._design.direction

    @property
    def criterion(self) -> str:
        return self._design.criterion.name

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

    def summary(self) -> str:
        """
        R-style step() trace.

        Each accepted model is followed by the candidate table evaluated
        from it, best first, with the current model shown as <none>:

            Start:  AIC=12.3456
            y ~ a + b + c

                      AIC
            - c    10.2000
            <none> 12.3456
            - a    40.1000
        """
        name = self.criterion
        lines = [f"Stepwise selection ({self.direction}, {name})", ""]

        for record in self.path:
            head = "Start: " if record.move is None else f"Step {record.step}:"
            lines.append(f"{head} {name}={record.score:.4f}")
            lines.append(record.spec.formula())
            lines.append("")
            lines.extend(self._candidate_table(record))
            lines.append("")

        lines.append(f"Selected: {self.spec.formula()}")
        if not self.converged:
            lines.append("Search stopped by max_steps before convergence.")
        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def _candidate_table(self, record: StepRecord) -> list[str]:
        reverse = self._design.criterion.greater_is_better
        rows = [(str(c.move), c.score) for c in record.candidates if c.status == STATUS_OK]
        rows.append(("<none>", record.score))
        rows.sort(key=lambda r: r[1], reverse=reverse)

        width = max(len(label) for label, _ in rows)
        out = [f"{'':<{width}} {self.criterion:>12}"]
        out.extend(f"{label:<{width}} {score:12.4f}" for label, score in rows)
        for c in record.candidates:
            if c.status != STATUS_OK:
                out.append(f"{str(c.move):<{width}} {'(' + c.status + ')':>12}")
        return out

    def __repr__(self) -> str:
        return (
            f"StepwiseSolution(selected={self.spec.formula()!r}, "
            f"{self.criterion}={self.score:.4f}, steps={self.n_steps})"
        )
