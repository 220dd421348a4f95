"""
CPU backend for stepwise selection.

Greedy hill climbing over predictor subsets: from the current model,
score every single add/drop the direction permits, move to the best one
if it strictly improves the criterion, and stop when none does. Only a
local optimum under single-predictor moves is guaranteed.
"""

from __future__ import annotations

import numpy as np

from pystepwise.core.result import Result
from pystepwise.core.compute.timing import Timer
from pystepwise.core.exceptions import DegenerateFitError
from pystepwise.regression.design import ModelSpec, RegressionDesign
from pystepwise.regression.solvers import fit
from pystepwise.selection._common import (
    CandidateMove,
    CandidateScore,
    StepRecord,
    StepwiseParams,
    STATUS_OK,
    STATUS_DEGENERATE,
    STATUS_VISITED,
    STATUS_NONFINITE,
)
from pystepwise.selection.design import StepwiseDesign


class CPUStepwiseBackend:
    """
    Sequential stepwise search; each step depends on the previous one.

    Every candidate is fitted with singular_ok=False, so a rank-deficient
    candidate raises DegenerateFitError and is skipped rather than scored.
    """

    @property
    def name(self) -> str:
        return 'cpu_stepwise'

    def solve(self, design: StepwiseDesign) -> Result[StepwiseParams]:
        """Run the search and return Result[StepwiseParams]."""
        timer = Timer()
        timer.start()

        criterion = design.criterion
        warnings_list: list[str] = []

        current = design.initial
        with timer.section('initial_fit'):
            current_score = self._score(design, current)
        if current_score is None:
            current_score = criterion.worst
            warnings_list.append(
                f"initial model {current.formula()} is rank-deficient; "
                f"its {criterion.name} is taken as {current_score}"
            )

        visited = {current.key}
        path: list[StepRecord] = []
        last_move: CandidateMove | None = None
        n_fits = 1
        n_degenerate = 0
        converged = True

        while True:
            with timer.section('candidate_fits'):
                candidates = self._evaluate(design, current, visited)
            n_fits += sum(c.status != STATUS_VISITED for c in candidates)
            n_degenerate += sum(c.status == STATUS_DEGENERATE for c in candidates)

            path.append(StepRecord(
                step=len(path),
                move=last_move,
                spec=current,
                score=current_score,
                candidates=candidates,
            ))

            best = self._best(design, candidates)
            if best is None or not criterion.improves(best.score, current_score):
                break

            if len(path) > design.max_steps:
                converged = False
                warnings_list.append(
                    f"stopped after max_steps={design.max_steps} moves while "
                    f"'{best.move}' would still improve {criterion.name}"
                )
                break

            last_move = best.move
            current = best.move.apply(current, design.scope)
            current_score = best.score
            visited.add(current.key)

        timer.stop()

        params = StepwiseParams(
            spec=current,
            score=current_score,
            path=tuple(path),
            converged=converged,
        )

        return Result(
            params=params,
            info={
                'direction': design.direction,
                'criterion': criterion.name,
                'greater_is_better': criterion.greater_is_better,
                'tie_break': design.tie_break,
                'steps': len(path) - 1,
                'n_fits': n_fits,
                'n_degenerate': n_degenerate,
                'converged': converged,
                'n': design.source.n_observations,
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _score(self, design: StepwiseDesign, spec: ModelSpec) -> float | None:
        """Criterion score of `spec`, or None if its design is rank-deficient."""
        regression_design = RegressionDesign.from_spec(design.source, spec)
        try:
            model = fit(regression_design, singular_ok=False)
        except DegenerateFitError:
            return None
        return design.criterion.score(model)

    def _evaluate(
        self,
        design: StepwiseDesign,
        current: ModelSpec,
        visited: set[frozenset[str]],
    ) -> tuple[CandidateScore, ...]:
        """Score every permitted move from `current`, in scope order."""
        candidates = []
        for predictor in design.scope:
            if predictor in current:
                if design.direction == 'forward' or predictor in design.keep:
                    continue
                move = CandidateMove('drop', predictor)
            else:
                if design.direction == 'backward':
                    continue
                move = CandidateMove('add', predictor)

            spec = move.apply(current, design.scope)
            if spec.key in visited:
                candidates.append(CandidateScore(move, None, STATUS_VISITED))
                continue

            score = self._score(design, spec)
            if score is None:
                candidates.append(CandidateScore(move, None, STATUS_DEGENERATE))
            elif np.isnan(score):
                candidates.append(CandidateScore(move, None, STATUS_NONFINITE))
            else:
                candidates.append(CandidateScore(move, score, STATUS_OK))

        return tuple(candidates)

    def _best(
        self,
        design: StepwiseDesign,
        candidates: tuple[CandidateScore, ...],
    ) -> CandidateScore | None:
        """
        Best usable candidate; exact ties go to the earliest in tie-break order.
        """
        usable = [c for c in candidates if c.usable]
        if not usable:
            return None
        if design.tie_break == 'name':
            usable.sort(key=lambda c: c.move.predictor)

        best = usable[0]
        for candidate in usable[1:]:
            if design.criterion.improves(candidate.score, best.score):
                best = candidate
        return best
