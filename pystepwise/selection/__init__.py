"""
Stepwise model selection.

Greedy add/drop search over predictor subsets guided by an information
criterion, with every policy (direction, criterion and its sign, tie
break, step cap) passed explicitly.

Usage:
    from pystepwise.selection import step

    result = step(ds, ModelSpec('y', ('a', 'b', 'c')), direction='backward')
    result.spec          # selected ModelSpec
    result.path          # accepted models with their candidate tables
    print(result.summary())
"""

from pystepwise.selection._common import CandidateMove, CandidateScore, StepRecord
from pystepwise.selection._criteria import Criterion, AIC, BIC, ADJ_R2, resolve_criterion
from pystepwise.selection.design import StepwiseDesign
from pystepwise.selection.solution import StepwiseSolution
from pystepwise.selection.solvers import step, select

__all__ = [
    "step",
    "select",
    "StepwiseDesign",
    "StepwiseSolution",
    "CandidateMove",
    "CandidateScore",
    "StepRecord",
    "Criterion",
    "AIC",
    "BIC",
    "ADJ_R2",
    "resolve_criterion",
]
