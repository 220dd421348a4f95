"""
Public API for stepwise selection.

step() runs a full selection and returns a StepwiseSolution; select() is
the bare contract, returning just the selected ModelSpec.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import warnings

from pystepwise.core.datasource import DataSource
from pystepwise.regression.design import ModelSpec
from pystepwise.regression.solution import LinearSolution
from pystepwise.selection._criteria import Criterion
from pystepwise.selection.design import StepwiseDesign
from pystepwise.selection.solution import StepwiseSolution
from pystepwise.selection.backends.cpu import CPUStepwiseBackend


def step(
    source: DataSource,
    initial: ModelSpec,
    *,
    direction: str = 'both',
    criterion: str | float | Criterion | Callable[[LinearSolution], float] = 'aic',
    scope: Sequence[str] | None = None,
    keep: Sequence[str] = (),
    tie_break: str = 'order',
    max_steps: int = 1000,
) -> StepwiseSolution:
    """
    Stepwise model selection by a penalised criterion.

    Starting from `initial`, repeatedly applies the single add or drop
    that most improves the criterion, until no permitted move strictly
    improves it. Rank-deficient candidates are skipped, as are moves
    back to a model already visited.

    Every policy is explicit: nothing depends on library defaults.

    Args:
        source: Dataset. Response and scope columns must have no
            missing values (drop them first with source.dropna()).
        initial: Starting model, e.g. ModelSpec('y') for forward
            selection or ModelSpec('y', all_predictors) for backward.
        direction: 'forward' (add only), 'backward' (drop only), or
            'both'.
        criterion: 'aic' (default; n log(RSS/n) + 2 edf as in R's
            extractAIC), 'bic' (penalty log(n)), 'adj_r2' (higher is
            better), a penalty k, a Criterion, or a callable
            LinearSolution -> float where lower is better.
        scope: Candidate predictors in priority order. Default: every
            non-response column, in column order.
        keep: Predictors that are never dropped.
        tie_break: 'order' (earliest in scope wins exact ties) or 'name'.
        max_steps: Maximum number of accepted moves.

    Returns:
        StepwiseSolution with the selected spec, its score, and the path.

    Raises:
        InvalidSpecificationError: initial/scope/keep name unknown columns
            or are mutually inconsistent.
        EmptyDatasetError: The dataset has no rows.
        ValidationError: Missing values in the response or scope columns.
        ValueError: Invalid option values.

    Example:
        >>> result = step(ds, ModelSpec('y'), direction='forward')
        >>> result.selected
        ('a',)
        >>> print(result.summary())
    """
    design = StepwiseDesign.for_selection(
        source,
        initial,
        direction=direction,
        criterion=criterion,
        scope=scope,
        keep=keep,
        tie_break=tie_break,
        max_steps=max_steps,
    )

    backend = CPUStepwiseBackend()
    result = backend.solve(design)

    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    return StepwiseSolution(_result=result, _design=design)


def select(
    source: DataSource,
    initial: ModelSpec,
    direction: str = 'both',
    **kwargs,
) -> ModelSpec:
    """
    Selected ModelSpec only; see step() for arguments.
    """
    return step(source, initial, direction=direction, **kwargs).spec
