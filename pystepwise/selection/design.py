"""
Design class for stepwise selection.

StepwiseDesign collects every policy choice of a selection run (data,
starting model, scope, direction, criterion, tie-break, step cap) in one
frozen, validated object. Backends receive nothing else.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import numbers

from pystepwise.core.datasource import DataSource
from pystepwise.core.exceptions import InvalidSpecificationError
from pystepwise.core.validation import check_columns, check_finite, check_not_empty
from pystepwise.regression.design import ModelSpec
from pystepwise.regression.solution import LinearSolution
from pystepwise.selection._criteria import Criterion, resolve_criterion

DIRECTIONS = ('forward', 'backward', 'both')
TIE_BREAKS = ('order', 'name')


@dataclass(frozen=True)
class StepwiseDesign:
    """
    Frozen design for stepwise selection.

    Attributes:
        source: Dataset every candidate is fitted on.
        initial: Starting model.
        scope: Predictors the search may use, in declared order. This
            order drives candidate enumeration and tie-breaking.
        keep: Predictors that are never dropped.
        direction: 'forward' (add only), 'backward' (drop only) or 'both'.
        criterion: Score and sign convention.
        tie_break: 'order' (first in scope wins) or 'name' (smallest name wins).
        max_steps: Maximum number of accepted moves.
    """
    source: DataSource
    initial: ModelSpec
    scope: tuple[str, ...]
    keep: frozenset[str]
    direction: str
    criterion: Criterion
    tie_break: str
    max_steps: int

    @classmethod
    def for_selection(
        cls,
        source: DataSource,
        initial: ModelSpec,
        *,
        direction: str = 'both',
        criterion: str | float | Criterion | Callable[[LinearSolution], float] = 'aic',
        scope: Sequence[str] | None = None,
        keep: Sequence[str] = (),
        tie_break: str = 'order',
        max_steps: int = 1000,
    ) -> StepwiseDesign:
        """
        Create a stepwise design with validation.

        Args:
            source: Dataset; response and scope columns must be finite.
            initial: Starting ModelSpec (empty, full, or anything between).
            direction: 'forward', 'backward' or 'both'.
            criterion: See resolve_criterion().
            scope: Candidate predictors. Default: every column except the
                response, in the source's column order.
            keep: Predictors always retained; must be in `initial`.
            tie_break: 'order' or 'name'.
            max_steps: Cap on accepted moves, >= 0.

        Returns:
            Validated StepwiseDesign.

        Raises:
            InvalidSpecificationError: Unknown columns, or initial/keep
                inconsistent with the scope.
            EmptyDatasetError: The source has no rows.
            ValidationError: Missing values in the response or scope.
            ValueError: Invalid option values.
        """
        if not isinstance(initial, ModelSpec):
            raise TypeError(
                f"initial must be a ModelSpec, got {type(initial).__name__}"
            )

        if direction not in DIRECTIONS:
            raise ValueError(
                f"direction must be 'forward', 'backward', or 'both', "
                f"got {direction!r}"
            )

        if tie_break not in TIE_BREAKS:
            raise ValueError(
                f"tie_break must be 'order' or 'name', got {tie_break!r}"
            )

        if isinstance(max_steps, bool) or not isinstance(max_steps, numbers.Integral) or max_steps < 0:
            raise ValueError(f"max_steps must be an integer >= 0, got {max_steps!r}")

        check_columns((initial.response,) + initial.predictors, source.columns, 'initial')

        if scope is None:
            scope_t = tuple(c for c in source.columns if c != initial.response)
        else:
            scope_t = tuple(scope)
            check_columns(scope_t, source.columns, 'scope')
            if len(set(scope_t)) != len(scope_t):
                raise InvalidSpecificationError(f"scope: duplicated names in {list(scope_t)}")
            if initial.response in scope_t:
                raise InvalidSpecificationError(
                    f"scope: response '{initial.response}' cannot be a candidate predictor",
                    missing=(initial.response,),
                )

        outside = tuple(p for p in initial.predictors if p not in scope_t)
        if outside:
            raise InvalidSpecificationError(
                f"initial: predictor(s) {list(outside)} are outside the scope {list(scope_t)}",
                missing=outside,
                available=scope_t,
            )

        keep_t = tuple(keep)
        not_in_initial = tuple(p for p in keep_t if p not in initial.predictors)
        if not_in_initial:
            raise InvalidSpecificationError(
                f"keep: predictor(s) {list(not_in_initial)} are not in the initial model "
                f"{initial.formula()}",
                missing=not_in_initial,
                available=initial.predictors,
            )

        check_not_empty(source.n_observations, 'data')

        # Every candidate must be fitted on the same rows.
        check_finite(source[initial.response], initial.response)
        for name in scope_t:
            check_finite(source[name], name)

        return cls(
            source=source,
            initial=initial,
            scope=scope_t,
            keep=frozenset(keep_t),
            direction=direction,
            criterion=resolve_criterion(criterion),
            tie_break=tie_break,
            max_steps=int(max_steps),
        )
