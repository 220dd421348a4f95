"""
CPU backend for repeated holdout evaluation.

Splits are independent of each other, but they are drawn from a single
Generator one after another so that a seed reproduces the whole batch.
"""

from __future__ import annotations

import numpy as np

from pystepwise.core.datasource import DataSource
from pystepwise.core.result import Result
from pystepwise.core.compute.timing import Timer
from pystepwise.core.exceptions import DegenerateFitError
from pystepwise.evaluation._common import HoldoutParams
from pystepwise.evaluation._split import train_test_split, prediction_error
from pystepwise.evaluation.design import HoldoutDesign, ModelLike
from pystepwise.regression.design import ModelSpec
from pystepwise.regression.solvers import fit_spec


class CPUHoldoutBackend:
    """
    Fits every model on each training part and scores RMSPE on the test part.

    All models see the same split within a repetition, so their errors
    are paired.
    """

    @property
    def name(self) -> str:
        return 'cpu_holdout'

    def solve(self, design: HoldoutDesign) -> Result[HoldoutParams]:
        """Run the splits and return Result[HoldoutParams]."""
        timer = Timer()
        timer.start()

        names = tuple(design.models)
        n_splits = design.n_splits
        k = len(names)

        rng = np.random.default_rng(design.seed)
        errors = np.full((n_splits, k), np.nan, dtype=np.float64)
        n_degenerate = np.zeros(k, dtype=int)
        specs: list[tuple[ModelSpec, ...]] = []

        for s in range(n_splits):
            with timer.section('split'):
                train, test = train_test_split(design.source, design.n_train, seed=rng)

            split_specs = []
            for j, name in enumerate(names):
                with timer.section('model_choice'):
                    spec = self._resolve(name, design.models[name], train)
                split_specs.append(spec)

                with timer.section('fit_and_score'):
                    try:
                        model = fit_spec(train, spec, singular_ok=False)
                    except DegenerateFitError:
                        n_degenerate[j] += 1
                        continue
                    errors[s, j] = prediction_error(model, test)
            specs.append(tuple(split_specs))

        timer.stop()

        warnings_list = [
            f"model {names[j]!r} was rank-deficient on {n_degenerate[j]} of "
            f"{n_splits} training sets; those splits score NaN"
            for j in range(k) if n_degenerate[j]
        ]

        params = HoldoutParams(
            errors=errors,
            names=names,
            specs=tuple(specs),
            n_train=design.n_train,
            n_test=design.n_test,
        )

        return Result(
            params=params,
            info={
                'n_splits': n_splits,
                'n_models': k,
                'n_train': design.n_train,
                'n_test': design.n_test,
                'n_degenerate': dict(zip(names, n_degenerate.tolist())),
            },
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )

    def _resolve(self, name: str, model: ModelLike, train: DataSource) -> ModelSpec:
        if isinstance(model, ModelSpec):
            return model
        spec = model(train)
        if not isinstance(spec, ModelSpec):
            raise TypeError(
                f"models[{name!r}] returned {type(spec).__name__}, expected a ModelSpec"
            )
        return spec
