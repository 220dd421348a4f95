"""
Design class for repeated holdout evaluation.

HoldoutDesign encapsulates everything a backend needs to compare models
over many random train/test splits. Immutable, validated at construction.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
import numbers
from typing import Union

from pystepwise.core.datasource import DataSource
from pystepwise.core.validation import check_columns, check_finite, check_not_empty
from pystepwise.evaluation._split import SeedLike, train_count
from pystepwise.regression.design import ModelSpec

# A model is either fixed, or chosen from each training set.
ModelLike = Union[ModelSpec, Callable[[DataSource], ModelSpec]]


@dataclass(frozen=True)
class HoldoutDesign:
    """
    Frozen design for repeated holdout evaluation.

    Attributes:
        source: Dataset to split.
        models: Name -> ModelSpec, or name -> callable(train) -> ModelSpec.
        n_train: Training rows per split.
        n_splits: Number of random splits.
        seed: Seed or Generator driving every split.
    """
    source: DataSource
    models: dict[str, ModelLike]
    n_train: int
    n_splits: int
    seed: SeedLike

    @classmethod
    def for_holdout(
        cls,
        source: DataSource,
        models: Mapping[str, ModelLike] | Sequence[ModelSpec] | ModelSpec,
        *,
        train: float | int = 0.5,
        n_splits: int = 100,
        seed: SeedLike = None,
    ) -> HoldoutDesign:
        """
        Create a holdout design with validation.

        Args:
            source: Dataset to split.
            models: Models to compare. A sequence of ModelSpecs is named
                by formula.
            train: Fraction in (0, 1) or row count for the training part.
            n_splits: Number of random splits, >= 1.
            seed: int, numpy Generator, or None.

        Raises:
            InvalidSpecificationError: A ModelSpec names unknown columns.
            EmptyDatasetError: The source has no rows.
            ValidationError: Missing values in a fixed model's columns.
            ValueError: Invalid option values.
        """
        if isinstance(models, ModelSpec):
            models = [models]
        if isinstance(models, Mapping):
            named = {str(k): v for k, v in models.items()}
        else:
            named = {spec.formula(): spec for spec in models}
            if len(named) != len(models):
                raise ValueError("models: duplicated model specifications")

        if not named:
            raise ValueError("models: at least one model is required")

        for name, model in named.items():
            if isinstance(model, ModelSpec):
                columns = (model.response,) + model.predictors
                check_columns(columns, source.columns, f"models[{name!r}]")
                for column in columns:
                    check_finite(source[column], column)
            elif not callable(model):
                raise TypeError(
                    f"models[{name!r}]: expected a ModelSpec or a callable, "
                    f"got {type(model).__name__}"
                )

        if isinstance(n_splits, bool) or not isinstance(n_splits, numbers.Integral) or n_splits < 1:
            raise ValueError(f"n_splits must be an integer >= 1, got {n_splits!r}")

        check_not_empty(source.n_observations, 'data')
        n_train = train_count(train, source.n_observations)

        return cls(
            source=source,
            models=named,
            n_train=n_train,
            n_splits=int(n_splits),
            seed=seed,
        )

    @property
    def n_test(self) -> int:
        return self.source.n_observations - self.n_train
