"""
Regression Design.

A ModelSpec names the model: which column is the response, which
columns are predictors, and whether an intercept is included. A
RegressionDesign is that spec resolved against a DataSource: the
numeric design matrix X (intercept column first) and response y,
validated and frozen.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystepwise.core.datasource import DataSource
from pystepwise.core.exceptions import InvalidSpecificationError
from pystepwise.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
    check_not_empty,
    check_columns,
)

INTERCEPT = '(Intercept)'


@dataclass(frozen=True)
class ModelSpec:
    """
    Immutable description of a linear model: response ~ predictors.

    Predictors keep the order they were given in. Adding or removing a
    predictor returns a new ModelSpec; the intercept is not a predictor
    and is never added or dropped by those methods.

    Examples:
        >>> spec = ModelSpec('mpg', ('wt', 'hp'))
        >>> str(spec)
        'mpg ~ wt + hp'
        >>> spec.without_predictor('hp').formula()
        'mpg ~ wt'
    """
    response: str
    predictors: tuple[str, ...] = ()
    intercept: bool = True

    def __post_init__(self):
        if isinstance(self.predictors, str):
            object.__setattr__(self, 'predictors', (self.predictors,))
        else:
            object.__setattr__(self, 'predictors', tuple(self.predictors))

        duplicates = sorted({p for p in self.predictors if self.predictors.count(p) > 1})
        if duplicates:
            raise InvalidSpecificationError(
                f"predictors: duplicated name(s) {duplicates}",
                missing=tuple(duplicates),
            )
        if self.response in self.predictors:
            raise InvalidSpecificationError(
                f"predictors: response '{self.response}' cannot also be a predictor",
                missing=(self.response,),
            )
        if self.response == INTERCEPT or INTERCEPT in self.predictors:
            raise InvalidSpecificationError(
                f"'{INTERCEPT}' is reserved; use intercept=True instead"
            )

    @property
    def key(self) -> frozenset[str]:
        """Order-free identity of the predictor set."""
        return frozenset(self.predictors)

    @property
    def terms(self) -> tuple[str, ...]:
        """Design column names, intercept first when present."""
        if self.intercept:
            return (INTERCEPT,) + self.predictors
        return self.predictors

    def __contains__(self, predictor: str) -> bool:
        return predictor in self.predictors

    def __len__(self) -> int:
        return len(self.predictors)

    def with_predictor(self, name: str, order: Sequence[str] | None = None) -> ModelSpec:
        """
        Return a new spec with `name` added.

        With `order`, predictors are arranged by their position in it
        (names absent from `order` keep their relative place at the end).
        """
        if name in self.predictors:
            raise ValueError(f"'{name}' is already in the model")
        predictors = self.predictors + (name,)
        if order is not None:
            rank = {p: i for i, p in enumerate(order)}
            predictors = tuple(sorted(
                predictors, key=lambda p: rank.get(p, len(rank))
            ))
        return ModelSpec(self.response, predictors, self.intercept)

    def without_predictor(self, name: str) -> ModelSpec:
        """Return a new spec with `name` removed."""
        if name not in self.predictors:
            raise ValueError(f"'{name}' is not in the model")
        predictors = tuple(p for p in self.predictors if p != name)
        return ModelSpec(self.response, predictors, self.intercept)

    def formula(self) -> str:
        """R-style formula text."""
        if not self.predictors:
            return f"{self.response} ~ {1 if self.intercept else 0}"
        rhs = " + ".join(self.predictors)
        if not self.intercept:
            rhs += " - 1"
        return f"{self.response} ~ {rhs}"

    def __str__(self) -> str:
        return self.formula()


@dataclass(frozen=True)
class RegressionDesign:
    """
    Regression design matrix specification.

    Immutable after construction. X already contains the intercept
    column when the model has one.

    Construction:
        RegressionDesign.from_spec(ds, ModelSpec('y', ('a', 'b')))
        RegressionDesign.from_arrays(X, y)         # X used as given
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _names: tuple[str, ...]
    _spec: ModelSpec | None = None

    @classmethod
    def from_spec(cls, source: DataSource, spec: ModelSpec) -> RegressionDesign:
        """
        Build a design from a DataSource and a ModelSpec.

        Raises:
            InvalidSpecificationError: If `spec` names unknown columns
            EmptyDatasetError: If the source has no rows
            ValidationError: If any used column has missing values
        """
        check_columns((spec.response,) + spec.predictors, source.columns, 'spec')
        check_not_empty(source.n_observations, 'data')

        y = np.asarray(source[spec.response], dtype=np.float64)
        X = source.matrix(spec.predictors)
        if spec.intercept:
            X = np.column_stack([np.ones(source.n_observations), X])

        check_finite(y, spec.response)
        for j, name in enumerate(spec.terms):
            check_finite(X[:, j], name)

        n, p = X.shape
        return cls(_X=X, _y=y, _n=n, _p=p, _names=spec.terms, _spec=spec)

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        names: Sequence[str] | None = None,
    ) -> RegressionDesign:
        """Build a design directly from arrays (X is used as given)."""
        X = check_array(X, 'X')
        y = check_array(y, 'y')
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))
        check_not_empty(X.shape[0], 'X')

        n, p = X.shape
        if names is None:
            names = tuple(f"x{j + 1}" for j in range(p))
        elif len(names) != p:
            raise InvalidSpecificationError(
                f"names: got {len(names)} names for {p} columns"
            )
        return cls(_X=X, _y=y, _n=n, _p=p, _names=tuple(names))

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of design columns (intercept included)."""
        return self._p

    @property
    def names(self) -> tuple[str, ...]:
        """Design column names."""
        return self._names

    @property
    def spec(self) -> ModelSpec | None:
        """The ModelSpec this design was built from, if any."""
        return self._spec

    @property
    def has_intercept(self) -> bool:
        if self._spec is not None:
            return self._spec.intercept
        return bool(self._p) and bool(np.all(self._X[:, 0] == 1.0))

    def XtX(self) -> NDArray[np.floating[Any]]:
        return self._X.T @ self._X
