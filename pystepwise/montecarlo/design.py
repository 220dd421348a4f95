"""
Design class for bootstrap resampling.

BootstrapDesign encapsulates all inputs needed by backends to perform
resampling. Immutable, validated at construction.
"""

from __future__ import annotations

from dataclasses import dataclass
import numbers
from typing import Any, Callable, Union

import numpy as np
from numpy.typing import NDArray

from pystepwise.core.datasource import DataSource
from pystepwise.core.validation import check_not_empty

BootData = Union[NDArray[np.floating[Any]], DataSource]


@dataclass(frozen=True)
class BootstrapDesign:
    """
    Frozen design for nonparametric bootstrap resampling.

    Attributes:
        data: Original data, an array of shape (n,) or (n, p), or a
            DataSource whose rows are resampled.
        statistic: fn(data, indices) -> (k,). The meaning of the second
            argument is set by stype.
        R: Number of bootstrap replicates.
        sim: "ordinary" or "balanced".
        stype: What the second argument to statistic represents:
            "i" (indices), "f" (frequencies), "w" (weights).
        strata: Optional stratification vector of length n.
        seed: Seed or Generator for reproducibility.
        names: Optional labels for the k statistics.
    """
    data: BootData
    statistic: Callable
    R: int
    sim: str
    stype: str
    strata: NDArray | None
    seed: int | np.random.Generator | None
    names: tuple[str, ...] | None = None

    @classmethod
    def for_bootstrap(
        cls,
        data,
        statistic: Callable,
        R: int = 999,
        *,
        sim: str = "ordinary",
        stype: str = "i",
        strata=None,
        seed: int | np.random.Generator | None = None,
        names=None,
    ) -> BootstrapDesign:
        """
        Create a bootstrap design with validation.

        Args:
            data: 1D or 2D array-like, or a DataSource.
            statistic: Function to compute the statistic of interest.
            R: Number of bootstrap replicates. Must be >= 1.
            sim: "ordinary" (default) or "balanced".
            stype: "i" (indices), "f" (frequencies), "w" (weights).
                A DataSource only supports "i".
            strata: Stratification vector (same length as data rows).
            seed: Random seed or Generator.
            names: Labels for the statistics, used by summary().

        Returns:
            Validated BootstrapDesign.

        Raises:
            EmptyDatasetError: If data has no rows.
            ValueError: If option values are invalid.
        """
        if isinstance(data, DataSource):
            data_arr = data
            n = data.n_observations
        else:
            data_arr = np.asarray(data, dtype=np.float64)
            if data_arr.ndim not in (1, 2):
                raise ValueError(
                    f"data must be 1D or 2D, got {data_arr.ndim}D"
                )
            data_arr = data_arr.copy()
            n = data_arr.shape[0]

        check_not_empty(n, 'data')

        if not callable(statistic):
            raise TypeError(f"statistic must be callable, got {type(statistic).__name__}")

        if isinstance(R, bool) or not isinstance(R, numbers.Integral) or R < 1:
            raise ValueError(f"R must be an integer >= 1, got {R!r}")

        if sim not in ("ordinary", "balanced"):
            raise ValueError(
                f"sim must be 'ordinary' or 'balanced', got {sim!r}"
            )

        if stype not in ("i", "f", "w"):
            raise ValueError(
                f"stype must be 'i', 'f', or 'w', got {stype!r}"
            )
        if isinstance(data_arr, DataSource) and stype != "i":
            raise ValueError("a DataSource can only be resampled with stype='i'")

        strata_arr = None
        if strata is not None:
            strata_arr = np.asarray(strata)
            if strata_arr.shape[0] != n:
                raise ValueError(
                    f"strata length ({strata_arr.shape[0]}) must match "
                    f"data rows ({n})"
                )

        return cls(
            data=data_arr,
            statistic=statistic,
            R=int(R),
            sim=sim,
            stype=stype,
            strata=strata_arr,
            seed=seed,
            names=tuple(names) if names is not None else None,
        )

    @property
    def n(self) -> int:
        if isinstance(self.data, DataSource):
            return self.data.n_observations
        return self.data.shape[0]

    def subset(self, indices: NDArray) -> BootData:
        """Rows of the data at `indices` (repeats allowed)."""
        if isinstance(self.data, DataSource):
            return self.data.take(indices)
        return self.data[indices]
