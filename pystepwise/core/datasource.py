"""
Universal DataSource for pystepwise.

DataSource is the "I have data" abstraction: an ordered set of named,
equal-length numeric columns. It doesn't know which column is the
response or what model will be fitted; designs decide that.

Usage:
    from pystepwise import DataSource

    ds = DataSource.from_arrays(y=y, a=a, b=b)
    ds = DataSource.from_file("data.csv")
    ds = DataSource.from_dataframe(df)

    ds.columns          # ('y', 'a', 'b'), declared order
    ds['a']             # 1D float64 array
    ds.dropna(['y'])    # rows with a missing response removed
    ds.take(indices)    # row subset, used by splitting and resampling
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystepwise.core.exceptions import ValidationError, DimensionError
from pystepwise.core.validation import check_array, check_columns

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Ordered collection of named numeric columns. Domain-agnostic.

    Construct via factory classmethods, not directly. Missing values are
    stored as NaN; consumers decide whether to drop them.
    """
    _data: dict[str, NDArray[np.floating[Any]]]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    @property
    def columns(self) -> tuple[str, ...]:
        """Column names in declared order."""
        return tuple(self._data.keys())

    def keys(self) -> frozenset[str]:
        """Return the names of all available columns."""
        return frozenset(self._data.keys())

    def __getitem__(self, key: str) -> NDArray[np.floating[Any]]:
        """
        Access a named column.

        Raises:
            KeyError: If key not found, listing the available columns
        """
        if key not in self._data:
            raise KeyError(
                f"DataSource has no column '{key}'. Available: {list(self.columns)}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return self.n_observations

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    # === Derived Views ===

    def matrix(self, columns: Sequence[str]) -> NDArray[np.floating[Any]]:
        """
        Stack columns into an (n, len(columns)) matrix.

        An empty column list gives an (n, 0) matrix.
        """
        check_columns(columns, self.columns, 'columns')
        if not columns:
            return np.empty((self.n_observations, 0), dtype=np.float64)
        return np.column_stack([self._data[c] for c in columns])

    def select(self, columns: Sequence[str]) -> DataSource:
        """New DataSource with only the given columns, in the given order."""
        check_columns(columns, self.columns, 'columns')
        return self._derive({c: self._data[c] for c in columns}, self.n_observations)

    def take(self, indices: ArrayLike) -> DataSource:
        """New DataSource with the rows at `indices` (repeats allowed)."""
        idx = np.asarray(indices, dtype=np.intp)
        if idx.ndim != 1:
            raise DimensionError(f"indices: expected 1D array, got {idx.ndim}D")
        storage = {name: col[idx] for name, col in self._data.items()}
        return self._derive(storage, len(idx))

    def dropna(self, columns: Iterable[str] | None = None) -> DataSource:
        """
        Drop rows with a non-finite value in any of `columns`.

        With columns=None every column is checked (R's na.omit).
        """
        names = self.columns if columns is None else tuple(columns)
        check_columns(names, self.columns, 'columns')
        keep = np.ones(self.n_observations, dtype=bool)
        for name in names:
            keep &= np.isfinite(self._data[name])
        n_dropped = int(self.n_observations - keep.sum())
        out = self.take(np.flatnonzero(keep))
        out._metadata['n_dropped'] = self._metadata.get('n_dropped', 0) + n_dropped
        return out

    def to_frame(self) -> 'pd.DataFrame':
        """Convert to a pandas DataFrame (columns in declared order)."""
        import pandas as pd
        return pd.DataFrame({name: col for name, col in self._data.items()})

    def _derive(self, storage: dict[str, NDArray], n_obs: int) -> DataSource:
        metadata = dict(self._metadata)
        metadata['n_observations'] = n_obs
        return DataSource(_data=storage, _metadata=metadata)

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        *,
        data: ArrayLike | None = None,
        columns: Sequence[str] | None = None,
        **named_arrays: ArrayLike,
    ) -> DataSource:
        """
        Construct from NumPy arrays.

        Either pass a 2D `data` matrix (columns named by `columns`, or
        V1..Vp like R's data.frame) or named 1D arrays as keywords.
        Keyword order is the declared column order.
        """
        storage: dict[str, NDArray] = {}

        if data is not None:
            matrix = check_array(data, 'data')
            if matrix.ndim == 1:
                matrix = matrix.reshape(-1, 1)
            if matrix.ndim != 2:
                raise DimensionError(
                    f"data: expected 2D array, got {matrix.ndim}D with shape {matrix.shape}"
                )
            if columns is None:
                columns = [f"V{i + 1}" for i in range(matrix.shape[1])]
            if len(columns) != matrix.shape[1]:
                raise DimensionError(
                    f"columns: got {len(columns)} names for {matrix.shape[1]} columns"
                )
            for i, name in enumerate(columns):
                storage[name] = matrix[:, i].astype(np.float64, copy=True)

        for name, arr in named_arrays.items():
            if name in storage:
                raise ValidationError(f"{name}: column given twice")
            col = check_array(arr, name)
            if col.ndim == 2 and col.shape[1] == 1:
                col = col.ravel()
            if col.ndim != 1:
                raise DimensionError(
                    f"{name}: expected 1D array, got {col.ndim}D with shape {col.shape}"
                )
            storage[name] = col.astype(np.float64, copy=True)

        return cls._from_storage(storage, source='arrays')

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from file (CSV, TSV, NPY)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ('.csv', '.tsv'):
            import pandas as pd
            sep = '\t' if suffix == '.tsv' else ','
            df = pd.read_csv(path, sep=sep, usecols=columns)
            return cls.from_dataframe(df, source_path=str(path))
        elif suffix == '.npy':
            data = np.load(path)
            return cls.from_arrays(data=data, columns=columns)
        else:
            raise ValidationError(f"Unknown file format: {suffix}")

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """
        Construct from a pandas DataFrame.

        Every column must be numeric; pandas missing values become NaN.
        """
        storage: dict[str, NDArray] = {}
        for col in df.columns:
            series = df[col]
            try:
                values = series.to_numpy(dtype=np.float64, na_value=np.nan)
            except (ValueError, TypeError) as e:
                raise ValidationError(
                    f"{col}: non-numeric column (dtype {series.dtype})"
                ) from e
            storage[str(col)] = values

        ds = cls._from_storage(storage, source='dataframe', n_obs=len(df))
        if source_path:
            ds._metadata['source_path'] = source_path
        return ds

    @classmethod
    def _from_storage(
        cls,
        storage: dict[str, NDArray],
        *,
        source: str,
        n_obs: int | None = None,
    ) -> DataSource:
        lengths = {name: len(col) for name, col in storage.items()}
        if len(set(lengths.values())) > 1:
            details = ", ".join(f"{k}={v}" for k, v in lengths.items())
            raise DimensionError(f"Inconsistent lengths: {details}")
        if n_obs is None:
            n_obs = next(iter(lengths.values()), 0)
        return cls(
            _data=storage,
            _metadata={'n_observations': n_obs, 'source': source},
        )
