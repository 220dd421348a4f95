"""
Solver dispatch for regression.

This module provides the fit() and fit_spec() functions (public API)
and backend selection.
"""

from typing import Literal
from numpy.typing import ArrayLike

from pystepwise.core.datasource import DataSource
from pystepwise.regression.design import RegressionDesign, ModelSpec
from pystepwise.regression.solution import LinearSolution
from pystepwise.regression.backends.cpu import CPUQRBackend


BackendChoice = Literal['auto', 'cpu', 'cpu_qr']


def fit(
    X: ArrayLike | RegressionDesign,
    y: ArrayLike | None = None,
    *,
    backend: BackendChoice = 'auto',
    singular_ok: bool = True,
) -> LinearSolution:
    """
    Fit a linear regression model by ordinary least squares.

    Solves:
        min_b ||y - Xb||^2

    X is used exactly as given: add a column of ones for an intercept,
    or use fit_spec() which does so from a ModelSpec.

    Args:
        X: Design matrix (n x p), or a prepared RegressionDesign
        y: Response vector (n,). Must be omitted when X is a design.
        backend: 'auto', 'cpu' or 'cpu_qr' (all the pivoted QR backend)
        singular_ok: If False, a rank-deficient X raises DegenerateFitError

    Returns:
        LinearSolution with coefficients, diagnostics, and summary methods

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions
        DegenerateFitError: If X is rank-deficient and singular_ok=False

    Example:
        >>> X = np.column_stack([np.ones(100), rng.standard_normal((100, 2))])
        >>> y = X @ [1, 2, 3] + rng.standard_normal(100) * 0.1
        >>> result = fit(X, y)
        >>> print(result.summary())
    """
    if isinstance(X, RegressionDesign):
        if y is not None:
            raise ValueError("y must be omitted when X is a RegressionDesign")
        design = X
    else:
        if y is None:
            raise ValueError("y required when X is an array")
        design = RegressionDesign.from_arrays(X, y)

    backend_impl = _get_backend(backend, singular_ok)
    result = backend_impl.solve(design)
    return LinearSolution(_result=result, _design=design)


def fit_spec(
    source: DataSource,
    spec: ModelSpec,
    *,
    backend: BackendChoice = 'auto',
    singular_ok: bool = True,
) -> LinearSolution:
    """
    Fit the model described by `spec` on `source`.

    Example:
        >>> ds = DataSource.from_dataframe(df)
        >>> model = fit_spec(ds, ModelSpec('price', ('sqft', 'age')))
        >>> model.coef
        {'(Intercept)': ..., 'sqft': ..., 'age': ...}

    Raises:
        InvalidSpecificationError: If `spec` names unknown columns
        EmptyDatasetError: If the source has no rows
        DegenerateFitError: If the design is rank-deficient and singular_ok=False
    """
    design = RegressionDesign.from_spec(source, spec)
    return fit(design, backend=backend, singular_ok=singular_ok)


def _get_backend(choice: BackendChoice, singular_ok: bool) -> CPUQRBackend:
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend(singular_ok=singular_ok)
    raise ValueError(f"Unknown backend: {choice!r}")
