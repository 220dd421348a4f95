"""
Linear models fitted by ordinary least squares.

Public API:
    fit(X, y, ...) -> LinearSolution
    fit_spec(source, spec, ...) -> LinearSolution

A ModelSpec names response and predictors; fit_spec() resolves it
against a DataSource, adds the intercept column, and fits.

Example:
    >>> from pystepwise.regression import ModelSpec, fit_spec
    >>> model = fit_spec(ds, ModelSpec('y', ('a', 'b')))
    >>> print(model.coef)
    >>> print(model.summary())
"""

from pystepwise.regression.design import ModelSpec, RegressionDesign, INTERCEPT
from pystepwise.regression.solution import LinearSolution, LinearParams
from pystepwise.regression.solvers import fit, fit_spec

__all__ = [
    "fit",
    "fit_spec",
    "ModelSpec",
    "RegressionDesign",
    "INTERCEPT",
    "LinearSolution",
    "LinearParams",
]
