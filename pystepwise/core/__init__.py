"""
Core infrastructure for pystepwise.

Shared abstractions and utilities used by the domain packages
(regression, selection, evaluation, montecarlo).

Key components:
    datasource: DataSource, the named-column dataset
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and linear algebra kernels
"""

from pystepwise.core.datasource import DataSource
from pystepwise.core.result import Result
from pystepwise.core.exceptions import (
    PyStepwiseError,
    ValidationError,
    DimensionError,
    EmptyDatasetError,
    InvalidSpecificationError,
    NumericalError,
    SingularMatrixError,
    DegenerateFitError,
)

__all__ = [
    "DataSource",
    "Result",
    "PyStepwiseError",
    "ValidationError",
    "DimensionError",
    "EmptyDatasetError",
    "InvalidSpecificationError",
    "NumericalError",
    "SingularMatrixError",
    "DegenerateFitError",
]
