"""
Exception hierarchy for pystepwise.

All exceptions inherit from PyStepwiseError so callers can catch any
library-specific error in one place.

Two families:
    - ValidationError: the caller passed something unusable. Raised at
      the public boundary, before any computation starts.
    - NumericalError: the data are valid but the computation cannot
      produce a unique answer (rank-deficient designs).

Exceptions carry diagnostic information as attributes, and messages
state the actual and expected values.
"""


class PyStepwiseError(Exception):
    """Base exception for all pystepwise errors."""
    pass


class ValidationError(PyStepwiseError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class EmptyDatasetError(ValidationError):
    """
    Dataset has no observations.

    Attributes:
        name: Name of the empty input, if known
    """

    def __init__(self, message: str, name: str | None = None):
        super().__init__(message)
        self.name = name


class InvalidSpecificationError(ValidationError):
    """
    Model specification references columns the dataset does not have,
    or is inconsistent with the selection scope.

    Attributes:
        missing: Column names that could not be resolved
        available: Column names the dataset provides
    """

    def __init__(
        self,
        message: str,
        missing: tuple[str, ...] = (),
        available: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.missing = tuple(missing)
        self.available = tuple(available)


class NumericalError(PyStepwiseError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (number of columns)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class DegenerateFitError(SingularMatrixError):
    """
    A regression design is rank-deficient (perfectly collinear columns),
    so the least-squares solution is not unique.

    Stepwise selection catches this and skips the offending candidate.

    Attributes:
        columns: Column names of the design, if known
        aliased: Column names dropped by the pivoted QR, if known
    """

    def __init__(
        self,
        message: str,
        rank: int | None = None,
        expected_rank: int | None = None,
        columns: tuple[str, ...] = (),
        aliased: tuple[str, ...] = (),
    ):
        super().__init__(
            message,
            matrix_name='X',
            rank=rank,
            expected_rank=expected_rank,
        )
        self.columns = tuple(columns)
        self.aliased = tuple(aliased)
