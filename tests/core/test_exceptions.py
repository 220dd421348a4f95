"""
Tests for the pystepwise exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyStepwiseError)
    - Diagnostic attributes on EmptyDatasetError, InvalidSpecificationError,
      SingularMatrixError and DegenerateFitError
    - Default attribute values
"""

import pytest

from pystepwise.core.exceptions import (
    DegenerateFitError,
    DimensionError,
    EmptyDatasetError,
    InvalidSpecificationError,
    NumericalError,
    PyStepwiseError,
    SingularMatrixError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyStepwiseError."""

    @pytest.mark.parametrize("exc", [
        ValidationError("bad"),
        DimensionError("shape"),
        EmptyDatasetError("empty"),
        InvalidSpecificationError("unknown column"),
        NumericalError("failed"),
        SingularMatrixError("singular"),
        DegenerateFitError("collinear"),
    ])
    def test_all_are_pystepwise_errors(self, exc):
        with pytest.raises(PyStepwiseError):
            raise exc

    def test_caller_errors_are_validation_errors(self):
        for cls in (DimensionError, EmptyDatasetError, InvalidSpecificationError):
            assert issubclass(cls, ValidationError)
            assert not issubclass(cls, NumericalError)

    def test_degenerate_fit_is_singular_matrix(self):
        with pytest.raises(SingularMatrixError):
            raise DegenerateFitError("collinear")

    def test_degenerate_fit_is_not_validation_error(self):
        assert not issubclass(DegenerateFitError, ValidationError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestAttributes:

    def test_empty_dataset_name(self):
        err = EmptyDatasetError("data: has no observations", name="data")
        assert err.name == "data"
        assert "no observations" in str(err)

    def test_empty_dataset_default_name(self):
        assert EmptyDatasetError("empty").name is None

    def test_invalid_specification_attributes(self):
        err = InvalidSpecificationError(
            "unknown", missing=["Z"], available=["A", "B"],
        )
        assert err.missing == ("Z",)
        assert err.available == ("A", "B")

    def test_invalid_specification_defaults(self):
        err = InvalidSpecificationError("unknown")
        assert err.missing == ()
        assert err.available == ()

    def test_singular_matrix_attributes(self):
        err = SingularMatrixError(
            "singular", matrix_name="XtX", condition_number=1e18,
            rank=2, expected_rank=3,
        )
        assert err.matrix_name == "XtX"
        assert err.condition_number == 1e18
        assert err.rank == 2
        assert err.expected_rank == 3

    def test_degenerate_fit_attributes(self):
        err = DegenerateFitError(
            "collinear", rank=2, expected_rank=3,
            columns=("(Intercept)", "A", "A2"), aliased=("A2",),
        )
        assert err.matrix_name == "X"
        assert err.rank == 2
        assert err.expected_rank == 3
        assert err.columns == ("(Intercept)", "A", "A2")
        assert err.aliased == ("A2",)
        assert err.condition_number is None
