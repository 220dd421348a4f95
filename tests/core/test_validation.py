"""
Tests for input validators.
"""

import numpy as np
import pytest

from pystepwise.core.exceptions import (
    DimensionError,
    EmptyDatasetError,
    InvalidSpecificationError,
    ValidationError,
)
from pystepwise.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_columns,
    check_consistent_length,
    check_finite,
    check_not_empty,
)


class TestCheckArray:

    def test_int_converted_to_float(self):
        arr = check_array([1, 2, 3], "x")
        assert arr.dtype == np.float64

    def test_float32_kept(self):
        arr = check_array(np.ones(3, dtype=np.float32), "x")
        assert arr.dtype == np.float32

    def test_strings_rejected(self):
        with pytest.raises(ValidationError, match="x: non-numeric"):
            check_array(["a", "b"], "x")

    def test_mixed_types_rejected(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([1, "a", None], "x")


class TestCheckFinite:

    def test_passes_on_finite(self):
        check_finite(np.array([1.0, 2.0]), "x")

    def test_counts_nan_and_inf(self):
        with pytest.raises(ValidationError, match=r"1 NaN, 2 Inf"):
            check_finite(np.array([np.nan, np.inf, -np.inf, 0.0]), "x")


class TestDimensions:

    def test_1d(self):
        check_1d(np.zeros(3), "y")
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((3, 1)), "y")

    def test_2d(self):
        check_2d(np.zeros((3, 2)), "X")
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros(3), "X")

    def test_consistent_length(self):
        check_consistent_length(np.zeros(3), np.zeros((3, 2)), names=("y", "X"))
        with pytest.raises(DimensionError, match="y=3, X=4"):
            check_consistent_length(np.zeros(3), np.zeros((4, 2)), names=("y", "X"))

    def test_consistent_length_name_count(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(3), np.zeros(3), names=("y",))


class TestCheckNotEmpty:

    def test_passes(self):
        check_not_empty(1, "data")

    def test_raises_with_name(self):
        with pytest.raises(EmptyDatasetError) as exc_info:
            check_not_empty(0, "data")
        assert exc_info.value.name == "data"


class TestCheckColumns:

    def test_all_present(self):
        check_columns(["A", "B"], ("A", "B", "C"), "spec")

    def test_missing_reported(self):
        with pytest.raises(InvalidSpecificationError) as exc_info:
            check_columns(["A", "Z", "W"], ("A", "B"), "spec")
        err = exc_info.value
        assert err.missing == ("Z", "W")
        assert err.available == ("A", "B")
        assert "spec" in str(err)
