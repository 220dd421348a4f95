"""
Tests for regression fit() and fit_spec().

Tests the complete pipeline: ModelSpec, design construction, backend
selection, and solution properties.
"""

import numpy as np
import pandas as pd
import pytest

from pystepwise.core.datasource import DataSource
from pystepwise.core.exceptions import (
    DegenerateFitError,
    EmptyDatasetError,
    InvalidSpecificationError,
    ValidationError,
)
from pystepwise.regression import (
    INTERCEPT,
    LinearSolution,
    ModelSpec,
    RegressionDesign,
    fit,
    fit_spec,
)


def _ols(source, predictors, intercept=True):
    """Reference fit with numpy.linalg.lstsq."""
    cols = [source[p] for p in predictors]
    if intercept:
        cols.insert(0, np.ones(source.n_observations))
    X = np.column_stack(cols) if cols else np.empty((source.n_observations, 0))
    y = source["Y"]
    beta, *_ = np.linalg.lstsq(X, y, rcond=None)
    resid = y - X @ beta
    return beta, float(resid @ resid)


class TestFitBasic:

    def test_fit_from_arrays(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(X, y)
        assert isinstance(result, LinearSolution)
        assert result.coefficients.shape == (3,)
        assert result.names == ("x1", "x2", "x3")
        assert result.spec is None

    def test_fit_from_design(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = fit(RegressionDesign.from_arrays(X, y))
        assert isinstance(result, LinearSolution)

    def test_fit_requires_y_with_arrays(self, simple_regression_data):
        X, _, _ = simple_regression_data
        with pytest.raises(ValueError, match="y required"):
            fit(X)

    def test_y_rejected_with_design(self, simple_regression_data):
        X, y, _ = simple_regression_data
        with pytest.raises(ValueError, match="omitted"):
            fit(RegressionDesign.from_arrays(X, y), y)

    def test_unknown_backend(self, simple_regression_data):
        X, y, _ = simple_regression_data
        with pytest.raises(ValueError, match="Unknown backend"):
            fit(X, y, backend="gpu")

    def test_coefficients_close_to_truth(self, simple_regression_data):
        X, y, beta_true = simple_regression_data
        np.testing.assert_allclose(fit(X, y).coefficients, beta_true, atol=0.1)

    def test_nan_rejected(self, simple_regression_data):
        X, y, _ = simple_regression_data
        y = y.copy()
        y[0] = np.nan
        with pytest.raises(ValidationError):
            fit(X, y)


class TestFitSpec:

    def test_matches_lstsq(self, informative_source):
        model = fit_spec(informative_source, ModelSpec("Y", ("A", "B", "C")))
        beta, rss = _ols(informative_source, ["A", "B", "C"])
        np.testing.assert_allclose(model.coefficients, beta, rtol=1e-10)
        assert model.rss == pytest.approx(rss, rel=1e-10)

    def test_intercept_first(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y", ("B", "A")))
        assert model.names == (INTERCEPT, "B", "A")
        assert list(model.coef) == [INTERCEPT, "B", "A"]
        assert model.coef["A"] == pytest.approx(2.0, abs=0.2)

    def test_no_intercept(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y", ("A",), intercept=False))
        assert model.names == ("A",)
        assert model.tss == pytest.approx(float(signal_source["Y"] @ signal_source["Y"]))

    def test_intercept_only(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y"))
        assert model.coefficients[0] == pytest.approx(np.mean(signal_source["Y"]))
        assert model.r_squared == pytest.approx(0.0, abs=1e-12)

    def test_zero_column_model(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y", intercept=False))
        assert model.coefficients.shape == (0,)
        np.testing.assert_array_equal(model.fitted_values, 0.0)
        assert model.rank == 0

    def test_unknown_column(self, signal_source):
        with pytest.raises(InvalidSpecificationError) as exc_info:
            fit_spec(signal_source, ModelSpec("Y", ("A", "Z")))
        assert exc_info.value.missing == ("Z",)

    def test_empty_dataset(self):
        ds = DataSource.from_arrays(Y=[], A=[])
        with pytest.raises(EmptyDatasetError):
            fit_spec(ds, ModelSpec("Y", ("A",)))

    def test_missing_response(self, signal_source):
        y = signal_source["Y"].copy()
        y[3] = np.nan
        ds = DataSource.from_arrays(Y=y, A=signal_source["A"])
        with pytest.raises(ValidationError, match="Y"):
            fit_spec(ds, ModelSpec("Y", ("A",)))
        assert fit_spec(ds.dropna(["Y"]), ModelSpec("Y", ("A",))).n_observations == 99


class TestRankDeficient:

    def test_aliased_coefficient_nan(self, duplicate_source):
        model = fit_spec(duplicate_source, ModelSpec("Y", ("A", "A2")))
        assert model.rank == 2
        assert np.isnan(model.coef["A2"])
        assert model.info["aliased"] == ("A2",)
        assert any("aliased" in w for w in model.warnings)

    def test_aliased_standard_error_nan(self, duplicate_source):
        model = fit_spec(duplicate_source, ModelSpec("Y", ("A", "A2")))
        se = model.standard_errors
        assert np.isnan(se[2])
        assert np.all(np.isfinite(se[:2]))

    def test_singular_not_ok(self, duplicate_source):
        with pytest.raises(DegenerateFitError) as exc_info:
            fit_spec(duplicate_source, ModelSpec("Y", ("A", "A2")), singular_ok=False)
        err = exc_info.value
        assert err.rank == 2
        assert err.expected_rank == 3
        assert err.columns == (INTERCEPT, "A", "A2")

    def test_predict_ignores_aliased(self, duplicate_source):
        model = fit_spec(duplicate_source, ModelSpec("Y", ("A", "A2")))
        np.testing.assert_allclose(model.predict(duplicate_source), model.fitted_values)


class TestFitProperties:

    def test_standard_errors_match_formula(self, informative_source):
        model = fit_spec(informative_source, ModelSpec("Y", ("A", "B")))
        X = model.design.X
        sigma_sq = model.rss / model.df_residual
        expected = np.sqrt(sigma_sq * np.diag(np.linalg.inv(X.T @ X)))
        np.testing.assert_allclose(model.standard_errors, expected, rtol=1e-10)

    def test_p_values_in_zero_one(self, informative_source):
        pv = fit_spec(informative_source, ModelSpec("Y", ("A", "B", "C"))).p_values
        assert np.all((pv >= 0.0) & (pv <= 1.0))

    def test_conf_int_contains_estimate(self, informative_source):
        model = fit_spec(informative_source, ModelSpec("Y", ("A", "B", "C")))
        ci = model.conf_int(0.95)
        assert ci.shape == (4, 2)
        assert np.all(ci[:, 0] < model.coefficients)
        assert np.all(model.coefficients < ci[:, 1])

    def test_conf_int_level_validated(self, informative_source):
        model = fit_spec(informative_source, ModelSpec("Y", ("A",)))
        with pytest.raises(ValueError):
            model.conf_int(1.5)

    def test_adjusted_r_squared(self, informative_source):
        model = fit_spec(informative_source, ModelSpec("Y", ("A", "B", "C")))
        n, p = 200, 4
        expected = 1 - (1 - model.r_squared) * (n - 1) / (n - p)
        assert model.adjusted_r_squared == pytest.approx(expected)

    def test_residuals_sum_to_zero_with_intercept(self, informative_source):
        model = fit_spec(informative_source, ModelSpec("Y", ("A", "B")))
        assert abs(model.residuals.sum()) < 1e-10


class TestCriteria:

    def test_extract_aic(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y", ("A",)))
        _, rss = _ols(signal_source, ["A"])
        n = 100
        assert model.extract_aic() == pytest.approx(n * np.log(rss / n) + 2 * 2)
        assert model.extract_aic(k=np.log(n)) == pytest.approx(
            n * np.log(rss / n) + np.log(n) * 2
        )

    def test_aic_bic_count_variance(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y", ("A",)))
        n = 100
        loglik = -0.5 * n * (np.log(2 * np.pi) + 1 - np.log(n) + np.log(model.rss))
        assert model.loglik == pytest.approx(loglik)
        assert model.aic == pytest.approx(-2 * loglik + 2 * 3)
        assert model.bic == pytest.approx(-2 * loglik + np.log(n) * 3)

    def test_aic_and_extract_aic_differ_by_constant(self, signal_source):
        a = fit_spec(signal_source, ModelSpec("Y", ("A",)))
        b = fit_spec(signal_source, ModelSpec("Y", ("A", "B")))
        assert (a.aic - b.aic) == pytest.approx(a.extract_aic() - b.extract_aic())


class TestPredict:

    @pytest.fixture
    def model(self, signal_source):
        return fit_spec(signal_source, ModelSpec("Y", ("A", "B")))

    def test_predict_datasource(self, model, signal_source):
        np.testing.assert_allclose(model.predict(signal_source), model.fitted_values)

    def test_predict_dataframe(self, model, signal_source):
        df = signal_source.to_frame()
        np.testing.assert_allclose(model.predict(df), model.fitted_values)

    def test_predict_mapping(self, model):
        pred = model.predict({"A": [1.0, 0.0], "B": [0.0, 0.0]})
        b = model.coefficients
        np.testing.assert_allclose(pred, [b[0] + b[1], b[0]])

    def test_predict_array(self, model):
        pred = model.predict(np.array([[1.0, 2.0]]))
        b = model.coefficients
        assert pred[0] == pytest.approx(b[0] + b[1] + 2.0 * b[2])

    def test_predict_array_wrong_width(self, model):
        with pytest.raises(Exception, match="expected 2 predictor columns"):
            model.predict(np.zeros((3, 3)))

    def test_predict_missing_column(self, model):
        with pytest.raises(InvalidSpecificationError):
            model.predict({"A": [1.0]})


class TestDisplay:

    def test_summary(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y", ("A",)))
        text = model.summary()
        assert "Y ~ A" in text
        assert "(Intercept)" in text
        assert "R-squared" in text

    def test_summary_marks_aliased(self, duplicate_source):
        text = fit_spec(duplicate_source, ModelSpec("Y", ("A", "A2"))).summary()
        assert "(aliased)" in text

    def test_repr(self, signal_source):
        assert "LinearSolution(n=100" in repr(fit_spec(signal_source, ModelSpec("Y", ("A",))))

    def test_timing_and_backend(self, signal_source):
        model = fit_spec(signal_source, ModelSpec("Y", ("A",)))
        assert model.backend_name == "cpu_qr"
        assert "qr_solve" in model.timing
