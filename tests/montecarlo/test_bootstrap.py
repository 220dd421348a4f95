"""
Tests for bootstrap resampling.

Tests ordinary, balanced and stratified bootstrap with various statistics,
DataSource input, NaN replicates, and the coefficient bootstrap.
"""

import warnings

import numpy as np
import pytest

from pystepwise.core.datasource import DataSource
from pystepwise.core.exceptions import EmptyDatasetError, InvalidSpecificationError
from pystepwise.montecarlo import BootstrapSolution, boot, boot_ci, boot_coefficients
from pystepwise.regression import INTERCEPT, ModelSpec, fit_spec


# ---------------------------------------------------------------------------
# Statistic functions
# ---------------------------------------------------------------------------

def mean_stat(data, indices):
    """Bootstrap statistic: sample mean."""
    return np.array([np.mean(data[indices])])


def mean_var_stat(data, indices):
    """Bootstrap statistic: mean and variance (2 statistics)."""
    d = data[indices]
    return np.array([np.mean(d), np.var(d, ddof=1)])


def weighted_mean_stat(data, w):
    return np.array([np.sum(data * w) / np.sum(w)])


# ---------------------------------------------------------------------------
# Ordinary bootstrap
# ---------------------------------------------------------------------------

class TestOrdinaryBootstrap:

    def test_basic_mean(self):
        data = np.arange(1.0, 11.0)
        result = boot(data, mean_stat, R=999, seed=42)

        assert isinstance(result, BootstrapSolution)
        assert result.t0[0] == pytest.approx(5.5, rel=1e-10)
        assert result.t.shape == (999, 1)
        assert result.R == 999
        assert abs(result.bias[0]) < 0.5
        # True SE of the mean = sd/sqrt(n) ~ 0.96
        assert 0.5 < result.se[0] < 1.5

    def test_multi_statistic(self):
        result = boot(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), mean_var_stat, R=500, seed=42)
        assert result.t.shape == (500, 2)
        assert result.t0 == pytest.approx([3.0, 2.5])

    def test_scalar_statistic(self):
        result = boot(np.arange(5.0), lambda d, i: np.median(d[i]), R=50, seed=1)
        assert result.t.shape == (50, 1)

    def test_bias_and_se_definitions(self):
        result = boot(np.arange(20.0), mean_stat, R=200, seed=3)
        assert result.bias[0] == pytest.approx(result.t[:, 0].mean() - result.t0[0])
        assert result.se[0] == pytest.approx(result.t[:, 0].std(ddof=1))

    def test_seed_reproducible(self):
        data = np.arange(30.0)
        a = boot(data, mean_stat, R=100, seed=11)
        b = boot(data, mean_stat, R=100, seed=11)
        np.testing.assert_array_equal(a.t, b.t)

    def test_two_dimensional_data(self, rng):
        data = rng.standard_normal((40, 2))
        result = boot(data, lambda d, i: d[i].mean(axis=0), R=100, seed=0)
        assert result.t.shape == (100, 2)

    def test_frequencies_and_weights_agree_with_indices(self):
        data = np.arange(1.0, 21.0)
        by_index = boot(data, mean_stat, R=100, seed=5)
        by_freq = boot(data, weighted_mean_stat, R=100, seed=5, stype="f")
        by_weight = boot(data, weighted_mean_stat, R=100, seed=5, stype="w")
        np.testing.assert_allclose(by_freq.t, by_index.t)
        np.testing.assert_allclose(by_weight.t, by_index.t)


class TestBalancedBootstrap:

    def test_each_observation_used_R_times(self):
        n, R = 15, 40
        counts = []

        def record(data, freqs):
            counts.append(freqs.copy())
            return np.array([0.0])

        boot(np.arange(float(n)), record, R=R, sim="balanced", stype="f", seed=1)
        # First call is t0 on the original sample
        totals = np.sum(counts[1:], axis=0)
        np.testing.assert_array_equal(totals, np.full(n, R))

    def test_balanced_mean_bias_is_zero(self):
        data = np.arange(1.0, 13.0)
        result = boot(data, mean_stat, R=50, sim="balanced", seed=2)
        assert result.bias[0] == pytest.approx(0.0, abs=1e-10)
        assert result.sim == "balanced"


class TestStratified:

    def test_strata_sizes_preserved(self):
        strata = np.array([0] * 5 + [1] * 10)
        data = np.arange(15.0)

        def group_one_count(d, i):
            return np.array([np.sum(strata[i] == 1)])

        result = boot(data, group_one_count, R=50, strata=strata, seed=0)
        np.testing.assert_array_equal(result.t[:, 0], 10.0)

    def test_stratified_balanced(self):
        strata = np.array([0] * 4 + [1] * 6)

        def group_one_count(d, i):
            return np.array([np.sum(strata[i] == 1)])

        result = boot(np.arange(10.0), group_one_count, R=20, strata=strata,
                      sim="balanced", seed=0)
        np.testing.assert_array_equal(result.t[:, 0], 6.0)
        assert result.info["stratified"]

    def test_strata_length_checked(self):
        with pytest.raises(ValueError, match="strata length"):
            boot(np.arange(5.0), mean_stat, R=10, strata=[0, 1])


class TestDataSourceInput:

    def test_rows_resampled_together(self, signal_source):
        def slope(ds, i):
            sub = ds.take(i)
            return fit_spec(sub, ModelSpec("Y", ("A",))).coefficients[1:]

        result = boot(signal_source, slope, R=50, seed=1)
        assert result.t0[0] == pytest.approx(
            fit_spec(signal_source, ModelSpec("Y", ("A",))).coefficients[1]
        )
        assert result.t.shape == (50, 1)

    def test_only_index_stype(self, signal_source):
        with pytest.raises(ValueError, match="stype='i'"):
            boot(signal_source, lambda d, f: np.zeros(1), R=5, stype="f")


class TestNaNReplicates:

    def test_nan_replicates_ignored_and_counted(self):
        data = np.arange(10.0)

        def stat(d, i):
            return np.array([np.nan if 0 not in i else np.mean(d[i])])

        with pytest.warns(RuntimeWarning, match="produced NaN"):
            result = boot(data, stat, R=200, seed=4)
        finite = result.t[~np.isnan(result.t[:, 0]), 0]
        assert result.n_failed == 200 - len(finite)
        assert result.bias[0] == pytest.approx(finite.mean() - result.t0[0])
        assert result.se[0] == pytest.approx(finite.std(ddof=1))

    def test_no_warning_without_nan(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = boot(np.arange(10.0), mean_stat, R=20, seed=0)
        assert result.n_failed == 0
        assert result.warnings == ()


class TestValidation:

    @pytest.mark.parametrize("kwargs", [
        {"R": 0},
        {"R": 2.5},
        {"sim": "parametric"},
        {"stype": "x"},
    ])
    def test_invalid_options(self, kwargs):
        options = {"R": 10}
        options.update(kwargs)
        with pytest.raises(ValueError):
            boot(np.arange(5.0), mean_stat, **options)

    def test_three_dimensional_data(self):
        with pytest.raises(ValueError, match="1D or 2D"):
            boot(np.zeros((2, 2, 2)), mean_stat, R=10)

    def test_statistic_must_be_callable(self):
        with pytest.raises(TypeError, match="callable"):
            boot(np.arange(5.0), "mean", R=10)

    def test_empty_data(self):
        with pytest.raises(EmptyDatasetError):
            boot(np.array([]), mean_stat, R=10)


class TestDisplay:

    def test_summary_format(self):
        result = boot(np.arange(10.0), mean_var_stat, R=20, seed=0)
        text = result.summary()
        assert "ORDINARY NONPARAMETRIC BOOTSTRAP" in text
        assert "t1*" in text and "t2*" in text
        assert "std. error" in text

    def test_named_statistics(self):
        result = boot(np.arange(10.0), mean_var_stat, R=20, seed=0, names=["mean", "var"])
        assert result.names == ("mean", "var")
        assert "var" in result.summary()

    def test_to_frame(self, informative_source):
        spec = ModelSpec("Y", ("A", "B"))
        out = boot_ci(boot_coefficients(informative_source, spec, R=50, seed=0), type="perc")
        frame = out.to_frame()
        assert list(frame.index) == [INTERCEPT, "A", "B"]
        assert list(frame.columns) == [
            "original", "bias", "std_error", "n_valid", "perc_lower", "perc_upper",
        ]
        np.testing.assert_allclose(frame["original"].to_numpy(), out.t0)
        assert (frame["n_valid"] == 50).all()

    def test_summary_reports_failed_replicates(self):
        def stat(d, i):
            return np.array([np.nan if 0 not in i else np.mean(d[i])])

        with pytest.warns(RuntimeWarning):
            result = boot(np.arange(10.0), stat, R=50, seed=4)
        assert f"Failed replicates: {result.n_failed} of 50" in result.summary()
        assert result.n_valid[0] == 50 - result.n_failed

    def test_repr(self):
        result = boot(np.arange(10.0), mean_stat, R=20, seed=0)
        assert repr(result) == (
            "BootstrapSolution(R=20, k=1, sim='ordinary', backend='cpu_bootstrap')"
        )


# ---------------------------------------------------------------------------
# Coefficient bootstrap
# ---------------------------------------------------------------------------

class TestBootCoefficients:

    def test_t0_is_full_fit(self, informative_source):
        spec = ModelSpec("Y", ("A", "B"))
        result = boot_coefficients(informative_source, spec, R=100, seed=1)
        model = fit_spec(informative_source, spec)
        np.testing.assert_allclose(result.t0, model.coefficients)
        assert result.names == (INTERCEPT, "A", "B")
        assert result.t.shape == (100, 3)

    def test_se_close_to_ols(self, informative_source):
        spec = ModelSpec("Y", ("A", "B", "C"))
        result = boot_coefficients(informative_source, spec, R=400, seed=2)
        ols = fit_spec(informative_source, spec).standard_errors
        np.testing.assert_allclose(result.se, ols, rtol=0.35)

    def test_seed_reproducible(self, signal_source):
        spec = ModelSpec("Y", ("A",))
        a = boot_coefficients(signal_source, spec, R=30, seed=8)
        b = boot_coefficients(signal_source, spec, R=30, seed=8)
        np.testing.assert_array_equal(a.t, b.t)

    def test_rank_deficient_resamples(self, rng):
        n = 20
        D = np.zeros(n)
        D[0] = 1.0
        A = rng.standard_normal(n)
        ds = DataSource.from_arrays(Y=A + rng.standard_normal(n), A=A, D=D)

        with pytest.warns(RuntimeWarning, match="produced NaN"):
            result = boot_coefficients(ds, ModelSpec("Y", ("A", "D")), R=200, seed=3)

        missing_d = np.isnan(result.t[:, 2])
        assert result.n_failed == int(missing_d.sum()) > 0
        assert not np.any(np.isnan(result.t[:, :2]))
        assert np.isfinite(result.se[2])

    def test_unknown_column(self, signal_source):
        with pytest.raises(InvalidSpecificationError):
            boot_coefficients(signal_source, ModelSpec("Y", ("Z",)), R=10)

    def test_summary_uses_coefficient_names(self, signal_source):
        result = boot_coefficients(signal_source, ModelSpec("Y", ("A",)), R=20, seed=0)
        assert "(Intercept)" in result.summary()
