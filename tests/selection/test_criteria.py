"""
Tests for selection criteria and their sign conventions.
"""

import numpy as np
import pytest

from pystepwise.regression import ModelSpec, fit_spec
from pystepwise.selection import ADJ_R2, AIC, BIC, Criterion, resolve_criterion


@pytest.fixture
def model(signal_source):
    return fit_spec(signal_source, ModelSpec("Y", ("A",)))


class TestBuiltins:

    def test_aic_is_extract_aic(self, model):
        assert AIC.score(model) == pytest.approx(model.extract_aic(k=2.0))

    def test_bic_uses_log_n(self, model):
        assert BIC.score(model) == pytest.approx(model.extract_aic(k=np.log(100)))

    def test_adj_r2(self, model):
        assert ADJ_R2.score(model) == pytest.approx(model.adjusted_r_squared)
        assert ADJ_R2.greater_is_better


class TestImproves:

    def test_lower_is_better(self):
        assert AIC.improves(1.0, 2.0)
        assert not AIC.improves(2.0, 1.0)

    def test_equal_is_not_improvement(self):
        assert not AIC.improves(1.0, 1.0)
        assert not ADJ_R2.improves(0.5, 0.5)

    def test_greater_is_better(self):
        assert ADJ_R2.improves(0.9, 0.8)

    def test_worst(self):
        assert AIC.worst == np.inf
        assert ADJ_R2.worst == -np.inf
        assert AIC.improves(1e300, AIC.worst)
        assert ADJ_R2.improves(-1e300, ADJ_R2.worst)

    def test_nan_never_improves(self):
        assert not AIC.improves(np.nan, 1.0)


class TestResolve:

    @pytest.mark.parametrize("name, expected", [
        ("aic", AIC), ("AIC", AIC), ("bic", BIC), ("adj_r2", ADJ_R2),
    ])
    def test_names(self, name, expected):
        assert resolve_criterion(name) is expected

    def test_penalty(self, model):
        crit = resolve_criterion(3)
        assert crit.name == "k=3"
        assert crit.score(model) == pytest.approx(model.extract_aic(k=3.0))

    def test_criterion_passthrough(self):
        crit = Criterion("rss", lambda m: m.rss)
        assert resolve_criterion(crit) is crit

    def test_callable(self, model):
        def rss(m):
            return m.rss
        crit = resolve_criterion(rss)
        assert crit.name == "rss"
        assert not crit.greater_is_better
        assert crit.score(model) == pytest.approx(model.rss)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown criterion"):
            resolve_criterion("mallows")

    @pytest.mark.parametrize("k", [-1.0, np.inf, np.nan])
    def test_bad_penalty(self, k):
        with pytest.raises(ValueError):
            resolve_criterion(k)

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            resolve_criterion(True)
