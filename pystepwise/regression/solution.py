"""
Regression solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pystepwise.core.datasource import DataSource
from pystepwise.core.exceptions import DimensionError
from pystepwise.core.result import Result
from pystepwise.core.validation import check_array

if TYPE_CHECKING:
    from pystepwise.regression.design import RegressionDesign, ModelSpec


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for linear regression.

    This is the immutable data computed by backends. Aliased (linearly
    dependent) columns have NaN coefficients.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int


@dataclass
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result and provides accessors for coefficients,
    inference, information criteria and prediction.
    """
    _result: Result[LinearParams]
    _design: 'RegressionDesign'

    # Cached computations
    _standard_errors: NDArray[np.floating[Any]] | None = None

    # === Estimates ===

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def names(self) -> tuple[str, ...]:
        """Coefficient names, intercept first when present."""
        return self._design.names

    @property
    def coef(self) -> dict[str, float]:
        """Coefficients keyed by design column name."""
        return {name: float(b) for name, b in zip(self.names, self.coefficients)}

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def spec(self) -> 'ModelSpec | None':
        return self._design.spec

    @property
    def design(self) -> 'RegressionDesign':
        return self._design

    # === Fit statistics ===

    @property
    def n_observations(self) -> int:
        return self._design.n

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        """Total sum of squares (centred when the model has an intercept)."""
        return self._result.params.tss

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        df = self.df_residual
        if df <= 0 or self.tss == 0:
            return self.r_squared
        df_total = n - 1 if self._design.has_intercept else n
        return 1.0 - (1.0 - self.r_squared) * df_total / df

    @property
    def residual_std_error(self) -> float:
        df = self.df_residual
        if df <= 0:
            return 0.0
        return float(np.sqrt(self.rss / df))

    # === Inference ===

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of coefficients.

        Computed as SE(b) = sqrt(diag(s^2 (X'X)^-1)) over the non-aliased
        columns; aliased coefficients get NaN.
        """
        if self._standard_errors is not None:
            return self._standard_errors

        p = len(self.coefficients)
        se = np.full(p, np.nan, dtype=np.float64)
        df = self.df_residual

        if df > 0 and self.rank > 0:
            sigma_sq = self.rss / df
            active = np.flatnonzero(~np.isnan(self.coefficients))
            X_active = self._design.X[:, active]
            try:
                XtX_inv = np.linalg.inv(X_active.T @ X_active)
                se[active] = np.sqrt(sigma_sq * np.diag(XtX_inv))
            except np.linalg.LinAlgError:
                pass

        self._standard_errors = se
        return se

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        se = self.standard_errors
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / se
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values of the t-tests."""
        t = self.t_statistics
        if self.df_residual <= 0:
            return np.full_like(t, np.nan)
        return 2.0 * stats.t.sf(np.abs(t), self.df_residual)

    def conf_int(self, level: float = 0.95) -> NDArray[np.floating[Any]]:
        """
        t-based confidence intervals for the coefficients.

        Returns:
            Array of shape (p, 2) with lower and upper bounds
        """
        if not 0.0 < level < 1.0:
            raise ValueError(f"level must be in (0, 1), got {level}")
        if self.df_residual <= 0:
            return np.full((len(self.coefficients), 2), np.nan)
        t_crit = stats.t.ppf(0.5 + level / 2.0, self.df_residual)
        half = t_crit * self.standard_errors
        return np.column_stack([self.coefficients - half, self.coefficients + half])

    # === Information criteria ===

    @property
    def loglik(self) -> float:
        """Gaussian log-likelihood at the ML estimate of the error variance."""
        n = self._design.n
        with np.errstate(divide='ignore'):
            return float(0.5 * -n * (np.log(2.0 * np.pi) + 1.0 - np.log(n) + np.log(self.rss)))

    @property
    def aic(self) -> float:
        """AIC counting the error variance as a parameter (R's AIC())."""
        return -2.0 * self.loglik + 2.0 * (self.rank + 1)

    @property
    def bic(self) -> float:
        """BIC counting the error variance as a parameter (R's BIC())."""
        return -2.0 * self.loglik + np.log(self._design.n) * (self.rank + 1)

    def extract_aic(self, k: float = 2.0) -> float:
        """
        n * log(RSS / n) + k * edf, with edf the model rank.

        This is R's extractAIC() for lm, the score stepwise selection
        compares. k=2 gives AIC, k=log(n) gives BIC. A perfect fit
        scores -inf.
        """
        n = self._design.n
        with np.errstate(divide='ignore'):
            return float(n * np.log(self.rss / n) + k * self.rank)

    # === Prediction ===

    def predict(self, newdata: Any) -> NDArray[np.floating[Any]]:
        """
        Predict the response for new observations.

        Args:
            newdata: DataSource, pandas DataFrame or mapping of columns
                (looked up by predictor name), or an array of predictor
                values in model order, without the intercept column

        Returns:
            Predicted values, shape (m,)

        Aliased coefficients contribute nothing, as in R.
        """
        X_new = self._new_design_matrix(newdata)
        valid = ~np.isnan(self.coefficients)
        return X_new[:, valid] @ self.coefficients[valid]

    def _new_design_matrix(self, newdata: Any) -> NDArray[np.floating[Any]]:
        spec = self._design.spec

        if not isinstance(newdata, (DataSource, Mapping)) and hasattr(newdata, 'columns'):
            newdata = DataSource.from_dataframe(newdata)
        elif isinstance(newdata, Mapping):
            newdata = DataSource.from_arrays(**newdata)

        if isinstance(newdata, DataSource):
            if spec is None:
                return newdata.matrix(self.names)
            X = newdata.matrix(spec.predictors)
        else:
            X = check_array(newdata, 'newdata')
            if X.ndim == 1:
                X = X.reshape(-1, 1) if self._n_predictors() == 1 else X.reshape(1, -1)
            if X.shape[1] != self._n_predictors():
                raise DimensionError(
                    f"newdata: expected {self._n_predictors()} predictor columns, "
                    f"got {X.shape[1]}"
                )
            if spec is None:
                return X

        if spec.intercept:
            X = np.column_stack([np.ones(X.shape[0]), X])
        return X

    def _n_predictors(self) -> int:
        spec = self._design.spec
        return self._design.p if spec is None else len(spec.predictors)

    # === Diagnostics ===

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Generate R-style summary output."""
        title = self.spec.formula() if self.spec is not None else "y ~ X"
        lines = [
            "Linear Regression Results",
            "=" * 72,
            f"Model: {title}",
            f"Observations: {self._design.n}",
            f"Rank: {self.rank}",
            "",
            "Coefficients:",
            "-" * 72,
            f"{'':<16} {'Estimate':>12} {'Std. Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * 72,
        ]

        for name, coef, se, t, pv in zip(
            self.names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            if np.isnan(coef):
                lines.append(f"{name:<16} {'(aliased)':>12}")
                continue
            se_str = f"{se:12.6f}" if not np.isnan(se) else f"{'NA':>12}"
            t_str = f"{t:10.3f}" if not np.isnan(t) else f"{'NA':>10}"
            if np.isnan(pv):
                pv_str = f"{'NA':>12}"
            elif pv < 2e-16:
                pv_str = f"{'<2e-16':>12}"
            else:
                pv_str = f"{pv:12.4g}"
            lines.append(f"{name:<16} {coef:12.6f} {se_str} {t_str} {pv_str}")

        lines.extend([
            "-" * 72,
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            f"R-squared: {self.r_squared:.6f}, Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"AIC: {self.aic:.4f}, BIC: {self.bic:.4f}",
            f"Backend: {self.backend_name}",
        ])
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  {w}" for w in self.warnings)

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self._design.n}, p={self._design.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )
