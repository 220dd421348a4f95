"""
CPU reference backend for linear regression.

Uses column-pivoted QR via LAPACK (through SciPy), the same strategy as
R's lm(): rank is read from the diagonal of R, aliased columns get NaN
coefficients.
"""

from typing import Any
import numpy as np

from pystepwise.core.result import Result
from pystepwise.core.compute.timing import Timer
from pystepwise.core.compute.linalg.qr import qr_lstsq
from pystepwise.core.exceptions import DegenerateFitError
from pystepwise.regression.design import RegressionDesign
from pystepwise.regression.solution import LinearParams


class CPUQRBackend:
    """
    CPU backend using pivoted QR decomposition.

    Args:
        singular_ok: If False, a rank-deficient design raises
            DegenerateFitError instead of returning NaN coefficients.
    """

    def __init__(self, singular_ok: bool = True):
        self._singular_ok = singular_ok

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via pivoted QR.

        Algorithm:
            1. X[:, P] = QR with column pivoting
            2. rank = #{|R_ii| > tol |R_11|}
            3. b = R[:r, :r]^-1 (Q'y)[:r] for the first r pivoted columns
            4. Residuals, RSS, TSS

        Raises:
            DegenerateFitError: If X is rank-deficient and singular_ok=False
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, p = design.n, design.p

        with timer.section('qr_solve'):
            try:
                lstsq = qr_lstsq(X, y, singular_ok=self._singular_ok)
            except DegenerateFitError as e:
                raise DegenerateFitError(
                    f"{e} Columns: {list(design.names)}",
                    rank=e.rank,
                    expected_rank=e.expected_rank,
                    columns=design.names,
                ) from e

        with timer.section('statistics'):
            fitted_values = lstsq.fitted_values
            residuals = y - fitted_values
            rss = float(residuals @ residuals)
            if design.has_intercept:
                tss = float(np.sum((y - np.mean(y)) ** 2))
            else:
                tss = float(y @ y)

        timer.stop()

        params = LinearParams(
            coefficients=lstsq.coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            rank=lstsq.rank,
            df_residual=n - lstsq.rank,
        )

        aliased = tuple(design.names[j] for j in lstsq.aliased)
        info: dict[str, Any] = {
            'method': 'qr_pivoted',
            'rank': lstsq.rank,
            'pivot': lstsq.pivot.tolist(),
            'aliased': aliased,
        }
        warnings: tuple[str, ...] = ()
        if aliased:
            warnings = (
                f"rank-deficient fit: rank {lstsq.rank} < {p} columns; "
                f"aliased: {list(aliased)}",
            )

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )
