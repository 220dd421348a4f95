"""
Column-pivoted QR least squares.

Used by every OLS fit in the package. Pivoting puts linearly dependent
columns last, so the numerical rank can be read off the diagonal of R
and the aliased columns identified, which is how a rank-deficient
candidate model is recognised during stepwise selection.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import qr, solve_triangular

from pystepwise.core.exceptions import DegenerateFitError

# Relative tolerance on |R_ii| / |R_11| for rank determination (R's lm default).
QR_RANK_TOL = 1e-7


@dataclass(frozen=True)
class QRResult:
    """
    Result of a pivoted QR decomposition X[:, pivot] = Q R.

    Attributes:
        Q: Orthonormal factor (n x k, k = min(n, p))
        R: Upper triangular factor (k x p)
        pivot: Column permutation (p,)
        rank: Numerical rank
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    pivot: NDArray[np.intp]
    rank: int


@dataclass(frozen=True)
class LstsqResult:
    """
    Least squares solution.

    Attributes:
        coefficients: Estimates in original column order; NaN where aliased
        fitted_values: X @ coefficients over the non-aliased columns
        rank: Numerical rank of X
        pivot: Column permutation from the QR
    """
    coefficients: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rank: int
    pivot: NDArray[np.intp]

    @property
    def aliased(self) -> NDArray[np.intp]:
        """Indices of columns dropped as linearly dependent."""
        return np.sort(self.pivot[self.rank:])


def qr_pivoted(X: NDArray[np.floating[Any]], tol: float = QR_RANK_TOL) -> QRResult:
    """
    Economy QR with column pivoting (LAPACK geqp3 via SciPy).

    Args:
        X: Matrix to decompose (n x p)
        tol: Relative tolerance for rank determination

    Returns:
        QRResult with Q, R, pivot and numerical rank
    """
    n, p = X.shape
    if p == 0 or n == 0:
        return QRResult(
            Q=np.empty((n, 0)),
            R=np.empty((0, p)),
            pivot=np.arange(p, dtype=np.intp),
            rank=0,
        )

    Q, R, pivot = qr(X, mode='economic', pivoting=True)

    diag_R = np.abs(np.diag(R))
    if diag_R[0] > 0:
        rank = int(np.sum(diag_R > tol * diag_R[0]))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, pivot=pivot.astype(np.intp), rank=rank)


def qr_lstsq(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    *,
    singular_ok: bool = True,
    tol: float = QR_RANK_TOL,
) -> LstsqResult:
    """
    Solve min_b ||y - X b||^2 via pivoted QR.

    The solution over the first `rank` pivoted columns is
        b_active = R[:r, :r]^-1 (Q' y)[:r]
    and the remaining (aliased) coefficients are NaN, as in R's lm().

    Args:
        X: Design matrix (n x p)
        y: Response vector (n,)
        singular_ok: If False, raise on a rank-deficient X
        tol: Relative tolerance for rank determination

    Returns:
        LstsqResult

    Raises:
        DegenerateFitError: If X is rank-deficient and singular_ok=False
    """
    n, p = X.shape
    decomposition = qr_pivoted(X, tol=tol)
    rank = decomposition.rank
    pivot = decomposition.pivot

    if not singular_ok and rank < p:
        raise DegenerateFitError(
            f"Design matrix is rank-deficient: rank={rank}, expected={p}. "
            f"This indicates perfect multicollinearity.",
            rank=rank,
            expected_rank=p,
        )

    coefficients = np.full(p, np.nan, dtype=np.float64)
    fitted = np.zeros(n, dtype=np.float64)

    if rank > 0:
        Qty = decomposition.Q[:, :rank].T @ y
        active = solve_triangular(decomposition.R[:rank, :rank], Qty, lower=False)
        coefficients[pivot[:rank]] = active
        fitted = X[:, pivot[:rank]] @ active

    return LstsqResult(
        coefficients=coefficients,
        fitted_values=fitted,
        rank=rank,
        pivot=pivot,
    )
