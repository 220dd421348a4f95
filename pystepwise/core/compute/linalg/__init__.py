"""
Linear algebra kernels for pystepwise.

CPU implementations on NumPy/SciPy (LAPACK underneath). Each operation
returns a structured result dataclass and raises immediately on failure.
"""

from pystepwise.core.compute.linalg.qr import (
    QR_RANK_TOL,
    QRResult,
    LstsqResult,
    qr_pivoted,
    qr_lstsq,
)

__all__ = [
    "QR_RANK_TOL",
    "QRResult",
    "LstsqResult",
    "qr_pivoted",
    "qr_lstsq",
]
