"""
Regression backends.

Available backends:
    CPUQRBackend: CPU reference implementation using pivoted QR
"""

from pystepwise.regression.backends.cpu import CPUQRBackend

__all__ = [
    "CPUQRBackend",
]
