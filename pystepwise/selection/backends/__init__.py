"""
Stepwise selection backends.

Available backends:
    CPUStepwiseBackend: sequential greedy search over pivoted-QR fits
"""

from pystepwise.selection.backends.cpu import CPUStepwiseBackend

__all__ = [
    "CPUStepwiseBackend",
]
