"""
Shared compute infrastructure for pystepwise.

Timing utilities and linear algebra kernels shared by all domain
backends. Domain-specific backends live in {domain}/backends/, not here.

Submodules:
    timing: Execution timing utilities
    tolerances: Tolerance tiers for numerical comparison
    linalg: Linear algebra kernels (pivoted QR least squares)
"""

from pystepwise.core.compute.timing import Timer, timed

__all__ = [
    "Timer",
    "timed",
]
