"""
Bootstrap resampling (following R's boot package).

Usage:
    from pystepwise.montecarlo import boot, boot_ci, boot_coefficients

    # Any statistic
    result = boot(data, statistic, R=999, seed=42)
    ci_result = boot_ci(result, type="perc")

    # Sampling variability of a fitted model's coefficients
    result = boot_coefficients(ds, ModelSpec('y', ('a', 'b')), R=999, seed=1)
"""

from pystepwise.montecarlo.design import BootstrapDesign
from pystepwise.montecarlo.solution import BootstrapSolution
from pystepwise.montecarlo.solvers import boot, boot_ci, boot_coefficients

__all__ = [
    "boot",
    "boot_ci",
    "boot_coefficients",
    "BootstrapDesign",
    "BootstrapSolution",
]
