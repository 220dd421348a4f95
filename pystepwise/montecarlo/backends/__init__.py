"""
Bootstrap backends.

Available backends:
    CPUBootstrapBackend: ordinary and balanced case resampling
"""

from pystepwise.montecarlo.backends.cpu import CPUBootstrapBackend

__all__ = [
    "CPUBootstrapBackend",
]
