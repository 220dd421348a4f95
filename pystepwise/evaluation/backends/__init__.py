"""
Holdout evaluation backends.

Available backends:
    CPUHoldoutBackend: sequential repeated train/test splits
"""

from pystepwise.evaluation.backends.cpu import CPUHoldoutBackend

__all__ = [
    "CPUHoldoutBackend",
]
