"""
Tolerance tiers for numerical comparison.

Fits are computed in double precision on the CPU. The tiers say how
closely two routes to the same quantity are expected to agree: a
well-conditioned design against an independent solver, and an
ill-conditioned one (cond > 1e4) where pivoting order starts to matter.

Used by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, well-conditioned design',
)

CPU_FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='cpu_fp64_ill_conditioned',
    description='CPU double precision, ill-conditioned (cond > 1e4)',
)

# Above this condition number a design is treated as ill-conditioned.
ILL_CONDITION_THRESHOLD = 1e4


def select_tolerance(condition_number: float) -> ToleranceTier:
    """Select the tolerance tier for a design with the given condition number."""
    if condition_number > ILL_CONDITION_THRESHOLD:
        return CPU_FP64_ILL_CONDITIONED
    return CPU_FP64
