"""Mathematical primitives for the AMM kernel.

This package provides deterministic integer math on Q128 sqrt ratios:
- muldiv: full-precision multiply-then-divide
- tick: tick to sqrt ratio conversion and range constants
- twamm: base-2 exponential and TWAMM price evolution
- swap: single-range swap step with fees
"""

from amm_kernel.math.errors import (
    AmountBeforeFeeOverflow,
    AmountDeltaError,
    AmountDeltaOverflow,
    ComputeStepError,
    Exp2InputOutOfDomain,
    KernelMathError,
    WrongDirection,
    ZeroSqrtRatio,
)
from amm_kernel.math.muldiv import muldiv
from amm_kernel.math.swap import StepResult, compute_step, is_price_increasing
from amm_kernel.math.tick import (
    FULL_RANGE_TICK_SPACING,
    MAX_SQRT_RATIO,
    MAX_TICK,
    MAX_TICK_SPACING,
    MIN_SQRT_RATIO,
    MIN_TICK,
    to_sqrt_ratio,
)
from amm_kernel.math.twamm import calculate_next_sqrt_ratio, exp2

__all__ = [
    # Errors
    "KernelMathError",
    "Exp2InputOutOfDomain",
    "AmountDeltaError",
    "AmountDeltaOverflow",
    "ZeroSqrtRatio",
    "ComputeStepError",
    "WrongDirection",
    "AmountBeforeFeeOverflow",
    # Primitives
    "muldiv",
    # Tick
    "MIN_TICK",
    "MAX_TICK",
    "MAX_TICK_SPACING",
    "FULL_RANGE_TICK_SPACING",
    "MIN_SQRT_RATIO",
    "MAX_SQRT_RATIO",
    "to_sqrt_ratio",
    # TWAMM
    "exp2",
    "calculate_next_sqrt_ratio",
    # Swap
    "StepResult",
    "compute_step",
    "is_price_increasing",
]
