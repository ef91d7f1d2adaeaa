"""TWAMM math: base-2 exponential and closed-form price evolution."""

from amm_kernel.math.twamm.exp2 import EXP2_UPPER_BOUND, exp2
from amm_kernel.math.twamm.sqrt_ratio import (
    calculate_next_sqrt_ratio,
    compute_c,
    compute_sqrt_sale_ratio,
)

__all__ = [
    "EXP2_UPPER_BOUND",
    "exp2",
    "calculate_next_sqrt_ratio",
    "compute_c",
    "compute_sqrt_sale_ratio",
]
