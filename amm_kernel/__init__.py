"""AMM Kernel - Ekubo-style pool math and quoting in Python."""

from amm_kernel.math import calculate_next_sqrt_ratio, exp2, to_sqrt_ratio
from amm_kernel.quoting import FullRangePool, OraclePool, TwammPool, parse_pool

__version__ = "0.1.0"
__all__ = [
    "to_sqrt_ratio",
    "exp2",
    "calculate_next_sqrt_ratio",
    "FullRangePool",
    "OraclePool",
    "TwammPool",
    "parse_pool",
    "__version__",
]
