"""Test helpers module for shared test utilities.

- constants: Token ids, fixed-point scales and common amounts
- factories: Pool factory functions
"""

from tests.helpers.constants import (
    FEE_ONE_PERCENT,
    ONE_E18,
    ONE_SQRT_RATIO,
    OTHER_TOKEN,
    TOKEN0,
    TOKEN1,
    TOKEN_SALE_RATE,
    TWO_POW_32,
    TWO_POW_64,
    TWO_POW_128,
)
from tests.helpers.factories import make_full_range_pool, make_key, make_twamm_pool

__all__ = [
    # Constants
    "TOKEN0",
    "TOKEN1",
    "OTHER_TOKEN",
    "TWO_POW_32",
    "TWO_POW_64",
    "TWO_POW_128",
    "ONE_SQRT_RATIO",
    "ONE_E18",
    "TOKEN_SALE_RATE",
    "FEE_ONE_PERCENT",
    # Factories
    "make_key",
    "make_full_range_pool",
    "make_twamm_pool",
]
