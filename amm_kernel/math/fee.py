"""Swap fee helpers.

Fees are fractions of 2^64: a fee of 2^63 takes half of the input amount.
"""

from __future__ import annotations

from amm_kernel.safe_int import S

TWO_POW_64 = 1 << 64


def compute_fee(amount: int, fee: int) -> int:
    """Fee charged on an input amount, rounded up."""
    return (S(amount) * fee).ceiling_div(TWO_POW_64).value


def amount_before_fee(after_fee: int, fee: int) -> int | None:
    """Gross amount that leaves after_fee once the fee is taken.

    Returns:
        ceil(after_fee * 2^64 / (2^64 - fee)), or None if it exceeds uint128
    """
    result = (S(after_fee) << 64).ceiling_div(TWO_POW_64 - fee)
    if not result.is_uint128():
        return None
    return result.value


__all__ = ["TWO_POW_64", "compute_fee", "amount_before_fee"]
