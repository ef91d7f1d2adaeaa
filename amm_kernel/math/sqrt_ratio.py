"""Next sqrt ratio after adding or removing a token amount.

Positive amounts are added to the pool, negative amounts are removed from it.
Rounding always favors the pool: the returned price never gives the swapper
more than the amount pays for.
"""

from __future__ import annotations

from amm_kernel.math.muldiv import muldiv
from amm_kernel.safe_int import UINT128_MAX, UINT256_MAX, S


def next_sqrt_ratio_from_amount0(sqrt_ratio: int, liquidity: int, amount: int) -> int | None:
    """Sqrt ratio after a token0 amount moves through the pool.

    Args:
        sqrt_ratio: Current Q128 sqrt ratio
        liquidity: Active liquidity
        amount: Signed token0 amount (positive adds to the pool)

    Returns:
        The next sqrt ratio, or None if the amount cannot be absorbed
    """
    if amount == 0:
        return sqrt_ratio
    if liquidity == 0 or sqrt_ratio == 0 or abs(amount) > UINT128_MAX:
        return None

    numerator1 = S(liquidity) << 128
    amount_abs = abs(amount)

    if amount < 0:
        # removing token0 raises the price
        product = sqrt_ratio * amount_abs
        if product >= numerator1.value:
            return None
        return muldiv(numerator1, sqrt_ratio, numerator1 - product, True)

    denominator = numerator1.value // sqrt_ratio + amount_abs
    if denominator > UINT256_MAX:
        return None
    return numerator1.ceiling_div(denominator).value


def next_sqrt_ratio_from_amount1(sqrt_ratio: int, liquidity: int, amount: int) -> int | None:
    """Sqrt ratio after a token1 amount moves through the pool.

    Args:
        sqrt_ratio: Current Q128 sqrt ratio
        liquidity: Active liquidity
        amount: Signed token1 amount (positive adds to the pool)

    Returns:
        The next sqrt ratio, or None if the amount cannot be absorbed
    """
    if amount == 0:
        return sqrt_ratio
    if liquidity == 0 or abs(amount) > UINT128_MAX:
        return None

    shifted_amount_abs = S(abs(amount)) << 128

    if amount < 0:
        quotient = shifted_amount_abs.ceiling_div(liquidity)
        if quotient >= sqrt_ratio:
            return None
        return sqrt_ratio - quotient.value

    result = sqrt_ratio + (shifted_amount_abs // liquidity).value
    if result > UINT256_MAX:
        return None
    return result


__all__ = ["next_sqrt_ratio_from_amount0", "next_sqrt_ratio_from_amount1"]
