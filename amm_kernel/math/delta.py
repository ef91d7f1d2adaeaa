"""Token amounts between two sqrt ratios for a given liquidity."""

from __future__ import annotations

from amm_kernel.math.errors import AmountDeltaOverflow, ZeroSqrtRatio
from amm_kernel.math.muldiv import muldiv
from amm_kernel.safe_int import S

TWO_POW_128 = 1 << 128


def _sorted(sqrt_ratio_a: int, sqrt_ratio_b: int) -> tuple[int, int]:
    if sqrt_ratio_a < sqrt_ratio_b:
        return sqrt_ratio_a, sqrt_ratio_b
    return sqrt_ratio_b, sqrt_ratio_a


def amount0_delta(sqrt_ratio_a: int, sqrt_ratio_b: int, liquidity: int, round_up: bool) -> int:
    """Amount of token0 moved when the price travels between two sqrt ratios.

    amount0 = liquidity * (upper - lower) / (upper * lower), in Q128 units.

    Args:
        sqrt_ratio_a: One end of the range
        sqrt_ratio_b: The other end of the range
        liquidity: Active liquidity across the range
        round_up: Round the result up instead of down

    Returns:
        Token0 amount (uint128)

    Raises:
        ZeroSqrtRatio: If the lower sqrt ratio is zero
        AmountDeltaOverflow: If the amount does not fit in uint128
    """
    lower, upper = _sorted(sqrt_ratio_a, sqrt_ratio_b)
    if lower == 0:
        raise ZeroSqrtRatio("amount0 delta undefined at a zero sqrt ratio")
    if liquidity == 0 or lower == upper:
        return 0

    result_0 = muldiv(S(liquidity) << 128, upper - lower, upper, round_up)
    if result_0 is None:
        raise AmountDeltaOverflow(f"amount0 delta overflow for liquidity {liquidity}")

    result = S(result_0).ceiling_div(lower) if round_up else S(result_0) // lower
    if not result.is_uint128():
        raise AmountDeltaOverflow(f"amount0 delta {result.value} exceeds uint128")
    return result.value


def amount1_delta(sqrt_ratio_a: int, sqrt_ratio_b: int, liquidity: int, round_up: bool) -> int:
    """Amount of token1 moved when the price travels between two sqrt ratios.

    amount1 = liquidity * (upper - lower), in Q128 units.

    Raises:
        AmountDeltaOverflow: If the amount does not fit in uint128
    """
    lower, upper = _sorted(sqrt_ratio_a, sqrt_ratio_b)
    if liquidity == 0 or lower == upper:
        return 0

    result = muldiv(liquidity, upper - lower, TWO_POW_128, round_up)
    if result is None or not S(result).is_uint128():
        raise AmountDeltaOverflow(f"amount1 delta overflow for liquidity {liquidity}")
    return result


__all__ = ["amount0_delta", "amount1_delta"]
