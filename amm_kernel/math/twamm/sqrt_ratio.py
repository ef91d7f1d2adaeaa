"""Closed-form price evolution under two continuous TWAMM order flows.

While token0 and token1 are sold into a pool at constant rates, the pool's
sqrt ratio relaxes exponentially towards the ratio implied by the two sale
rates:

    sqrt_ratio(t) = s * (e^kt + c) / (e^kt - c)

where s is the equilibrium sqrt ratio, c = (sqrt_ratio(0) - s) /
(sqrt_ratio(0) + s) and k = 2 * sqrt(rate0 * rate1) / liquidity. The
exponential is evaluated in base 2 with exp2.

Sale rates are Q32: token amount per second multiplied by 2^32.
"""

from __future__ import annotations

import structlog

from amm_kernel.math.muldiv import muldiv
from amm_kernel.math.tick import MAX_SQRT_RATIO, MIN_SQRT_RATIO
from amm_kernel.math.twamm.exp2 import EXP2_UPPER_BOUND, exp2
from amm_kernel.safe_int import S

logger = structlog.get_logger()

TWO_POW_64 = 1 << 64
TWO_POW_128 = 1 << 128
TWO_POW_192 = 1 << 192
TWO_POW_240 = 1 << 240

# floor(2^33 / ln 2): removes the Q32 scale of the sale rates, applies the
# factor 2 of the exponent and converts from base e to base 2 in Q64.64
EXPONENT_SCALE = 12392656037


def compute_sqrt_sale_ratio(sale_rate_token0: int, sale_rate_token1: int) -> int:
    """Equilibrium sqrt ratio sqrt(sale_rate_token1 / sale_rate_token0) in Q128.

    The pre-shift before the integer square root depends on the magnitude of
    the ratio so that as many significant bits as possible survive.

    A flow in only one direction pushes the price to the corresponding bound.
    """
    if sale_rate_token0 == 0:
        return MAX_SQRT_RATIO
    if sale_rate_token1 == 0:
        return MIN_SQRT_RATIO

    sale_ratio = (S(sale_rate_token1) << 128) // sale_rate_token0

    if sale_ratio >= TWO_POW_240:
        return (sale_ratio.integer_sqrt() << 64).value
    if sale_ratio >= TWO_POW_192:
        return ((sale_ratio << 16).integer_sqrt() << 56).value
    if sale_ratio >= TWO_POW_128:
        # at most 192 bits, so there is room for a 64 bit pre-shift
        return ((sale_ratio << 64).integer_sqrt() << 32).value
    return (sale_ratio << 128).integer_sqrt().value


def compute_c(sqrt_ratio: int, sqrt_sale_ratio: int) -> tuple[int, bool]:
    """Normalized distance between the current and the equilibrium sqrt ratio.

    Args:
        sqrt_ratio: Current sqrt ratio
        sqrt_sale_ratio: Equilibrium sqrt ratio

    Returns:
        (magnitude, is_negative) where magnitude is
        |sqrt_ratio - sqrt_sale_ratio| / (sqrt_ratio + sqrt_sale_ratio) in Q128,
        rounded down, and is_negative is set when the current price is below
        equilibrium
    """
    distance = S(sqrt_ratio).abs_diff(sqrt_sale_ratio)
    if not distance:
        return 0, False

    c = muldiv(distance, TWO_POW_128, S(sqrt_ratio) + sqrt_sale_ratio, False)
    assert c is not None  # distance <= sum and sum > 0, so c <= 2^128
    return c, sqrt_ratio < sqrt_sale_ratio


def calculate_next_sqrt_ratio(
    sqrt_ratio: int,
    liquidity: int,
    sale_rate_token0: int,
    sale_rate_token1: int,
    time_elapsed: int,
    fee: int,
) -> int:
    """Sqrt ratio after time_elapsed seconds of virtual order execution.

    Never raises: degenerate inputs (no liquidity, already at equilibrium,
    fully converged, numerically unstable ratio) resolve to the equilibrium
    sqrt ratio.

    Args:
        sqrt_ratio: Current Q128 sqrt ratio
        liquidity: Active liquidity
        sale_rate_token0: Q32 sale rate of token0
        sale_rate_token1: Q32 sale rate of token1
        time_elapsed: Seconds of execution (uint32)
        fee: Pool fee as a fraction of 2^64

    Returns:
        The next Q128 sqrt ratio, never past the equilibrium sqrt ratio
    """
    sqrt_sale_ratio = compute_sqrt_sale_ratio(sale_rate_token0, sale_rate_token1)

    if liquidity == 0:
        return sqrt_sale_ratio

    c, is_negative = compute_c(sqrt_ratio, sqrt_sale_ratio)
    if c == 0:
        return sqrt_sale_ratio

    sale_rate = (
        (S(sale_rate_token0) * sale_rate_token1).integer_sqrt() * (TWO_POW_64 - fee)
    ) // TWO_POW_64

    exponent = (sale_rate * time_elapsed * EXPONENT_SCALE) // liquidity

    if exponent >= EXP2_UPPER_BOUND:
        logger.debug("twamm_exponent_saturated", exponent=exponent.value)
        return sqrt_sale_ratio

    e = S(exp2(exponent.value)) << 64
    round_up = sqrt_ratio > sqrt_sale_ratio

    if is_negative:
        # below equilibrium and rising
        sqrt_ratio_next = muldiv(sqrt_sale_ratio, e - c, e + c, round_up)
    else:
        # above equilibrium and falling
        sqrt_ratio_next = muldiv(sqrt_sale_ratio, e + c, e - c, round_up)

    if sqrt_ratio_next is None:
        logger.debug(
            "twamm_next_sqrt_ratio_fallback",
            sqrt_ratio=sqrt_ratio,
            sqrt_sale_ratio=sqrt_sale_ratio,
            exponent=exponent.value,
        )
        return sqrt_sale_ratio

    # never overshoot the equilibrium
    if round_up:
        return max(sqrt_ratio_next, sqrt_sale_ratio)
    return min(sqrt_ratio_next, sqrt_sale_ratio)


__all__ = [
    "EXPONENT_SCALE",
    "compute_sqrt_sale_ratio",
    "compute_c",
    "calculate_next_sqrt_ratio",
]
