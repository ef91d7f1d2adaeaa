"""Single swap step within one liquidity range.

Amounts are signed: a positive amount is an exact input of the specified
token, a negative amount an exact output of it.
"""

from __future__ import annotations

from dataclasses import dataclass

from amm_kernel.math.delta import amount0_delta, amount1_delta
from amm_kernel.math.errors import AmountBeforeFeeOverflow, WrongDirection
from amm_kernel.math.fee import amount_before_fee, compute_fee
from amm_kernel.math.sqrt_ratio import next_sqrt_ratio_from_amount0, next_sqrt_ratio_from_amount1


@dataclass(frozen=True)
class StepResult:
    """Outcome of a swap step.

    Attributes:
        consumed_amount: Signed amount of the specified token used up
        calculated_amount: Amount of the other token paid out (exact input)
            or required (exact output)
        sqrt_ratio_next: Sqrt ratio after the step
        fee_amount: Fee charged, in the input token
    """

    consumed_amount: int
    calculated_amount: int
    sqrt_ratio_next: int
    fee_amount: int


def is_price_increasing(amount: int, is_token1: bool) -> bool:
    """Whether a swap of the given signed amount raises the price."""
    return (amount < 0) != is_token1


def _gross_up(amount: int, fee: int) -> int:
    result = amount_before_fee(amount, fee)
    if result is None:
        raise AmountBeforeFeeOverflow(f"amount {amount} before fee {fee} exceeds uint128")
    return result


def compute_step(
    sqrt_ratio: int,
    liquidity: int,
    sqrt_ratio_limit: int,
    amount: int,
    is_token1: bool,
    fee: int,
) -> StepResult:
    """Swap against constant liquidity until the amount or the limit runs out.

    Args:
        sqrt_ratio: Current Q128 sqrt ratio
        liquidity: Liquidity active over the whole step
        sqrt_ratio_limit: Price the step may not move past
        amount: Signed amount of the specified token
        is_token1: Whether the specified token is token1
        fee: Fee as a fraction of 2^64

    Returns:
        StepResult describing amounts and the resulting price

    Raises:
        WrongDirection: If the limit is on the wrong side of sqrt_ratio
        AmountBeforeFeeOverflow: If adding the fee overflows uint128
        AmountDeltaError: If a token amount cannot be represented
    """
    if amount == 0 or sqrt_ratio == sqrt_ratio_limit:
        return StepResult(0, 0, sqrt_ratio, 0)

    increasing = is_price_increasing(amount, is_token1)

    if (sqrt_ratio_limit < sqrt_ratio) == increasing:
        direction = "rising" if increasing else "falling"
        raise WrongDirection(
            f"limit {sqrt_ratio_limit} is on the wrong side of {sqrt_ratio} for a {direction} price"
        )

    if liquidity == 0:
        # nothing to trade against, the price moves freely to the limit
        return StepResult(0, 0, sqrt_ratio_limit, 0)

    is_exact_out = amount < 0

    if is_exact_out:
        price_impact_amount = amount
    else:
        price_impact_amount = amount - compute_fee(amount, fee)

    if is_token1:
        sqrt_ratio_next = next_sqrt_ratio_from_amount1(sqrt_ratio, liquidity, price_impact_amount)
    else:
        sqrt_ratio_next = next_sqrt_ratio_from_amount0(sqrt_ratio, liquidity, price_impact_amount)

    within_limit = sqrt_ratio_next is not None and (
        sqrt_ratio_next <= sqrt_ratio_limit if increasing else sqrt_ratio_next >= sqrt_ratio_limit
    )

    if within_limit:
        if sqrt_ratio_next == sqrt_ratio:
            # amount too small to move the price, all of it is kept as fee
            return StepResult(amount, 0, sqrt_ratio, abs(amount))

        calculated_delta = amount0_delta if is_token1 else amount1_delta
        excluding_fee = calculated_delta(sqrt_ratio_next, sqrt_ratio, liquidity, is_exact_out)

        if is_exact_out:
            including_fee = _gross_up(excluding_fee, fee)
            return StepResult(amount, including_fee, sqrt_ratio_next, including_fee - excluding_fee)

        return StepResult(amount, excluding_fee, sqrt_ratio_next, amount - price_impact_amount)

    if is_token1:
        specified_delta, calculated_delta = amount1_delta, amount0_delta
    else:
        specified_delta, calculated_delta = amount0_delta, amount1_delta

    specified_amount = specified_delta(sqrt_ratio_limit, sqrt_ratio, liquidity, not is_exact_out)
    calculated_amount = calculated_delta(sqrt_ratio_limit, sqrt_ratio, liquidity, is_exact_out)

    if is_exact_out:
        before_fee = _gross_up(calculated_amount, fee)
        return StepResult(
            -specified_amount, before_fee, sqrt_ratio_limit, before_fee - calculated_amount
        )

    before_fee = _gross_up(specified_amount, fee)
    return StepResult(before_fee, calculated_amount, sqrt_ratio_limit, before_fee - specified_amount)


__all__ = ["StepResult", "is_price_increasing", "compute_step"]
