"""Full-precision multiply-then-divide."""

from __future__ import annotations

from amm_kernel.safe_int import UINT256_MAX, S, SafeInt


def muldiv(x: SafeInt | int, y: SafeInt | int, d: SafeInt | int, round_up: bool) -> int | None:
    """Compute x * y / d without intermediate overflow.

    The 512-bit product is formed exactly; only the quotient has to fit the
    uint256 output width.

    Args:
        x: First factor (uint256)
        y: Second factor (uint256)
        d: Divisor (uint256)
        round_up: Round the quotient up instead of down

    Returns:
        The quotient, or None if d is zero or the quotient exceeds uint256
    """
    sx, sy, sd = S(x), S(y), S(d)
    if not sd:
        return None

    quotient, remainder = divmod(sx.value * sy.value, sd.value)
    if round_up and remainder:
        quotient += 1

    if quotient > UINT256_MAX:
        return None
    return quotient


__all__ = ["muldiv"]
