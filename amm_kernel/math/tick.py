"""Tick to sqrt ratio conversion.

A tick is a signed index on a logarithmic price grid where each step
multiplies the price by 1.000001. Sqrt ratios are Q128 fixed-point values:
the square root of the price of token1 in units of token0, scaled by 2^128.
"""

from __future__ import annotations

from amm_kernel.safe_int import UINT256_MAX, S

MIN_TICK = -88722835
MAX_TICK = 88722835
MAX_TICK_SPACING = 698605
FULL_RANGE_TICK_SPACING = 0

# 1.0 in Q128
ONE_X128 = 1 << 128

# MASKS[i] = 2^128 / sqrt(1.000001)^(2^i), truncated
MASKS: tuple[int, ...] = (
    0xFFFFF79C8499329C7CBB2510D893283B,
    0xFFFFEF390978C398134B4FF3764FE410,
    0xFFFFDE72140B00A354BD3DC828E976C9,
    0xFFFFBCE42C7BE6C998AD6318193C0B18,
    0xFFFF79C86A8F6150A32D9778ECEEF97C,
    0xFFFEF3911B7CFF24BA1B3DBB5F8F5974,
    0xFFFDE72350725CC4EA8FEECE3B5F13C8,
    0xFFFBCE4B06C196E9247AC87695D53C60,
    0xFFF79CA7A4D1BF1EE8556CEA23CDBAA5,
    0xFFEF3995A5B6A6267530F207142A5764,
    0xFFDE7444B28145508125D10077BA83B8,
    0xFFBCECEEB791747F10DF216F2E53EC57,
    0xFF79EB706B9A64C6431D76E63531E929,
    0xFEF41D1A5F2AE3A20676BEC6F7F9459A,
    0xFDE95287D26D81BEA159C37073122C73,
    0xFBD701C7CBC4C8A6BB81EFD232D1E4E7,
    0xF7BF5211C72F5185F372AEB1D48F937E,
    0xEFC2BF59DF33ECC28125CF78EC4F167F,
    0xE08D35706200796273F0B3A981D90CFD,
    0xC4F76B68947482DC198A48A54348C4ED,
    0x978BCB9894317807E5FA4498EEE7C0FA,
    0x59B63684B86E9F486EC54727371BA6CA,
    0x1F703399D88F6AA83A28B22D4A1F56E3,
    0x3DC5DAC7376E20FC8679758D1BCDCFC,
    0xEE7E32D61FDB0A5E622B820F681D0,
    0xDE2EE4BC381AFA7089AA84BB66,
    0xC0D55D4D7152C25FB139,
)

# Exact outputs of to_sqrt_ratio(MIN_TICK) and to_sqrt_ratio(MAX_TICK)
MIN_SQRT_RATIO = 0x1000196A05DFEB89E
MAX_SQRT_RATIO = 0xFFFE696227DE541A6906A28C6409402EEFDD9A358361E7EC


def to_sqrt_ratio(tick: int) -> int | None:
    """Convert a tick to its Q128 sqrt ratio.

    The absolute tick is decomposed into powers of two and the per-tick
    factor is raised to each power through the precomputed MASKS. Positive
    ticks take the reciprocal against the full uint256 width at the end.

    Args:
        tick: Tick index

    Returns:
        Sqrt ratio as a Q128 integer, or None if tick is outside
        [MIN_TICK, MAX_TICK]
    """
    # Range check comes before abs() so that any wider integer is rejected too
    if tick < MIN_TICK or tick > MAX_TICK:
        return None

    ratio = S(ONE_X128)
    tick_abs = abs(tick)

    for i, mask in enumerate(MASKS):
        if tick_abs & (1 << i):
            ratio = (ratio * mask) >> 128

    if tick > 0:
        ratio = S(UINT256_MAX) // ratio

    return ratio.value


__all__ = [
    "MIN_TICK",
    "MAX_TICK",
    "MAX_TICK_SPACING",
    "FULL_RANGE_TICK_SPACING",
    "ONE_X128",
    "MASKS",
    "MIN_SQRT_RATIO",
    "MAX_SQRT_RATIO",
    "to_sqrt_ratio",
]
