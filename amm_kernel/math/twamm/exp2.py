"""Fixed-point base-2 exponential.

Inputs and outputs are Q64.64: the integer divided by 2^64 is the real value.
"""

from __future__ import annotations

from amm_kernel.math.errors import Exp2InputOutOfDomain
from amm_kernel.safe_int import S

# exp2 is defined for x < 64 in Q64.64; integer parts of 64 or more overflow
EXP2_UPPER_BOUND = 0x400000000000000000

# 2^(2^-k) in Q128 for k = 1..64, i.e. one factor per fractional bit of the
# exponent, from bit 63 down to bit 0
EXP2_FACTORS: tuple[int, ...] = (
    0x16A09E667F3BCC908B2FB1366EA957D3E,
    0x1306FE0A31B7152DE8D5A46305C85EDEC,
    0x1172B83C7D517ADCDF7C8C50EB14A791F,
    0x10B5586CF9890F6298B92B71842A98363,
    0x1059B0D31585743AE7C548EB68CA417FD,
    0x102C9A3E778060EE6F7CACA4F7A29BDE8,
    0x10163DA9FB33356D84A66AE336DCDFA3F,
    0x100B1AFA5ABCBED6129AB13EC11DC9543,
    0x10058C86DA1C09EA1FF19D294CF2F679B,
    0x1002C605E2E8CEC506D21BFC89A23A00F,
    0x100162F3904051FA128BCA9C55C31E5DF,
    0x1000B175EFFDC76BA38E31671CA939725,
    0x100058BA01FB9F96D6CACD4B180917C3D,
    0x10002C5CC37DA9491D0985C348C68E7B3,
    0x1000162E525EE054754457D5995292026,
    0x10000B17255775C040618BF4A4ADE83FC,
    0x1000058B91B5BC9AE2EED81E9B7D4CFAB,
    0x100002C5C89D5EC6CA4D7C8ACC017B7C9,
    0x10000162E43F4F831060E02D839A9D16D,
    0x100000B1721BCFC99D9F890EA06911763,
    0x10000058B90CF1E6D97F9CA14DBCC1628,
    0x1000002C5C863B73F016468F6BAC5CA2B,
    0x100000162E430E5A18F6119E3C02282A5,
    0x1000000B1721835514B86E6D96EFD1BFE,
    0x100000058B90C0B48C6BE5DF846C5B2EF,
    0x10000002C5C8601CC6B9E94213C72737A,
    0x1000000162E42FFF037DF38AA2B219F06,
    0x10000000B17217FBA9C739AA5819F44F9,
    0x1000000058B90BFCDEE5ACD3C1CEDC823,
    0x100000002C5C85FE31F35A6A30DA1BE50,
    0x10000000162E42FF0999CE3541B9FFFCF,
    0x100000000B17217F80F4EF5AADDA45554,
    0x10000000058B90BFBF8479BD5A81B51AD,
    0x1000000002C5C85FDF84BD62AE30A74CC,
    0x100000000162E42FEFB2FED257559BDAA,
    0x1000000000B17217F7D5A7716BBA4A9AE,
    0x100000000058B90BFBE9DDBAC5E109CCE,
    0x10000000002C5C85FDF4B15DE6F17EB0D,
    0x1000000000162E42FEFA494F1478FDE05,
    0x10000000000B17217F7D20CF927C8E94C,
    0x1000000000058B90BFBE8F71CB4E4B33D,
    0x100000000002C5C85FDF477B662B26945,
    0x10000000000162E42FEFA3AE53369388C,
    0x100000000000B17217F7D1D351A389D40,
    0x10000000000058B90BFBE8E8B2D3D4EDE,
    0x1000000000002C5C85FDF4741BEA6E77E,
    0x100000000000162E42FEFA39FE95583C2,
    0x1000000000000B17217F7D1CFB72B45E1,
    0x100000000000058B90BFBE8E7CC35C3F0,
    0x10000000000002C5C85FDF473E242EA38,
    0x1000000000000162E42FEFA39F02B772C,
    0x10000000000000B17217F7D1CF7D83C1A,
    0x1000000000000058B90BFBE8E7BDCBE2E,
    0x100000000000002C5C85FDF473DEA871F,
    0x10000000000000162E42FEFA39EF44D91,
    0x100000000000000B17217F7D1CF79E949,
    0x10000000000000058B90BFBE8E7BCE544,
    0x1000000000000002C5C85FDF473DE6ECA,
    0x100000000000000162E42FEFA39EF366F,
    0x1000000000000000B17217F7D1CF79AFA,
    0x100000000000000058B90BFBE8E7BCD6D,
    0x10000000000000002C5C85FDF473DE6B2,
    0x1000000000000000162E42FEFA39EF358,
    0x10000000000000000B17217F7D1CF79AB,
)


def exp2(x: int) -> int:
    """Compute 2^x for a signed Q64.64 exponent.

    The accumulator starts at 2^127 so that every partial product keeps full
    precision. Each set fractional bit multiplies in its factor; the final
    shift by (63 - integer part) both restores the Q64.64 scale and applies
    the integer power.

    Args:
        x: Exponent as a signed Q64.64 integer

    Returns:
        2^x as an unsigned Q64.64 integer (fits in uint128); 0 when x is so
        negative that the result underflows

    Raises:
        Exp2InputOutOfDomain: If x >= EXP2_UPPER_BOUND
    """
    if x >= EXP2_UPPER_BOUND:
        raise Exp2InputOutOfDomain(f"exp2 exponent {x} >= {EXP2_UPPER_BOUND}")
    if x < -EXP2_UPPER_BOUND:
        return 0

    result = S(1 << 127)

    for bit, factor in zip(range(63, -1, -1), EXP2_FACTORS):
        if x & (1 << bit):
            result = (result * factor) >> 128

    # x >> 64 floors, so negative exponents shift further right
    result >>= 63 - (x >> 64)

    return result.to_uint128()


__all__ = ["EXP2_UPPER_BOUND", "EXP2_FACTORS", "exp2"]
