"""Kernel math error classes.

Expected absence of a result (an out-of-range tick, a failed multiply-divide)
is reported as None by the functions themselves. These errors are reserved
for caller-contract violations and failed swap steps.
"""


class KernelMathError(Exception):
    """Base error for kernel math operations."""

    pass


class Exp2InputOutOfDomain(KernelMathError):
    """Exponent is at or above the positive bound of exp2."""

    pass


class AmountDeltaError(KernelMathError):
    """Token amount between two sqrt ratios could not be computed."""

    pass


class AmountDeltaOverflow(AmountDeltaError):
    """Amount delta does not fit in uint128."""

    pass


class ZeroSqrtRatio(AmountDeltaError):
    """Lower sqrt ratio of an amount0 delta is zero."""

    pass


class ComputeStepError(KernelMathError):
    """A single swap step could not be computed."""

    pass


class WrongDirection(ComputeStepError):
    """Sqrt ratio limit lies on the wrong side of the current price."""

    pass


class AmountBeforeFeeOverflow(ComputeStepError):
    """Grossing up an amount by the fee overflows uint128."""

    pass
