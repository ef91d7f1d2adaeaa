"""Pool construction and quoting errors."""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class PoolConstructionError(PoolError):
    """Pool parameters are invalid."""

    pass


class TokenOrderInvalid(PoolConstructionError):
    """token0 must sort strictly before token1."""

    pass


class TickSpacingInvalid(PoolConstructionError):
    """Tick spacing is not allowed for this pool type."""

    pass


class SqrtRatioInvalid(PoolConstructionError):
    """Sqrt ratio lies outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO]."""

    pass


class LiquidityInvalid(PoolConstructionError):
    """Liquidity does not fit in uint128."""

    pass


class SaleRateDeltasInvalid(PoolConstructionError):
    """Sale rates or their deltas leave the uint128 range, or deltas are unordered or stale."""

    pass


class QuoteError(PoolError):
    """A quote could not be computed."""

    pass


class InvalidToken(QuoteError):
    """Token is not part of the pool."""

    pass


class InvalidSqrtRatioLimit(QuoteError):
    """Sqrt ratio limit lies outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO]."""

    pass


class FailedComputeSwapStep(QuoteError):
    """The swap step raised a kernel math error."""

    pass


class ExecutionTimeExceedsBlockTime(QuoteError):
    """Virtual orders were executed later than the quoted block time."""

    pass


class VirtualOrderIntervalTooLong(QuoteError):
    """An execution interval does not fit in uint32 seconds."""

    pass
