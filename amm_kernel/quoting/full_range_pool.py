"""Full range pool: a single liquidity position spanning every tick."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from amm_kernel.math.errors import KernelMathError
from amm_kernel.math.swap import compute_step, is_price_increasing
from amm_kernel.math.tick import (
    FULL_RANGE_TICK_SPACING,
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
)
from amm_kernel.safe_int import UINT128_MAX

from .errors import (
    FailedComputeSwapStep,
    InvalidSqrtRatioLimit,
    InvalidToken,
    LiquidityInvalid,
    SqrtRatioInvalid,
    TickSpacingInvalid,
    TokenOrderInvalid,
)
from .types import NodeKey, Quote, QuoteParams

logger = structlog.get_logger()


@dataclass(frozen=True)
class FullRangePoolState:
    """Price and liquidity of a full range pool."""

    sqrt_ratio: int
    liquidity: int


@dataclass(frozen=True)
class FullRangePoolResources:
    """Work done by a full range quote.

    Attributes:
        no_override_price_change: 1 if the quote moved the pool's own price
    """

    no_override_price_change: int = 0

    def __add__(self, other: FullRangePoolResources) -> FullRangePoolResources:
        return FullRangePoolResources(self.no_override_price_change + other.no_override_price_change)

    def __sub__(self, other: FullRangePoolResources) -> FullRangePoolResources:
        return FullRangePoolResources(self.no_override_price_change - other.no_override_price_change)


class FullRangePool:
    """Pool whose liquidity is active across the whole price range.

    Tick spacing is the FULL_RANGE_TICK_SPACING sentinel, so a swap is a
    single step of the swap math: there are no ticks to cross.
    """

    def __init__(self, key: NodeKey, state: FullRangePoolState):
        """Initialize a full range pool.

        Args:
            key: Token pair and configuration (tick spacing must be 0)
            state: Initial price and liquidity

        Raises:
            TokenOrderInvalid: If token0 does not sort before token1
            TickSpacingInvalid: If the tick spacing is not the full range sentinel
            SqrtRatioInvalid: If the sqrt ratio is outside the valid range
            LiquidityInvalid: If the liquidity does not fit in uint128
        """
        if key.token0 >= key.token1:
            raise TokenOrderInvalid(f"token0 {key.token0} must be < token1 {key.token1}")
        if key.config.tick_spacing != FULL_RANGE_TICK_SPACING:
            raise TickSpacingInvalid(
                f"Full range pools require tick spacing {FULL_RANGE_TICK_SPACING},"
                f" got {key.config.tick_spacing}"
            )
        if not MIN_SQRT_RATIO <= state.sqrt_ratio <= MAX_SQRT_RATIO:
            raise SqrtRatioInvalid(f"Sqrt ratio {state.sqrt_ratio} out of range")
        if not 0 <= state.liquidity <= UINT128_MAX:
            raise LiquidityInvalid(f"Liquidity {state.liquidity} does not fit in uint128")

        self.key = key
        self.state = state

    def __repr__(self) -> str:
        return f"FullRangePool(key={self.key!r}, state={self.state!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FullRangePool):
            return NotImplemented
        return self.key == other.key and self.state == other.state

    def get_key(self) -> NodeKey:
        return self.key

    def get_state(self) -> FullRangePoolState:
        return self.state

    def quote(
        self, params: QuoteParams[FullRangePoolState, object]
    ) -> Quote[FullRangePoolResources, FullRangePoolState]:
        """Quote a swap against the full range position.

        Args:
            params: Specified token amount, optional limit and override state

        Returns:
            Quote with amounts and the state after the swap

        Raises:
            InvalidToken: If the token is not part of the pool
            InvalidSqrtRatioLimit: If the limit is outside the valid range
            FailedComputeSwapStep: If the swap step fails
        """
        amount = params.token_amount.amount
        token = params.token_amount.token

        if token == self.key.token1:
            is_token1 = True
        elif token == self.key.token0:
            is_token1 = False
        else:
            raise InvalidToken(f"Token {token} not in pool")

        state = params.override_state if params.override_state is not None else self.state
        increasing = is_price_increasing(amount, is_token1)

        sqrt_ratio_limit = params.sqrt_ratio_limit
        if sqrt_ratio_limit is None:
            sqrt_ratio_limit = MAX_SQRT_RATIO if increasing else MIN_SQRT_RATIO
        elif not MIN_SQRT_RATIO <= sqrt_ratio_limit <= MAX_SQRT_RATIO:
            raise InvalidSqrtRatioLimit(f"Sqrt ratio limit {sqrt_ratio_limit} out of range")

        try:
            step = compute_step(
                sqrt_ratio=state.sqrt_ratio,
                liquidity=state.liquidity,
                sqrt_ratio_limit=sqrt_ratio_limit,
                amount=amount,
                is_token1=is_token1,
                fee=self.key.config.fee,
            )
        except KernelMathError as err:
            logger.debug(
                "full_range_quote_failed",
                token=token,
                amount=amount,
                sqrt_ratio=state.sqrt_ratio,
                error=str(err),
            )
            raise FailedComputeSwapStep(str(err)) from err

        moved_own_price = (
            params.override_state is None and step.sqrt_ratio_next != self.state.sqrt_ratio
        )

        return Quote(
            calculated_amount=step.calculated_amount,
            consumed_amount=step.consumed_amount,
            execution_resources=FullRangePoolResources(
                no_override_price_change=1 if moved_own_price else 0
            ),
            fees_paid=step.fee_amount,
            is_price_increasing=increasing,
            state_after=FullRangePoolState(
                sqrt_ratio=step.sqrt_ratio_next,
                liquidity=state.liquidity,
            ),
        )

    def has_liquidity(self) -> bool:
        return self.state.liquidity > 0

    def max_tick_with_liquidity(self) -> int | None:
        return MAX_TICK if self.has_liquidity() else None

    def min_tick_with_liquidity(self) -> int | None:
        return MIN_TICK if self.has_liquidity() else None

    def is_path_dependent(self) -> bool:
        return False


__all__ = ["FullRangePool", "FullRangePoolState", "FullRangePoolResources"]
