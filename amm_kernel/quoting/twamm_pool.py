"""TWAMM pool: a full range pool that executes long-running virtual orders.

Two continuous order flows sell token0 and token1 into the pool at Q32 sale
rates. Before any swap is quoted, the flows accumulated since the last
execution are settled against the full range position, interval by interval,
with the sale rates changing at the times given by the sale rate deltas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import structlog

from amm_kernel.math.tick import MAX_SQRT_RATIO, MIN_SQRT_RATIO
from amm_kernel.math.twamm import calculate_next_sqrt_ratio
from amm_kernel.safe_int import UINT128_MAX

from .errors import (
    ExecutionTimeExceedsBlockTime,
    SaleRateDeltasInvalid,
    VirtualOrderIntervalTooLong,
)
from .full_range_pool import FullRangePool, FullRangePoolResources, FullRangePoolState
from .types import NodeKey, Quote, QuoteParams, TokenAmount

logger = structlog.get_logger()

MAX_INTERVAL_SECONDS = (1 << 32) - 1


@dataclass(frozen=True)
class TwammSaleRateDelta:
    """Change of the sale rates at a point in time (orders starting or ending)."""

    time: int
    sale_rate_delta0: int
    sale_rate_delta1: int


@dataclass(frozen=True)
class TwammPoolState:
    """Full range state plus the running sale rates and last execution time."""

    full_range_pool_state: FullRangePoolState
    token0_sale_rate: int
    token1_sale_rate: int
    last_execution_time: int


@dataclass(frozen=True)
class TwammPoolResources:
    """Work done by a TWAMM quote.

    Attributes:
        full_range_pool_resources: Resources of the user swap
        virtual_orders_executed: 1 if virtual orders had to be executed
        virtual_order_seconds_executed: Seconds of virtual order execution
        virtual_order_delta_times_crossed: Sale rate deltas applied
    """

    full_range_pool_resources: FullRangePoolResources = FullRangePoolResources()
    virtual_orders_executed: int = 0
    virtual_order_seconds_executed: int = 0
    virtual_order_delta_times_crossed: int = 0

    def __add__(self, other: TwammPoolResources) -> TwammPoolResources:
        return TwammPoolResources(
            self.full_range_pool_resources + other.full_range_pool_resources,
            self.virtual_orders_executed + other.virtual_orders_executed,
            self.virtual_order_seconds_executed + other.virtual_order_seconds_executed,
            self.virtual_order_delta_times_crossed + other.virtual_order_delta_times_crossed,
        )

    def __sub__(self, other: TwammPoolResources) -> TwammPoolResources:
        return TwammPoolResources(
            self.full_range_pool_resources - other.full_range_pool_resources,
            self.virtual_orders_executed - other.virtual_orders_executed,
            self.virtual_order_seconds_executed - other.virtual_order_seconds_executed,
            self.virtual_order_delta_times_crossed - other.virtual_order_delta_times_crossed,
        )


def _clamp_sqrt_ratio(sqrt_ratio: int) -> int:
    return min(max(sqrt_ratio, MIN_SQRT_RATIO), MAX_SQRT_RATIO)


def _check_sale_rates(rate0: int, rate1: int, time: int) -> None:
    if not (0 <= rate0 <= UINT128_MAX and 0 <= rate1 <= UINT128_MAX):
        raise SaleRateDeltasInvalid(
            f"Sale rates ({rate0}, {rate1}) at time {time} must be in [0, 2^128)"
        )


class TwammPool:
    """Full range pool with virtual order execution.

    Quotes take the block timestamp as meta. The pool itself is never
    mutated: the state after virtual order execution and the user swap is
    returned in the quote.
    """

    def __init__(
        self,
        key: NodeKey,
        sqrt_ratio: int,
        liquidity: int,
        last_execution_time: int,
        token0_sale_rate: int,
        token1_sale_rate: int,
        sale_rate_deltas: Sequence[TwammSaleRateDelta] = (),
    ):
        """Initialize a TWAMM pool.

        Args:
            key: Token pair and configuration (tick spacing must be 0)
            sqrt_ratio: Current Q128 sqrt ratio
            liquidity: Liquidity of the full range position
            last_execution_time: Timestamp virtual orders were last executed at
            token0_sale_rate: Current Q32 sale rate of token0
            token1_sale_rate: Current Q32 sale rate of token1
            sale_rate_deltas: Future sale rate changes, sorted by time

        Raises:
            PoolConstructionError: If the full range pool is invalid
            SaleRateDeltasInvalid: If a sale rate is outside uint128 at any
                point, or the deltas are unsorted or not after the last
                execution time
        """
        _check_sale_rates(token0_sale_rate, token1_sale_rate, last_execution_time)

        self.full_range_pool = FullRangePool(
            key, FullRangePoolState(sqrt_ratio=sqrt_ratio, liquidity=liquidity)
        )

        previous_time = last_execution_time
        rate0, rate1 = token0_sale_rate, token1_sale_rate
        for delta in sale_rate_deltas:
            if delta.time <= previous_time:
                raise SaleRateDeltasInvalid(
                    f"Delta time {delta.time} must be after {previous_time}"
                )
            rate0 += delta.sale_rate_delta0
            rate1 += delta.sale_rate_delta1
            _check_sale_rates(rate0, rate1, delta.time)
            previous_time = delta.time

        self.token0_sale_rate = token0_sale_rate
        self.token1_sale_rate = token1_sale_rate
        self.last_execution_time = last_execution_time
        self.sale_rate_deltas = tuple(sale_rate_deltas)

    def __repr__(self) -> str:
        return (
            f"TwammPool(full_range_pool={self.full_range_pool!r},"
            f" token0_sale_rate={self.token0_sale_rate},"
            f" token1_sale_rate={self.token1_sale_rate},"
            f" last_execution_time={self.last_execution_time},"
            f" sale_rate_deltas={self.sale_rate_deltas!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TwammPool):
            return NotImplemented
        return (
            self.full_range_pool == other.full_range_pool
            and self.token0_sale_rate == other.token0_sale_rate
            and self.token1_sale_rate == other.token1_sale_rate
            and self.last_execution_time == other.last_execution_time
            and self.sale_rate_deltas == other.sale_rate_deltas
        )

    def get_key(self) -> NodeKey:
        return self.full_range_pool.get_key()

    def get_state(self) -> TwammPoolState:
        return TwammPoolState(
            full_range_pool_state=self.full_range_pool.get_state(),
            token0_sale_rate=self.token0_sale_rate,
            token1_sale_rate=self.token1_sale_rate,
            last_execution_time=self.last_execution_time,
        )

    def quote(
        self, params: QuoteParams[TwammPoolState, int]
    ) -> Quote[TwammPoolResources, TwammPoolState]:
        """Execute virtual orders up to the block time, then quote the swap.

        Args:
            params: Swap parameters; meta is the block timestamp (defaults to
                the last execution time, i.e. no virtual order execution)

        Returns:
            Quote of the user swap on the post-execution state

        Raises:
            ExecutionTimeExceedsBlockTime: If the block time is before the last
                execution time
            VirtualOrderIntervalTooLong: If an interval exceeds 2^32 - 1 seconds
            QuoteError: If a full range quote fails
        """
        state = params.override_state if params.override_state is not None else self.get_state()
        current_time = state.last_execution_time
        block_time = current_time if params.meta is None else params.meta

        if block_time < current_time:
            raise ExecutionTimeExceedsBlockTime(
                f"Last execution time {current_time} is after block time {block_time}"
            )

        key = self.get_key()
        fee = key.config.fee
        full_range_state = state.full_range_pool_state
        rate0, rate1 = state.token0_sale_rate, state.token1_sale_rate
        deltas = [d for d in self.sale_rate_deltas if current_time < d.time <= block_time]
        delta_times_crossed = 0

        while current_time != block_time:
            if delta_times_crossed < len(deltas):
                next_time = deltas[delta_times_crossed].time
            else:
                next_time = block_time

            time_elapsed = next_time - current_time
            if time_elapsed > MAX_INTERVAL_SECONDS:
                raise VirtualOrderIntervalTooLong(
                    f"Interval of {time_elapsed} seconds exceeds {MAX_INTERVAL_SECONDS}"
                )

            amount0 = (rate0 * time_elapsed) >> 32
            amount1 = (rate1 * time_elapsed) >> 32

            if amount0 > 0 and amount1 > 0:
                current_sqrt_ratio = _clamp_sqrt_ratio(full_range_state.sqrt_ratio)
                target_sqrt_ratio = _clamp_sqrt_ratio(
                    calculate_next_sqrt_ratio(
                        sqrt_ratio=current_sqrt_ratio,
                        liquidity=full_range_state.liquidity,
                        sale_rate_token0=rate0,
                        sale_rate_token1=rate1,
                        time_elapsed=time_elapsed,
                        fee=fee,
                    )
                )
                if current_sqrt_ratio < target_sqrt_ratio:
                    token_amount = TokenAmount(amount=amount1, token=key.token1)
                else:
                    token_amount = TokenAmount(amount=amount0, token=key.token0)

                full_range_state = self.full_range_pool.quote(
                    QuoteParams(
                        token_amount=token_amount,
                        sqrt_ratio_limit=target_sqrt_ratio,
                        override_state=full_range_state,
                    )
                ).state_after
            elif amount0 > 0 or amount1 > 0:
                if amount0 > 0:
                    token_amount = TokenAmount(amount=amount0, token=key.token0)
                else:
                    token_amount = TokenAmount(amount=amount1, token=key.token1)

                full_range_state = self.full_range_pool.quote(
                    QuoteParams(token_amount=token_amount, override_state=full_range_state)
                ).state_after

            if delta_times_crossed < len(deltas) and deltas[delta_times_crossed].time == next_time:
                delta = deltas[delta_times_crossed]
                rate0 += delta.sale_rate_delta0
                rate1 += delta.sale_rate_delta1
                delta_times_crossed += 1

            current_time = next_time

        seconds_executed = block_time - state.last_execution_time
        if seconds_executed:
            logger.debug(
                "twamm_virtual_orders_executed",
                seconds=seconds_executed,
                delta_times_crossed=delta_times_crossed,
                sqrt_ratio=full_range_state.sqrt_ratio,
            )

        own_state = params.override_state is None and full_range_state == self.full_range_pool.state
        result = self.full_range_pool.quote(
            QuoteParams(
                token_amount=params.token_amount,
                sqrt_ratio_limit=params.sqrt_ratio_limit,
                override_state=None if own_state else full_range_state,
            )
        )

        return Quote(
            calculated_amount=result.calculated_amount,
            consumed_amount=result.consumed_amount,
            execution_resources=TwammPoolResources(
                full_range_pool_resources=result.execution_resources,
                virtual_orders_executed=1 if seconds_executed else 0,
                virtual_order_seconds_executed=seconds_executed,
                virtual_order_delta_times_crossed=delta_times_crossed,
            ),
            fees_paid=result.fees_paid,
            is_price_increasing=result.is_price_increasing,
            state_after=TwammPoolState(
                full_range_pool_state=result.state_after,
                token0_sale_rate=rate0,
                token1_sale_rate=rate1,
                last_execution_time=block_time,
            ),
        )

    def has_liquidity(self) -> bool:
        return self.full_range_pool.has_liquidity()

    def max_tick_with_liquidity(self) -> int | None:
        return self.full_range_pool.max_tick_with_liquidity()

    def min_tick_with_liquidity(self) -> int | None:
        return self.full_range_pool.min_tick_with_liquidity()

    def is_path_dependent(self) -> bool:
        return True


__all__ = [
    "TwammPool",
    "TwammPoolState",
    "TwammPoolResources",
    "TwammSaleRateDelta",
    "MAX_INTERVAL_SECONDS",
]
