"""Oracle pool: a fee-less native token full range pool that snapshots prices."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import NATIVE_TOKEN_ADDRESS
from .full_range_pool import FullRangePool, FullRangePoolResources, FullRangePoolState
from .types import Config, NodeKey, Quote, QuoteParams


@dataclass(frozen=True)
class OraclePoolState:
    """Full range state plus the time of the last price snapshot."""

    full_range_pool_state: FullRangePoolState
    last_snapshot_time: int


@dataclass(frozen=True)
class OraclePoolResources:
    """Full range resources plus the number of snapshots written."""

    full_range_pool_resources: FullRangePoolResources = FullRangePoolResources()
    snapshots_written: int = 0

    def __add__(self, other: OraclePoolResources) -> OraclePoolResources:
        return OraclePoolResources(
            self.full_range_pool_resources + other.full_range_pool_resources,
            self.snapshots_written + other.snapshots_written,
        )

    def __sub__(self, other: OraclePoolResources) -> OraclePoolResources:
        return OraclePoolResources(
            self.full_range_pool_resources - other.full_range_pool_resources,
            self.snapshots_written - other.snapshots_written,
        )


class OraclePool:
    """Full range pool between the native token and token1, with no fee.

    The first swap in a block writes a price snapshot; quotes take the block
    timestamp as their meta and report whether a snapshot would be written.
    """

    def __init__(
        self,
        token1: int,
        extension: int,
        sqrt_ratio: int,
        active_liquidity: int,
        last_snapshot_time: int,
    ):
        """Initialize an oracle pool.

        Args:
            token1: The non-native token
            extension: Id of the oracle extension
            sqrt_ratio: Current Q128 sqrt ratio
            active_liquidity: Liquidity of the full range position
            last_snapshot_time: Timestamp of the last snapshot

        Raises:
            PoolConstructionError: If the underlying full range pool is invalid
        """
        self.full_range_pool = FullRangePool(
            NodeKey(
                token0=NATIVE_TOKEN_ADDRESS,
                token1=token1,
                config=Config(fee=0, tick_spacing=0, extension=extension),
            ),
            FullRangePoolState(sqrt_ratio=sqrt_ratio, liquidity=active_liquidity),
        )
        self.last_snapshot_time = last_snapshot_time

    def __repr__(self) -> str:
        return (
            f"OraclePool(full_range_pool={self.full_range_pool!r},"
            f" last_snapshot_time={self.last_snapshot_time})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OraclePool):
            return NotImplemented
        return (
            self.full_range_pool == other.full_range_pool
            and self.last_snapshot_time == other.last_snapshot_time
        )

    def get_key(self) -> NodeKey:
        return self.full_range_pool.get_key()

    def get_state(self) -> OraclePoolState:
        return OraclePoolState(
            full_range_pool_state=self.full_range_pool.get_state(),
            last_snapshot_time=self.last_snapshot_time,
        )

    def quote(
        self, params: QuoteParams[OraclePoolState, int]
    ) -> Quote[OraclePoolResources, OraclePoolState]:
        """Quote a swap at the block timestamp given as meta.

        Raises:
            QuoteError: If the underlying full range quote fails
        """
        override = params.override_state
        pool_time = self.last_snapshot_time if override is None else override.last_snapshot_time
        block_time = pool_time if params.meta is None else params.meta

        result = self.full_range_pool.quote(
            QuoteParams(
                token_amount=params.token_amount,
                sqrt_ratio_limit=params.sqrt_ratio_limit,
                override_state=None if override is None else override.full_range_pool_state,
            )
        )

        return Quote(
            calculated_amount=result.calculated_amount,
            consumed_amount=result.consumed_amount,
            execution_resources=OraclePoolResources(
                full_range_pool_resources=result.execution_resources,
                snapshots_written=1 if pool_time != block_time else 0,
            ),
            fees_paid=result.fees_paid,
            is_price_increasing=result.is_price_increasing,
            state_after=OraclePoolState(
                full_range_pool_state=result.state_after,
                last_snapshot_time=block_time,
            ),
        )

    def has_liquidity(self) -> bool:
        return self.full_range_pool.has_liquidity()

    def max_tick_with_liquidity(self) -> int | None:
        return self.full_range_pool.max_tick_with_liquidity()

    def min_tick_with_liquidity(self) -> int | None:
        return self.full_range_pool.min_tick_with_liquidity()

    def is_path_dependent(self) -> bool:
        return False


__all__ = ["OraclePool", "OraclePoolState", "OraclePoolResources"]
