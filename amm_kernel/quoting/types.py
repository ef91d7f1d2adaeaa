"""Shared quoting types and the pool protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from amm_kernel.math.fee import TWO_POW_64
from amm_kernel.math.tick import MAX_TICK_SPACING

StateT = TypeVar("StateT")
MetaT = TypeVar("MetaT")
ResourcesT = TypeVar("ResourcesT")


@dataclass(frozen=True)
class Config:
    """Pool configuration.

    Attributes:
        fee: Swap fee as a fraction of 2^64
        tick_spacing: Tick spacing; 0 means full range
        extension: Id of the extension contract attached to the pool
    """

    fee: int
    tick_spacing: int
    extension: int

    def __post_init__(self) -> None:
        if not 0 <= self.fee < TWO_POW_64:
            raise ValueError(f"Fee must be in [0, 2^64), got {self.fee}")
        if not 0 <= self.tick_spacing <= MAX_TICK_SPACING:
            raise ValueError(
                f"Tick spacing must be in [0, {MAX_TICK_SPACING}], got {self.tick_spacing}"
            )


@dataclass(frozen=True)
class NodeKey:
    """Identifies a pool: its token pair and configuration."""

    token0: int
    token1: int
    config: Config


@dataclass(frozen=True)
class TokenAmount:
    """A signed amount of a token: positive is exact input, negative exact output."""

    amount: int
    token: int


@dataclass(frozen=True)
class QuoteParams(Generic[StateT, MetaT]):
    """Input of Pool.quote.

    Attributes:
        token_amount: Specified token and signed amount
        sqrt_ratio_limit: Price the swap may not move past (None for the
            range bound in the swap direction)
        override_state: Quote from this state instead of the pool's own
        meta: Pool-specific context, e.g. the block timestamp
    """

    token_amount: TokenAmount
    sqrt_ratio_limit: int | None = None
    override_state: StateT | None = None
    meta: MetaT | None = None


@dataclass(frozen=True)
class Quote(Generic[ResourcesT, StateT]):
    """Result of Pool.quote.

    Attributes:
        calculated_amount: Amount of the other token paid out or required
        consumed_amount: Signed amount of the specified token used up
        execution_resources: Pool-specific work counters
        fees_paid: Fee charged, in the input token
        is_price_increasing: Direction the swap moves the price
        state_after: Pool state once the swap is applied
    """

    calculated_amount: int
    consumed_amount: int
    execution_resources: ResourcesT
    fees_paid: int
    is_price_increasing: bool
    state_after: StateT


@runtime_checkable
class Pool(Protocol):
    """Protocol for pools built on the kernel.

    Every pool variant exposes the same operation set; quoting never mutates
    the pool, it returns the state the swap would leave behind.
    """

    def get_key(self) -> NodeKey:
        """Token pair and configuration of the pool."""
        ...

    def get_state(self) -> Any:
        """Current pool state."""
        ...

    def quote(self, params: QuoteParams[Any, Any]) -> Quote[Any, Any]:
        """Quote a swap.

        Raises:
            QuoteError: If the swap cannot be quoted
        """
        ...

    def has_liquidity(self) -> bool:
        """Whether any liquidity is active."""
        ...

    def max_tick_with_liquidity(self) -> int | None:
        """Highest tick at which the pool holds liquidity."""
        ...

    def min_tick_with_liquidity(self) -> int | None:
        """Lowest tick at which the pool holds liquidity."""
        ...

    def is_path_dependent(self) -> bool:
        """Whether quotes depend on more than the current state (e.g. time)."""
        ...


__all__ = ["Config", "NodeKey", "TokenAmount", "QuoteParams", "Quote", "Pool"]
