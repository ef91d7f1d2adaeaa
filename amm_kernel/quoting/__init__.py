"""Pool quoting on top of the kernel math.

This package provides:
- types: pool keys, quote parameters and results, the Pool protocol
- full_range_pool: a single position spanning every tick
- oracle_pool: fee-less native token pool that writes price snapshots
- twamm_pool: full range pool executing virtual orders before each quote
- parsing: pydantic models for JSON pool snapshots
"""

from amm_kernel.quoting.constants import NATIVE_TOKEN_ADDRESS
from amm_kernel.quoting.errors import (
    ExecutionTimeExceedsBlockTime,
    FailedComputeSwapStep,
    InvalidSqrtRatioLimit,
    InvalidToken,
    LiquidityInvalid,
    PoolConstructionError,
    PoolError,
    QuoteError,
    SaleRateDeltasInvalid,
    SqrtRatioInvalid,
    TickSpacingInvalid,
    TokenOrderInvalid,
    VirtualOrderIntervalTooLong,
)
from amm_kernel.quoting.full_range_pool import (
    FullRangePool,
    FullRangePoolResources,
    FullRangePoolState,
)
from amm_kernel.quoting.oracle_pool import OraclePool, OraclePoolResources, OraclePoolState
from amm_kernel.quoting.parsing import parse_pool, parse_pool_json
from amm_kernel.quoting.twamm_pool import (
    TwammPool,
    TwammPoolResources,
    TwammPoolState,
    TwammSaleRateDelta,
)
from amm_kernel.quoting.types import Config, NodeKey, Pool, Quote, QuoteParams, TokenAmount

__all__ = [
    # Types
    "Config",
    "NodeKey",
    "TokenAmount",
    "QuoteParams",
    "Quote",
    "Pool",
    "NATIVE_TOKEN_ADDRESS",
    # Errors
    "PoolError",
    "PoolConstructionError",
    "TokenOrderInvalid",
    "TickSpacingInvalid",
    "SqrtRatioInvalid",
    "LiquidityInvalid",
    "SaleRateDeltasInvalid",
    "QuoteError",
    "InvalidToken",
    "InvalidSqrtRatioLimit",
    "FailedComputeSwapStep",
    "ExecutionTimeExceedsBlockTime",
    "VirtualOrderIntervalTooLong",
    # Pools
    "FullRangePool",
    "FullRangePoolState",
    "FullRangePoolResources",
    "OraclePool",
    "OraclePoolState",
    "OraclePoolResources",
    "TwammPool",
    "TwammPoolState",
    "TwammPoolResources",
    "TwammSaleRateDelta",
    # Parsing
    "parse_pool",
    "parse_pool_json",
]
