"""Pydantic models for JSON pool snapshots and their conversion to pools.

Integers may be given as JSON numbers, decimal strings or 0x-prefixed hex
strings, so that values above 2^53 survive JSON tooling unchanged.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

import structlog
from pydantic import BaseModel, BeforeValidator, Discriminator, Field, Tag, TypeAdapter

from .full_range_pool import FullRangePool, FullRangePoolState
from .oracle_pool import OraclePool
from .twamm_pool import TwammPool, TwammSaleRateDelta
from .types import Config, NodeKey

logger = structlog.get_logger()


def parse_int(value: Any) -> int:
    """Parse an integer given as int, decimal string or 0x hex string.

    Raises:
        ValueError: If the value is not an integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Integer expected, got {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Integer must be string or int, got {type(value).__name__}")

    text = value.strip()
    negative = text.startswith("-")
    digits = text[1:] if negative else text
    try:
        if digits[:2].lower() == "0x":
            parsed = int(digits[2:], 16)
        else:
            parsed = int(digits, 10)
    except ValueError as err:
        raise ValueError(f"Integer must be a decimal or 0x hex string: '{value}'") from err

    return -parsed if negative else parsed


def _validate_unsigned(value: Any, bits: int) -> int:
    int_value = parse_int(value)
    if int_value < 0:
        raise ValueError(f"Uint{bits} cannot be negative: {value}")
    if int_value >= 1 << bits:
        raise ValueError(f"Uint{bits} overflow: {value} > 2^{bits}-1")
    return int_value


def validate_uint256(value: Any) -> int:
    """Validate a uint256 given as int, decimal string or 0x hex string.

    Raises:
        ValueError: If the value is negative or above 2^256-1
    """
    return _validate_unsigned(value, 256)


def validate_uint128(value: Any) -> int:
    """Validate a uint128 (liquidity, sale rates)."""
    return _validate_unsigned(value, 128)


def validate_uint64(value: Any) -> int:
    """Validate a uint64 (fees as a fraction of 2^64)."""
    return _validate_unsigned(value, 64)


def validate_uint32(value: Any) -> int:
    return _validate_unsigned(value, 32)


# Unsigned integers of 256, 128 and 64 bits
Uint = Annotated[int, BeforeValidator(validate_uint256)]
Uint128 = Annotated[int, BeforeValidator(validate_uint128)]
Uint64 = Annotated[int, BeforeValidator(validate_uint64)]

# Signed integer (sale rate deltas, tick values)
Int = Annotated[int, BeforeValidator(parse_int)]


class PoolKeySnapshot(BaseModel):
    """Token pair and configuration of a pool."""

    token0: Uint
    token1: Uint
    fee: Uint64 = Field(default=0, description="Fee as a fraction of 2^64.")
    tick_spacing: Uint = Field(default=0, alias="tickSpacing")
    extension: Uint = 0

    model_config = {"populate_by_name": True}

    def to_node_key(self) -> NodeKey:
        return NodeKey(
            token0=self.token0,
            token1=self.token1,
            config=Config(fee=self.fee, tick_spacing=self.tick_spacing, extension=self.extension),
        )


class FullRangePoolSnapshot(BaseModel):
    """Snapshot of a full range pool."""

    kind: Literal["fullRange"] = "fullRange"
    key: PoolKeySnapshot
    sqrt_ratio: Uint = Field(alias="sqrtRatio")
    liquidity: Uint128

    model_config = {"populate_by_name": True}

    def to_pool(self) -> FullRangePool:
        return FullRangePool(
            self.key.to_node_key(),
            FullRangePoolState(sqrt_ratio=self.sqrt_ratio, liquidity=self.liquidity),
        )


class OraclePoolSnapshot(BaseModel):
    """Snapshot of an oracle pool; token0 is always the native token."""

    kind: Literal["oracle"] = "oracle"
    token1: Uint
    extension: Uint = 0
    sqrt_ratio: Uint = Field(alias="sqrtRatio")
    liquidity: Uint128
    last_snapshot_time: Uint = Field(alias="lastSnapshotTime")

    model_config = {"populate_by_name": True}

    def to_pool(self) -> OraclePool:
        return OraclePool(
            token1=self.token1,
            extension=self.extension,
            sqrt_ratio=self.sqrt_ratio,
            active_liquidity=self.liquidity,
            last_snapshot_time=self.last_snapshot_time,
        )


class SaleRateDeltaSnapshot(BaseModel):
    """Sale rate change at a point in time."""

    time: Uint
    sale_rate_delta0: Int = Field(alias="saleRateDelta0")
    sale_rate_delta1: Int = Field(alias="saleRateDelta1")

    model_config = {"populate_by_name": True}


class TwammPoolSnapshot(BaseModel):
    """Snapshot of a TWAMM pool."""

    kind: Literal["twamm"] = "twamm"
    key: PoolKeySnapshot
    sqrt_ratio: Uint = Field(alias="sqrtRatio")
    liquidity: Uint128
    last_execution_time: Uint = Field(alias="lastExecutionTime")
    token0_sale_rate: Uint128 = Field(alias="token0SaleRate")
    token1_sale_rate: Uint128 = Field(alias="token1SaleRate")
    sale_rate_deltas: list[SaleRateDeltaSnapshot] = Field(
        default_factory=list, alias="saleRateDeltas"
    )

    model_config = {"populate_by_name": True}

    def to_pool(self) -> TwammPool:
        return TwammPool(
            key=self.key.to_node_key(),
            sqrt_ratio=self.sqrt_ratio,
            liquidity=self.liquidity,
            last_execution_time=self.last_execution_time,
            token0_sale_rate=self.token0_sale_rate,
            token1_sale_rate=self.token1_sale_rate,
            sale_rate_deltas=[
                TwammSaleRateDelta(
                    time=d.time,
                    sale_rate_delta0=d.sale_rate_delta0,
                    sale_rate_delta1=d.sale_rate_delta1,
                )
                for d in self.sale_rate_deltas
            ],
        )


def _get_snapshot_kind(v: dict[str, Any] | BaseModel) -> str:
    """Discriminator function for the PoolSnapshot union type."""
    if isinstance(v, dict):
        return str(v.get("kind", "fullRange"))
    return str(getattr(v, "kind", "fullRange"))


# Discriminated union: the 'kind' field selects the pool type
PoolSnapshot = Annotated[
    Annotated[FullRangePoolSnapshot, Tag("fullRange")]
    | Annotated[OraclePoolSnapshot, Tag("oracle")]
    | Annotated[TwammPoolSnapshot, Tag("twamm")],
    Discriminator(_get_snapshot_kind),
]

_snapshot_adapter: TypeAdapter[Any] = TypeAdapter(PoolSnapshot)


def parse_pool(data: dict[str, Any]) -> FullRangePool | OraclePool | TwammPool:
    """Build a pool from a snapshot dict.

    Raises:
        pydantic.ValidationError: If the snapshot is malformed
        PoolConstructionError: If the values do not form a valid pool
    """
    snapshot = _snapshot_adapter.validate_python(data)
    pool = snapshot.to_pool()
    logger.debug("pool_parsed", kind=snapshot.kind, key=repr(pool.get_key()))
    return pool


def parse_pool_json(raw: str | bytes) -> FullRangePool | OraclePool | TwammPool:
    """Build a pool from a JSON snapshot document."""
    snapshot = _snapshot_adapter.validate_json(raw)
    return snapshot.to_pool()


__all__ = [
    "PoolKeySnapshot",
    "FullRangePoolSnapshot",
    "OraclePoolSnapshot",
    "SaleRateDeltaSnapshot",
    "TwammPoolSnapshot",
    "PoolSnapshot",
    "parse_int",
    "validate_uint256",
    "validate_uint128",
    "validate_uint64",
    "validate_uint32",
    "parse_pool",
    "parse_pool_json",
]
