"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from amm_kernel.math import to_sqrt_ratio
from amm_kernel.quoting import FullRangePool, OraclePool
from tests.helpers import TOKEN1, make_full_range_pool


@pytest.fixture
def full_range_pool() -> FullRangePool:
    """Fee-less full range pool at price 1 with liquidity 1e9."""
    return make_full_range_pool()


@pytest.fixture
def oracle_pool() -> OraclePool:
    """Oracle pool at price 1 with liquidity 1e9 and last snapshot at time 1."""
    return OraclePool(
        token1=TOKEN1,
        extension=0,
        sqrt_ratio=to_sqrt_ratio(0),
        active_liquidity=1_000_000_000,
        last_snapshot_time=1,
    )


@pytest.fixture
def write_snapshot(tmp_path: Path):
    """Write a snapshot dict to a JSON file and return its path."""

    def _write(data: dict) -> Path:
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(data))
        return path

    return _write
