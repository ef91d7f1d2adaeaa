"""Tests for FullRangePool."""

import pytest

from amm_kernel.math.tick import MAX_SQRT_RATIO, MAX_TICK, MIN_SQRT_RATIO, MIN_TICK
from amm_kernel.quoting import (
    FailedComputeSwapStep,
    FullRangePool,
    FullRangePoolResources,
    FullRangePoolState,
    InvalidSqrtRatioLimit,
    InvalidToken,
    LiquidityInvalid,
    Pool,
    QuoteParams,
    SqrtRatioInvalid,
    TickSpacingInvalid,
    TokenAmount,
    TokenOrderInvalid,
)
from amm_kernel.safe_int import UINT128_MAX
from tests.helpers import OTHER_TOKEN, TOKEN0, TOKEN1, TWO_POW_128, make_full_range_pool, make_key


class TestFullRangePoolConstruction:
    """Tests for FullRangePool validation."""

    def test_valid(self, full_range_pool):
        """A valid pool exposes its key and state."""
        assert full_range_pool.get_key() == make_key()
        assert full_range_pool.get_state() == FullRangePoolState(TWO_POW_128, 1_000_000_000)
        assert isinstance(full_range_pool, Pool)

    def test_token_order(self):
        """token0 must sort before token1."""
        with pytest.raises(TokenOrderInvalid):
            FullRangePool(make_key(token0=TOKEN1, token1=TOKEN0), FullRangePoolState(TWO_POW_128, 1))
        with pytest.raises(TokenOrderInvalid):
            FullRangePool(make_key(token0=TOKEN0, token1=TOKEN0), FullRangePoolState(TWO_POW_128, 1))

    def test_tick_spacing(self):
        """Only the full range tick spacing is accepted."""
        with pytest.raises(TickSpacingInvalid):
            FullRangePool(make_key(tick_spacing=100), FullRangePoolState(TWO_POW_128, 1))

    @pytest.mark.parametrize("sqrt_ratio", [0, MIN_SQRT_RATIO - 1, MAX_SQRT_RATIO + 1])
    def test_sqrt_ratio_range(self, sqrt_ratio):
        """The sqrt ratio must lie within the valid range."""
        with pytest.raises(SqrtRatioInvalid):
            make_full_range_pool(sqrt_ratio=sqrt_ratio)

    def test_liquidity_range(self):
        """Liquidity must fit in uint128."""
        assert make_full_range_pool(liquidity=UINT128_MAX).get_state().liquidity == UINT128_MAX
        with pytest.raises(LiquidityInvalid):
            make_full_range_pool(liquidity=UINT128_MAX + 1)
        with pytest.raises(LiquidityInvalid):
            make_full_range_pool(liquidity=-1)

    def test_config_validation(self):
        """Fees and tick spacings outside their domains are rejected."""
        with pytest.raises(ValueError):
            make_key(fee=1 << 64)
        with pytest.raises(ValueError):
            make_key(tick_spacing=698606)


class TestFullRangePoolQuote:
    """Tests for FullRangePool.quote."""

    @pytest.mark.parametrize("token", [TOKEN0, TOKEN1])
    def test_symmetric_quote(self, full_range_pool, token):
        """1000 of either token buys 999 of the other at price 1."""
        quote = full_range_pool.quote(QuoteParams(token_amount=TokenAmount(1000, token)))
        assert quote.consumed_amount == 1000
        assert quote.calculated_amount == 999
        assert quote.fees_paid == 0
        assert quote.execution_resources == FullRangePoolResources(no_override_price_change=1)
        assert quote.is_price_increasing is (token == TOKEN1)

    def test_quote_does_not_mutate(self, full_range_pool):
        """Quoting returns the new state without touching the pool."""
        quote = full_range_pool.quote(QuoteParams(token_amount=TokenAmount(1000, TOKEN1)))
        assert quote.state_after.sqrt_ratio > TWO_POW_128
        assert quote.state_after.liquidity == 1_000_000_000
        assert full_range_pool.get_state().sqrt_ratio == TWO_POW_128

    def test_override_state(self, full_range_pool):
        """An override state is quoted instead of the pool's own."""
        first = full_range_pool.quote(QuoteParams(token_amount=TokenAmount(1000, TOKEN1)))
        second = full_range_pool.quote(
            QuoteParams(token_amount=TokenAmount(1000, TOKEN1), override_state=first.state_after)
        )
        assert second.state_after.sqrt_ratio > first.state_after.sqrt_ratio
        assert second.calculated_amount <= first.calculated_amount
        assert second.execution_resources.no_override_price_change == 0

    def test_explicit_limit(self, full_range_pool):
        """A swap stops at its sqrt ratio limit."""
        limit = TWO_POW_128 + TWO_POW_128 // 10**6
        quote = full_range_pool.quote(
            QuoteParams(token_amount=TokenAmount(10**12, TOKEN1), sqrt_ratio_limit=limit)
        )
        assert quote.state_after.sqrt_ratio == limit
        assert quote.consumed_amount < 10**12

    def test_invalid_token(self, full_range_pool):
        """Tokens outside the pool are rejected."""
        with pytest.raises(InvalidToken):
            full_range_pool.quote(QuoteParams(token_amount=TokenAmount(1000, OTHER_TOKEN)))

    def test_invalid_limit(self, full_range_pool):
        """Limits outside the valid range are rejected."""
        with pytest.raises(InvalidSqrtRatioLimit):
            full_range_pool.quote(
                QuoteParams(
                    token_amount=TokenAmount(1000, TOKEN1), sqrt_ratio_limit=MAX_SQRT_RATIO + 1
                )
            )

    def test_wrong_direction_limit(self, full_range_pool):
        """A limit behind the swap direction surfaces as a failed step."""
        with pytest.raises(FailedComputeSwapStep):
            full_range_pool.quote(
                QuoteParams(token_amount=TokenAmount(1000, TOKEN1), sqrt_ratio_limit=MIN_SQRT_RATIO)
            )

    def test_zero_amount(self, full_range_pool):
        """A zero amount quote changes nothing."""
        quote = full_range_pool.quote(QuoteParams(token_amount=TokenAmount(0, TOKEN0)))
        assert quote.consumed_amount == 0
        assert quote.calculated_amount == 0
        assert quote.state_after == full_range_pool.get_state()
        assert quote.execution_resources.no_override_price_change == 0


class TestFullRangePoolLiquidity:
    """Tests for liquidity queries."""

    def test_with_liquidity(self, full_range_pool):
        """Liquidity spans the full tick range."""
        assert full_range_pool.has_liquidity() is True
        assert full_range_pool.max_tick_with_liquidity() == MAX_TICK
        assert full_range_pool.min_tick_with_liquidity() == MIN_TICK
        assert full_range_pool.is_path_dependent() is False

    def test_without_liquidity(self):
        """An empty pool has no liquidity ticks."""
        pool = make_full_range_pool(liquidity=0)
        assert pool.has_liquidity() is False
        assert pool.max_tick_with_liquidity() is None
        assert pool.min_tick_with_liquidity() is None


class TestFullRangePoolResources:
    """Tests for resource arithmetic."""

    def test_add_sub(self):
        """Resources add and subtract field-wise."""
        a = FullRangePoolResources(2)
        b = FullRangePoolResources(1)
        assert a + b == FullRangePoolResources(3)
        assert a - b == FullRangePoolResources(1)
