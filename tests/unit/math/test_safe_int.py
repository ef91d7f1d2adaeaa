"""Tests for SafeInt checked uint256 arithmetic."""

import pytest

from amm_kernel.safe_int import (
    UINT128_MAX,
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint128Overflow,
    Uint256Overflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_negative_raises(self):
        """Negative values are not uint256."""
        with pytest.raises(Underflow):
            SafeInt(-1)

    def test_bounds(self):
        """Zero and 2^256-1 are the inclusive bounds."""
        assert SafeInt(0).value == 0
        assert SafeInt(UINT256_MAX).value == UINT256_MAX
        with pytest.raises(Uint256Overflow):
            SafeInt(UINT256_MAX + 1)

    def test_from_invalid_type_raises(self):
        """SafeInt rejects invalid types."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt

    def test_zero_constructor(self):
        """SafeInt.zero() creates zero value."""
        assert SafeInt.zero().value == 0

    def test_from_str(self):
        """SafeInt.from_str parses decimal text."""
        assert SafeInt.from_str("12345").value == 12345
        with pytest.raises(ValueError):
            SafeInt.from_str("not a number")

    def test_from_hex(self):
        """SafeInt.from_hex parses hex text with or without prefix."""
        assert SafeInt.from_hex("0xff").value == 255
        assert SafeInt.from_hex("FF").value == 255
        assert S(255).to_hex() == "0xff"


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        """Addition works with SafeInt and int on either side."""
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_add_overflow_raises(self):
        """Sums above 2^256-1 raise."""
        with pytest.raises(Uint256Overflow) as exc_info:
            S(UINT256_MAX) + 1
        assert "uint256 overflow" in str(exc_info.value)

    def test_sub(self):
        """Subtraction with non-negative result works."""
        assert (S(10) - S(3)).value == 7
        assert (10 - S(3)).value == 7
        assert (S(5) - S(5)).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction underflow raises Underflow."""
        with pytest.raises(Underflow) as exc_info:
            S(5) - S(10)
        assert "5 - 10" in str(exc_info.value)
        with pytest.raises(Underflow):
            5 - S(10)

    def test_mul(self):
        """Multiplication works correctly."""
        assert (S(6) * S(7)).value == 42
        assert (6 * S(7)).value == 42

    def test_mul_overflow_raises(self):
        """Products above 2^256-1 raise."""
        big = 10**50
        with pytest.raises(Uint256Overflow):
            S(big) * S(big)
        assert (S(1 << 128) * ((1 << 128) - 1)).value == (1 << 256) - (1 << 128)

    def test_floordiv(self):
        """Floor division works and rejects zero divisors."""
        assert (S(10) // S(3)).value == 3
        assert (10 // S(3)).value == 3
        with pytest.raises(DivisionByZero) as exc_info:
            S(10) // S(0)
        assert "Division by zero" in str(exc_info.value)
        with pytest.raises(DivisionByZero):
            10 // S(0)

    def test_mod(self):
        """Modulo works and rejects zero divisors."""
        assert (S(10) % S(3)).value == 1
        with pytest.raises(DivisionByZero):
            S(10) % 0

    def test_truediv_raises_typeerror(self):
        """True division raises TypeError to prevent float results."""
        with pytest.raises(TypeError) as exc_info:
            S(10) / S(3)
        assert "true division" in str(exc_info.value)
        with pytest.raises(TypeError):
            10 / S(3)

    def test_shifts(self):
        """Left shift is checked; right shift floors."""
        assert (S(1) << 255).value == 1 << 255
        with pytest.raises(Uint256Overflow):
            S(1) << 256
        assert (S(7) >> 1).value == 3


class TestSafeIntComparison:
    """Tests for SafeInt comparison operations."""

    def test_eq(self):
        """Equality against SafeInt and int."""
        assert S(5) == S(5)
        assert S(5) == 5
        assert S(5) != S(6)
        assert S(5) != 6

    def test_ordering(self):
        """Ordering against SafeInt and int."""
        assert S(5) < S(6)
        assert S(5) <= 5
        assert S(6) > 5
        assert S(6) >= S(6)
        assert not (S(6) < S(5))

    def test_builtin_min_max(self):
        """SafeInt works with builtin min and max."""
        assert max(S(3), 7) == 7
        assert min(S(3), 7) == S(3)


class TestSafeIntConversion:
    """Tests for SafeInt conversion operations."""

    def test_int_and_index(self):
        """int() and index conversion work."""
        assert int(S(42)) == 42
        assert [0, 1, 2, 3][S(2)] == 2

    def test_bool(self):
        """bool() is True only for non-zero."""
        assert bool(S(1)) is True
        assert bool(S(0)) is False

    def test_str_and_repr(self):
        """str() and repr() conversions."""
        assert str(S(42)) == "42"
        assert repr(S(42)) == "SafeInt(42)"

    def test_hash(self):
        """SafeInt hashes like its value."""
        assert {S(42): "value"}[S(42)] == "value"

    def test_to_uint128(self):
        """Narrowing to uint128 is checked."""
        assert S(UINT128_MAX).to_uint128() == UINT128_MAX
        assert S(UINT128_MAX).is_uint128() is True
        assert S(UINT128_MAX + 1).is_uint128() is False
        with pytest.raises(Uint128Overflow):
            S(UINT128_MAX + 1).to_uint128()


class TestSafeIntNamedOps:
    """Tests for SafeInt named operations."""

    def test_ceiling_div(self):
        """Ceiling division rounds up."""
        assert S(10).ceiling_div(3).value == 4
        assert S(9).ceiling_div(3).value == 3
        assert S(0).ceiling_div(5).value == 0
        assert S(UINT256_MAX).ceiling_div(UINT256_MAX).value == 1
        with pytest.raises(DivisionByZero):
            S(10).ceiling_div(0)

    def test_integer_sqrt(self):
        """integer_sqrt is the floor of the square root."""
        assert S(16).integer_sqrt().value == 4
        assert S(17).integer_sqrt().value == 4
        assert S(UINT256_MAX).integer_sqrt().value == UINT128_MAX

    def test_abs_diff(self):
        """abs_diff is symmetric."""
        assert S(3).abs_diff(10).value == 7
        assert S(10).abs_diff(S(3)).value == 7

    def test_min_max(self):
        """min() and max() return SafeInt."""
        assert S(10).min(5).value == 5
        assert S(5).max(S(10)).value == 10

    def test_saturating_sub(self):
        """saturating_sub clamps to zero."""
        assert S(10).saturating_sub(3).value == 7
        assert S(10).saturating_sub(15).value == 0

    def test_checked_ops(self):
        """checked_sub and checked_div return None instead of raising."""
        assert S(10).checked_sub(3) == 7
        assert S(5).checked_sub(10) is None
        assert S(10).checked_div(3) == 3
        assert S(10).checked_div(0) is None


class TestSafeIntExceptionHierarchy:
    """Tests for exception class hierarchy."""

    @pytest.mark.parametrize("error", [DivisionByZero, Underflow, Uint256Overflow, Uint128Overflow])
    def test_errors_are_safeint_errors(self, error):
        """Every SafeInt error is a SafeIntError and an ArithmeticError."""
        assert issubclass(error, SafeIntError)
        assert issubclass(error, ArithmeticError)

    def test_can_catch_all_with_safeint_error(self):
        """All SafeInt exceptions can be caught with SafeIntError."""
        caught = []
        for operation in (
            lambda: S(5) - S(10),
            lambda: S(10) // S(0),
            lambda: S(UINT256_MAX) * 2,
            lambda: S(UINT128_MAX + 1).to_uint128(),
        ):
            try:
                operation()
            except SafeIntError as err:
                caught.append(type(err))
        assert caught == [Underflow, DivisionByZero, Uint256Overflow, Uint128Overflow]
