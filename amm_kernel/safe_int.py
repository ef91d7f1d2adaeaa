"""Checked uint256 wrapper for wide fixed-point arithmetic.

This module provides SafeInt, a lightweight wrapper that keeps every
intermediate value inside the uint256 range:
- Division by zero raises DivisionByZero
- Subtraction underflow raises Underflow
- Results above 2^256 - 1 raise Uint256Overflow
- Narrowing to uint128 raises Uint128Overflow

Usage pattern:
    from amm_kernel.safe_int import S

    def scale(ratio: int, mask: int) -> int:
        # Wrap at entry
        r = S(ratio)

        # Natural arithmetic - automatically checked
        r = (r * mask) >> 128

        # Unwrap at exit
        return r.value
"""

from __future__ import annotations

from math import isqrt

UINT128_MAX = 2**128 - 1
UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Result would be negative."""

    pass


class Uint256Overflow(SafeIntError):
    """Value exceeds uint256 maximum."""

    pass


class Uint128Overflow(SafeIntError):
    """Value does not fit the uint128 it is narrowed to."""

    pass


class SafeInt:
    """Unsigned 256-bit integer with checked arithmetic.

    Wraps a Python int and provides arithmetic operators that raise
    descriptive errors instead of wrapping or producing invalid results.
    No call site relies on modular wrap-around, so any value leaving
    [0, 2^256) is a bug surfaced immediately.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Args:
            value: Integer value to wrap, or SafeInt to copy

        Raises:
            TypeError: If value is not an int or SafeInt
            Underflow: If value is negative
            Uint256Overflow: If value exceeds 2^256-1
        """
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        if value < 0:
            raise Underflow(f"Negative value cannot be uint256: {value}")
        if value > UINT256_MAX:
            raise Uint256Overflow(f"Value exceeds uint256 max: {value}")
        self._value = value

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        """Add two values.

        Raises:
            Uint256Overflow: If the sum exceeds 2^256-1
        """
        return _checked(self._value + _extract_value(other), "+", self, other)

    def __radd__(self, other: int) -> SafeInt:
        return _checked(other + self._value, "+", other, self)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            Uint256Overflow: If the product exceeds 2^256-1
        """
        return _checked(self._value * _extract_value(other), "*", self, other)

    def __rmul__(self, other: int) -> SafeInt:
        return _checked(other * self._value, "*", other, self)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeInt(other // self._value)

    def __truediv__(self, other: object) -> SafeInt:
        raise TypeError("SafeInt does not support true division; use // instead")

    def __rtruediv__(self, other: object) -> SafeInt:
        raise TypeError("SafeInt does not support true division; use // instead")

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        """Modulo operation.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Modulo by zero: {self._value} % 0")
        return SafeInt(self._value % other_val)

    def __lshift__(self, bits: int) -> SafeInt:
        """Shift left.

        Raises:
            Uint256Overflow: If bits are shifted out of the 256-bit width
        """
        return _checked(self._value << bits, "<<", self, bits)

    def __rshift__(self, bits: int) -> SafeInt:
        """Shift right (floor)."""
        return SafeInt(self._value >> bits)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Ceiling division (rounds up).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt(-(-self._value // other_val))

    def integer_sqrt(self) -> SafeInt:
        """Floor of the exact square root."""
        return SafeInt(isqrt(self._value))

    def abs_diff(self, other: SafeInt | int) -> SafeInt:
        """Absolute difference |self - other|."""
        return SafeInt(abs(self._value - _extract_value(other)))

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))

    def max(self, other: SafeInt | int) -> SafeInt:
        """Return maximum of self and other."""
        return SafeInt(max(self._value, _extract_value(other)))

    def saturating_sub(self, other: SafeInt | int) -> SafeInt:
        """Subtract, clamping result to zero instead of raising."""
        return SafeInt(max(0, self._value - _extract_value(other)))

    def checked_sub(self, other: SafeInt | int) -> SafeInt | None:
        """Subtract, returning None on underflow instead of raising."""
        result = self._value - _extract_value(other)
        if result < 0:
            return None
        return SafeInt(result)

    def checked_div(self, other: SafeInt | int) -> SafeInt | None:
        """Divide, returning None on zero instead of raising."""
        other_val = _extract_value(other)
        if other_val == 0:
            return None
        return SafeInt(self._value // other_val)

    def to_uint128(self) -> int:
        """Narrow to uint128.

        Raises:
            Uint128Overflow: If value exceeds 2^128-1
        """
        if self._value > UINT128_MAX:
            raise Uint128Overflow(f"Value exceeds uint128 max: {self._value}")
        return self._value

    def is_uint128(self) -> bool:
        """Check if value fits in uint128 without raising."""
        return self._value <= UINT128_MAX

    def to_hex(self) -> str:
        """Lowercase 0x-prefixed hexadecimal text."""
        return hex(self._value)

    @classmethod
    def zero(cls) -> SafeInt:
        """Create a SafeInt with value 0."""
        return cls(0)

    @classmethod
    def from_str(cls, s: str) -> SafeInt:
        """Parse SafeInt from decimal text.

        Raises:
            ValueError: If string is not a valid integer
        """
        return cls(int(s, 10))

    @classmethod
    def from_hex(cls, s: str) -> SafeInt:
        """Parse SafeInt from hexadecimal text, with or without 0x prefix.

        Raises:
            ValueError: If string is not valid hexadecimal
        """
        return cls(int(s, 16))


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


def _checked(result: int, op: str, lhs: SafeInt | int, rhs: SafeInt | int) -> SafeInt:
    if result > UINT256_MAX:
        raise Uint256Overflow(
            f"uint256 overflow: {_extract_value(lhs)} {op} {_extract_value(rhs)}"
        )
    return SafeInt(result)


# Convenience alias for concise code
S = SafeInt
