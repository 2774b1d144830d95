"""Checked integer arithmetic for reserve and product values.

Python integers never overflow, so the fixed widths the pool relies on
(64-bit reserves, 128-bit constant product) have to be enforced by hand.
SafeInt wraps an int and makes each step explicit:
- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- Values outside a bit width raise WidthOverflow on conversion

Usage pattern:
    from cpmm_engine.safe_int import S

    def new_native_reserve(k: int, new_token_reserve: int) -> int:
        # Wrap at entry
        sk, st = S(k), S(new_token_reserve)

        # Natural arithmetic - raises instead of going negative or dividing by 0
        reserve = sk // st

        # Unwrap at exit, validating the width
        return reserve.to_uint(64)

The checked_* methods return None instead of raising, for call sites that
translate the failure into a pool error of their own.
"""

from __future__ import annotations

from cpmm_engine.constants import RESERVE_BITS


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class WidthOverflow(SafeIntError):
    """Value does not fit the requested unsigned width."""

    pass


def uint_max(bits: int) -> int:
    """Largest value of an unsigned integer of the given width."""
    return 2**bits - 1


class SafeInt:
    """Integer with checked arithmetic operations.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int):
            self._value = int(value)
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

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

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer (floor) division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    # --- Comparison ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    # --- Conversion ---

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def fits(self, bits: int) -> bool:
        """Check if value fits an unsigned width without raising."""
        return 0 <= self._value <= uint_max(bits)

    def to_uint(self, bits: int) -> int:
        """Convert to int, validating unsigned width.

        Raises:
            WidthOverflow: If value is negative or exceeds 2^bits - 1
        """
        if self._value < 0:
            raise WidthOverflow(f"Negative value cannot be u{bits}: {self._value}")
        if self._value > uint_max(bits):
            raise WidthOverflow(f"Value exceeds u{bits} max: {self._value}")
        return self._value

    # --- Checked operations ---

    def checked_add(self, other: SafeInt | int, bits: int = RESERVE_BITS) -> SafeInt | None:
        """Add, returning None if the sum leaves the unsigned width."""
        result = SafeInt(self._value + _extract_value(other))
        if not result.fits(bits):
            return None
        return result

    def checked_sub(self, other: SafeInt | int) -> SafeInt | None:
        """Subtract, returning None on underflow instead of raising."""
        result = self._value - _extract_value(other)
        if result < 0:
            return None
        return SafeInt(result)

    def checked_div(self, other: SafeInt | int) -> SafeInt | None:
        """Floor-divide, returning None on zero instead of raising."""
        other_val = _extract_value(other)
        if other_val == 0:
            return None
        return SafeInt(self._value // other_val)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
