"""Width-checked unsigned integers for token amount arithmetic.

This module provides U64, U128 and U256, lightweight wrappers that make
arithmetic on token amounts safe by default:
- Division by zero raises DivisionByZero
- Subtraction underflow raises Underflow
- Results wider than the type raise Overflow

Python integers never wrap, so the width checks are what keep intermediate
results inside the ranges the pool formulas were designed for.

Usage pattern:
    from tokenswap.safe_int import U128, U256, checked

    @checked
    def calculate(a: int, b: int, c: int) -> int:
        # Wrap at entry
        product = U256(a) * b       # Raises Overflow past 2**256 - 1
        result = product // c       # Raises DivisionByZero if c == 0

        # Narrow and unwrap at exit
        return int(U128(result))    # Raises Overflow past 2**128 - 1

    calculate(1, 2, 0)  # -> None
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import ClassVar, ParamSpec, TypeVar

import structlog

logger = structlog.get_logger()

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
U256_MAX = 2**256 - 1

P = ParamSpec("P")
R = TypeVar("R")


class SafeIntError(ArithmeticError):
    """Base class for checked arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Result would be negative."""

    pass


class Overflow(SafeIntError):
    """Result does not fit the integer width."""

    pass


class ZeroResult(SafeIntError):
    """A result that must be non-zero truncated to zero."""

    pass


class SafeInt:
    """Unsigned integer of a fixed bit width with checked arithmetic.

    Not used directly; U64, U128 and U256 fix the width. Arithmetic returns
    the type of the left operand, so ``U256(a) * b`` is checked against 256
    bits whatever ``b`` is.

    Attributes:
        value: The underlying integer value (read-only)
    """

    MAX: ClassVar[int]

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create from an integer or another SafeInt of any width.

        Raises:
            TypeError: If value is not an int or SafeInt
            Underflow: If value is negative
            Overflow: If value exceeds the width of this type
        """
        if isinstance(value, SafeInt):
            raw = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            raw = value
        else:
            raise TypeError(f"{type(self).__name__} requires int, got {type(value).__name__}")
        if raw < 0:
            raise Underflow(f"Negative value cannot be {type(self).__name__}: {raw}")
        if raw > self.MAX:
            raise Overflow(f"Value exceeds {type(self).__name__} max: {raw}")
        self._value = raw

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    def _new(self, raw: int, op: str, other: int) -> SafeInt:
        if raw < 0:
            raise Underflow(f"Underflow: {self._value} {op} {other} = {raw}")
        if raw > self.MAX:
            raise Overflow(f"{type(self).__name__} overflow: {self._value} {op} {other}")
        return type(self)(raw)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        other_val = _extract_value(other)
        return self._new(self._value + other_val, "+", other_val)

    def __radd__(self, other: int) -> SafeInt:
        return self.__add__(other)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        return self._new(self._value - other_val, "-", other_val)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        other_val = _extract_value(other)
        return self._new(self._value * other_val, "*", other_val)

    def __rmul__(self, other: int) -> SafeInt:
        return self.__mul__(other)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return type(self)(self._value // other_val)

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        """Remainder.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Modulo by zero: {self._value} % 0")
        return type(self)(self._value % other_val)

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

    def ceil_div(self, other: SafeInt | int) -> tuple[SafeInt, SafeInt]:
        """Ceiling division that also tightens the divisor.

        Returns ``(quotient, divisor)`` where quotient is ``self / other``
        rounded up and divisor is the smallest value that, used instead of
        ``other``, still produces that quotient. Swaps use the tightened
        divisor as the amount of source token actually consumed.

        A dividend smaller than the divisor yields a quotient of 1 when it
        is at least half the divisor, otherwise 0; the divisor is then 0.

        Raises:
            DivisionByZero: If other is zero
            Overflow: If doubling the dividend overflows
        """
        rhs = _extract_value(other)
        if rhs == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        cls = type(self)
        quotient = self._value // rhs
        if quotient == 0:
            if self * 2 >= rhs:
                return cls(1), cls(0)
            return cls(0), cls(0)

        if self._value % rhs > 0:
            quotient += 1
            rhs = self._value // quotient
            if self._value % quotient > 0:
                rhs += 1
        return cls(quotient), cls(rhs)

    def checked_mul(self, other: SafeInt | int) -> SafeInt | None:
        """Multiply, returning None on overflow instead of raising."""
        result = self._value * _extract_value(other)
        if result > self.MAX:
            return None
        return type(self)(result)

    @classmethod
    def fits(cls, value: int) -> bool:
        """Check if value fits this width without raising."""
        return 0 <= value <= cls.MAX


class U64(SafeInt):
    """64-bit unsigned integer (configuration values, initial reserves)."""

    __slots__ = ()
    MAX = U64_MAX


class U128(SafeInt):
    """128-bit unsigned integer (token amounts)."""

    __slots__ = ()
    MAX = U128_MAX


class U256(SafeInt):
    """256-bit unsigned integer (products of two amounts)."""

    __slots__ = ()
    MAX = U256_MAX


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


def nonzero(value: SafeInt) -> SafeInt:
    """Return value unchanged, raising ZeroResult if it is zero."""
    if not value:
        raise ZeroResult("Result truncated to zero")
    return value


def checked(func: Callable[P, R]) -> Callable[P, R | None]:
    """Turn a SafeIntError raised by ``func`` into a ``None`` result.

    Public pricing operations report "cannot compute" as an absent result;
    internally they are written with the raising operators above.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R | None:
        try:
            return func(*args, **kwargs)
        except SafeIntError as e:
            logger.debug(
                "arithmetic_check_failed",
                operation=func.__qualname__,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

    return wrapper
