"""Fixed-point numbers with 12 decimals of precision.

All values are stored as non-negative integers scaled by 10^12 and bounded
by 256 bits. Arithmetic comes in two flavours:

- operators (``+ - * /``) and ``sqrt``/``floor``/``ceiling``/``to_imprecise``
  raise a SafeIntError subclass when the result cannot be represented;
- ``new`` and the ``checked_*`` methods return None instead.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from tokenswap.math.newton import converge
from tokenswap.safe_int import U128, U128_MAX, U256, DivisionByZero, Overflow, checked

__all__ = [
    "PreciseNumber",
    "ONE",
    "ROUNDING_CORRECTION",
    "PRECISION",
    "MAX_APPROXIMATION_ITERATIONS",
]

ONE = 10**12

# Added before truncating divisions so that results round half-up
ROUNDING_CORRECTION = ONE // 2

# Default tolerance (in scaled units) for almost_eq
PRECISION = 100

MAX_APPROXIMATION_ITERATIONS = 100


def _isqrt_step(radicand: int) -> Callable[[int], int]:
    def step(x: int) -> int:
        # Never increases, so the first repeated value is floor(sqrt(radicand))
        return min(x, (x + radicand // x) // 2)

    return step


class PreciseNumber:
    """Non-negative fixed-point number stored as int.

    Example: 1.5 is stored as 1_500_000_000_000
    """

    ONE: ClassVar[int] = ONE

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    value: int

    def __init__(self, value: int | U256) -> None:
        """Create from a raw scaled value.

        Raises:
            Overflow: If value does not fit 256 bits
            Underflow: If value is negative
        """
        self.value = int(U256(value))

    @classmethod
    def from_int(cls, value: int) -> PreciseNumber:
        """Create from a 128-bit integer (will be scaled by 10^12).

        Raises:
            Overflow: If value does not fit 128 bits
        """
        return cls(U256(U128(value)) * ONE)

    @classmethod
    @checked
    def new(cls, value: int) -> PreciseNumber:
        """Create from an integer, or None if it does not fit 128 bits."""
        return cls.from_int(value)

    @classmethod
    def zero(cls) -> PreciseNumber:
        return cls(0)

    @classmethod
    def maximum_sqrt_base(cls) -> PreciseNumber:
        """Largest value accepted by sqrt."""
        return cls.from_int(U128_MAX)

    # --- Raising arithmetic ---

    def __add__(self, other: PreciseNumber) -> PreciseNumber:
        return PreciseNumber(U256(self.value) + other.value)

    def __sub__(self, other: PreciseNumber) -> PreciseNumber:
        """Subtract; negative results raise Underflow."""
        return PreciseNumber(U256(self.value) - other.value)

    def __mul__(self, other: PreciseNumber) -> PreciseNumber:
        """Multiply, rounding half-up at the scale.

        When the scaled product does not fit 256 bits, the fraction of the
        larger operand is dropped before multiplying instead.
        """
        product = U256(self.value).checked_mul(other.value)
        if product is not None:
            return PreciseNumber((product + ROUNDING_CORRECTION) // ONE)
        if self.value >= other.value:
            return PreciseNumber(U256(self.value) // ONE * other.value)
        return PreciseNumber(U256(other.value) // ONE * self.value)

    def __truediv__(self, other: PreciseNumber) -> PreciseNumber:
        """Divide, rounding half-up at the scale.

        Raises:
            DivisionByZero: If other is zero
        """
        if other.value == 0:
            raise DivisionByZero(f"PreciseNumber division by zero: {self.value}")
        scaled = U256(self.value).checked_mul(ONE)
        if scaled is not None:
            return PreciseNumber((scaled + ROUNDING_CORRECTION) // other.value)
        return PreciseNumber((U256(self.value) + ROUNDING_CORRECTION) // other.value * ONE)

    def sqrt(self) -> PreciseNumber:
        """Floor square root at the scale.

        The result r satisfies r * r <= self < (r + 10^-12)^2 exactly.

        Raises:
            Overflow: If self exceeds maximum_sqrt_base()
        """
        if self > self.maximum_sqrt_base():
            raise Overflow(f"sqrt base too large: {self.value}")
        radicand = int(U256(self.value) * ONE)
        if radicand == 0:
            return PreciseNumber.zero()
        # 2^ceil(bits/2) is always at or above the root
        initial = 1 << ((radicand.bit_length() + 1) // 2)
        root = converge(
            initial,
            _isqrt_step(radicand),
            max_iterations=MAX_APPROXIMATION_ITERATIONS,
        )
        return PreciseNumber(root)

    def floor(self) -> PreciseNumber:
        """Round down to a whole unit."""
        return PreciseNumber(U256(self.value) // ONE * ONE)

    def ceiling(self) -> PreciseNumber:
        """Round up to a whole unit.

        Raises:
            Overflow: If rounding up leaves 256 bits
        """
        return PreciseNumber((U256(self.value) + (ONE - 1)) // ONE * ONE)

    def to_imprecise(self) -> int:
        """Round half-up to an integer.

        Raises:
            Overflow: If the integer does not fit 128 bits
        """
        return int(U128((U256(self.value) + ROUNDING_CORRECTION) // ONE))

    # --- Checked arithmetic ---

    @checked
    def checked_add(self, other: PreciseNumber) -> PreciseNumber:
        return self + other

    @checked
    def checked_sub(self, other: PreciseNumber) -> PreciseNumber:
        return self - other

    @checked
    def checked_mul(self, other: PreciseNumber) -> PreciseNumber:
        return self * other

    @checked
    def checked_div(self, other: PreciseNumber) -> PreciseNumber:
        return self / other

    @checked
    def checked_sqrt(self) -> PreciseNumber:
        return self.sqrt()

    @checked
    def checked_to_imprecise(self) -> int:
        return self.to_imprecise()

    # --- Comparison ---

    def almost_eq(self, other: PreciseNumber, precision: int = PRECISION) -> bool:
        """True if the scaled values differ by less than precision."""
        return abs(self.value - other.value) < precision

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PreciseNumber):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PreciseNumber):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PreciseNumber):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PreciseNumber):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PreciseNumber):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"PreciseNumber({self.value})"

    def __str__(self) -> str:
        whole, fraction = divmod(self.value, ONE)
        return f"{whole}.{fraction:012d}"
