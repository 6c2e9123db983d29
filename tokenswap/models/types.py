"""Shared integer types for pool configuration models.

Values may be written as JSON numbers or as decimal strings; large values
are usually strings so they survive tools that parse numbers as doubles.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from tokenswap.safe_int import U64_MAX


def validate_uint64(value: Any) -> int:
    """Validate an int or decimal string as a 64-bit unsigned integer.

    Raises:
        ValueError: If value is not a non-negative integer below 2^64
    """
    if isinstance(value, bool):
        raise ValueError("Uint64 must be string or int, got bool")

    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint64 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint64 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint64 cannot be negative: {value}")
    if int_value > U64_MAX:
        raise ValueError(f"Uint64 overflow: {value} > 2^64-1")
    return int_value


# Curve parameters and fee fractions
Uint64 = Annotated[
    int,
    BeforeValidator(validate_uint64),
    Field(description="64-bit unsigned integer, as int or decimal string"),
]
