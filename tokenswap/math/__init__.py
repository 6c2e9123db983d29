"""Mathematical utilities for pool pricing.

This package provides the arithmetic primitives every curve depends on:
- PreciseNumber: 12-decimal fixed-point arithmetic with a floor square root
- converge: the shared converge-or-cap Newton iteration
"""

from tokenswap.math.newton import converge
from tokenswap.math.precise_number import PreciseNumber

__all__ = ["PreciseNumber", "converge"]
