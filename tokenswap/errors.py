"""Pool configuration errors.

These are raised once, when a pool is set up, and should block pool creation
outright. Arithmetic that merely cannot be priced is reported as a ``None``
result instead (see ``tokenswap.safe_int``).
"""


class SwapError(Exception):
    """Base error for pool configuration problems."""

    pass


class InvalidFee(SwapError):
    """A fee fraction has numerator >= denominator (and is not 0/0)."""

    pass


class InvalidCurve(SwapError):
    """A curve parameter is out of range (zero price, zero offset, bad amp)."""

    pass


class EmptySupply(SwapError):
    """Initial reserves are empty on a side the curve requires."""

    pass


class UnsupportedCurveOperation(SwapError):
    """The curve does not allow the requested operation (e.g. deposits)."""

    pass
