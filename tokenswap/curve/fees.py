"""Fee fractions and the fee arithmetic shared by every curve.

All fees are expressed as numerator / denominator fractions of the amount
they apply to. A fraction of 0/0 means "no fee".
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tokenswap.errors import InvalidFee
from tokenswap.safe_int import U128, checked


def calculate_fee(token_amount: int, fee_numerator: int, fee_denominator: int) -> int:
    """Fee owed on token_amount, never less than 1 when a fee applies.

    The minimum of one token stops traders from splitting a trade into
    pieces small enough for every fee to round down to zero.

    Raises:
        DivisionByZero: If a non-zero numerator comes with a zero denominator
    """
    if fee_numerator == 0 or token_amount == 0:
        return 0
    fee = U128(token_amount) * fee_numerator // fee_denominator
    if not fee:
        return 1
    return int(fee)


def pre_fee_amount(post_fee_amount: int, fee_numerator: int, fee_denominator: int) -> int:
    """Input that keeps at least post_fee_amount once the fee is taken.

    ceil(post_fee_amount * denominator / (denominator - numerator))
    """
    if fee_numerator == 0 or fee_denominator == 0:
        return post_fee_amount
    if fee_numerator == fee_denominator or post_fee_amount == 0:
        return 0
    remaining = U128(fee_denominator) - fee_numerator
    return int((U128(post_fee_amount) * fee_denominator + remaining - 1) // remaining)


def validate_fraction(numerator: int, denominator: int) -> None:
    """Raises InvalidFee unless the fraction is 0/0 or strictly below one."""
    if denominator == 0 and numerator == 0:
        return
    if numerator >= denominator:
        raise InvalidFee(f"Fee {numerator}/{denominator} must be below 1")


@dataclass(frozen=True)
class FeeFraction:
    numerator: int = 0
    denominator: int = 0

    def is_active(self) -> bool:
        return self.numerator != 0 and self.denominator != 0

    def apply(self, amount: int) -> int:
        return calculate_fee(amount, self.numerator, self.denominator)


@dataclass(frozen=True)
class Fees:
    """Every fee a pool charges.

    Attributes:
        trade_fee: Kept in the pool for liquidity providers
        owner_trade_fee: Paid to the pool owner as pool tokens
        owner_withdraw_fee: Taken from pool tokens burned on withdrawal
        host_fee: Share of the owner trade fee paid to the front end host
    """

    trade_fee: FeeFraction = field(default_factory=FeeFraction)
    owner_trade_fee: FeeFraction = field(default_factory=FeeFraction)
    owner_withdraw_fee: FeeFraction = field(default_factory=FeeFraction)
    host_fee: FeeFraction = field(default_factory=FeeFraction)

    @checked
    def trading_fee(self, trading_tokens: int) -> int:
        return self.trade_fee.apply(trading_tokens)

    @checked
    def owner_trading_fee(self, trading_tokens: int) -> int:
        return self.owner_trade_fee.apply(trading_tokens)

    @checked
    def owner_withdraw_fee_amount(self, pool_tokens: int) -> int:
        return self.owner_withdraw_fee.apply(pool_tokens)

    @checked
    def host_fee_amount(self, owner_fee: int) -> int:
        return self.host_fee.apply(owner_fee)

    @checked
    def pre_trading_fee_amount(self, post_fee_amount: int) -> int:
        """Input needed so that post_fee_amount remains after trade and owner fees.

        With both fees active the two fractions are combined over a common
        denominator before inverting.
        """
        trade, owner = self.trade_fee, self.owner_trade_fee
        if not trade.is_active():
            return pre_fee_amount(post_fee_amount, owner.numerator, owner.denominator)
        if not owner.is_active():
            return pre_fee_amount(post_fee_amount, trade.numerator, trade.denominator)

        numerator = (
            U128(trade.numerator) * owner.denominator + U128(owner.numerator) * trade.denominator
        )
        denominator = U128(trade.denominator) * owner.denominator
        return pre_fee_amount(post_fee_amount, int(numerator), int(denominator))

    def validate(self) -> None:
        """Raises InvalidFee if any fraction is 1 or more."""
        validate_fraction(self.trade_fee.numerator, self.trade_fee.denominator)
        validate_fraction(self.owner_trade_fee.numerator, self.owner_trade_fee.denominator)
        validate_fraction(self.owner_withdraw_fee.numerator, self.owner_withdraw_fee.denominator)
        validate_fraction(self.host_fee.numerator, self.host_fee.denominator)
