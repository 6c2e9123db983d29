"""Constant price curve.

Token B always trades for a fixed amount of token A, so pool value is the
sum a + b * price rather than a product.
"""

from __future__ import annotations

from dataclasses import dataclass

from tokenswap.curve.calculator import (
    CurveCalculator,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)
from tokenswap.errors import EmptySupply, InvalidCurve
from tokenswap.math.precise_number import PreciseNumber
from tokenswap.safe_int import U128, U256, checked, nonzero


def trading_tokens_to_pool_tokens(
    token_b_price: int,
    source_amount: int,
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    pool_supply: int,
    trade_direction: TradeDirection,
    round_direction: RoundDirection,
) -> int:
    """Pool tokens equivalent to a one-sided amount, weighted by price.

    pool_tokens = pool_supply * given_value / (a + b * price)
    where given_value is the source amount expressed in token A.
    """
    price = U256(token_b_price)
    if trade_direction is TradeDirection.A_TO_B:
        given_value = U256(source_amount)
    else:
        given_value = U256(source_amount) * price
    total_value = U256(swap_token_b_amount) * price + swap_token_a_amount

    share = U256(pool_supply) * given_value
    if round_direction is RoundDirection.FLOOR:
        pool_tokens = share // total_value
    else:
        pool_tokens, _ = share.ceil_div(total_value)
    return int(U128(pool_tokens))


def _total_value(token_b_price: int, swap_token_a_amount: int, swap_token_b_amount: int) -> int:
    """(a + b * price) / 2, halving first when the sum would overflow 128 bits."""
    token_b_value = U128(swap_token_b_amount) * token_b_price
    if not U128.fits(int(token_b_value) + swap_token_a_amount):
        return int(token_b_value // 2 + U128(swap_token_a_amount) // 2)
    return int((token_b_value + swap_token_a_amount) // 2)


def _div_rounded(numerator: U256, denominator: U256, round_direction: RoundDirection) -> U256:
    """Divide, rounding up only a non-zero quotient that has a remainder."""
    quotient = numerator // denominator
    if round_direction is RoundDirection.CEILING and quotient and numerator % denominator:
        quotient = quotient + 1
    return quotient


@dataclass(frozen=True)
class ConstantPriceCurve(CurveCalculator):
    """Fixed-rate curve.

    Attributes:
        token_b_price: Amount of token A that one token B trades for
    """

    token_b_price: int

    @checked
    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        """Swap at the fixed rate; reserves are not consulted.

        Selling token A consumes only a whole multiple of the price, the
        remainder is left with the trader.
        """
        source = U128(source_amount)
        if trade_direction is TradeDirection.B_TO_A:
            source_amount_swapped = source
            destination_amount_swapped = source * self.token_b_price
        else:
            destination_amount_swapped = source // self.token_b_price
            source_amount_swapped = source - source % self.token_b_price

        return SwapWithoutFeesResult(
            source_amount_swapped=int(nonzero(source_amount_swapped)),
            destination_amount_swapped=int(nonzero(destination_amount_swapped)),
        )

    @checked
    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
    ) -> TradingTokenResult:
        """Half the claimed value is paid in token A, half in token B."""
        total_value = _total_value(self.token_b_price, swap_token_a_amount, swap_token_b_amount)
        pool_value = U256(pool_tokens) * total_value

        token_a_amount = _div_rounded(pool_value, U256(pool_token_supply), round_direction)
        token_b_divisor = U256(pool_token_supply) * self.token_b_price
        token_b_amount = _div_rounded(pool_value, token_b_divisor, round_direction)

        return TradingTokenResult(
            token_a_amount=int(U128(token_a_amount)),
            token_b_amount=int(U128(token_b_amount)),
        )

    @checked
    def deposit_single_token_type(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
    ) -> int:
        return trading_tokens_to_pool_tokens(
            self.token_b_price,
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            RoundDirection.FLOOR,
        )

    @checked
    def withdraw_single_token_type_exact_out(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
    ) -> int:
        return trading_tokens_to_pool_tokens(
            self.token_b_price,
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            RoundDirection.CEILING,
        )

    def validate(self) -> None:
        if self.token_b_price == 0:
            raise InvalidCurve("Constant price curve needs a non-zero token B price")

    def validate_supply(self, token_a_amount: int, token_b_amount: int) -> None:
        """Only token A must be non-zero; token B may start empty."""
        if token_a_amount == 0:
            raise EmptySupply("Token A supply must be non-zero")

    @checked
    def normalized_value(self, swap_token_a_amount: int, swap_token_b_amount: int) -> PreciseNumber:
        """(a + b * price) / 2.

        Most curves use a multiplicative invariant; this one is additive, and
        the sum is halved to express it in single-token units.
        """
        total_value = _total_value(self.token_b_price, swap_token_a_amount, swap_token_b_amount)
        return PreciseNumber.from_int(total_value)
