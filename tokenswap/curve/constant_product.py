"""Constant product curve.

Uniswap-style invariant: reserve_a * reserve_b = k.

The module-level functions take reserves directly and raise SafeIntError
subclasses on failure; they are shared with the offset curve, which calls
them with a shifted token B reserve.
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
from tokenswap.math.precise_number import PreciseNumber
from tokenswap.safe_int import U128, Underflow, checked, nonzero


def swap(
    source_amount: int,
    swap_source_amount: int,
    swap_destination_amount: int,
) -> SwapWithoutFeesResult:
    """Price a swap on x * y = k.

    The new destination reserve is rounded up so that k never shrinks, and
    the source amount is trimmed to the least amount that still yields that
    reserve.

    Raises:
        ZeroResult: If no destination token would move
    """
    invariant = U128(swap_source_amount) * swap_destination_amount
    new_swap_source_amount = U128(swap_source_amount) + source_amount
    new_swap_destination_amount, new_swap_source_amount = invariant.ceil_div(new_swap_source_amount)

    source_amount_swapped = new_swap_source_amount - swap_source_amount
    destination_amount_swapped = nonzero(
        U128(swap_destination_amount) - new_swap_destination_amount
    )

    return SwapWithoutFeesResult(
        source_amount_swapped=int(source_amount_swapped),
        destination_amount_swapped=int(destination_amount_swapped),
    )


def pool_tokens_to_trading_tokens(
    pool_tokens: int,
    pool_token_supply: int,
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    round_direction: RoundDirection,
) -> TradingTokenResult:
    """Convert pool tokens to their proportional share of both reserves.

    With CEILING, an amount is bumped by one only when there is a remainder
    and the floor is non-zero: a claim worth 0.01 token A stays 0 (and gets
    rejected later) rather than being rounded up to a whole token.
    """
    amounts = []
    for reserve in (swap_token_a_amount, swap_token_b_amount):
        share = U128(pool_tokens) * reserve
        amount = share // pool_token_supply
        if round_direction is RoundDirection.CEILING and amount and share % pool_token_supply:
            amount = amount + 1
        amounts.append(int(amount))

    return TradingTokenResult(token_a_amount=amounts[0], token_b_amount=amounts[1])


def _source_reserve(
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    trade_direction: TradeDirection,
) -> int:
    if trade_direction is TradeDirection.A_TO_B:
        return swap_token_a_amount
    return swap_token_b_amount


def _round(pool_tokens: PreciseNumber, round_direction: RoundDirection) -> int:
    if round_direction is RoundDirection.FLOOR:
        return pool_tokens.floor().to_imprecise()
    return pool_tokens.ceiling().to_imprecise()


def deposit_single_token_type(
    source_amount: int,
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    pool_supply: int,
    trade_direction: TradeDirection,
    round_direction: RoundDirection,
) -> int:
    """Pool tokens for a one-sided deposit.

    pool_tokens = pool_supply * (sqrt(1 + source_amount / reserve) - 1)
    """
    if source_amount == 0:
        return 0

    raw_reserve = _source_reserve(swap_token_a_amount, swap_token_b_amount, trade_direction)
    reserve = PreciseNumber.from_int(raw_reserve)
    one = PreciseNumber.from_int(1)
    ratio = PreciseNumber.from_int(source_amount) / reserve
    root = (one + ratio).sqrt() - one
    pool_tokens = PreciseNumber.from_int(pool_supply) * root
    return _round(pool_tokens, round_direction)


def withdraw_single_token_type_exact_out(
    source_amount: int,
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    pool_supply: int,
    trade_direction: TradeDirection,
    round_direction: RoundDirection,
) -> int:
    """Pool tokens burned for a one-sided withdrawal of exactly source_amount.

    pool_tokens = pool_supply * (1 - sqrt(1 - source_amount / reserve))

    Raises:
        Underflow: If source_amount is not strictly below the reserve
    """
    if source_amount == 0:
        return 0

    raw_reserve = _source_reserve(swap_token_a_amount, swap_token_b_amount, trade_direction)
    if source_amount >= raw_reserve:
        raise Underflow(f"Cannot withdraw {source_amount} from a reserve of {raw_reserve}")

    reserve = PreciseNumber.from_int(raw_reserve)
    one = PreciseNumber.from_int(1)
    ratio = PreciseNumber.from_int(source_amount) / reserve
    root = one - (one - ratio).sqrt()
    pool_tokens = PreciseNumber.from_int(pool_supply) * root
    return _round(pool_tokens, round_direction)


def normalized_value(swap_token_a_amount: int, swap_token_b_amount: int) -> PreciseNumber:
    """sqrt(a * b): the invariant reduced to a single token dimension."""
    token_a = PreciseNumber.from_int(swap_token_a_amount)
    token_b = PreciseNumber.from_int(swap_token_b_amount)
    return (token_a * token_b).sqrt()


@dataclass(frozen=True)
class ConstantProductCurve(CurveCalculator):
    """Constant product curve, reserve_a * reserve_b = k."""

    @checked
    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        return swap(source_amount, swap_source_amount, swap_destination_amount)

    @checked
    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
    ) -> TradingTokenResult:
        return pool_tokens_to_trading_tokens(
            pool_tokens,
            pool_token_supply,
            swap_token_a_amount,
            swap_token_b_amount,
            round_direction,
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
        return deposit_single_token_type(
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
        return withdraw_single_token_type_exact_out(
            source_amount,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
            RoundDirection.CEILING,
        )

    def validate(self) -> None:
        """The constant product curve has no parameters."""

    @checked
    def normalized_value(self, swap_token_a_amount: int, swap_token_b_amount: int) -> PreciseNumber:
        return normalized_value(swap_token_a_amount, swap_token_b_amount)
