"""Offset curve.

A constant product curve that pretends the token B reserve holds an extra
``token_b_offset`` tokens. The pool creator can sell token A against a pool
seeded with nothing but phantom token B liquidity.
"""

from __future__ import annotations

from dataclasses import dataclass

from tokenswap.curve import constant_product
from tokenswap.curve.calculator import (
    CurveCalculator,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)
from tokenswap.errors import EmptySupply, InvalidCurve
from tokenswap.math.precise_number import PreciseNumber
from tokenswap.safe_int import U128, checked


@dataclass(frozen=True)
class OffsetCurve(CurveCalculator):
    """Constant product curve with a phantom token B offset.

    Attributes:
        token_b_offset: Amount added to the token B reserve in every formula
    """

    token_b_offset: int

    def _offset_b(self, swap_token_b_amount: int) -> int:
        return int(U128(swap_token_b_amount) + self.token_b_offset)

    @checked
    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        if trade_direction is TradeDirection.B_TO_A:
            swap_source_amount = self._offset_b(swap_source_amount)
        else:
            swap_destination_amount = self._offset_b(swap_destination_amount)
        return constant_product.swap(source_amount, swap_source_amount, swap_destination_amount)

    @checked
    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
    ) -> TradingTokenResult:
        """Proportional share of the real reserves.

        The offset is left out: phantom tokens cannot be paid out, and pricing
        a claim against them would promise token B the pool does not hold.
        """
        return constant_product.pool_tokens_to_trading_tokens(
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
        return constant_product.deposit_single_token_type(
            source_amount,
            swap_token_a_amount,
            self._offset_b(swap_token_b_amount),
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
        return constant_product.withdraw_single_token_type_exact_out(
            source_amount,
            swap_token_a_amount,
            self._offset_b(swap_token_b_amount),
            pool_supply,
            trade_direction,
            RoundDirection.CEILING,
        )

    def validate(self) -> None:
        if self.token_b_offset == 0:
            raise InvalidCurve(
                "Offset curve needs a non-zero token B offset; use constant product instead"
            )

    def validate_supply(self, token_a_amount: int, token_b_amount: int) -> None:
        """Token B is supplied by the offset, so only token A must be non-zero."""
        if token_a_amount == 0:
            raise EmptySupply("Token A supply must be non-zero")

    def allows_deposits(self) -> bool:
        """Offset pools take no deposits after initialization."""
        return False

    @checked
    def normalized_value(self, swap_token_a_amount: int, swap_token_b_amount: int) -> PreciseNumber:
        return constant_product.normalized_value(
            swap_token_a_amount, self._offset_b(swap_token_b_amount)
        )
