"""Swap curve: a curve calculator with the pool's fees applied around it.

Calculators price trades on raw reserves; SwapCurve is what a pool actually
calls. It takes fees out of inputs, grosses up exact-out withdrawals,
converts whole-pool deposits and withdrawals, and checks a pool's setup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from tokenswap.curve.calculator import (
    CurveCalculator,
    RoundDirection,
    TradeDirection,
    TradingTokenResult,
)
from tokenswap.curve.constant_price import ConstantPriceCurve
from tokenswap.curve.constant_product import ConstantProductCurve
from tokenswap.curve.fees import Fees
from tokenswap.curve.offset import OffsetCurve
from tokenswap.curve.stable import StableCurve
from tokenswap.errors import SwapError, UnsupportedCurveOperation
from tokenswap.safe_int import U128, checked

logger = structlog.get_logger()


class CurveType(str, Enum):
    """Curve variants a pool can be configured with."""

    CONSTANT_PRODUCT = "constant_product"
    CONSTANT_PRICE = "constant_price"
    OFFSET = "offset"
    STABLE = "stable"

    @property
    def calculator_class(self) -> type[CurveCalculator]:
        return _CURVE_CLASSES[self]

    @classmethod
    def of(cls, calculator: CurveCalculator) -> CurveType:
        """Curve type of a calculator instance."""
        for curve_type, curve_class in _CURVE_CLASSES.items():
            if isinstance(calculator, curve_class):
                return curve_type
        raise TypeError(f"Unknown curve calculator: {type(calculator).__name__}")


_CURVE_CLASSES: dict[CurveType, type[CurveCalculator]] = {
    CurveType.CONSTANT_PRODUCT: ConstantProductCurve,
    CurveType.CONSTANT_PRICE: ConstantPriceCurve,
    CurveType.OFFSET: OffsetCurve,
    CurveType.STABLE: StableCurve,
}


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap with fees.

    Attributes:
        new_swap_source_amount: Source reserve after the swap
        new_swap_destination_amount: Destination reserve after the swap
        source_amount_swapped: Source tokens taken from the trader, fees included
        destination_amount_swapped: Destination tokens paid to the trader
        trade_fee: Part of the source kept by liquidity providers
        owner_fee: Part of the source owed to the pool owner
    """

    new_swap_source_amount: int
    new_swap_destination_amount: int
    source_amount_swapped: int
    destination_amount_swapped: int
    trade_fee: int
    owner_fee: int


@dataclass(frozen=True)
class WithdrawAllResult:
    """Outcome of burning pool tokens for both reserves."""

    pool_tokens_burned: int
    withdraw_fee: int
    token_a_amount: int
    token_b_amount: int


@dataclass(frozen=True)
class OwnerFeeResult:
    """Owner trading fee converted to pool tokens.

    Attributes:
        pool_tokens: Pool tokens minted for the whole owner fee
        host_fee: Share of pool_tokens paid to the host
        owner_pool_tokens: Share of pool_tokens kept by the owner
    """

    pool_tokens: int
    host_fee: int
    owner_pool_tokens: int


@dataclass(frozen=True)
class SwapCurve:
    """A pool's curve calculator together with its fee schedule."""

    calculator: CurveCalculator

    @property
    def curve_type(self) -> CurveType:
        return CurveType.of(self.calculator)

    @checked
    def swap(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
        fees: Fees,
    ) -> SwapResult | None:
        """Swap source_amount after taking the trade and owner fees from it.

        The fees stay with the pool, so they count towards the source amount
        swapped even though they are not priced by the curve.
        """
        trade_fee = fees.trade_fee.apply(source_amount)
        owner_fee = fees.owner_trade_fee.apply(source_amount)
        total_fees = U128(trade_fee) + owner_fee
        source_amount_less_fees = U128(source_amount) - total_fees

        result = self.calculator.swap_without_fees(
            int(source_amount_less_fees),
            swap_source_amount,
            swap_destination_amount,
            trade_direction,
        )
        if result is None:
            return None

        source_amount_swapped = total_fees + result.source_amount_swapped
        return SwapResult(
            new_swap_source_amount=int(U128(swap_source_amount) + source_amount_swapped),
            new_swap_destination_amount=int(
                U128(swap_destination_amount) - result.destination_amount_swapped
            ),
            source_amount_swapped=int(source_amount_swapped),
            destination_amount_swapped=result.destination_amount_swapped,
            trade_fee=trade_fee,
            owner_fee=owner_fee,
        )

    @checked
    def deposit_single_token_type(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        fees: Fees,
    ) -> int | None:
        """Pool tokens minted for a one-sided deposit, fees included.

        Depositing one side is equivalent to swapping half of it, so fees
        are charged on half the deposit (at least 1 token).

        Raises:
            UnsupportedCurveOperation: If the curve does not allow deposits
        """
        self._require_deposits()
        if source_amount == 0:
            return 0

        half_source_amount = max(1, source_amount // 2)
        trade_fee = fees.trade_fee.apply(half_source_amount)
        owner_fee = fees.owner_trade_fee.apply(half_source_amount)
        source_amount_less_fees = U128(source_amount) - trade_fee - owner_fee

        return self.calculator.deposit_single_token_type(
            int(source_amount_less_fees),
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
        )

    @checked
    def withdraw_single_token_type_exact_out(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        fees: Fees,
    ) -> int | None:
        """Pool tokens burned to withdraw exactly source_amount, fees included.

        Half of the requested amount is treated as swapped, so it is grossed
        up to what it would cost before fees.
        """
        if source_amount == 0:
            return 0

        half_source_amount = (U128(source_amount) + 1) // 2
        pre_fee_source_amount = fees.pre_trading_fee_amount(int(half_source_amount))
        if pre_fee_source_amount is None:
            return None
        source_amount_with_fees = U128(source_amount) - half_source_amount + pre_fee_source_amount

        return self.calculator.withdraw_single_token_type_exact_out(
            int(source_amount_with_fees),
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
        )

    def deposit_all_token_types(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
    ) -> TradingTokenResult | None:
        """Trading tokens charged to mint pool_tokens, rounded up.

        Returns None if a side the pool holds would be charged nothing.

        Raises:
            UnsupportedCurveOperation: If the curve does not allow deposits
        """
        self._require_deposits()
        result = self.calculator.pool_tokens_to_trading_tokens(
            pool_tokens,
            pool_token_supply,
            swap_token_a_amount,
            swap_token_b_amount,
            RoundDirection.CEILING,
        )
        if result is None:
            return None
        if (result.token_a_amount == 0 and swap_token_a_amount != 0) or (
            result.token_b_amount == 0 and swap_token_b_amount != 0
        ):
            logger.debug(
                "zero_trading_tokens",
                operation="deposit_all_token_types",
                pool_tokens=pool_tokens,
                pool_token_supply=pool_token_supply,
            )
            return None
        return result

    @checked
    def withdraw_all_token_types(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        fees: Fees,
    ) -> WithdrawAllResult | None:
        """Trading tokens paid out for burning pool_tokens, rounded down.

        The owner withdraw fee is taken from the pool tokens first. Returns
        None if a side the pool holds would pay out nothing.
        """
        withdraw_fee = fees.owner_withdraw_fee.apply(pool_tokens)
        pool_tokens_burned = U128(pool_tokens) - withdraw_fee

        result = self.calculator.pool_tokens_to_trading_tokens(
            int(pool_tokens_burned),
            pool_token_supply,
            swap_token_a_amount,
            swap_token_b_amount,
            RoundDirection.FLOOR,
        )
        if result is None:
            return None

        token_a_amount = min(swap_token_a_amount, result.token_a_amount)
        token_b_amount = min(swap_token_b_amount, result.token_b_amount)
        if (token_a_amount == 0 and swap_token_a_amount != 0) or (
            token_b_amount == 0 and swap_token_b_amount != 0
        ):
            logger.debug(
                "zero_trading_tokens",
                operation="withdraw_all_token_types",
                pool_tokens=pool_tokens,
                pool_token_supply=pool_token_supply,
            )
            return None

        return WithdrawAllResult(
            pool_tokens_burned=int(pool_tokens_burned),
            withdraw_fee=withdraw_fee,
            token_a_amount=token_a_amount,
            token_b_amount=token_b_amount,
        )

    @checked
    def owner_fee_pool_tokens(
        self,
        owner_fee: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
        fees: Fees,
    ) -> OwnerFeeResult | None:
        """Convert an owner trading fee into pool tokens.

        The fee is valued as a one-sided withdrawal of owner_fee source tokens
        from the post-swap reserves; the host takes its cut of the result.
        """
        pool_tokens = self.calculator.withdraw_single_token_type_exact_out(
            owner_fee,
            swap_token_a_amount,
            swap_token_b_amount,
            pool_supply,
            trade_direction,
        )
        if pool_tokens is None:
            return None

        host_fee = fees.host_fee.apply(pool_tokens)
        return OwnerFeeResult(
            pool_tokens=pool_tokens,
            host_fee=host_fee,
            owner_pool_tokens=int(U128(pool_tokens) - host_fee),
        )

    def initialize(self, fees: Fees, token_a_amount: int, token_b_amount: int) -> int:
        """Check a new pool's setup and return its initial pool token supply.

        Raises:
            InvalidFee: If a fee fraction is invalid
            InvalidCurve: If a curve parameter is out of range
            EmptySupply: If the initial reserves are empty where the curve needs them
        """
        log = logger.bind(
            curve_type=self.curve_type.value,
            token_a_amount=token_a_amount,
            token_b_amount=token_b_amount,
        )
        try:
            fees.validate()
            self.calculator.validate()
            self.calculator.validate_supply(token_a_amount, token_b_amount)
        except SwapError as e:
            log.warning("pool_initialization_rejected", error_type=type(e).__name__, error=str(e))
            raise

        pool_supply = self.calculator.new_pool_supply()
        log.info("pool_initialized", pool_supply=pool_supply)
        return pool_supply

    def _require_deposits(self) -> None:
        if not self.calculator.allows_deposits():
            raise UnsupportedCurveOperation(
                f"{self.curve_type.value} curve does not allow deposits"
            )
