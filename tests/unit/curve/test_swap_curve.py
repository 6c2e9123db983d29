"""Tests for SwapCurve, the fee-aware wrapper around a calculator."""

import pytest
from structlog.testing import capture_logs

from tokenswap.curve import (
    ConstantPriceCurve,
    ConstantProductCurve,
    CurveType,
    FeeFraction,
    Fees,
    OffsetCurve,
    OwnerFeeResult,
    StableCurve,
    SwapCurve,
    SwapResult,
    TradeDirection,
    TradingTokenResult,
    WithdrawAllResult,
)
from tokenswap.errors import EmptySupply, InvalidCurve, InvalidFee
from tokenswap.safe_int import U128_MAX
from tests.helpers import NO_FEES, POOL_SUPPLY, STANDARD_FEES

ONE_PERCENT = FeeFraction(1, 100)


class TestCurveType:
    """Tests for CurveType."""

    @pytest.mark.parametrize(
        "calculator,curve_type",
        [
            (ConstantProductCurve(), CurveType.CONSTANT_PRODUCT),
            (ConstantPriceCurve(token_b_price=1), CurveType.CONSTANT_PRICE),
            (OffsetCurve(token_b_offset=1), CurveType.OFFSET),
            (StableCurve(amp=1), CurveType.STABLE),
        ],
    )
    def test_of(self, calculator, curve_type):
        """Each calculator maps back to its curve type."""
        assert CurveType.of(calculator) is curve_type
        assert SwapCurve(calculator=calculator).curve_type is curve_type
        assert curve_type.calculator_class is type(calculator)

    def test_from_string(self):
        assert CurveType("stable") is CurveType.STABLE


class TestSwap:
    """Tests for swaps with fees."""

    def test_no_fees(self, swap_curve):
        """Without fees the result mirrors the calculator."""
        result = swap_curve.swap(100, 1000, 1000, TradeDirection.A_TO_B, NO_FEES)
        assert result == SwapResult(
            new_swap_source_amount=1099,
            new_swap_destination_amount=910,
            source_amount_swapped=99,
            destination_amount_swapped=90,
            trade_fee=0,
            owner_fee=0,
        )

    def test_trade_fee_stays_in_pool(self, swap_curve):
        """The fee is taken from the input but still lands in the source reserve."""
        fees = Fees(trade_fee=ONE_PERCENT)
        result = swap_curve.swap(100, 1000, 1000, TradeDirection.A_TO_B, fees)
        assert result == SwapResult(
            new_swap_source_amount=1100,
            new_swap_destination_amount=910,
            source_amount_swapped=100,
            destination_amount_swapped=90,
            trade_fee=1,
            owner_fee=0,
        )

    def test_trade_and_owner_fee(self, swap_curve):
        """Both fees come out of the input before pricing."""
        fees = Fees(trade_fee=ONE_PERCENT, owner_trade_fee=ONE_PERCENT)
        result = swap_curve.swap(100, 1000, 1000, TradeDirection.A_TO_B, fees)
        assert result == SwapResult(
            new_swap_source_amount=1100,
            new_swap_destination_amount=911,
            source_amount_swapped=100,
            destination_amount_swapped=89,
            trade_fee=1,
            owner_fee=1,
        )

    def test_reserves_stay_consistent(self, swap_curve):
        """New reserves are the old ones moved by the swapped amounts."""
        result = swap_curve.swap(12_345, 1_000_000, 3_000_000, TradeDirection.B_TO_A, STANDARD_FEES)
        assert result.new_swap_source_amount == 1_000_000 + result.source_amount_swapped
        assert result.new_swap_destination_amount == 3_000_000 - result.destination_amount_swapped
        assert result.source_amount_swapped <= 12_345

    def test_fees_larger_than_input_are_rejected(self, swap_curve):
        """Minimum fees on a 1 token trade leave nothing to swap."""
        fees = Fees(trade_fee=ONE_PERCENT, owner_trade_fee=ONE_PERCENT)
        assert swap_curve.swap(1, 1000, 1000, TradeDirection.A_TO_B, fees) is None

    def test_unpriceable_swap_is_rejected(self, swap_curve):
        """A calculator failure comes back as None."""
        result = swap_curve.swap(10, 70_000_000_000, 4_000_000, TradeDirection.A_TO_B, NO_FEES)
        assert result is None


class TestSingleSided:
    """Tests for one-sided deposits and withdrawals with fees."""

    def test_deposit_charges_fee_on_half(self, swap_curve):
        """300 deposited: 1% of the swapped half (1) is taken, 299 is priced."""
        fees = Fees(trade_fee=ONE_PERCENT)
        pool_tokens = swap_curve.deposit_single_token_type(
            300, 100, 1000, 1000, TradeDirection.A_TO_B, fees
        )
        assert pool_tokens == 997

    def test_deposit_without_fees_matches_calculator(self, swap_curve, constant_product):
        pool_tokens = swap_curve.deposit_single_token_type(
            300, 100, 1000, 1000, TradeDirection.A_TO_B, NO_FEES
        )
        assert pool_tokens == constant_product.deposit_single_token_type(
            300, 100, 1000, 1000, TradeDirection.A_TO_B
        )

    def test_deposit_zero(self, swap_curve):
        assert swap_curve.deposit_single_token_type(
            0, 100, 1000, 1000, TradeDirection.A_TO_B, STANDARD_FEES
        ) == 0

    def test_withdraw_grosses_up_half(self, swap_curve):
        """75 out: the 38 treated as swapped grosses up to 39, so 76 is priced."""
        fees = Fees(trade_fee=ONE_PERCENT)
        pool_tokens = swap_curve.withdraw_single_token_type_exact_out(
            75, 100, 1000, 1000, TradeDirection.A_TO_B, fees
        )
        assert pool_tokens == 511

    def test_withdraw_zero(self, swap_curve):
        assert swap_curve.withdraw_single_token_type_exact_out(
            0, 100, 1000, 1000, TradeDirection.A_TO_B, STANDARD_FEES
        ) == 0

    def test_withdraw_whole_reserve_is_rejected(self, swap_curve):
        """Grossing up past the reserve is unpriceable."""
        assert (
            swap_curve.withdraw_single_token_type_exact_out(
                100, 100, 1000, 1000, TradeDirection.A_TO_B, STANDARD_FEES
            )
            is None
        )


class TestAllTokenTypes:
    """Tests for two-sided deposits and withdrawals."""

    def test_deposit_all(self, swap_curve):
        """Minting 10% of the supply costs 10% of each reserve."""
        result = swap_curve.deposit_all_token_types(10, 100, 1000, 1000)
        assert result == TradingTokenResult(token_a_amount=100, token_b_amount=100)

    def test_deposit_all_rounds_up(self, swap_curve):
        """The depositor pays the remainder."""
        result = swap_curve.deposit_all_token_types(5, 101, 100, 202)
        assert result == TradingTokenResult(token_a_amount=5, token_b_amount=10)

    def test_deposit_all_zero_side_is_rejected(self, swap_curve):
        """Minting pool tokens for nothing on a held side is refused."""
        with capture_logs() as logs:
            assert swap_curve.deposit_all_token_types(10, 100, 1000, 5) is None
        assert logs[-1]["event"] == "zero_trading_tokens"
        assert logs[-1]["operation"] == "deposit_all_token_types"

    def test_deposit_all_empty_side_is_allowed(self, swap_curve):
        """A side the pool does not hold may be charged nothing."""
        result = swap_curve.deposit_all_token_types(10, 100, 1000, 0)
        assert result == TradingTokenResult(token_a_amount=100, token_b_amount=0)

    def test_deposit_all_overflow_is_rejected(self, swap_curve):
        assert swap_curve.deposit_all_token_types(5, 10, U128_MAX, 1) is None

    def test_withdraw_all_with_fee(self, swap_curve):
        """The owner keeps 10% of the pool tokens; the rest are burned."""
        fees = Fees(owner_withdraw_fee=FeeFraction(1, 10))
        result = swap_curve.withdraw_all_token_types(100, 1000, 1000, 2000, fees)
        assert result == WithdrawAllResult(
            pool_tokens_burned=90,
            withdraw_fee=10,
            token_a_amount=90,
            token_b_amount=180,
        )

    def test_withdraw_all_without_fee(self, swap_curve):
        result = swap_curve.withdraw_all_token_types(100, 1000, 1000, 2000, NO_FEES)
        assert result == WithdrawAllResult(
            pool_tokens_burned=100,
            withdraw_fee=0,
            token_a_amount=100,
            token_b_amount=200,
        )

    def test_withdraw_all_zero_side_is_rejected(self, swap_curve):
        """Burning pool tokens for nothing on a held side is refused."""
        assert swap_curve.withdraw_all_token_types(1, 1000, 1000, 5, NO_FEES) is None

    def test_withdraw_all_capped_at_reserves(self, swap_curve):
        """Burning more than the supply still cannot drain more than the pool holds."""
        result = swap_curve.withdraw_all_token_types(2000, 1000, 1000, 2000, NO_FEES)
        assert (result.token_a_amount, result.token_b_amount) == (1000, 2000)


class TestOwnerFee:
    """Tests for owner_fee_pool_tokens."""

    def test_host_takes_its_cut(self, swap_curve):
        """75 of a 100 reserve is worth half the supply; the host takes a fifth."""
        fees = Fees(host_fee=FeeFraction(1, 5))
        result = swap_curve.owner_fee_pool_tokens(
            75, 100, 1000, 1000, TradeDirection.A_TO_B, fees
        )
        assert result == OwnerFeeResult(pool_tokens=500, host_fee=100, owner_pool_tokens=400)

    def test_no_host(self, swap_curve):
        result = swap_curve.owner_fee_pool_tokens(
            75, 100, 1000, 1000, TradeDirection.A_TO_B, NO_FEES
        )
        assert result == OwnerFeeResult(pool_tokens=500, host_fee=0, owner_pool_tokens=500)

    def test_after_swap(self, swap_curve):
        """The owner fee from a swap converts to a positive number of pool tokens."""
        swap = swap_curve.swap(10_000, 1_000_000, 1_000_000, TradeDirection.A_TO_B, STANDARD_FEES)
        result = swap_curve.owner_fee_pool_tokens(
            swap.owner_fee,
            swap.new_swap_source_amount,
            swap.new_swap_destination_amount,
            POOL_SUPPLY,
            TradeDirection.A_TO_B,
            STANDARD_FEES,
        )
        assert result.pool_tokens > 0
        assert result.host_fee + result.owner_pool_tokens == result.pool_tokens

    def test_unpriceable_is_rejected(self, swap_curve):
        """An owner fee as large as the reserve cannot be valued."""
        assert (
            swap_curve.owner_fee_pool_tokens(
                100, 100, 1000, 1000, TradeDirection.A_TO_B, NO_FEES
            )
            is None
        )


class TestInitialize:
    """Tests for pool set-up checks."""

    def test_returns_initial_supply(self, swap_curve):
        assert swap_curve.initialize(STANDARD_FEES, 1000, 1000) == POOL_SUPPLY

    def test_logs_success(self, swap_curve):
        with capture_logs() as logs:
            swap_curve.initialize(NO_FEES, 1000, 1000)
        assert logs == [
            {
                "event": "pool_initialized",
                "log_level": "info",
                "curve_type": "constant_product",
                "token_a_amount": 1000,
                "token_b_amount": 1000,
                "pool_supply": POOL_SUPPLY,
            }
        ]

    def test_invalid_fee(self, swap_curve):
        with pytest.raises(InvalidFee):
            swap_curve.initialize(Fees(trade_fee=FeeFraction(1, 1)), 1000, 1000)

    def test_invalid_curve(self):
        swap_curve = SwapCurve(calculator=StableCurve(amp=0))
        with pytest.raises(InvalidCurve):
            swap_curve.initialize(NO_FEES, 1000, 1000)

    @pytest.mark.parametrize("token_a_amount,token_b_amount", [(0, 1000), (1000, 0)])
    def test_empty_supply(self, swap_curve, token_a_amount, token_b_amount):
        with pytest.raises(EmptySupply):
            swap_curve.initialize(NO_FEES, token_a_amount, token_b_amount)

    def test_offset_pool_needs_only_token_a(self, offset):
        assert SwapCurve(calculator=offset).initialize(NO_FEES, 1000, 0) == POOL_SUPPLY

    def test_logs_rejection(self, swap_curve):
        """A rejected set-up is logged as a warning before it is raised."""
        with capture_logs() as logs:
            with pytest.raises(EmptySupply):
                swap_curve.initialize(NO_FEES, 0, 1000)
        assert len(logs) == 1
        assert logs[0]["event"] == "pool_initialization_rejected"
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["error_type"] == "EmptySupply"
        assert logs[0]["curve_type"] == "constant_product"
