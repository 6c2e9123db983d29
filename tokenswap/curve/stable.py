"""Stable curve (Curve.fi StableSwap, two coins).

The invariant blends a constant sum and a constant product; the
amplification coefficient decides how long the curve stays flat around the
1:1 price. See https://classic.curve.fi/files/stableswap-paper.pdf

Both solvers run Newton's method in 256-bit arithmetic and stop after
STABLE_ITERATIONS steps if the estimate has not settled.
"""

from __future__ import annotations

from dataclasses import dataclass

from tokenswap.constants import MAX_AMP, MIN_AMP, N_COINS, N_COINS_SQUARED, STABLE_ITERATIONS
from tokenswap.curve import constant_product
from tokenswap.curve.calculator import (
    CurveCalculator,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)
from tokenswap.errors import InvalidCurve
from tokenswap.math.newton import converge
from tokenswap.math.precise_number import PreciseNumber
from tokenswap.safe_int import U64, U128, U256, checked, nonzero


def compute_a(amp: int) -> int:
    """Leverage used by the invariant equations: A * n."""
    return int(U64(amp) * N_COINS)


def compute_d(leverage: int, amount_a: int, amount_b: int) -> int:
    """Solve the StableSwap invariant D for the given reserves.

    A * sum(x_i) * n**n + D = A * D * n**n + D**(n+1) / (n**n * prod(x_i))

    Iterates
        D' = (A*n * S + n * D_P) * D / ((A*n - 1) * D + (n + 1) * D_P)
    with D_P = D**(n+1) / (n**n * prod(x_i)), starting from D = S.
    Reserves are offset by one inside D_P so an empty side cannot divide by
    zero.

    Raises:
        Overflow: If D does not fit 128 bits or an intermediate leaves 256
    """
    amount_a_times_coins = U256(amount_a) * N_COINS + 1
    amount_b_times_coins = U256(amount_b) * N_COINS + 1
    sum_x = U128(amount_a) + amount_b
    if not sum_x:
        return 0

    leverage_sum = U256(leverage) * sum_x
    leverage_less_one = U256(leverage) - 1

    def step(d: U256) -> U256:
        d_product = d * d // amount_a_times_coins * d // amount_b_times_coins
        numerator = (leverage_sum + d_product * N_COINS) * d
        denominator = d * leverage_less_one + d_product * (N_COINS + 1)
        return numerator // denominator

    d = converge(U256(sum_x), step, max_iterations=STABLE_ITERATIONS)
    return int(U128(d))


def compute_new_destination_amount(leverage: int, new_source_amount: int, d: int) -> int:
    """Destination reserve that keeps D constant after the source reserve moves.

    With a single unknown y the invariant reduces to y**2 + b*y = c where
        c = D**(n+1) / (n**(2n) * x * A*n)
        b = x + D / (A*n)
    solved by y' = (y**2 + c) / (2y + b - D), rounded up, from y = D.

    Raises:
        DivisionByZero: If new_source_amount is zero
        Overflow: If y does not fit 128 bits
    """
    d_val = U256(d)
    c = d_val * d_val * d_val // (U256(new_source_amount) * N_COINS_SQUARED * leverage)
    b = U256(new_source_amount) + d_val // leverage

    def step(y: U256) -> U256:
        y_new, _ = (y * y + c).ceil_div(y * 2 + b - d_val)
        return y_new

    y = converge(d_val, step, max_iterations=STABLE_ITERATIONS)
    return int(U128(y))


def _d_after(
    leverage: int,
    delta: int,
    swap_token_a_amount: int,
    swap_token_b_amount: int,
    trade_direction: TradeDirection,
    deposit: bool,
) -> int:
    if trade_direction is TradeDirection.A_TO_B:
        moved, other = swap_token_a_amount, swap_token_b_amount
    else:
        moved, other = swap_token_b_amount, swap_token_a_amount
    updated = U128(moved) + delta if deposit else U128(moved) - delta
    return compute_d(leverage, int(updated), other)


@dataclass(frozen=True)
class StableCurve(CurveCalculator):
    """StableSwap curve for pegged assets.

    Attributes:
        amp: Amplification coefficient, MIN_AMP..MAX_AMP
    """

    amp: int

    def _leverage(self) -> int:
        return compute_a(self.amp)

    @checked
    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult:
        """Swap keeping D constant; the whole source amount is consumed."""
        leverage = self._leverage()
        new_swap_source_amount = U128(swap_source_amount) + source_amount
        d = compute_d(leverage, swap_source_amount, swap_destination_amount)
        new_swap_destination_amount = compute_new_destination_amount(
            leverage, int(new_swap_source_amount), d
        )
        destination_amount_swapped = nonzero(
            U128(swap_destination_amount) - new_swap_destination_amount
        )

        return SwapWithoutFeesResult(
            source_amount_swapped=int(U128(source_amount)),
            destination_amount_swapped=int(destination_amount_swapped),
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
        """pool_supply * (D1 - D0) / D0, rounded down."""
        if source_amount == 0:
            return 0
        leverage = self._leverage()
        d0 = PreciseNumber.from_int(compute_d(leverage, swap_token_a_amount, swap_token_b_amount))
        d1 = PreciseNumber.from_int(
            _d_after(
                leverage,
                source_amount,
                swap_token_a_amount,
                swap_token_b_amount,
                trade_direction,
                deposit=True,
            )
        )
        pool_tokens = (d1 - d0) * PreciseNumber.from_int(pool_supply) / d0
        return pool_tokens.floor().to_imprecise()

    @checked
    def withdraw_single_token_type_exact_out(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
    ) -> int:
        """pool_supply * (D0 - D1) / D0, rounded up."""
        if source_amount == 0:
            return 0
        leverage = self._leverage()
        d0 = PreciseNumber.from_int(compute_d(leverage, swap_token_a_amount, swap_token_b_amount))
        d1 = PreciseNumber.from_int(
            _d_after(
                leverage,
                source_amount,
                swap_token_a_amount,
                swap_token_b_amount,
                trade_direction,
                deposit=False,
            )
        )
        pool_tokens = (d0 - d1) * PreciseNumber.from_int(pool_supply) / d0
        return pool_tokens.ceiling().to_imprecise()

    def validate(self) -> None:
        if not MIN_AMP <= self.amp <= MAX_AMP:
            raise InvalidCurve(f"Stable curve amp {self.amp} outside [{MIN_AMP}, {MAX_AMP}]")

    @checked
    def normalized_value(self, swap_token_a_amount: int, swap_token_b_amount: int) -> PreciseNumber:
        """D, which already has the dimension of a single token."""
        d = compute_d(self._leverage(), swap_token_a_amount, swap_token_b_amount)
        return PreciseNumber.from_int(d)
